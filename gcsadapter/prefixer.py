from typing import Optional

from gcsadapter.constants import DIRECTORY_SEPARATOR


class PathPrefixer:
    """
    Maps logical paths onto object keys under a configured root.

    The prefix is normalized to end with the separator (an empty prefix stays
    empty), so prefix_path() joins with exactly one separator and strip_prefix()
    reverses it.
    """

    def __init__(self, prefix: Optional[str] = None, separator: str = DIRECTORY_SEPARATOR):
        self.separator = separator
        prefix = (prefix or "").strip(separator)
        self.prefix = f"{prefix}{separator}" if prefix else ""

    def prefix_path(self, path: str) -> str:
        return self.prefix + path.lstrip(self.separator)

    def strip_prefix(self, path: str) -> str:
        if self.prefix and path.startswith(self.prefix):
            path = path[len(self.prefix):]

        return path

    def prefix_directory_path(self, path: str) -> str:
        prefixed = self.prefix_path(path)
        if prefixed == "" or prefixed.endswith(self.separator):
            return prefixed

        return prefixed + self.separator

