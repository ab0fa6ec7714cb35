"""
Value types describing entries of a storage bucket.

Listing produces a mix of files and directories. Both share a `path` and carry
a `type` discriminant, so callers can branch on `entry.type` (or `is_file()` /
`is_dir()`) without isinstance checks.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Optional, Union

from gcsadapter.constants import StorageAttributeType, Visibility


@dataclass(frozen=True)
class FileAttributes:
    path: str
    file_size: Optional[int] = None
    visibility: Optional[Visibility] = None
    last_modified: Optional[int] = None
    mime_type: Optional[str] = None
    extra_metadata: dict = field(default_factory=dict)
    type: StorageAttributeType = field(default=StorageAttributeType.FILE, init=False)

    def is_file(self) -> bool:
        return True

    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True)
class DirectoryAttributes:
    path: str
    type: StorageAttributeType = field(default=StorageAttributeType.DIRECTORY, init=False)

    def is_file(self) -> bool:
        return False

    def is_dir(self) -> bool:
        return True


StorageAttributes = Union[FileAttributes, DirectoryAttributes]


class DirectoryListing:
    """
    Lazy wrapper around an iterable of StorageAttributes.

    filter() and map() return new listings without consuming the source; the
    underlying iterable is consumed once, when the listing is iterated.
    """

    def __init__(self, listing: Iterable[StorageAttributes]):
        self.listing = listing

    def __iter__(self) -> Iterator[StorageAttributes]:
        return iter(self.listing)

    def filter(self, predicate: Callable[[StorageAttributes], bool]) -> "DirectoryListing":
        return DirectoryListing(entry for entry in self.listing if predicate(entry))

    def map(self, func: Callable[[StorageAttributes], Any]) -> "DirectoryListing":
        return DirectoryListing(func(entry) for entry in self.listing)

    def files(self) -> "DirectoryListing":
        return self.filter(lambda entry: entry.is_file())

    def directories(self) -> "DirectoryListing":
        return self.filter(lambda entry: entry.is_dir())

    def sort_by_path(self) -> "DirectoryListing":
        # forces the listing into memory
        return DirectoryListing(sorted(self.listing, key=lambda entry: entry.path))

    def to_list(self) -> list:
        return list(self.listing)
