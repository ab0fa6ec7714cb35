"""
Storage error taxonomy.

Every public adapter operation fails with its own subclass of StorageError.
The triggering backend exception is attached as __cause__ by the adapter
(raise ... from e), and the message of that exception is kept in `reason`.
"""

from typing import Optional


class StorageError(Exception):
    """Base class for all storage errors."""

    def __init__(self, message: str, location: Optional[str] = None, reason: str = ""):
        super().__init__(message)
        self.location = location
        self.reason = reason


class UnableToCheckFileExistence(StorageError):
    @classmethod
    def for_location(cls, path: str, reason: str = "") -> "UnableToCheckFileExistence":
        return cls(f"unable to check existence for {path}: {reason}", location=path, reason=reason)


class UnableToCheckDirectoryExistence(StorageError):
    @classmethod
    def for_location(cls, path: str, reason: str = "") -> "UnableToCheckDirectoryExistence":
        return cls(f"unable to check directory existence for {path}: {reason}", location=path, reason=reason)


class UnableToWriteFile(StorageError):
    @classmethod
    def at_location(cls, path: str, reason: str = "") -> "UnableToWriteFile":
        return cls(f"unable to write file at location {path}: {reason}", location=path, reason=reason)


class UnableToReadFile(StorageError):
    @classmethod
    def from_location(cls, path: str, reason: str = "") -> "UnableToReadFile":
        return cls(f"unable to read file from location {path}: {reason}", location=path, reason=reason)


class UnableToDeleteFile(StorageError):
    @classmethod
    def at_location(cls, path: str, reason: str = "") -> "UnableToDeleteFile":
        return cls(f"unable to delete file located at {path}: {reason}", location=path, reason=reason)


class UnableToCreateDirectory(StorageError):
    @classmethod
    def at_location(cls, path: str, reason: str = "") -> "UnableToCreateDirectory":
        return cls(f"unable to create a directory at {path}: {reason}", location=path, reason=reason)


class UnableToDeleteDirectory(StorageError):
    @classmethod
    def at_location(cls, path: str, reason: str = "") -> "UnableToDeleteDirectory":
        return cls(f"unable to delete directory located at {path}: {reason}", location=path, reason=reason)


class UnableToSetVisibility(StorageError):
    @classmethod
    def at_location(cls, path: str, reason: str = "") -> "UnableToSetVisibility":
        return cls(f"unable to set visibility for file {path}: {reason}", location=path, reason=reason)


class UnableToRetrieveMetadata(StorageError):
    """Raised when one of the metadata getters fails; `metadata_type` names the requested attribute."""

    def __init__(self, message: str, location: Optional[str] = None, reason: str = "", metadata_type: str = ""):
        super().__init__(message, location=location, reason=reason)
        self.metadata_type = metadata_type

    @classmethod
    def create(cls, path: str, metadata_type: str, reason: str = "") -> "UnableToRetrieveMetadata":
        return cls(
            f"unable to retrieve the {metadata_type} for file at location {path}: {reason}",
            location=path,
            reason=reason,
            metadata_type=metadata_type,
        )


class _TransferError(StorageError):
    def __init__(self, message: str, source: str, destination: str, reason: str = ""):
        super().__init__(message, location=source, reason=reason)
        self.source = source
        self.destination = destination


class UnableToMoveFile(_TransferError):
    @classmethod
    def from_location_to(cls, source: str, destination: str, reason: str = "") -> "UnableToMoveFile":
        return cls(f"unable to move file from {source} to {destination}: {reason}", source, destination, reason)


class UnableToCopyFile(_TransferError):
    @classmethod
    def from_location_to(cls, source: str, destination: str, reason: str = "") -> "UnableToCopyFile":
        return cls(f"unable to copy file from {source} to {destination}: {reason}", source, destination, reason)
