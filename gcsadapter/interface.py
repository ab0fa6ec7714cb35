"""
Filesystem adapter contract.

This module defines the abstract interface that storage backends implement.
Paths are logical, separator-delimited strings; adapters are responsible for
mapping them onto their own keys.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator, Optional, Union

from gcsadapter.attributes import FileAttributes, StorageAttributes
from gcsadapter.constants import Visibility


class FilesystemAdapter(ABC):
    """
    Abstract base class for filesystem adapters.

    Every operation raises a subclass of gcsadapter.error.StorageError
    on failure.
    """

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """
        Check if a file exists.

        Args:
            path: logical path of the file

        Returns:
            bool: True if the file exists, False otherwise

        Raises:
            UnableToCheckFileExistence: If existence cannot be determined
        """
        pass

    @abstractmethod
    def directory_exists(self, path: str) -> bool:
        """
        Check if anything is stored under a directory.

        Raises:
            UnableToCheckDirectoryExistence: If existence cannot be determined
        """
        pass

    @abstractmethod
    def write(self, path: str, contents: Union[str, bytes], config: Optional[dict] = None) -> None:
        """
        Write contents to a file, replacing it if it exists.

        Args:
            path: logical path of the file
            contents: data to store
            config: options, see gcsadapter.constants.OPTION_*

        Raises:
            UnableToWriteFile: If the upload fails
        """
        pass

    @abstractmethod
    def write_stream(self, path: str, contents: BinaryIO, config: Optional[dict] = None) -> None:
        """
        Write a readable binary stream to a file.

        Raises:
            UnableToWriteFile: If the upload fails
        """
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        """
        Read the full contents of a file.

        Raises:
            UnableToReadFile: If the download fails
        """
        pass

    @abstractmethod
    def read_stream(self, path: str) -> BinaryIO:
        """
        Open a file for streamed reading.

        Raises:
            UnableToReadFile: If the stream cannot be opened
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """
        Delete a single file.

        Raises:
            UnableToDeleteFile: If the deletion fails
        """
        pass

    @abstractmethod
    def delete_directory(self, path: str) -> None:
        """
        Delete a directory and everything below it.

        Raises:
            UnableToDeleteDirectory: If any deletion fails
        """
        pass

    @abstractmethod
    def create_directory(self, path: str, config: Optional[dict] = None) -> None:
        """
        Create a directory.

        Raises:
            UnableToCreateDirectory: If the directory cannot be created
        """
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: Union[str, Visibility]) -> None:
        """
        Change the visibility of a file.

        Raises:
            UnableToSetVisibility: If the change fails
        """
        pass

    @abstractmethod
    def visibility(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def mime_type(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def last_modified(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def file_size(self, path: str) -> FileAttributes:
        pass

    @abstractmethod
    def list_contents(self, path: str, deep: bool = False) -> Iterator[StorageAttributes]:
        """
        List the entries below a directory.

        Args:
            path: logical directory path
            deep: whether to descend into sub directories

        Returns:
            Iterator[StorageAttributes]: a lazy, single-pass sequence of entries
        """
        pass

    @abstractmethod
    def move(self, source: str, destination: str, config: Optional[dict] = None) -> None:
        """
        Move a file.

        Raises:
            UnableToMoveFile: If the move fails
        """
        pass

    @abstractmethod
    def copy(self, source: str, destination: str, config: Optional[dict] = None) -> None:
        """
        Copy a file.

        Raises:
            UnableToCopyFile: If the copy fails
        """
        pass
