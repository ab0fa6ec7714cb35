"""
Google Cloud Storage filesystem adapter.

This module provides the concrete implementation of the FilesystemAdapter
contract on top of the google-cloud-storage client library. The client and the
bucket handle are created by the caller (see gcsadapter.factory) and injected
into the adapter; the adapter only translates paths, options and errors.
"""

import logging
import mimetypes
from typing import BinaryIO, Iterator, Optional, Union
from urllib.parse import quote

from google.api_core.exceptions import NotFound
from google.cloud.storage import Blob, Bucket, Client

from gcsadapter.attributes import DirectoryAttributes, DirectoryListing, FileAttributes, StorageAttributes
from gcsadapter.constants import (
    ACL_ENTITY_ALL_USERS,
    ACL_ROLE_READER,
    ATTRIBUTE_FILE_SIZE,
    ATTRIBUTE_LAST_MODIFIED,
    ATTRIBUTE_MIME_TYPE,
    ATTRIBUTE_VISIBILITY,
    DIRECTORY_SEPARATOR,
    OPTION_METADATA,
    OPTION_MIMETYPE,
    OPTION_VISIBILITY,
    OBJECT_RESOURCE_CONTENT_TYPE,
    OBJECT_RESOURCE_CUSTOM_METADATA,
    OBJECT_RESOURCE_FIELDS,
    STORAGE_API_URI_DEFAULT,
    PredefinedAcl,
    Visibility,
)
from gcsadapter.error import (
    UnableToCheckDirectoryExistence,
    UnableToCheckFileExistence,
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToMoveFile,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToSetVisibility,
    UnableToWriteFile,
)
from gcsadapter.interface import FilesystemAdapter
from gcsadapter.prefixer import PathPrefixer


class GoogleStorageAdapter(FilesystemAdapter):
    """
    FilesystemAdapter backed by a single Google Cloud Storage bucket.

    Every logical path is mapped to an object key by the path prefixer. Directories
    are not a backend primitive: they exist as common prefixes of object keys, or as
    zero byte marker objects whose key ends with the separator.
    """

    def __init__(
        self,
        storage_client: Client,
        bucket: Bucket,
        path_prefix: Optional[str] = None,
        storage_api_uri: Optional[str] = None,
    ):
        """
        Initialize the adapter.

        Args:
            storage_client: configured google.cloud.storage.Client
            bucket: bucket handle all operations are performed against
            path_prefix: root path prepended to every logical path (optional)
            storage_api_uri: base URI used to build public URLs (optional)
        """
        self.storage_client = storage_client
        self.bucket = bucket
        self.prefixer = PathPrefixer(path_prefix, DIRECTORY_SEPARATOR)
        self.storage_api_uri = storage_api_uri or STORAGE_API_URI_DEFAULT

    def file_exists(self, path: str) -> bool:
        try:
            return self._get_blob(path).exists()
        except Exception as e:
            error = UnableToCheckFileExistence.for_location(path, str(e))
            logging.error(str(error))
            raise error from e

    def directory_exists(self, path: str) -> bool:
        try:
            prefix = self.prefixer.prefix_directory_path(path)
            blobs = self.bucket.list_blobs(prefix=prefix or None, max_results=1)
            return next(iter(blobs), None) is not None
        except Exception as e:
            error = UnableToCheckDirectoryExistence.for_location(path, str(e))
            logging.error(str(error))
            raise error from e

    def write(self, path: str, contents: Union[str, bytes], config: Optional[dict] = None) -> None:
        try:
            self._upload(path, contents, config)
        except Exception as e:
            error = UnableToWriteFile.at_location(path, f"error while uploading to bucket: {e}")
            logging.error(str(error))
            raise error from e

    def write_stream(self, path: str, contents: BinaryIO, config: Optional[dict] = None) -> None:
        try:
            self._upload(path, contents, config)
        except Exception as e:
            error = UnableToWriteFile.at_location(path, f"error while uploading to bucket: {e}")
            logging.error(str(error))
            raise error from e

    def _upload(self, path: str, contents: Union[str, bytes, BinaryIO], config: Optional[dict]) -> None:
        """Uploads in-memory contents or a readable stream to the prefixed key."""
        blob = self._get_blob(path)
        options = self._get_options_from_config(config)

        metadata = dict(options.get("metadata") or {})
        for key, attribute in OBJECT_RESOURCE_FIELDS.items():
            if key in metadata:
                setattr(blob, attribute, metadata.pop(key))

        resource_content_type = metadata.pop(OBJECT_RESOURCE_CONTENT_TYPE, None)

        # a nested map is the custom metadata; remaining top level keys are added to it
        custom_metadata = dict(metadata.pop(OBJECT_RESOURCE_CUSTOM_METADATA, None) or {})
        custom_metadata.update(metadata)
        if custom_metadata:
            blob.metadata = custom_metadata

        content_type = (
            options.get("content_type")
            or resource_content_type
            or mimetypes.guess_type(path)[0]
        )

        if isinstance(contents, (str, bytes)):
            blob.upload_from_string(
                contents,
                content_type=content_type,
                predefined_acl=options["predefined_acl"],
            )
        else:
            blob.upload_from_file(
                contents,
                content_type=content_type,
                predefined_acl=options["predefined_acl"],
            )

        logging.info("uploaded %s to %s/%s", path, self.bucket.name, blob.name)

    def read(self, path: str) -> bytes:
        try:
            return self._get_blob(path).download_as_bytes()
        except Exception as e:
            error = UnableToReadFile.from_location(path, f"error while reading from bucket: {e}")
            logging.error(str(error))
            raise error from e

    def read_stream(self, path: str) -> BinaryIO:
        # open() makes no request; reload so a missing or forbidden object fails here
        try:
            blob = self._get_blob(path)
            blob.reload()
            return blob.open("rb")
        except Exception as e:
            error = UnableToReadFile.from_location(path, f"error while reading from bucket: {e}")
            logging.error(str(error))
            raise error from e

    def delete(self, path: str) -> None:
        try:
            blob = self._get_blob(path)
            blob.delete()
            logging.info("deleted %s/%s", self.bucket.name, blob.name)
        except Exception as e:
            error = UnableToDeleteFile.at_location(path, str(e))
            logging.error(str(error))
            raise error from e

    def delete_directory(self, path: str) -> None:
        """
        Delete every file below a directory, then its marker objects.

        Files are deleted one at a time in listing order. The first failure aborts
        the operation; objects deleted before it stay deleted.
        """
        try:
            path = self._normalise_dir_name(path)
            markers = []
            for entry in DirectoryListing(self.list_contents(path, deep=True)):
                if entry.is_file():
                    self.delete(entry.path)
                else:
                    markers.append(entry.path)

            # deepest markers first, the directory itself last
            for marker in sorted(markers, reverse=True) + [path]:
                self._delete_directory_marker(marker)

        except Exception as e:
            error = UnableToDeleteDirectory.at_location(path, str(e))
            logging.error(str(error))
            raise error from e

    def _delete_directory_marker(self, path: str) -> None:
        key = self.prefixer.prefix_path(path)
        if not key.strip(DIRECTORY_SEPARATOR):
            return

        try:
            self.bucket.blob(key).delete()
            logging.info("deleted directory marker %s/%s", self.bucket.name, key)
        except NotFound:
            # directories that only exist as common prefixes have no marker
            pass

    def create_directory(self, path: str, config: Optional[dict] = None) -> None:
        try:
            self._upload(self._normalise_dir_name(path), b"", config)
        except Exception as e:
            error = UnableToCreateDirectory.at_location(path, str(e))
            logging.error(str(error))
            raise error from e

    def _normalise_dir_name(self, dirname: str) -> str:
        return dirname.rstrip(DIRECTORY_SEPARATOR) + DIRECTORY_SEPARATOR

    def set_visibility(self, path: str, visibility: Union[str, Visibility]) -> None:
        try:
            blob = self._get_blob(path)

            if visibility == Visibility.PRIVATE:
                blob.acl.all().revoke_read()
                blob.acl.save()
            elif visibility == Visibility.PUBLIC:
                blob.acl.all().grant_read()
                blob.acl.save()
            else:
                logging.warning("ignoring unknown visibility %s for %s", visibility, path)
                return

            logging.info("set visibility of %s/%s to %s", self.bucket.name, blob.name, visibility)

        except Exception as e:
            error = UnableToSetVisibility.at_location(path, str(e))
            logging.error(str(error))
            raise error from e

    def visibility(self, path: str) -> FileAttributes:
        return self._get_file_attributes(path, ATTRIBUTE_VISIBILITY)

    def mime_type(self, path: str) -> FileAttributes:
        return self._get_file_attributes(path, ATTRIBUTE_MIME_TYPE)

    def last_modified(self, path: str) -> FileAttributes:
        return self._get_file_attributes(path, ATTRIBUTE_LAST_MODIFIED)

    def file_size(self, path: str) -> FileAttributes:
        return self._get_file_attributes(path, ATTRIBUTE_FILE_SIZE)

    def list_contents(self, path: str, deep: bool = False) -> Iterator[StorageAttributes]:
        """
        Lazily list the entries below a directory.

        A shallow listing groups keys on the separator, so sub directories are
        reported as common prefixes. A deep listing drops the delimiter and walks
        every key below the directory; marker objects are then reported as
        directories. Directories that only exist because they hold files have no
        marker and produce no entry in a deep listing. Entries are produced page by
        page as the backend returns them.
        """
        prefix = self.prefixer.prefix_directory_path(path)
        delimiter = None if deep else DIRECTORY_SEPARATOR
        logging.debug("listing %s/%s (deep=%s)", self.bucket.name, prefix, deep)

        blobs = self.bucket.list_blobs(prefix=prefix or None, delimiter=delimiter)
        for page in blobs.pages:
            for directory in page.prefixes:
                yield DirectoryAttributes(self.prefixer.strip_prefix(directory))

            for blob in page:
                if blob.name == prefix:
                    continue

                if blob.name.endswith(DIRECTORY_SEPARATOR):
                    yield DirectoryAttributes(self.prefixer.strip_prefix(blob.name))
                    continue

                yield self._file_attributes_from_blob(self.prefixer.strip_prefix(blob.name), blob)

    def move(self, source: str, destination: str, config: Optional[dict] = None) -> None:
        # copy then delete; a failed delete leaves both files in place
        try:
            self.copy(source, destination, config)
            self.delete(source)
        except Exception as e:
            error = UnableToMoveFile.from_location_to(source, destination, str(e))
            logging.error(str(error))
            raise error from e

    def copy(self, source: str, destination: str, config: Optional[dict] = None) -> None:
        try:
            source_blob = self._get_blob(source)

            # the copy gets the same visibility as the source
            acl = self._get_predefined_acl_for_visibility(self._get_raw_visibility(source_blob))

            new_blob = self.bucket.copy_blob(
                source_blob,
                self.bucket,
                new_name=self.prefixer.prefix_path(destination),
            )
            new_blob.acl.save_predefined(acl.value)
            logging.info("copied %s to %s in %s", source_blob.name, new_blob.name, self.bucket.name)

        except Exception as e:
            error = UnableToCopyFile.from_location_to(source, destination, str(e))
            logging.error(str(error))
            raise error from e

    def public_url(self, path: str) -> str:
        """Returns the URL an object is served from when it is publicly readable."""
        key = quote(self.prefixer.prefix_path(path), safe=DIRECTORY_SEPARATOR)
        return f"{self.storage_api_uri.rstrip('/')}/{self.bucket.name}/{key}"

    def _get_blob(self, path: str) -> Blob:
        return self.bucket.blob(self.prefixer.prefix_path(path))

    def _get_options_from_config(self, config: Optional[dict]) -> dict:
        config = config or {}
        options = {}

        # objects without an explicit visibility are private to the project
        visibility = config.get(OPTION_VISIBILITY) or Visibility.PRIVATE
        options["predefined_acl"] = self._get_predefined_acl_for_visibility(visibility).value

        metadata = config.get(OPTION_METADATA)
        if metadata:
            options["metadata"] = metadata

        mimetype = config.get(OPTION_MIMETYPE)
        if mimetype:
            options["content_type"] = mimetype

        return options

    def _get_predefined_acl_for_visibility(self, visibility: Union[str, Visibility]) -> PredefinedAcl:
        if visibility == Visibility.PUBLIC:
            return PredefinedAcl.PUBLIC_READ

        return PredefinedAcl.PROJECT_PRIVATE

    def _get_raw_visibility(self, blob: Blob) -> Visibility:
        try:
            blob.acl.reload()
        except NotFound:
            # the object may not have an acl entry at all
            return Visibility.PRIVATE

        entity = blob.acl.get_entity(ACL_ENTITY_ALL_USERS)
        if entity is not None and ACL_ROLE_READER in entity.get_roles():
            return Visibility.PUBLIC

        return Visibility.PRIVATE

    def _get_updated(self, blob: Blob) -> Optional[int]:
        try:
            updated = blob.updated
        except (TypeError, ValueError):
            return None

        if updated is None:
            return None

        return int(updated.timestamp())

    def _file_attributes_from_blob(self, path: str, blob: Blob) -> FileAttributes:
        return FileAttributes(
            path=path,
            file_size=blob.size,
            visibility=self._get_raw_visibility(blob),
            last_modified=self._get_updated(blob),
            mime_type=blob.content_type,
            # the raw object resource; Blob exposes it only as _properties
            extra_metadata=dict(blob._properties),
        )

    def _get_file_attributes(self, path: str, metadata_type: str) -> FileAttributes:
        try:
            blob = self._get_blob(path)
            blob.reload()
            return self._file_attributes_from_blob(path, blob)
        except Exception as e:
            error = UnableToRetrieveMetadata.create(path, metadata_type, str(e))
            logging.error(str(error))
            raise error from e
