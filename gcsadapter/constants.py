from enum import Enum


STORAGE_API_URI_DEFAULT = "https://storage.googleapis.com"

DIRECTORY_SEPARATOR = "/"

# acl principal that represents anonymous access to an object
ACL_ENTITY_ALL_USERS = "allUsers"
ACL_ROLE_READER = "READER"

ATTRIBUTE_PATH = "path"
ATTRIBUTE_FILE_SIZE = "file_size"
ATTRIBUTE_VISIBILITY = "visibility"
ATTRIBUTE_LAST_MODIFIED = "last_modified"
ATTRIBUTE_MIME_TYPE = "mime_type"
ATTRIBUTE_EXTRA_METADATA = "extra_metadata"

# option names recognized by write, write_stream and create_directory
OPTION_VISIBILITY = "visibility"
OPTION_METADATA = "metadata"
OPTION_MIMETYPE = "mimetype"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class PredefinedAcl(str, Enum):
    """Access control presets applied by the backend when an object is created or copied."""

    # project team owners get OWNER access, allAuthenticatedUsers get READER access
    AUTHENTICATED_READ = "authenticatedRead"
    # project team owners get OWNER access
    PRIVATE = "private"
    # project team members get access according to their roles
    PROJECT_PRIVATE = "projectPrivate"
    # project team owners get OWNER access, allUsers get READER access
    PUBLIC_READ = "publicRead"
    # project team owners get OWNER access, allUsers get WRITER access
    PUBLIC_READ_WRITE = "publicReadWrite"


class StorageAttributeType(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"

# keys of the `metadata` option that set object resource fields, mapped to Blob attributes;
# a nested `metadata` key holds custom metadata
OBJECT_RESOURCE_FIELDS = {
    "cacheControl": "cache_control",
    "contentDisposition": "content_disposition",
    "contentEncoding": "content_encoding",
    "contentLanguage": "content_language",
}
OBJECT_RESOURCE_CONTENT_TYPE = "contentType"
OBJECT_RESOURCE_CUSTOM_METADATA = "metadata"
