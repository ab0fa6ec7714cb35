"""
Filesystem adapter for Google Cloud Storage.

This package maps a generic filesystem contract (exists, read, write, delete,
list, copy, move, visibility and metadata) onto objects in a single bucket.
"""

from gcsadapter.attributes import DirectoryAttributes, DirectoryListing, FileAttributes, StorageAttributes
from gcsadapter.constants import PredefinedAcl, Visibility
from gcsadapter.error import StorageError
from gcsadapter.factory import StorageFactory, get_storage_system
from gcsadapter.google_storage import GoogleStorageAdapter
from gcsadapter.interface import FilesystemAdapter
from gcsadapter.prefixer import PathPrefixer

__all__ = [
    'DirectoryAttributes',
    'DirectoryListing',
    'FileAttributes',
    'StorageAttributes',
    'PredefinedAcl',
    'Visibility',
    'StorageError',
    'StorageFactory',
    'get_storage_system',
    'GoogleStorageAdapter',
    'FilesystemAdapter',
    'PathPrefixer',
]
