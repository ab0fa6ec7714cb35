"""
Storage factory for creating and configuring the Google Cloud Storage adapter.

This module builds the storage client and bucket handle from configuration and
injects them into a GoogleStorageAdapter.
"""

import logging
from typing import Optional

from google.cloud import storage

from gcsadapter.config import GoogleStorageConfig, get_config
from gcsadapter.error import StorageError
from gcsadapter.google_storage import GoogleStorageAdapter

STORAGE_SYSTEM = None


class StorageFactory:
    """
    Factory class for creating storage adapters.

    The client is created from a service account file when one is configured,
    otherwise the default google credential chain is used (environment,
    metadata server, gcloud user credentials).
    """

    @staticmethod
    def get_storage_system() -> GoogleStorageAdapter:
        """
        Create and return an adapter for the current configuration.

        Raises:
            StorageError: If adapter creation fails
        """
        try:
            return StorageFactory.create_adapter(get_config())

        except StorageError:
            raise

        except Exception as e:
            error_msg = f"failed to create storage adapter: {str(e)}"
            logging.error(error_msg)
            raise StorageError(error_msg) from e

    @staticmethod
    def create_client(config: GoogleStorageConfig) -> storage.Client:
        if config.credentials_file:
            return storage.Client.from_service_account_json(config.credentials_file, project=config.project)

        return storage.Client(project=config.project)

    @staticmethod
    def create_adapter(config: GoogleStorageConfig, client: Optional[storage.Client] = None) -> GoogleStorageAdapter:
        """
        Create an adapter for the given configuration.

        Args:
            config: storage configuration
            client: an existing client to reuse (optional)

        Returns:
            GoogleStorageAdapter: a configured adapter

        Raises:
            StorageError: If the client or the bucket handle cannot be created
        """
        try:
            if client is None:
                client = StorageFactory.create_client(config)

            bucket = client.bucket(config.bucket)
            logging.info("using gcs bucket %s (prefix %s)", config.bucket, config.path_prefix or "")

            return GoogleStorageAdapter(
                client,
                bucket,
                path_prefix=config.path_prefix,
                storage_api_uri=config.storage_api_uri,
            )

        except Exception as e:
            error_msg = f"failed to create storage adapter for bucket {config.bucket}: {str(e)}"
            logging.error(error_msg)
            raise StorageError(error_msg) from e


def get_storage_system() -> GoogleStorageAdapter:
    """
    Convenience function returning the shared adapter.

    Returns:
        GoogleStorageAdapter: the adapter created from the current configuration
    """
    global STORAGE_SYSTEM

    if STORAGE_SYSTEM is not None:
        return STORAGE_SYSTEM

    STORAGE_SYSTEM = StorageFactory.get_storage_system()
    return STORAGE_SYSTEM


def reset_storage_system() -> None:
    """Drop the shared adapter so the next call rebuilds it."""
    global STORAGE_SYSTEM
    STORAGE_SYSTEM = None
