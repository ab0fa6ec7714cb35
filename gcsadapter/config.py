"""
Configuration for the Google Cloud Storage adapter.

Configuration is read from a YAML file. The settings may either sit at the top
level of the document or below a `gcs` key, which allows them to live in a
larger application configuration file:

    gcs:
      bucket: my-bucket
      project: my-project
      credentials_file: /etc/gcs/service-account.json
      path_prefix: uploads
"""

import logging
import os
from typing import Optional, Union
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from gcsadapter.constants import STORAGE_API_URI_DEFAULT
from gcsadapter.error import StorageError

ENV_CONFIG_PATH = "GCSADAPTER_CONFIG"
CONFIG_SECTION = "gcs"

CONFIG = None


class GoogleStorageConfig(BaseModel):
    bucket: str
    project: Optional[str] = None
    credentials_file: Optional[str] = None
    path_prefix: Optional[str] = None
    storage_api_uri: str = STORAGE_API_URI_DEFAULT

    @field_validator("bucket")
    @classmethod
    def bucket_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("bucket name must not be empty")
        return value.strip()


def load_config(path: Union[str, Path]) -> GoogleStorageConfig:
    """
    Load and validate the storage configuration from a YAML file.

    Args:
        path: path to the YAML file

    Returns:
        GoogleStorageConfig: the validated configuration

    Raises:
        StorageError: If the file cannot be read, parsed or validated
    """
    try:
        with open(path, "r") as fp:
            data = yaml.safe_load(fp) or {}
    except (OSError, yaml.YAMLError) as e:
        error_msg = f"failed to load storage configuration from {path}: {e}"
        logging.error(error_msg)
        raise StorageError(error_msg) from e

    if not isinstance(data, dict):
        raise StorageError(f"storage configuration in {path} must be a mapping")

    if CONFIG_SECTION in data:
        data = data[CONFIG_SECTION] or {}

    try:
        return GoogleStorageConfig(**data)
    except ValidationError as e:
        error_msg = f"invalid storage configuration in {path}: {e}"
        logging.error(error_msg)
        raise StorageError(error_msg) from e


def get_config() -> GoogleStorageConfig:
    """Returns the storage configuration referenced by the GCSADAPTER_CONFIG environment variable."""
    global CONFIG

    if CONFIG is not None:
        return CONFIG

    path = os.environ.get(ENV_CONFIG_PATH)
    if not path:
        raise StorageError(f"missing storage configuration: {ENV_CONFIG_PATH} is not set")

    CONFIG = load_config(path)
    return CONFIG


def reset_config() -> None:
    global CONFIG
    CONFIG = None
