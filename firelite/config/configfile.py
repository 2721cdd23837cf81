##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module provides functionality for locating and loading Firelite's
application configuration file and filling in default settings.

Unlike a module-level constant, the configuration is returned from
`initialize_config` so callers hand it explicitly to whatever needs it.
"""
import logging
import os
from typing import Dict, Optional

from firelite.config import Config
from firelite.config.config_filepaths import APP_FILENAME, CONFIG_PATH_FILE, FIRELITE_HOME
from firelite.utils import deep_merge, load_yaml


LOG: logging.Logger = logging.getLogger(__name__)

SCHEMA_POLICIES = ("reject", "extend")


def load_config(filepath: str) -> Optional[Dict]:
    """
    Reads a Firelite YAML configuration file and returns its contents as a dictionary.

    Args:
        filepath (str): The path to the YAML configuration file.

    Returns:
        A dictionary containing the contents of the YAML file or None if file doesn't exist.
    """
    if not os.path.isfile(filepath):
        LOG.info(f"No app config file at {filepath}")
        return None
    LOG.info(f"Reading app config from file {filepath}")
    return load_yaml(filepath) or {}


def find_config_file(path: str = None) -> Optional[str]:
    """
    Locate the Firelite application configuration file (`app.yaml`).

    If no directory is provided, this uses a fallback sequence:
      1. Check for `app.yaml` in the current working directory.
      2. Check if `CONFIG_PATH_FILE` exists and points to a valid config file.
      3. Check for `app.yaml` in the `FIRELITE_HOME` directory.

    If `path` is a directory, only that directory is checked. If `path` is a
    file, it is returned as-is.

    Args:
        path (str, optional): A specific directory (or file) to look for `app.yaml`.

    Returns:
        The full path to the `app.yaml` file if found, otherwise `None`.
    """
    if path is None:
        local_app = os.path.join(os.getcwd(), APP_FILENAME)
        if os.path.isfile(local_app):
            return local_app

        if os.path.isfile(CONFIG_PATH_FILE):
            with open(CONFIG_PATH_FILE, "r") as f:
                config_path = f.read().strip()
            if os.path.isfile(config_path):
                return config_path

        path_app = os.path.join(FIRELITE_HOME, APP_FILENAME)
        if os.path.isfile(path_app):
            return path_app

        return None

    if os.path.isfile(path):
        return path

    app_path = os.path.join(path, APP_FILENAME)
    if os.path.exists(app_path):
        return app_path

    return None


def get_default_config() -> Dict:
    """
    Creates the default configuration used when no `app.yaml` is found and
    to fill in keys that an `app.yaml` leaves out.

    Returns:
        Dict: A configuration dictionary with every supported setting.
    """
    return {
        "database": {
            "path": "__d.sqlite",
            "journal_mode": "WAL",
            "schema_policy": "reject",
            "timestamp_field": None,
        },
        "backup": {
            "directory": "__backups",
            "retention_days": 7,
            "interval_hours": 24,
        },
        "storage": {"directory": "__storage"},
        "auth": {
            "bcrypt_rounds": 12,
            "users_collection": "users",
            "logs_collection": "authlogs",
        },
        "logging": {"level": "INFO", "colors": True},
    }


def merge_defaults(config: Dict) -> Dict:
    """
    Fill in every setting the user's configuration leaves out and validate
    the values that have a fixed set of choices.

    Args:
        config: The configuration loaded from `app.yaml`.

    Returns:
        The merged configuration.

    Raises:
        ValueError: If `database.schema_policy` is not a supported policy.
    """
    merged = deep_merge(get_default_config(), config)
    policy = str(merged["database"]["schema_policy"]).lower()
    if policy not in SCHEMA_POLICIES:
        raise ValueError(f"database.schema_policy must be one of {SCHEMA_POLICIES}, got '{policy}'")
    merged["database"]["schema_policy"] = policy
    return merged


def get_config(path: Optional[str] = None) -> Dict:
    """
    Loads a Firelite configuration file and returns a dictionary containing the configuration data.

    Args:
        path (str, optional): The directory (or file) to search for the configuration file.
            If `None`, default search paths are used.

    Returns:
        A dictionary containing all the configuration data, with defaults applied.
    """
    filepath: Optional[str] = find_config_file(path)
    if filepath is None:
        LOG.debug("No app.yaml found, using default configuration.")
        return merge_defaults({})

    config = load_config(filepath)
    return merge_defaults(config or {})


def initialize_config(path: Optional[str] = None) -> Config:
    """
    Initializes and returns the Firelite configuration.

    Args:
        path (Optional[str]): Path to look for the configuration file.

    Returns:
        The initialized configuration object.
    """
    return Config(get_config(path))
