##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Module for project-wide utility functions.
"""

import copy
import logging
from datetime import date, datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict

import yaml


LOG = logging.getLogger(__name__)


def load_yaml(filepath: str) -> Dict:
    """
    Safely read a YAML file and return its contents.

    Args:
        filepath: The file path to the YAML file to be read.

    Returns:
        A dict representing the contents of the YAML file.
    """
    with open(filepath, "r") as _file:
        return yaml.safe_load(_file)


def parse_scalar(raw: str) -> Any:
    """
    Interpret a command-line string as a YAML scalar so that `"1"` becomes `1`,
    `"true"` becomes `True` and `"null"` becomes `None`.

    Args:
        raw: The raw string.

    Returns:
        The parsed value. Anything that doesn't parse to a scalar is returned unchanged.
    """
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    if isinstance(value, (dict, list, date)):
        return raw
    return value


def nested_dict_to_namespaces(dic: Dict) -> SimpleNamespace:
    """
    Convert a nested dictionary into a nested SimpleNamespace structure.

    Args:
        dic: The nested dictionary to be converted.

    Returns:
        A SimpleNamespace object representing the nested structure of the input dictionary.

    Raises:
        TypeError: If the input is not a dictionary.
    """

    def recurse(dic):
        if not isinstance(dic, dict):
            return dic
        for key, val in list(dic.items()):
            dic[key] = recurse(val)
        return SimpleNamespace(**dic)

    if not isinstance(dic, dict):
        raise TypeError(f"Expected a dict, got {type(dic)}")

    return recurse(copy.deepcopy(dic))


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merge `override` into a copy of `base`.

    Args:
        base: The dictionary providing default values.
        override: The dictionary whose values win.

    Returns:
        A new merged dictionary.
    """
    merged = copy.deepcopy(base)
    for key, val in (override or {}).items():
        if isinstance(val, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], val)
        else:
            merged[key] = val
    return merged


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()
