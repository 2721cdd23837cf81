##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Configuration for a Firelite application.

Settings come from an `app.yaml` file merged over built-in defaults (see
`configfile.py`) and are exposed section by section as attribute namespaces,
so code reads `config.database.path` rather than indexing dictionaries.

Modules:
    config_filepaths.py: Where Firelite looks for `app.yaml`.
    configfile.py: Finding, reading and merging configuration files.
"""
from copy import copy
from types import SimpleNamespace
from typing import Dict, List, Optional

from firelite.utils import nested_dict_to_namespaces


SECTIONS: List[str] = ["database", "backup", "storage", "auth", "logging"]


class Config:  # pylint: disable=R0903
    """
    Holds every Firelite setting, one namespace per section.

    A section that is absent from the dictionary the config was built from is
    left as `None`.

    Attributes:
        database (Optional[SimpleNamespace]): `path`, `journal_mode`, `schema_policy`, `timestamp_field`.
        backup (Optional[SimpleNamespace]): `directory`, `retention_days`, `interval_hours`.
        storage (Optional[SimpleNamespace]): `directory`.
        auth (Optional[SimpleNamespace]): `bcrypt_rounds`, `users_collection`, `logs_collection`.
        logging (Optional[SimpleNamespace]): `level`, `colors`.
    """

    def __init__(self, app_dict: Dict):
        """
        Args:
            app_dict: The configuration dictionary, keyed by section name.
        """
        self.database: Optional[SimpleNamespace] = None
        self.backup: Optional[SimpleNamespace] = None
        self.storage: Optional[SimpleNamespace] = None
        self.auth: Optional[SimpleNamespace] = None
        self.logging: Optional[SimpleNamespace] = None
        for section in SECTIONS:
            if section in app_dict:
                setattr(self, section, nested_dict_to_namespaces(app_dict[section]))

    def __copy__(self) -> "Config":
        duplicate = self.__class__.__new__(self.__class__)
        for section in SECTIONS:
            setattr(duplicate, section, copy(getattr(self, section)))
        return duplicate

    def __str__(self) -> str:
        lines = ["config:"]
        for section in SECTIONS:
            lines.append(f"  {section}:")
            namespace = getattr(self, section)
            if namespace is None:
                lines.append("    None")
                continue
            lines.extend(f"    {key}: {value!r}" for key, value in vars(namespace).items())
        return "\n".join(lines)
