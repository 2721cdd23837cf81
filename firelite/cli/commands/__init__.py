##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Firelite CLI Commands Package.

Modules:
    command_entry_point: Defines the abstract base class `CommandEntryPoint` for all CLI commands.
    backup: Implements the `backup` command for copying the database file.
    database: Implements the `database` command for inspecting and editing collections.
"""

from firelite.cli.commands.backup import BackupCommand
from firelite.cli.commands.database.database import DatabaseCommand


# Keep these in alphabetical order
ALL_COMMANDS = [
    BackupCommand(),
    DatabaseCommand(),
]
