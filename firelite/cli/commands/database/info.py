##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module defines the `DatabaseInfoCommand` class, which implements the
`database info` subcommand: the database location, the SQLite version and a
table of collections with their document counts.
"""

from argparse import ArgumentParser, Namespace
from typing import List, Tuple

from tabulate import tabulate

from firelite.app import FireliteApp
from firelite.backends.sqlite.sqlite_connection import SQLiteConnectionProvider
from firelite.cli.commands.command_entry_point import CommandEntryPoint
from firelite.cli.utils import run_with_app


class DatabaseInfoCommand(CommandEntryPoint):
    """
    Handles the `database info` subcommand.

    Methods:
        add_parser: Adds the `database info` command to the CLI parser.
        process_command: Prints information about the database.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `database info` subcommand parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `database info`
                subcommand parser will be added.
        """
        parser = self.new_parser(subparsers, "info", "Print information about the database.")

    @staticmethod
    async def _collect(app: FireliteApp) -> List[Tuple[str, int]]:
        names = await app.store.list_collections()
        return [(name, await app.store.count(name)) for name in names]

    def process_command(self, args: Namespace):
        """
        Print information about the database to the console.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        counts = run_with_app(args, self._collect)
        print(f"Database: {args.firelite_config.database.path}")
        print(f"SQLite version: {SQLiteConnectionProvider.get_version()}")
        print(f"Schema policy: {args.firelite_config.database.schema_policy}")
        print()
        if counts:
            print(tabulate(counts, headers=["Collection", "Documents"]))
        else:
            print("No collections.")
