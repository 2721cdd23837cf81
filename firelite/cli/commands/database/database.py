##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module defines the `DatabaseCommand` class, which provides CLI subcommands
for inspecting and editing the collections stored in Firelite's database.

The commands are registered under the `database` top-level command.
"""

from argparse import ArgumentParser, Namespace

from firelite.cli.commands.command_entry_point import CommandEntryPoint
from firelite.cli.commands.database.add import DatabaseAddCommand
from firelite.cli.commands.database.delete import DatabaseDeleteCommand
from firelite.cli.commands.database.get import DatabaseGetCommand
from firelite.cli.commands.database.info import DatabaseInfoCommand


class DatabaseCommand(CommandEntryPoint):
    """
    Handles `database` CLI commands for interacting with Firelite's database.

    Attributes:
        info_command (DatabaseInfoCommand): Handles the `database info` subcommand.
        get_command (DatabaseGetCommand): Handles the `database get` subcommand.
        add_command (DatabaseAddCommand): Handles the `database add` subcommand.
        delete_command (DatabaseDeleteCommand): Handles the `database delete` subcommand.

    Methods:
        add_parser: Adds the `database` command and its subcommands to the CLI parser.
        process_command: Processes the CLI input and dispatches the appropriate action.
    """

    def __init__(self):
        self.info_command = DatabaseInfoCommand()
        self.get_command = DatabaseGetCommand()
        self.add_command = DatabaseAddCommand()
        self.delete_command = DatabaseDeleteCommand()

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `database` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `database` command parser will be added.
        """
        database = self.new_parser(subparsers, "database", "Interact with Firelite's database.")

        database_commands: ArgumentParser = database.add_subparsers(dest="commands", required=True)

        self.info_command.add_parser(database_commands)
        self.get_command.add_parser(database_commands)
        self.add_command.add_parser(database_commands)
        self.delete_command.add_parser(database_commands)

    def process_command(self, args: Namespace):
        """
        This method doesn't do anything as the subcommands each have logic
        for processing their respective commands. This still has to be implemented
        as we inherit from CommandEntryPoint.

        Args:
            args: An argparse Namespace containing user arguments.
        """
