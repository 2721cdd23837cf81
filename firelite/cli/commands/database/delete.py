##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module defines the `DatabaseDeleteCommand` class, which implements the
`database delete` subcommand. It deletes the first document of a collection
matching a required `--where` filter.
"""

import logging
from argparse import ArgumentParser, Namespace

from firelite.api import collection, delete_doc
from firelite.app import FireliteApp
from firelite.cli.commands.command_entry_point import CommandEntryPoint
from firelite.cli.commands.database.get import add_where_argument
from firelite.cli.utils import parse_where, run_with_app


LOG = logging.getLogger(__name__)


class DatabaseDeleteCommand(CommandEntryPoint):
    """
    Handles the `database delete` subcommand.

    Methods:
        add_parser: Adds the `database delete` parser.
        process_command: Deletes the first matching document.
    """

    def add_parser(self, database_commands: ArgumentParser):  # pylint: disable=arguments-renamed
        """
        Add the `database delete` subcommand parser to the CLI argument parser.

        Parameters:
            database_commands (ArgumentParser): The subparsers object to which the `database delete`
                subcommand parser will be added.
        """
        db_delete_parser = self.new_parser(
            database_commands, "delete", "Delete the first document of a collection matching a filter."
        )
        db_delete_parser.add_argument("collection", type=str, help="The collection to delete from.")
        add_where_argument(db_delete_parser, required=True)

    def process_command(self, args: Namespace):
        """
        Process the `database delete` command using the provided CLI arguments.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        query_filter = parse_where(args.where)

        async def remove(app: FireliteApp):
            await delete_doc(collection(app.store, args.collection), query_filter)

        run_with_app(args, remove)
        LOG.info(f"Deleted a document matching {query_filter} from '{args.collection}'.")
