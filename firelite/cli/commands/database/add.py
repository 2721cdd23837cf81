##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module defines the `DatabaseAddCommand` class, which implements the
`database add` subcommand for adding a document from `KEY=VALUE` pairs.
"""

import logging
from argparse import ArgumentParser, Namespace

from firelite.api import add_doc, collection
from firelite.app import FireliteApp
from firelite.cli.commands.command_entry_point import CommandEntryPoint
from firelite.cli.utils import format_documents, parse_assignments, run_with_app
from firelite.data_models import Document


LOG = logging.getLogger(__name__)


class DatabaseAddCommand(CommandEntryPoint):
    """
    Handles the `database add` subcommand.

    Methods:
        add_parser: Adds the `database add` parser.
        process_command: Adds the document and prints it.
    """

    def add_parser(self, database_commands: ArgumentParser):  # pylint: disable=arguments-renamed
        """
        Add the `database add` subcommand parser to the CLI argument parser.

        Parameters:
            database_commands (ArgumentParser): The subparsers object to which the `database add`
                subcommand parser will be added.
        """
        db_add_parser = self.new_parser(database_commands, "add", "Add a document to a collection.")
        db_add_parser.add_argument("collection", type=str, help="The collection to add to.")
        db_add_parser.add_argument(
            "fields",
            nargs="*",
            metavar="KEY=VALUE",
            help="The document's fields. Values are read as YAML scalars.",
        )

    def process_command(self, args: Namespace):
        """
        Process the `database add` command using the provided CLI arguments.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        fields = parse_assignments(args.fields)

        async def create(app: FireliteApp) -> Document:
            return await add_doc(collection(app.store, args.collection), fields)

        document = run_with_app(args, create)
        LOG.info(f"Added document {document.id} to '{args.collection}'.")
        print(format_documents([document]))
