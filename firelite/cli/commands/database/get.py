##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module defines the `DatabaseGetCommand` class, which implements the
`database get` subcommand for printing the documents of a collection.

Main Capabilities:
- `database get <collection>`: Print every document.
- `database get <collection> --where FIELD OP VALUE`: Print the matching documents.
- `database get <collection> --first ...`: Print only the first match.
"""

import logging
from argparse import ArgumentParser, Namespace
from typing import List

from firelite.api import collection, get_doc, get_docs, query
from firelite.app import FireliteApp
from firelite.cli.commands.command_entry_point import CommandEntryPoint
from firelite.cli.utils import format_documents, parse_where, run_with_app
from firelite.data_models import Document


LOG = logging.getLogger(__name__)


def add_where_argument(parser: ArgumentParser, required: bool = False):
    """
    Add the `--where FIELD OP VALUE` option to a parser.

    Args:
        parser: The parser to add the option to.
        required: Whether the option must be given.
    """
    parser.add_argument(
        "-w",
        "--where",
        nargs=3,
        metavar=("FIELD", "OP", "VALUE"),
        required=required,
        help="Filter documents, e.g. `--where age '>' 30`. For `in`, separate values with commas.",
    )


class DatabaseGetCommand(CommandEntryPoint):
    """
    Handles the `database get` subcommand.

    Methods:
        add_parser: Adds the `database get` parser.
        process_command: Fetches and prints the requested documents.
    """

    def add_parser(self, database_commands: ArgumentParser):  # pylint: disable=arguments-renamed
        """
        Add the `database get` subcommand parser to the CLI argument parser.

        Parameters:
            database_commands (ArgumentParser): The subparsers object to which the `database get`
                subcommand parser will be added.
        """
        db_get_parser = self.new_parser(database_commands, "get", "Print documents stored in a collection.")
        db_get_parser.add_argument("collection", type=str, help="The collection to read.")
        add_where_argument(db_get_parser)
        db_get_parser.add_argument(
            "--first",
            action="store_true",
            default=False,
            help="Only print the first matching document.",
        )

    def process_command(self, args: Namespace):
        """
        Process the `database get` command using the provided CLI arguments.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        query_filter = parse_where(args.where)

        async def fetch(app: FireliteApp) -> List[Document]:
            source = collection(app.store, args.collection)
            if query_filter is not None:
                source = query(source, query_filter)
            if args.first:
                document = await get_doc(source)
                return [document] if document is not None else []
            return await get_docs(source)

        documents = run_with_app(args, fetch)
        if documents:
            print(format_documents(documents))
        else:
            filter_msg = f" matching {query_filter}" if query_filter else ""
            LOG.info(f"No documents{filter_msg} found in '{args.collection}'.")
