##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
The top-level `firelite` argument parser.

Global options (log level, config location) live here; every command in
`ALL_COMMANDS` registers itself as a subcommand.
"""

import sys
from argparse import ArgumentParser, RawDescriptionHelpFormatter

from firelite import VERSION
from firelite.cli.commands import ALL_COMMANDS


DESCRIPTION = "Firelite: a Firestore-style document store on SQLite."


class HelpParser(ArgumentParser):
    """
    An `ArgumentParser` that shows the full help text after a usage error.
    """

    def error(self, message: str):
        """
        Report a usage error on stderr, print the help and exit with status 2.

        Args:
            message: What was wrong with the command line.
        """
        sys.stderr.write(f"error: {message}\n")
        self.print_help()
        sys.exit(2)


def build_main_parser() -> ArgumentParser:
    """
    Set up the command-line argument parser for the Firelite package.

    Returns:
        An `ArgumentParser` object with every command Firelite provides.
    """
    parser = HelpParser(
        prog="firelite",
        description=DESCRIPTION,
        formatter_class=RawDescriptionHelpFormatter,
        epilog="See firelite <command> --help for more info",
    )
    parser.add_argument("-v", "--version", action="version", version=VERSION)
    parser.add_argument(
        "-lvl",
        "--level",
        type=str,
        default=None,
        help="Set log level: DEBUG, INFO, WARNING, ERROR [Default: logging.level from app.yaml]",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Directory (or file) holding app.yaml. [Default: search cwd, then ~/.firelite]",
    )
    subparsers = parser.add_subparsers(dest="subparsers", required=True)

    for command in ALL_COMMANDS:
        command.add_parser(subparsers)

    return parser
