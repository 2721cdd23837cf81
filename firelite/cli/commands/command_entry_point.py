##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Base class for the commands of the `firelite` CLI.

A command registers its arguments in `add_parser` (usually by calling
`new_parser`, which also routes the parsed arguments back to
`process_command`) and does its work in `process_command`.
"""

from abc import ABC, abstractmethod
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, Namespace


class CommandEntryPoint(ABC):
    """
    A command (or subcommand) of the `firelite` CLI.

    Methods:
        new_parser: Create this command's parser and bind it to `process_command`.
        add_parser: Register this command and its arguments.
        process_command: Run the command with the parsed arguments.
    """

    def new_parser(self, subparsers, name: str, help_text: str) -> ArgumentParser:
        """
        Create the parser for this command under `subparsers`.

        Args:
            subparsers: The object returned by `add_subparsers` on the parent parser.
            name: The command's name on the command line.
            help_text: The one-line description shown in the parent's help.

        Returns:
            The new parser, ready for arguments to be added.
        """
        parser: ArgumentParser = subparsers.add_parser(
            name, help=help_text, formatter_class=ArgumentDefaultsHelpFormatter
        )
        parser.set_defaults(func=self.process_command)
        return parser

    @abstractmethod
    def add_parser(self, subparsers):
        """Register this command and its arguments under `subparsers`."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement an `add_parser` method.")

    @abstractmethod
    def process_command(self, args: Namespace):
        """Run the command with the parsed arguments."""
        raise NotImplementedError("Subclasses of `CommandEntryPoint` must implement a `process_command` method.")
