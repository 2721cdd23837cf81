##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module defines the `BackupCommand` class, which implements the `backup`
command. By default it keeps running and backs the database up on the
configured interval; with `--once` it takes a single backup, prunes expired
ones and exits.
"""

import asyncio
import logging
from argparse import ArgumentParser, Namespace

from firelite.app import FireliteApp
from firelite.cli.commands.command_entry_point import CommandEntryPoint


LOG = logging.getLogger(__name__)


class BackupCommand(CommandEntryPoint):
    """
    Handles the `backup` command.

    Methods:
        add_parser: Adds the `backup` command parser to the CLI argument parser.
        process_command: Runs the backup job once or on a schedule.
    """

    def add_parser(self, subparsers: ArgumentParser):
        """
        Add the `backup` command parser to the CLI argument parser.

        Parameters:
            subparsers (ArgumentParser): The subparsers object to which the `backup` command parser will be added.
        """
        backup = self.new_parser(subparsers, "backup", "Back up the database file and prune expired backups.")
        backup.add_argument(
            "--once",
            action="store_true",
            default=False,
            help="Take a single backup and exit instead of running on a schedule.",
        )

    def process_command(self, args: Namespace):
        """
        Process the `backup` command using the provided CLI arguments.

        Args:
            args: An argparse Namespace containing user arguments.
        """
        job = FireliteApp.from_config(args.firelite_config).backup
        if args.once:
            destination = job.run_once()
            deleted = job.prune()
            print(f"Backup written to {destination} ({len(deleted)} expired backup(s) removed).")
            return

        try:
            asyncio.run(job.run_forever())
        except KeyboardInterrupt:
            LOG.info("Backup schedule stopped.")
