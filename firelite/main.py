##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Main entry point into Firelite's codebase.
"""

import logging
import sys
import traceback

from firelite.cli.argparse_main import build_main_parser
from firelite.config.configfile import initialize_config
from firelite.log_formatter import setup_logging


LOG = logging.getLogger("firelite")


def main():
    """
    Entry point for the Firelite command-line interface (CLI) operations.

    This function sets up the argument parser, loads the configuration,
    initializes logging, and executes the function attached to the chosen
    command. Any exception raised by the command is logged and turned into a
    non-zero exit code.
    """
    parser = build_main_parser()
    if len(sys.argv) == 1:
        parser.print_help(sys.stdout)
        return 1
    args = parser.parse_args()

    try:
        args.firelite_config = initialize_config(args.config)
    except Exception as excpt:  # pylint: disable=broad-except
        sys.stderr.write(f"error: could not load configuration: {excpt}\n")
        sys.exit(1)

    log_level = args.level or args.firelite_config.logging.level
    setup_logging(logger=LOG, log_level=log_level.upper(), colors=args.firelite_config.logging.colors)
    LOG.debug(str(args.firelite_config))

    try:
        args.func(args)
        # Top of the program stack: every failure becomes a logged error and exit code 1.
    except Exception as excpt:  # pylint: disable=broad-except
        LOG.debug(traceback.format_exc())
        LOG.error(str(excpt))
        sys.exit(1)

    sys.exit()


if __name__ == "__main__":
    main()
