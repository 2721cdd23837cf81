##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
The `cli` package contains the command-line interface for Firelite.

Modules:
    argparse_main.py: Builds the top-level `firelite` parser.
    utils.py: Argument parsing and output helpers shared by the commands.
"""
