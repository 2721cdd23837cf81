##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Firelite: a Firestore-style document API on top of SQLite.

This module contains the source code for Firelite.
"""


__version__ = "0.4.0"
VERSION = __version__
