##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module stores constants representing file paths that will be needed for
Firelite's configuration.
"""

import os


APP_FILENAME: str = "app.yaml"
USER_HOME: str = os.path.expanduser("~")
FIRELITE_HOME: str = os.path.join(USER_HOME, ".firelite")
CONFIG_PATH_FILE: str = os.path.join(FIRELITE_HOME, "config_path.txt")
