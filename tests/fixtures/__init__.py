##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Shared fixtures, split by topic so `conftest.py` stays small. Every module in
this directory is loaded as a pytest plugin by `tests/conftest.py`.

Fixture names start with the name of the file that defines them, e.g. the
fixtures in `stores.py` are `stores_db_path`, `stores_provider`, and so on.
"""
