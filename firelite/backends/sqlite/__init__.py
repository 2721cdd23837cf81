##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
The `sqlite` package contains the SQLite implementation of Firelite's document store.

Modules:
    sqlite_connection.py: Opens the database file and owns the shared connection.
    sqlite_schema.py: Creates collection tables and applies the schema policy.
    sqlite_filters.py: Translates filters into parameterized WHERE fragments.
    sqlite_document_store.py: Carries out document operations.
"""
