##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
The `backends` package holds the document store contract and its implementations.

Modules:
    store_base.py: The abstract `DocumentStoreBase` every store implements.
    document_mapper.py: Converts relational rows into documents and references.

Subpackages:
    sqlite: The SQLite implementation.
"""
