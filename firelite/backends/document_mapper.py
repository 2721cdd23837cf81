##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Conversion between relational rows and logical documents.

Rows come back from the engine as `sqlite3.Row` objects (or any mapping). The
mapper copies every column verbatim into a `Document`, pulling the identity out
of the `id` column, and builds `DocumentReference`s from the same rows.
"""

import logging
import sqlite3
from typing import Any, Dict, Mapping, Union

from firelite.data_models import ID_COLUMN, Document, DocumentReference


LOG = logging.getLogger(__name__)

Row = Union[sqlite3.Row, Mapping[str, Any]]


def row_to_dict(row: Row) -> Dict[str, Any]:
    """
    Convert a row into a plain dict, keeping column order.

    Args:
        row: A `sqlite3.Row` or a mapping of column name to value.

    Returns:
        A dict of column name to value.
    """
    if isinstance(row, sqlite3.Row):
        return {key: row[key] for key in row.keys()}
    return dict(row)


class DocumentMapper:
    """
    Shapes engine rows into the objects handed back to callers.

    Methods:
        to_document: Convert a row into a `Document`.
        to_reference: Convert a row into a `DocumentReference`.
    """

    id_column: str = ID_COLUMN

    def to_document(self, collection_name: str, row: Row) -> Document:
        """
        Convert a row into a `Document`. No type coercion is applied beyond
        what the engine returned.

        Args:
            collection_name: The collection the row was read from.
            row: The row to convert.

        Returns:
            The document.

        Raises:
            KeyError: If the row has no identity column.
        """
        data = row_to_dict(row)
        doc_id = data.pop(self.id_column)
        return Document(collection_name, doc_id, data)

    def to_reference(self, collection_name: str, row: Row) -> DocumentReference:
        """
        Build a reference to the document stored in `row`.

        Args:
            collection_name: The collection the row was read from.
            row: A row that includes the identity column.

        Returns:
            A reference addressing the row by identity.
        """
        return DocumentReference(collection_name, row[self.id_column], id_column=self.id_column)
