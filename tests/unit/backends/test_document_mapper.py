##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Tests for the `document_mapper.py` module.
"""

import sqlite3

import pytest

from firelite.backends.document_mapper import DocumentMapper, row_to_dict
from firelite.data_models import Document, DocumentReference


@pytest.fixture
def sqlite_row() -> sqlite3.Row:
    """
    A real `sqlite3.Row` with an identity and two fields.

    Returns:
        The row.
    """
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    try:
        return conn.execute("SELECT 4 AS id, 'a@x.com' AS email, NULL AS bio").fetchone()
    finally:
        conn.close()


def test_row_to_dict_from_sqlite_row(sqlite_row: sqlite3.Row):
    """
    Test that a `sqlite3.Row` converts to a dict in column order.

    Args:
        sqlite_row: A real SQLite row.
    """
    converted = row_to_dict(sqlite_row)
    assert converted == {"id": 4, "email": "a@x.com", "bio": None}
    assert list(converted) == ["id", "email", "bio"]


def test_row_to_dict_from_mapping():
    """Test that a plain mapping converts to a dict."""
    assert row_to_dict({"id": 1, "a": 2}) == {"id": 1, "a": 2}


class TestDocumentMapper:
    """Tests for the `DocumentMapper` class."""

    def test_to_document(self, sqlite_row: sqlite3.Row):
        """
        Test that a row becomes a document with the identity split out.

        Args:
            sqlite_row: A real SQLite row.
        """
        document = DocumentMapper().to_document("users", sqlite_row)

        assert isinstance(document, Document)
        assert document.id == 4
        assert document.collection_name == "users"
        assert document.data() == {"email": "a@x.com", "bio": None}

    def test_to_reference(self, sqlite_row: sqlite3.Row):
        """
        Test that a row becomes a reference to its identity.

        Args:
            sqlite_row: A real SQLite row.
        """
        assert DocumentMapper().to_reference("users", sqlite_row) == DocumentReference("users", 4, "id")

    def test_to_document_requires_identity(self):
        """Test that a row without an identity column can't be mapped."""
        with pytest.raises(KeyError):
            DocumentMapper().to_document("users", {"email": "a@x.com"})
