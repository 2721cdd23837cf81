##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module houses the classes that define the logical documents handed to
callers, as opposed to the relational rows they are stored in.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterator


ID_COLUMN = "id"


@dataclass(frozen=True)
class DocumentReference:
    """
    Enough information to address exactly one document for an update or a
    delete without running the lookup again.

    Attributes:
        collection_name: The collection (table) holding the document.
        id_value: The identity assigned to the document when it was created.
        id_column: The identity column; always `id` for documents created by Firelite.
    """

    collection_name: str
    id_value: int
    id_column: str = ID_COLUMN


class Document(Mapping):
    """
    A schema-less field map plus the identity the database assigned to it.

    A document behaves like a read-only dict whose first key is `id`, so it
    compares equal to `{"id": 1, "email": "a@x.com"}` when those are its contents.

    Attributes:
        id: The identity of the document within its collection.
        collection_name: The collection the document was read from.

    Methods:
        data: Return the document's fields without the identity.
        to_dict: Return the document's fields including the identity.
    """

    __slots__ = ("_id", "_fields", "_collection_name")

    def __init__(self, collection_name: str, doc_id: int, fields: Dict[str, Any]):
        """
        Args:
            collection_name: The collection the document belongs to.
            doc_id: The identity assigned by the database.
            fields: The document's fields, not including the identity.
        """
        self._collection_name = collection_name
        self._id = doc_id
        self._fields = {key: val for key, val in fields.items() if key != ID_COLUMN}

    @property
    def id(self) -> int:  # pylint: disable=invalid-name
        return self._id

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def reference(self) -> DocumentReference:
        """The reference addressing this document."""
        return DocumentReference(self._collection_name, self._id)

    def data(self) -> Dict[str, Any]:
        """
        Return a copy of the document's fields without the identity.

        Returns:
            A dict of field name to value.
        """
        return dict(self._fields)

    def to_dict(self) -> Dict[str, Any]:
        """
        Return a copy of the document including the identity.

        Returns:
            A dict whose first key is `id`.
        """
        return {ID_COLUMN: self._id, **self._fields}

    def __getitem__(self, key: str) -> Any:
        if key == ID_COLUMN:
            return self._id
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        yield ID_COLUMN
        yield from self._fields

    def __len__(self) -> int:
        return len(self._fields) + 1

    def __repr__(self) -> str:
        return f"Document({self._collection_name!r}, {self.to_dict()!r})"
