##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module defines the abstract base class for document stores in Firelite.

The `DocumentStoreBase` class outlines the document operations every backend
must provide. All of them are coroutines; a store performs no cross-call
session state beyond the connection it was given.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from firelite.data_models import Document, DocumentReference
from firelite.filters import Filter


class DocumentStoreBase(ABC):
    """
    Base class for all document stores supported in Firelite.

    Methods:
        add_doc: Create a document and return it with its assigned identity.
        get_docs: Return every document in a collection, optionally filtered.
        get_doc: Return the first matching document, or None.
        doc: Resolve the first matching document to a reference.
        update_doc: Update the document a reference points to.
        delete_doc: Delete the first document matching a filter.
    """

    @abstractmethod
    async def add_doc(self, collection_name: str, fields: Dict[str, Any]) -> Document:
        """
        Create a document.

        Args:
            collection_name: The collection to add the document to.
            fields: The document's fields.

        Returns:
            The stored document, including its identity.
        """
        raise NotImplementedError("Subclasses of `DocumentStoreBase` must implement an `add_doc` method.")

    @abstractmethod
    async def get_docs(self, collection_name: str, query_filter: Optional[Filter] = None) -> List[Document]:
        """
        Return the documents of a collection that match an optional filter.

        Args:
            collection_name: The collection to read.
            query_filter: The filter to apply, if any.

        Returns:
            The matching documents (possibly none).
        """
        raise NotImplementedError("Subclasses of `DocumentStoreBase` must implement a `get_docs` method.")

    @abstractmethod
    async def get_doc(self, collection_name: str, query_filter: Optional[Filter] = None) -> Optional[Document]:
        """
        Return the first document matching an optional filter.

        Args:
            collection_name: The collection to read.
            query_filter: The filter to apply, if any.

        Returns:
            The document, or None if nothing matches.
        """
        raise NotImplementedError("Subclasses of `DocumentStoreBase` must implement a `get_doc` method.")

    @abstractmethod
    async def doc(self, collection_name: str, query_filter: Filter) -> Optional[DocumentReference]:
        """
        Resolve the first document matching a filter to a reference.

        Args:
            collection_name: The collection to read.
            query_filter: The filter to apply.

        Returns:
            A reference, or None if nothing matches.
        """
        raise NotImplementedError("Subclasses of `DocumentStoreBase` must implement a `doc` method.")

    @abstractmethod
    async def update_doc(self, reference: DocumentReference, fields: Dict[str, Any]):
        """
        Update the document a reference points to.

        Args:
            reference: The document to update.
            fields: The fields to set.
        """
        raise NotImplementedError("Subclasses of `DocumentStoreBase` must implement an `update_doc` method.")

    @abstractmethod
    async def delete_doc(self, collection_name: str, query_filter: Filter):
        """
        Delete the first document matching a filter.

        Args:
            collection_name: The collection to delete from.
            query_filter: The filter selecting the document.
        """
        raise NotImplementedError("Subclasses of `DocumentStoreBase` must implement a `delete_doc` method.")
