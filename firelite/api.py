##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Firestore-style functions for working with documents.

```python
users = collection(store, "users")
created = await add_doc(users, {"email": "a@x.com"})
matches = await get_docs(query(users, where("email", "==", "a@x.com")))
ref = await doc(query(users, where("id", "==", created.id)))
await update_doc(store, ref, {"email": "b@x.com"})
await delete_doc(users, where("id", "==", created.id))
```

A read accepts either a `CollectionReference` (every document) or a `Query`
(documents matching a filter). The two are distinct types resolved once, in
`_resolve_source`. Nothing here holds a module-level store: the store travels
with the collection reference, or is passed in explicitly.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from firelite.backends.sqlite.sqlite_schema import validate_identifier
from firelite.backends.store_base import DocumentStoreBase
from firelite.data_models import Document, DocumentReference
from firelite.filters import Filter, where


__all__ = (
    "CollectionReference",
    "Query",
    "collection",
    "where",
    "query",
    "get_docs",
    "get_doc",
    "add_doc",
    "doc",
    "update_doc",
    "delete_doc",
)


@dataclass(frozen=True)
class CollectionReference:
    """
    Every document in one collection of a store.

    Attributes:
        store: The store holding the collection.
        name: The collection's name.
    """

    store: DocumentStoreBase
    name: str


@dataclass(frozen=True)
class Query:
    """
    The documents of a collection that match a filter.

    Attributes:
        collection: The collection to read.
        filter: The filter documents must match.
    """

    collection: CollectionReference
    filter: Filter


Source = Union[CollectionReference, Query]


def _resolve_source(source: Source) -> Tuple[DocumentStoreBase, str, Optional[Filter]]:
    """
    Unpack a read source into (store, collection name, filter).

    Raises:
        TypeError: If the source is neither a `CollectionReference` nor a `Query`.
    """
    if isinstance(source, Query):
        return source.collection.store, source.collection.name, source.filter
    if isinstance(source, CollectionReference):
        return source.store, source.name, None
    raise TypeError(f"Expected a CollectionReference or Query, got {type(source).__name__}")


def collection(store: DocumentStoreBase, name: str) -> CollectionReference:
    """
    Reference a collection of a store. The collection doesn't need to exist yet.

    Args:
        store: The store holding the collection.
        name: The collection's name.

    Returns:
        A reference to the collection.

    Raises:
        InvalidIdentifierError: If the name can't be used as a collection name.
    """
    return CollectionReference(store, validate_identifier(name, kind="collection"))


def query(collection_ref: CollectionReference, query_filter: Filter) -> Query:
    """
    Narrow a collection to the documents that match a filter.

    Args:
        collection_ref: The collection to read.
        query_filter: A filter built with `where`.

    Returns:
        The query.
    """
    query_filter.validate()
    return Query(collection_ref, query_filter)


async def get_docs(source: Source) -> List[Document]:
    """
    Return every document of a collection, or those a query matches.

    Args:
        source: A `CollectionReference` or a `Query`.

    Returns:
        The matching documents; empty if none match.
    """
    store, name, query_filter = _resolve_source(source)
    return await store.get_docs(name, query_filter)


async def get_doc(source: Source) -> Optional[Document]:
    """
    Return the first document of a collection, or the first a query matches.

    Args:
        source: A `CollectionReference` or a `Query`.

    Returns:
        The document, or None if nothing matches.
    """
    store, name, query_filter = _resolve_source(source)
    return await store.get_doc(name, query_filter)


async def doc(source: Source) -> Optional[DocumentReference]:
    """
    Resolve the first document of a collection or query to a reference.

    Args:
        source: A `CollectionReference` or a `Query`.

    Returns:
        A reference usable with `update_doc`, or None if nothing matches.
    """
    store, name, query_filter = _resolve_source(source)
    return await store.doc(name, query_filter)


async def add_doc(collection_ref: CollectionReference, fields: Dict[str, Any]) -> Document:
    """
    Add a document to a collection.

    Args:
        collection_ref: The collection to add to.
        fields: The document's fields.

    Returns:
        The stored document, including its identity.
    """
    return await collection_ref.store.add_doc(collection_ref.name, fields)


async def update_doc(store: DocumentStoreBase, reference: DocumentReference, fields: Dict[str, Any]):
    """
    Set fields on the document a reference points to.

    Args:
        store: The store holding the document.
        reference: The document to update.
        fields: The fields to set.

    Raises:
        DocumentNotFoundError: If the document doesn't exist.
    """
    await store.update_doc(reference, fields)


async def delete_doc(collection_ref: CollectionReference, query_filter: Filter):
    """
    Delete the first document of a collection matching a filter.

    Args:
        collection_ref: The collection to delete from.
        query_filter: A filter built with `where`.

    Raises:
        DocumentNotFoundError: If nothing matches.
    """
    await collection_ref.store.delete_doc(collection_ref.name, query_filter)
