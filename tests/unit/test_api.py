##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Tests for the `api.py` module.
"""

import pytest
from pytest_mock import MockerFixture

from firelite.api import (
    CollectionReference,
    Query,
    add_doc,
    collection,
    delete_doc,
    doc,
    get_doc,
    get_docs,
    query,
    update_doc,
    where,
)
from firelite.backends.store_base import DocumentStoreBase
from firelite.data_models import DocumentReference
from firelite.exceptions import DocumentNotFoundError, InvalidFilterError, InvalidIdentifierError
from firelite.filters import Filter
from tests.fixture_types import FixtureStore


class TestReferences:
    """Tests for building collection references and queries."""

    def test_collection(self, mocker: MockerFixture):
        """
        Test that `collection` pairs a store with a validated name.

        Args:
            mocker: PyTest mocker fixture.
        """
        store = mocker.MagicMock(spec=DocumentStoreBase)
        ref = collection(store, "users")
        assert ref == CollectionReference(store, "users")

    def test_collection_rejects_bad_names(self, mocker: MockerFixture):
        """
        Test that invalid collection names are rejected up front.

        Args:
            mocker: PyTest mocker fixture.
        """
        with pytest.raises(InvalidIdentifierError):
            collection(mocker.MagicMock(spec=DocumentStoreBase), "drop table")

    def test_query(self, mocker: MockerFixture):
        """
        Test that `query` pairs a collection with a filter.

        Args:
            mocker: PyTest mocker fixture.
        """
        ref = collection(mocker.MagicMock(spec=DocumentStoreBase), "users")
        email_filter = where("email", "==", "a@x.com")
        assert query(ref, email_filter) == Query(ref, email_filter)

    def test_query_validates_filter(self, mocker: MockerFixture):
        """
        Test that `query` rejects a malformed filter.

        Args:
            mocker: PyTest mocker fixture.
        """
        ref = collection(mocker.MagicMock(spec=DocumentStoreBase), "users")
        with pytest.raises(InvalidFilterError):
            query(ref, Filter("email", "~=", "x"))


class TestDispatch:
    """Tests that the functions hand the right arguments to the store."""

    @pytest.fixture
    def store(self, mocker: MockerFixture) -> DocumentStoreBase:
        """
        A mocked store whose operations are coroutines.

        Args:
            mocker: PyTest mocker fixture.

        Returns:
            The mocked store.
        """
        return mocker.AsyncMock(spec=DocumentStoreBase)

    @pytest.mark.asyncio
    async def test_get_docs_from_collection(self, store: DocumentStoreBase):
        """
        Test that reading a collection reference reads without a filter.

        Args:
            store: A mocked store.
        """
        await get_docs(collection(store, "users"))
        store.get_docs.assert_awaited_once_with("users", None)

    @pytest.mark.asyncio
    async def test_get_docs_from_query(self, store: DocumentStoreBase):
        """
        Test that reading a query passes its filter.

        Args:
            store: A mocked store.
        """
        email_filter = where("email", "==", "a@x.com")
        await get_docs(query(collection(store, "users"), email_filter))
        store.get_docs.assert_awaited_once_with("users", email_filter)

    @pytest.mark.asyncio
    async def test_get_doc_and_doc(self, store: DocumentStoreBase):
        """
        Test that `get_doc` and `doc` dispatch to the matching store operations.

        Args:
            store: A mocked store.
        """
        id_filter = where("id", "==", 1)
        source = query(collection(store, "users"), id_filter)
        await get_doc(source)
        await doc(source)
        store.get_doc.assert_awaited_once_with("users", id_filter)
        store.doc.assert_awaited_once_with("users", id_filter)

    @pytest.mark.asyncio
    async def test_writes(self, store: DocumentStoreBase):
        """
        Test that the write functions dispatch to the store.

        Args:
            store: A mocked store.
        """
        users = collection(store, "users")
        reference = DocumentReference("users", 1)
        id_filter = where("id", "==", 1)

        await add_doc(users, {"email": "a@x.com"})
        await update_doc(store, reference, {"email": "b@x.com"})
        await delete_doc(users, id_filter)

        store.add_doc.assert_awaited_once_with("users", {"email": "a@x.com"})
        store.update_doc.assert_awaited_once_with(reference, {"email": "b@x.com"})
        store.delete_doc.assert_awaited_once_with("users", id_filter)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("source", ["users", None, {"collection": "users"}])
    async def test_reads_reject_other_sources(self, store: DocumentStoreBase, source):
        """
        Test that only collection references and queries can be read.

        Args:
            store: A mocked store.
            source: Something that is neither.
        """
        with pytest.raises(TypeError, match="Expected a CollectionReference or Query"):
            await get_docs(source)
        store.get_docs.assert_not_called()


class TestEndToEnd:
    """Tests the functions against a real store."""

    @pytest.mark.asyncio
    async def test_document_lifecycle(self, stores_store: FixtureStore):
        """
        Test adding, finding, updating and deleting a document.

        Args:
            stores_store: A document store using the REJECT policy.
        """
        users = collection(stores_store, "users")
        created = await add_doc(users, {"email": "a@x.com", "name": "Ann"})

        ref = await doc(query(users, where("email", "==", "a@x.com")))
        assert ref == created.reference

        await update_doc(stores_store, ref, {"name": "Anne"})
        assert await get_doc(query(users, where("id", "==", created.id))) == {
            "id": created.id,
            "email": "a@x.com",
            "name": "Anne",
        }

        await delete_doc(users, where("id", "==", created.id))
        assert await get_docs(users) == []

        with pytest.raises(DocumentNotFoundError):
            await update_doc(stores_store, ref, {"name": "Gone"})
