##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
SQLite-based document store for Firelite.

This module defines `SQLiteDocumentStore`, which carries out document operations
against the connection owned by a `SQLiteConnectionProvider`. It coordinates the
schema synthesizer (tables and columns), the filter translator (WHERE clauses)
and the document mapper (rows to documents), and turns engine errors into
Firelite's typed failures with the operation and collection attached.

See also:
    - firelite.backends.store_base: Base class
    - firelite.backends.sqlite.sqlite_schema: Table creation and schema policy
    - firelite.backends.sqlite.sqlite_filters: Filter translation
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional

import aiosqlite

from firelite.backends.document_mapper import DocumentMapper
from firelite.backends.sqlite.sqlite_connection import SQLiteConnectionProvider
from firelite.backends.sqlite.sqlite_filters import build_where_clause_and_params
from firelite.backends.sqlite.sqlite_schema import (
    SQLiteSchemaSynthesizer,
    is_identity_field,
    quote_identifier,
    validate_identifier,
)
from firelite.backends.store_base import DocumentStoreBase
from firelite.data_models import ID_COLUMN, Document, DocumentReference
from firelite.exceptions import DocumentNotFoundError, InvalidFilterError, QueryFailedError, WriteFailedError
from firelite.filters import Filter
from firelite.utils import utc_timestamp


LOG = logging.getLogger(__name__)


class SQLiteDocumentStore(DocumentStoreBase):
    """
    Document operations on a SQLite database.

    Attributes:
        provider (SQLiteConnectionProvider): Owner of the shared connection.
        synthesizer (SQLiteSchemaSynthesizer): Creates tables and applies the schema policy.
        mapper (DocumentMapper): Converts rows into documents and references.
        timestamp_field (Optional[str]): If set, `add_doc` stamps new documents with
            the creation time under this field.

    Methods:
        add_doc: Create a document and return it with its assigned identity.
        get_docs: Return every document in a collection, optionally filtered.
        get_doc: Return the first matching document, or None.
        doc: Resolve the first matching document to a reference.
        update_doc: Update the document a reference points to.
        delete_doc: Delete the first document matching a filter.
        list_collections: List the collections in the database.
        count: Count the documents in a collection.
    """

    def __init__(
        self,
        provider: SQLiteConnectionProvider,
        synthesizer: Optional[SQLiteSchemaSynthesizer] = None,
        mapper: Optional[DocumentMapper] = None,
        timestamp_field: Optional[str] = None,
    ):
        """
        Args:
            provider: The connection provider to run statements through.
            synthesizer: The schema synthesizer. Defaults to one using the REJECT policy.
            mapper: The document mapper.
            timestamp_field: Field to stamp new documents with, if any.
        """
        self.provider: SQLiteConnectionProvider = provider
        self.synthesizer: SQLiteSchemaSynthesizer = synthesizer or SQLiteSchemaSynthesizer()
        self.mapper: DocumentMapper = mapper or DocumentMapper()
        self.timestamp_field: Optional[str] = (
            validate_identifier(timestamp_field) if timestamp_field is not None else None
        )

    @property
    def _conn(self) -> aiosqlite.Connection:
        return self.provider.connection

    async def _select(
        self,
        collection_name: str,
        query_filter: Optional[Filter],
        limit: Optional[int] = None,
        operation: Optional[str] = None,
    ) -> List[sqlite3.Row]:
        """
        Run `SELECT *` on a collection with an optional filter and row limit.

        The filter's field is checked against the table's columns before the
        query runs. SQLite would otherwise read an unknown quoted name as a
        string literal and match the wrong rows.

        Args:
            collection_name: The collection to read.
            query_filter: The filter to apply, if any.
            limit: The maximum number of rows to return, if any.
            operation: The operation reading the rows, for error context.

        Returns:
            The matching rows in the engine's natural order.

        Raises:
            InvalidIdentifierError: If the collection name is invalid.
            InvalidFilterError: If the filter is malformed.
            QueryFailedError: If the filter names a field that isn't a column
                or the engine rejects the query.
        """
        if operation is None:
            operation = "get_doc" if limit == 1 else "get_docs"
        validate_identifier(collection_name, kind="collection")
        where_clause, params = build_where_clause_and_params(query_filter)
        query = f"SELECT * FROM {quote_identifier(collection_name)}{where_clause}"
        if limit is not None:
            query += f" LIMIT {int(limit)}"
        LOG.debug(f"SQLite query: {query}")
        LOG.debug(f"SQLite params: {params}")

        conn = self._conn
        try:
            if query_filter is not None:
                columns = await self.synthesizer.get_columns(conn, collection_name)
                # An empty list means no table; the SELECT reports that itself
                if columns and query_filter.field.lower() not in {column.lower() for column in columns}:
                    raise QueryFailedError(
                        f"no such column: {query_filter.field}", operation=operation, collection=collection_name
                    )
            async with conn.execute(query, params) as cursor:
                return await cursor.fetchall()
        except sqlite3.Error as exc:
            raise QueryFailedError(str(exc), operation=operation, collection=collection_name) from exc

    async def add_doc(self, collection_name: str, fields: Dict[str, Any]) -> Document:
        """
        Create a document, creating the collection's table first if needed.

        The document is read back by the identity the insert returned, so two
        documents with identical fields are never confused.

        Args:
            collection_name: The collection to add the document to.
            fields: The document's fields. `id` is assigned by the database and
                may not be supplied.

        Returns:
            The stored document, including its identity.

        Raises:
            InvalidIdentifierError: If the collection or a field name is invalid.
            UnknownFieldError: If the policy is REJECT and a field isn't a column.
            WriteFailedError: If `id` is supplied or the engine rejects the insert.
        """
        operation = "add_doc"
        validate_identifier(collection_name, kind="collection")
        record = dict(fields)
        if any(is_identity_field(name) for name in record):
            raise WriteFailedError(
                f"'{ID_COLUMN}' is assigned by the database and can't be set",
                operation=operation,
                collection=collection_name,
            )
        if self.timestamp_field is not None:
            record[self.timestamp_field] = utc_timestamp()

        LOG.debug(f"Creating a document in '{collection_name}'...")
        conn = self._conn
        try:
            await self.synthesizer.ensure_table(conn, collection_name, record)
            await self.synthesizer.reconcile_columns(conn, collection_name, record, operation=operation)
        except sqlite3.Error as exc:
            raise WriteFailedError(str(exc), operation=operation, collection=collection_name) from exc

        table = quote_identifier(collection_name)
        if record:
            columns_str = ", ".join(quote_identifier(name) for name in record)
            placeholders_str = ", ".join("?" for _ in record)
            insert_sql = f"INSERT INTO {table} ({columns_str}) VALUES ({placeholders_str})"
        else:
            insert_sql = f"INSERT INTO {table} DEFAULT VALUES"
        params = list(record.values())
        LOG.debug(f"SQLite query: {insert_sql}")
        LOG.debug(f"SQLite params: {params}")

        try:
            async with conn.execute(insert_sql, params) as cursor:
                new_id = cursor.lastrowid
            select_sql = f"SELECT * FROM {table} WHERE {quote_identifier(ID_COLUMN)} = ?"
            async with conn.execute(select_sql, (new_id,)) as cursor:
                row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise WriteFailedError(str(exc), operation=operation, collection=collection_name) from exc

        if row is None:
            raise WriteFailedError(
                f"document with id {new_id} could not be read back", operation=operation, collection=collection_name
            )

        LOG.debug(f"Successfully created document {new_id} in '{collection_name}'.")
        return self.mapper.to_document(collection_name, row)

    async def get_docs(self, collection_name: str, query_filter: Optional[Filter] = None) -> List[Document]:
        """
        Return the documents of a collection that match an optional filter.

        Args:
            collection_name: The collection to read.
            query_filter: The filter to apply, if any.

        Returns:
            The matching documents in the engine's natural order; empty if none match.

        Raises:
            InvalidFilterError: If the filter is malformed.
            QueryFailedError: If the collection doesn't exist or the engine rejects the query.
        """
        log_action = "filtered" if query_filter else "all"
        LOG.debug(f"Fetching {log_action} documents from '{collection_name}'...")
        rows = await self._select(collection_name, query_filter)
        documents = [self.mapper.to_document(collection_name, row) for row in rows]
        LOG.debug(f"Retrieved {len(documents)} document(s) from '{collection_name}' ({log_action}).")
        return documents

    async def get_doc(self, collection_name: str, query_filter: Optional[Filter] = None) -> Optional[Document]:
        """
        Return the first document matching an optional filter.

        Args:
            collection_name: The collection to read.
            query_filter: The filter to apply, if any.

        Returns:
            The document, or None if nothing matches.

        Raises:
            InvalidFilterError: If the filter is malformed.
            QueryFailedError: If the collection doesn't exist or the engine rejects the query.
        """
        rows = await self._select(collection_name, query_filter, limit=1)
        if not rows:
            return None
        return self.mapper.to_document(collection_name, rows[0])

    async def doc(self, collection_name: str, query_filter: Optional[Filter] = None) -> Optional[DocumentReference]:
        """
        Resolve the first document matching a filter to a reference.

        Args:
            collection_name: The collection to read.
            query_filter: The filter to apply.

        Returns:
            A reference, or None if nothing matches.

        Raises:
            InvalidFilterError: If the filter is malformed.
            QueryFailedError: If the collection doesn't exist or the engine rejects the query.
        """
        rows = await self._select(collection_name, query_filter, limit=1)
        if not rows:
            return None
        return self.mapper.to_reference(collection_name, rows[0])

    async def update_doc(self, reference: DocumentReference, fields: Dict[str, Any]):
        """
        Set fields on the document a reference points to. The identity never changes.

        Args:
            reference: The document to update.
            fields: The fields to set.

        Raises:
            InvalidIdentifierError: If the collection or a field name is invalid.
            UnknownFieldError: If the policy is REJECT and a field isn't a column.
            WriteFailedError: If `fields` is empty, tries to change `id`, or the
                engine rejects the update.
            DocumentNotFoundError: If no document has the referenced identity.
        """
        operation = "update_doc"
        collection_name = validate_identifier(reference.collection_name, kind="collection")
        id_column = validate_identifier(reference.id_column)
        record = dict(fields)
        if not record:
            raise WriteFailedError("no fields to update", operation=operation, collection=collection_name)
        if any(is_identity_field(name) for name in record):
            raise WriteFailedError(
                f"'{ID_COLUMN}' identifies the document and can't be changed",
                operation=operation,
                collection=collection_name,
            )

        conn = self._conn
        try:
            if not await self.synthesizer.table_exists(conn, collection_name):
                raise DocumentNotFoundError(
                    f"no document with {id_column} = {reference.id_value!r} (collection does not exist)",
                    operation=operation,
                    collection=collection_name,
                )
            await self.synthesizer.reconcile_columns(conn, collection_name, record, operation=operation)
        except sqlite3.Error as exc:
            raise WriteFailedError(str(exc), operation=operation, collection=collection_name) from exc

        set_str = ", ".join(f"{quote_identifier(name)} = ?" for name in record)
        sql = f"UPDATE {quote_identifier(collection_name)} SET {set_str} WHERE {quote_identifier(id_column)} = ?"
        params = [*record.values(), reference.id_value]
        LOG.debug(f"SQLite query: {sql}")
        LOG.debug(f"SQLite params: {params}")

        try:
            async with conn.execute(sql, params) as cursor:
                changed = cursor.rowcount
        except sqlite3.Error as exc:
            raise WriteFailedError(str(exc), operation=operation, collection=collection_name) from exc

        if changed == 0:
            raise DocumentNotFoundError(
                f"no document with {id_column} = {reference.id_value!r}",
                operation=operation,
                collection=collection_name,
            )
        LOG.debug(f"Successfully updated document {reference.id_value} in '{collection_name}'.")

    async def delete_doc(self, collection_name: str, query_filter: Filter):
        """
        Delete the first document matching a filter.

        Only one document is ever deleted, even when the filter matches several.

        Args:
            collection_name: The collection to delete from.
            query_filter: The filter selecting the document.

        Raises:
            InvalidFilterError: If the filter is malformed.
            QueryFailedError: If the filter names an unknown field or the lookup is rejected.
            DocumentNotFoundError: If nothing matches or nothing was deleted.
            WriteFailedError: If the engine rejects the delete.
        """
        operation = "delete_doc"
        validate_identifier(collection_name, kind="collection")
        if query_filter is None:
            raise InvalidFilterError("delete_doc requires a filter selecting the document to delete")
        LOG.info(f"Attempting to delete a document from '{collection_name}'...")

        conn = self._conn
        try:
            exists = await self.synthesizer.table_exists(conn, collection_name)
        except sqlite3.Error as exc:
            raise QueryFailedError(str(exc), operation=operation, collection=collection_name) from exc
        if not exists:
            raise DocumentNotFoundError("collection does not exist", operation=operation, collection=collection_name)

        rows = await self._select(collection_name, query_filter, limit=1, operation=operation)
        if not rows:
            raise DocumentNotFoundError(
                f"no document matches {query_filter}", operation=operation, collection=collection_name
            )
        reference = self.mapper.to_reference(collection_name, rows[0])

        sql = f"DELETE FROM {quote_identifier(collection_name)} WHERE {quote_identifier(reference.id_column)} = ?"
        LOG.debug(f"SQLite query: {sql}")
        try:
            async with conn.execute(sql, (reference.id_value,)) as cursor:
                deleted = cursor.rowcount
        except sqlite3.Error as exc:
            raise WriteFailedError(str(exc), operation=operation, collection=collection_name) from exc

        if deleted == 0:
            raise DocumentNotFoundError(
                f"document {reference.id_value} was already deleted", operation=operation, collection=collection_name
            )
        LOG.info(f"Successfully deleted document {reference.id_value} from '{collection_name}'.")

    async def list_collections(self) -> List[str]:
        """
        List the collections stored in the database.

        Returns:
            Collection names sorted alphabetically.
        """
        return await self.synthesizer.list_tables(self._conn)

    async def count(self, collection_name: str) -> int:
        """
        Count the documents in a collection.

        Args:
            collection_name: The collection to count.

        Returns:
            The number of documents.

        Raises:
            QueryFailedError: If the collection doesn't exist.
        """
        validate_identifier(collection_name, kind="collection")
        try:
            async with self._conn.execute(f"SELECT COUNT(*) FROM {quote_identifier(collection_name)}") as cursor:
                row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise QueryFailedError(str(exc), operation="count", collection=collection_name) from exc
        return row[0]
