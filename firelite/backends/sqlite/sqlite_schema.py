##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Schema synthesis for SQLite-backed collections.

Documents carry no fixed schema, but every collection lives in a SQLite table.
The `SQLiteSchemaSynthesizer` is the single place that turns an observed field
set into table and column definitions:

- `ensure_table` creates a collection's table (with an autoincrement `id`
  column) the first time a document is written to it, and does nothing if the
  table already exists.
- `reconcile_columns` applies the configured `SchemaPolicy` to fields a later
  write introduces: reject them, or add them as nullable columns.

It is also the only authority on which strings may be used as table and column
names; everything it emits is validated and quoted.
"""

import logging
import sqlite3
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Union

import aiosqlite

from firelite.data_models import ID_COLUMN
from firelite.exceptions import InvalidIdentifierError, UnknownFieldError
from firelite.filters import IDENTIFIER_PATTERN


LOG = logging.getLogger(__name__)

FieldSample = Union[Mapping[str, Any], Iterable[str]]


class SchemaPolicy(Enum):
    """
    What to do when a write introduces fields the collection's table doesn't have.

    REJECT: Fail the write with `UnknownFieldError` before any statement is sent.
    EXTEND: Add each new field as a nullable column, then perform the write.
    """

    REJECT = "reject"
    EXTEND = "extend"


def validate_identifier(name: str, kind: str = "field") -> str:
    """
    Ensure a collection or field name is safe to use as a SQL identifier.

    Args:
        name: The identifier to check.
        kind: What the identifier names ("collection" or "field"), used in error messages.

    Returns:
        The identifier unchanged.

    Raises:
        InvalidIdentifierError: If the name isn't a plain identifier, or is a
            collection name reserved by SQLite.
    """
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise InvalidIdentifierError(f"Invalid {kind} name: {name!r}")
    if kind == "collection" and name.lower().startswith("sqlite_"):
        raise InvalidIdentifierError(f"Collection names may not start with 'sqlite_': {name!r}")
    return name


def quote_identifier(name: str) -> str:
    """
    Quote an identifier that has already passed `validate_identifier`.

    Args:
        name: A validated identifier.

    Returns:
        The identifier wrapped in double quotes.
    """
    return f'"{name}"'


def get_sqlite_type(value: Any) -> str:
    """
    Map a sample Python value to the SQLite column type used to store it.

    Args:
        value: A value observed in a document.

    Returns:
        A string representing the corresponding SQLite column type.
    """
    result = "TEXT"  # Default fallback

    # bool is a subclass of int, SQLite stores both as INTEGER
    if isinstance(value, (bool, int)):
        result = "INTEGER"
    elif isinstance(value, float):
        result = "REAL"
    elif isinstance(value, (bytes, bytearray, memoryview)):
        result = "BLOB"

    return result


def is_identity_field(name: str) -> bool:
    """
    Check whether a field name refers to the identity column.

    SQLite compares identifiers without regard to case, so `ID` and `Id` name
    the same column as `id`.

    Args:
        name: The field name to check.

    Returns:
        True if writing this field would write the identity column.
    """
    return isinstance(name, str) and name.lower() == ID_COLUMN


def _column_types(sample: FieldSample) -> List[tuple]:
    """
    Turn a sample (a document mapping or a list of field names) into
    `(name, type)` pairs, validating each name.
    """
    if isinstance(sample, Mapping):
        pairs = [(name, get_sqlite_type(value)) for name, value in sample.items()]
    else:
        pairs = [(name, "TEXT") for name in sample]

    columns = []
    for name, col_type in pairs:
        validate_identifier(name)
        if is_identity_field(name):
            continue
        columns.append((name, col_type))
    return columns


class SQLiteSchemaSynthesizer:
    """
    Creates and extends the tables that back collections.

    Attributes:
        policy (SchemaPolicy): How writes that introduce new fields are handled.

    Methods:
        table_exists: Check the catalog for a table.
        get_columns: List a table's columns.
        list_tables: List every collection table in the database.
        ensure_table: Create a collection's table if it doesn't exist.
        reconcile_columns: Apply the schema policy to fields missing from a table.
    """

    def __init__(self, policy: Union[SchemaPolicy, str] = SchemaPolicy.REJECT):
        """
        Args:
            policy: A `SchemaPolicy` or its string value ("reject" or "extend").
        """
        self.policy: SchemaPolicy = SchemaPolicy(policy.lower()) if isinstance(policy, str) else policy

    async def table_exists(self, conn: aiosqlite.Connection, collection_name: str) -> bool:
        """
        Check whether a collection's table exists.

        Args:
            conn: An open connection.
            collection_name: The collection to look for.

        Returns:
            True if the table exists, False otherwise.
        """
        async with conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?", (collection_name,)
        ) as cursor:
            row = await cursor.fetchone()
        return row is not None

    async def get_columns(self, conn: aiosqlite.Connection, collection_name: str) -> List[str]:
        """
        List a table's columns in definition order.

        Args:
            conn: An open connection.
            collection_name: A validated collection name.

        Returns:
            The column names, or an empty list if the table doesn't exist.
        """
        async with conn.execute(f"PRAGMA table_info({quote_identifier(collection_name)})") as cursor:
            rows = await cursor.fetchall()
        return [row[1] for row in rows]

    async def list_tables(self, conn: aiosqlite.Connection) -> List[str]:
        """
        List every collection table, skipping SQLite's internal tables.

        Args:
            conn: An open connection.

        Returns:
            Table names sorted alphabetically.
        """
        async with conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        ) as cursor:
            rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def ensure_table(
        self, conn: aiosqlite.Connection, collection_name: str, sample: Optional[FieldSample] = None
    ):
        """
        Create the table backing a collection if it doesn't exist yet.

        The table gets an `id INTEGER PRIMARY KEY AUTOINCREMENT` column plus one
        column per field in `sample`. If the table already exists, nothing is
        changed; a racing creator that wins first is treated as success.

        Args:
            conn: An open connection.
            collection_name: The collection to create.
            sample: A document (column types are inferred from its values) or an
                iterable of field names (all stored as TEXT).

        Raises:
            InvalidIdentifierError: If the collection or a field name is invalid.
            sqlite3.Error: If the engine rejects the statement for another reason.
        """
        validate_identifier(collection_name, kind="collection")
        columns = _column_types(sample or {})

        if await self.table_exists(conn, collection_name):
            return

        field_defs = [f"{quote_identifier(ID_COLUMN)} INTEGER PRIMARY KEY AUTOINCREMENT"]
        field_defs.extend(f"{quote_identifier(name)} {col_type}" for name, col_type in columns)
        field_defs_str = ", ".join(field_defs)

        sql = f"CREATE TABLE IF NOT EXISTS {quote_identifier(collection_name)} ({field_defs_str})"
        LOG.debug(f"SQLite query: {sql}")
        try:
            await conn.execute(sql)
        except sqlite3.OperationalError as exc:
            if "already exists" not in str(exc):
                raise
            LOG.debug(f"Table '{collection_name}' was created concurrently; continuing.")
            return
        LOG.info(f"Created collection table '{collection_name}' with columns {[name for name, _ in columns]}.")

    async def reconcile_columns(
        self, conn: aiosqlite.Connection, collection_name: str, fields: Mapping[str, Any], operation: str = None
    ) -> List[str]:
        """
        Apply the schema policy to any fields that aren't columns of the table.

        Args:
            conn: An open connection.
            collection_name: A validated collection name whose table exists.
            fields: The fields about to be written.
            operation: The operation performing the write, for error context.

        Returns:
            The names of the columns that were added (always empty under REJECT).

        Raises:
            InvalidIdentifierError: If a field name is invalid.
            UnknownFieldError: Under REJECT, if any field isn't a column.
        """
        columns = _column_types(fields)
        # Column names are matched the way SQLite matches them, ignoring case
        existing = {column.lower() for column in await self.get_columns(conn, collection_name)}
        missing = []
        for name, col_type in columns:
            if name.lower() not in existing:
                existing.add(name.lower())
                missing.append((name, col_type))
        if not missing:
            return []

        if self.policy is SchemaPolicy.REJECT:
            raise UnknownFieldError([name for name, _ in missing], operation=operation, collection=collection_name)

        added = []
        for name, col_type in missing:
            sql = f"ALTER TABLE {quote_identifier(collection_name)} ADD COLUMN {quote_identifier(name)} {col_type}"
            LOG.debug(f"SQLite query: {sql}")
            try:
                await conn.execute(sql)
            except sqlite3.OperationalError as exc:
                if "duplicate column name" not in str(exc):
                    raise
                continue
            added.append(name)
        LOG.info(f"Added column(s) {added} to collection '{collection_name}'.")
        return added
