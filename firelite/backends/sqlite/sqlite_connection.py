##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
SQLite connection provider for the Firelite application.

This module defines the `SQLiteConnectionProvider` class, which owns the single
`aiosqlite` connection shared by every document operation in a process. It makes
sure the database file exists before first use, configures the connection (journal
mode, foreign keys, name-based row access, autocommit) and guarantees cleanup when
used as an async context manager.
"""

import asyncio
import logging
import sqlite3
from pathlib import Path
from types import TracebackType
from typing import Optional, Type, Union

import aiosqlite

from firelite.exceptions import StorageUnavailableError


LOG = logging.getLogger(__name__)

JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")


class SQLiteConnectionProvider:
    """
    Opens (creating if needed) a SQLite database file and hands out the one
    connection every operation shares.

    The provider does no pooling and no locking around statements; SQLite
    serializes writes itself. The only lock guards `open()` so that concurrent
    first callers don't open two connections.

    Attributes:
        db_path (Path): The location of the database file.
        journal_mode (str): The SQLite journal mode applied on open.

    Methods:
        open: Open the shared connection if it isn't open yet and return it.
        close: Close the shared connection.
        connection: The currently open connection.
        is_open: Whether a connection is currently open.
        get_version: The version of the SQLite library in use.
    """

    def __init__(self, db_path: Union[str, Path], journal_mode: str = "WAL"):
        """
        Args:
            db_path: The location of the database file.
            journal_mode: The SQLite journal mode to apply when the connection opens.

        Raises:
            ValueError: If `journal_mode` is not a SQLite journal mode.
        """
        if journal_mode.upper() not in JOURNAL_MODES:
            raise ValueError(f"Unsupported journal mode '{journal_mode}'. Choose from {JOURNAL_MODES}.")
        self.db_path: Path = Path(db_path)
        self.journal_mode: str = journal_mode.upper()
        self._conn: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    def _ensure_file(self):
        """
        Create the database file, and its parent directory, if they don't exist.

        Raises:
            StorageUnavailableError: If the path is a directory or can't be created.
        """
        if self.db_path.is_dir():
            raise StorageUnavailableError(f"Database path points to a directory, expected a file: {self.db_path}")
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            if not self.db_path.exists():
                LOG.info(f"Creating database file at {self.db_path}")
                self.db_path.touch()
        except OSError as exc:
            raise StorageUnavailableError(f"Unable to create database file {self.db_path}: {exc}") from exc

    async def open(self) -> aiosqlite.Connection:
        """
        Open the shared connection. Calling this again while a connection is
        open returns the same connection.

        Returns:
            The open `aiosqlite.Connection`.

        Raises:
            StorageUnavailableError: If the database can't be created or opened.
        """
        async with self._lock:
            if self._conn is not None:
                return self._conn

            self._ensure_file()
            try:
                # isolation_level=None puts sqlite3 in autocommit mode
                conn = await aiosqlite.connect(str(self.db_path), isolation_level=None)
            except (OSError, sqlite3.Error) as exc:
                raise StorageUnavailableError(f"Unable to open database {self.db_path}: {exc}") from exc

            try:
                await conn.execute(f"PRAGMA journal_mode={self.journal_mode}")
                await conn.execute("PRAGMA foreign_keys=ON")
            except sqlite3.Error as exc:
                await conn.close()
                raise StorageUnavailableError(f"Unable to configure database {self.db_path}: {exc}") from exc

            # This enables name-based access to columns
            conn.row_factory = aiosqlite.Row

            LOG.debug(f"Opened SQLite connection to {self.db_path} (journal_mode={self.journal_mode}).")
            self._conn = conn
            return conn

    async def close(self):
        """
        Close the shared connection if one is open.
        """
        async with self._lock:
            if self._conn is not None:
                await self._conn.close()
                self._conn = None
                LOG.debug(f"Closed SQLite connection to {self.db_path}.")

    @property
    def connection(self) -> aiosqlite.Connection:
        """
        The currently open connection.

        Raises:
            StorageUnavailableError: If `open()` hasn't been called.
        """
        if self._conn is None:
            raise StorageUnavailableError(f"No open connection to {self.db_path}; call open() first.")
        return self._conn

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @staticmethod
    def get_version() -> str:
        """
        Return the version of the SQLite library in use.

        Returns:
            The SQLite version string.
        """
        return sqlite3.sqlite_version

    async def __aenter__(self) -> aiosqlite.Connection:
        return await self.open()

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ):
        await self.close()
