##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Wires the Firelite components together from a single `Config`.

```python
async with initialize_app() as app:
    users = collection(app.store, "users")
    session = await app.auth.sign_in_with_email_and_password(email, password)
```
"""

import logging
from datetime import timedelta
from typing import Optional

from firelite.auth.auth_service import AuthLogRecorder, AuthService
from firelite.auth.events import Subscription
from firelite.backends.sqlite.sqlite_connection import SQLiteConnectionProvider
from firelite.backends.sqlite.sqlite_document_store import SQLiteDocumentStore
from firelite.backends.sqlite.sqlite_schema import SQLiteSchemaSynthesizer
from firelite.config import Config
from firelite.config.configfile import initialize_config
from firelite.maintenance.backup import BackupJob
from firelite.storage.blob_storage import BlobStorage


LOG = logging.getLogger(__name__)


class FireliteApp:
    """
    The set of services built from one configuration.

    Attributes:
        config (Config): The configuration the app was built from.
        provider (SQLiteConnectionProvider): Owner of the shared database connection.
        store (SQLiteDocumentStore): Document operations on the database.
        auth (AuthService): Email/password accounts.
        storage (BlobStorage): Raw file storage.
        backup (BackupJob): The database backup job.

    Methods:
        from_config: Build every service from a `Config`.
        open: Open the database connection.
        close: Close the database connection.
    """

    def __init__(
        self,
        config: Config,
        provider: SQLiteConnectionProvider,
        store: SQLiteDocumentStore,
        auth: AuthService,
        storage: BlobStorage,
        backup: BackupJob,
    ):
        self.config = config
        self.provider = provider
        self.store = store
        self.auth = auth
        self.storage = storage
        self.backup = backup
        self._auth_log: Optional[Subscription] = None

    @classmethod
    def from_config(cls, config: Config) -> "FireliteApp":
        """
        Build every service from a `Config`. Nothing touches the disk until `open`.

        Args:
            config: The configuration to build from.

        Returns:
            The app.
        """
        provider = SQLiteConnectionProvider(config.database.path, journal_mode=config.database.journal_mode)
        store = SQLiteDocumentStore(
            provider,
            synthesizer=SQLiteSchemaSynthesizer(config.database.schema_policy),
            timestamp_field=config.database.timestamp_field,
        )
        auth = AuthService(
            store, rounds=config.auth.bcrypt_rounds, users_collection=config.auth.users_collection
        )
        storage = BlobStorage(config.storage.directory)
        backup = BackupJob(
            config.database.path,
            config.backup.directory,
            retention=timedelta(days=config.backup.retention_days),
            interval=timedelta(hours=config.backup.interval_hours),
        )
        app = cls(config, provider, store, auth, storage, backup)
        if config.auth.logs_collection:
            app._auth_log = auth.on_auth_state_changed(AuthLogRecorder(store, config.auth.logs_collection))
        return app

    async def open(self):
        """Open the shared database connection, creating the file if needed."""
        await self.provider.open()
        LOG.debug(f"Firelite app opened on '{self.provider.db_path}'.")

    async def close(self):
        """Close the shared database connection."""
        await self.provider.close()

    async def __aenter__(self) -> "FireliteApp":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


def initialize_app(config_path: Optional[str] = None) -> FireliteApp:
    """
    Load the configuration and build an app from it.

    Args:
        config_path: A directory (or file) to look for `app.yaml` in. If
            `None`, the default search locations are used.

    Returns:
        The app, not yet opened.
    """
    return FireliteApp.from_config(initialize_config(config_path))
