##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
This module provides the `BackupJob` class, which periodically copies the
database into a backup directory and removes backups that have outlived the
retention window.

Copies go through SQLite's online backup API rather than a file copy, so
committed writes still sitting in the write-ahead log are included and a
connection can keep writing while the backup runs.

The job runs beside the store rather than inside it: nothing in the document
operations waits on a backup, and each backup runs in a worker thread so
the event loop stays responsive.
"""

import asyncio
import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional, Union

from firelite.exceptions import StorageUnavailableError


LOG = logging.getLogger(__name__)

BACKUP_PREFIX = "backup_"
BACKUP_SUFFIX = ".sqlite"


def backup_filename(moment: datetime) -> str:
    """
    Build the name of the backup taken at `moment`.

    The timestamp is ISO 8601 in UTC with every `:` replaced by `-`, e.g.
    `backup_2024-05-01T12-00-00.000Z.sqlite`.

    Args:
        moment: When the backup is taken.

    Returns:
        The backup's file name.
    """
    stamp = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"{BACKUP_PREFIX}{stamp.replace(':', '-')}{BACKUP_SUFFIX}"


class BackupJob:
    """
    Copies the database on a schedule and prunes old copies.

    Attributes:
        db_path (Path): The database file to back up.
        backup_dir (Path): Where backups are written.
        retention (timedelta): How long a backup is kept.
        interval (timedelta): How long to wait between backups.

    Methods:
        run_once: Take one backup now.
        prune: Delete backups older than the retention window.
        run_forever: Back up and prune every `interval` until cancelled.
    """

    def __init__(
        self,
        db_path: Union[str, Path],
        backup_dir: Union[str, Path] = "__backups",
        retention: timedelta = timedelta(days=7),
        interval: timedelta = timedelta(hours=24),
    ):
        self.db_path = Path(db_path)
        self.backup_dir = Path(backup_dir)
        self.retention = retention
        self.interval = interval

    def run_once(self, now: Optional[datetime] = None) -> Path:
        """
        Copy the database into the backup directory.

        Args:
            now: The time to name the backup after. Defaults to the current time.

        Returns:
            The path of the new backup.

        Raises:
            StorageUnavailableError: If the database file doesn't exist or can't be backed up.
        """
        if not self.db_path.is_file():
            raise StorageUnavailableError(f"Cannot back up '{self.db_path}': database file does not exist.")

        moment = now or datetime.now(timezone.utc)
        destination = self.backup_dir / backup_filename(moment)
        source = target = None
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            source = sqlite3.connect(str(self.db_path))
            target = sqlite3.connect(str(destination))
            source.backup(target)
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailableError(f"Cannot back up '{self.db_path}' to '{destination}': {exc}") from exc
        finally:
            for conn in (target, source):
                if conn is not None:
                    conn.close()

        LOG.info(f"Backup written to '{destination}'.")
        return destination

    def prune(self, now: Optional[datetime] = None) -> List[Path]:
        """
        Delete backups whose modification time is older than the retention window.

        A backup that can't be inspected or removed is logged and skipped.

        Args:
            now: The time to measure ages against. Defaults to the current time.

        Returns:
            The backups that were deleted.
        """
        if not self.backup_dir.is_dir():
            return []

        cutoff = (now or datetime.now(timezone.utc)).timestamp() - self.retention.total_seconds()
        deleted = []
        for backup in sorted(self.backup_dir.glob(f"{BACKUP_PREFIX}*{BACKUP_SUFFIX}")):
            try:
                if backup.stat().st_mtime < cutoff:
                    backup.unlink()
                    LOG.info(f"Deleted expired backup '{backup}'.")
                    deleted.append(backup)
            except OSError as exc:
                LOG.error(f"Could not prune backup '{backup}': {exc}")
        return deleted

    async def run_forever(self):
        """
        Every `interval`, take a backup and prune expired ones. Runs until cancelled.
        """
        LOG.info(
            f"Backing up '{self.db_path}' to '{self.backup_dir}' every {self.interval} "
            f"(keeping {self.retention})."
        )
        while True:
            await asyncio.sleep(self.interval.total_seconds())
            await asyncio.to_thread(self.run_once)
            await asyncio.to_thread(self.prune)
