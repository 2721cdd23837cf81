##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Tests for the `backup.py` module.
"""

import asyncio
import logging
import os
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from firelite.exceptions import StorageUnavailableError
from firelite.maintenance.backup import BackupJob, backup_filename
from tests.fixture_types import FixturePath, FixtureStore


# pylint: disable=redefined-outer-name

NOW = datetime(2024, 5, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def backup_job(tmp_path: FixturePath) -> BackupJob:
    """
    A backup job for a small database under `tmp_path` holding one `notes` row.

    Args:
        tmp_path: PyTest's per-test temporary directory.

    Returns:
        The job.
    """
    db_path = tmp_path / "app.sqlite"
    conn = sqlite3.connect(str(db_path))
    with conn:
        conn.execute("CREATE TABLE notes (id INTEGER PRIMARY KEY AUTOINCREMENT, text TEXT)")
        conn.execute("INSERT INTO notes (text) VALUES ('hello')")
    conn.close()
    return BackupJob(db_path, tmp_path / "backups", retention=timedelta(days=7), interval=timedelta(hours=24))


def read_rows(db_path: Path, table: str) -> list:
    """Read every row of `table` from the database at `db_path`."""
    conn = sqlite3.connect(str(db_path))
    try:
        return conn.execute(f"SELECT * FROM {table} ORDER BY id").fetchall()
    finally:
        conn.close()


def make_backup(directory: Path, name: str, age: timedelta) -> Path:
    """Create a file in `directory` whose modification time is `age` before `NOW`."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_bytes(b"")
    stamp = (NOW - age).timestamp()
    os.utime(path, (stamp, stamp))
    return path


def test_backup_filename():
    """Test that backup names are filesystem-safe ISO 8601 UTC timestamps."""
    assert backup_filename(NOW) == "backup_2024-05-10T12-00-00.000Z.sqlite"


def test_backup_filename_converts_to_utc():
    """Test that aware times in other zones are converted to UTC."""
    moment = datetime(2024, 5, 10, 14, 30, 0, tzinfo=timezone(timedelta(hours=2)))
    assert backup_filename(moment) == "backup_2024-05-10T12-30-00.000Z.sqlite"


class TestRunOnce:
    """Tests for `BackupJob.run_once`."""

    def test_copies_database(self, backup_job: BackupJob):
        """
        Test that the database is copied into a newly created backup directory.

        Args:
            backup_job: The job under test.
        """
        destination = backup_job.run_once(now=NOW)

        assert destination == backup_job.backup_dir / "backup_2024-05-10T12-00-00.000Z.sqlite"
        assert read_rows(destination, "notes") == [(1, "hello")]

    def test_missing_database(self, tmp_path: FixturePath):
        """
        Test that backing up a database that doesn't exist raises.

        Args:
            tmp_path: PyTest's per-test temporary directory.
        """
        job = BackupJob(tmp_path / "missing.sqlite", tmp_path / "backups")
        with pytest.raises(StorageUnavailableError, match="does not exist"):
            job.run_once(now=NOW)
        assert not (tmp_path / "backups").exists()

    def test_unwritable_backup_directory(self, backup_job: BackupJob):
        """
        Test that an OS error while preparing the backup is reported as storage being unavailable.

        Args:
            backup_job: The job under test.
        """
        backup_job.backup_dir.write_text("not a directory")
        with pytest.raises(StorageUnavailableError, match="Cannot back up"):
            backup_job.run_once(now=NOW)

    def test_not_a_database(self, tmp_path: FixturePath):
        """
        Test that a file SQLite can't read is reported as storage being unavailable.

        Args:
            tmp_path: PyTest's per-test temporary directory.
        """
        db_path = tmp_path / "app.sqlite"
        db_path.write_bytes(b"plain text, not a database" * 100)
        job = BackupJob(db_path, tmp_path / "backups")

        with pytest.raises(StorageUnavailableError, match="not a database"):
            job.run_once(now=NOW)

    @pytest.mark.asyncio
    async def test_includes_writes_still_in_the_log(self, stores_store: FixtureStore, stores_db_path: FixturePath):
        """
        Test that a backup taken while a write-ahead-log connection is open holds
        every committed write, even ones not yet checkpointed into the main file.

        Args:
            stores_store: A document store over an open connection in WAL mode.
            stores_db_path: The path of the database behind `stores_store`.
        """
        await stores_store.add_doc("users", {"email": "a@x.com"})
        await stores_store.add_doc("users", {"email": "b@x.com"})
        job = BackupJob(stores_db_path, stores_db_path.parent / "backups")

        destination = await asyncio.to_thread(job.run_once, NOW)

        assert read_rows(destination, "users") == [(1, "a@x.com"), (2, "b@x.com")]
        await stores_store.add_doc("users", {"email": "c@x.com"})
        assert await stores_store.count("users") == 3


class TestPrune:
    """Tests for `BackupJob.prune`."""

    def test_missing_directory(self, backup_job: BackupJob):
        """
        Test that pruning before any backup exists does nothing.

        Args:
            backup_job: The job under test.
        """
        assert backup_job.prune(now=NOW) == []

    def test_deletes_only_expired_backups(self, backup_job: BackupJob):
        """
        Test that only backups older than the retention window are removed.

        Args:
            backup_job: The job under test.
        """
        directory = backup_job.backup_dir
        expired = make_backup(directory, "backup_old.sqlite", timedelta(days=8))
        fresh = make_backup(directory, "backup_new.sqlite", timedelta(days=1))
        unrelated = make_backup(directory, "notes.txt", timedelta(days=30))

        deleted = backup_job.prune(now=NOW)

        assert deleted == [expired]
        assert not expired.exists()
        assert fresh.exists()
        assert unrelated.exists()

    def test_errors_are_logged_and_skipped(
        self, backup_job: BackupJob, mocker: MockerFixture, caplog: pytest.LogCaptureFixture
    ):
        """
        Test that a backup that can't be removed doesn't stop the others.

        Args:
            backup_job: The job under test.
            mocker: PyTest mocker fixture.
            caplog: PyTest caplog fixture.
        """
        directory = backup_job.backup_dir
        first = make_backup(directory, "backup_a.sqlite", timedelta(days=9))
        second = make_backup(directory, "backup_b.sqlite", timedelta(days=9))
        real_unlink = Path.unlink

        def flaky_unlink(path: Path, *args, **kwargs):
            if path.name == first.name:
                raise PermissionError("busy")
            return real_unlink(path, *args, **kwargs)

        mocker.patch.object(Path, "unlink", flaky_unlink)
        caplog.set_level(logging.ERROR)

        deleted = backup_job.prune(now=NOW)

        assert deleted == [second]
        assert first.exists()
        assert "Could not prune backup" in caplog.text


class TestRunForever:
    """Tests for `BackupJob.run_forever`."""

    @pytest.mark.asyncio
    async def test_backs_up_and_prunes_each_interval(self, backup_job: BackupJob, mocker: MockerFixture):
        """
        Test that every interval produces one backup followed by one prune.

        Args:
            backup_job: The job under test.
            mocker: PyTest mocker fixture.
        """
        sleep = mocker.patch(
            "firelite.maintenance.backup.asyncio.sleep", side_effect=[None, None, asyncio.CancelledError()]
        )
        run_once = mocker.patch.object(backup_job, "run_once")
        prune = mocker.patch.object(backup_job, "prune")

        with pytest.raises(asyncio.CancelledError):
            await backup_job.run_forever()

        sleep.assert_called_with(timedelta(hours=24).total_seconds())
        assert sleep.call_count == 3
        assert run_once.call_count == 2
        assert prune.call_count == 2

    @pytest.mark.asyncio
    async def test_failures_stop_the_loop(self, backup_job: BackupJob, mocker: MockerFixture):
        """
        Test that a failed backup propagates out of the schedule.

        Args:
            backup_job: The job under test.
            mocker: PyTest mocker fixture.
        """
        mocker.patch("firelite.maintenance.backup.asyncio.sleep", return_value=None)
        mocker.patch.object(backup_job, "run_once", side_effect=StorageUnavailableError("gone"))

        with pytest.raises(StorageUnavailableError, match="gone"):
            await backup_job.run_forever()
