"""
Unit tests for compressed log rotation.

Tests cover:
- Size-triggered rollover into gzip backups
- Backup count limits
- Age-based pruning of backups
- Uncompressed rotation
"""

import gzip
import logging
import os
import time

import pytest

from shared.logging.rotation import CompressingRotatingFileHandler, SECONDS_PER_DAY


def make_record(message):
    """Build a log record with a fixed message."""
    return logging.makeLogRecord({"msg": message, "levelno": logging.INFO, "levelname": "INFO"})


def read_gzip(path):
    """Return the text of a gzip backup."""
    with gzip.open(path, "rt", encoding="utf-8") as f:
        return f.read()


def age_file(path, days):
    """Set a file's modification time to the given number of days ago."""
    old = time.time() - days * SECONDS_PER_DAY
    os.utime(path, (old, old))


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "auth.log"


@pytest.fixture
def handler_factory(log_path):
    handlers = []

    def factory(**kwargs):
        handler = CompressingRotatingFileHandler(str(log_path), **kwargs)
        handlers.append(handler)
        return handler

    yield factory
    for handler in handlers:
        handler.close()


class TestRollover:
    """Tests for rollover behavior."""

    def test_rolls_over_at_max_size(self, log_path, handler_factory):
        """Test the file rotates once it would exceed max_size_mb."""
        handler = handler_factory(max_size_mb=1, backup_count=3)
        chunk = "x" * (600 * 1024)

        handler.emit(make_record("first " + chunk))
        assert not (log_path.parent / "auth.log.1.gz").exists()

        handler.emit(make_record("second " + chunk))
        handler.flush()

        backup = log_path.parent / "auth.log.1.gz"
        assert backup.exists()
        assert read_gzip(backup).startswith("first ")
        assert log_path.read_text(encoding="utf-8").startswith("second ")

    def test_uncompressed_file_removed_after_gzip(self, log_path, handler_factory):
        """Test only the compressed backup remains after rollover."""
        handler = handler_factory(backup_count=3)
        handler.emit(make_record("entry"))

        handler.doRollover()

        assert (log_path.parent / "auth.log.1.gz").exists()
        assert not (log_path.parent / "auth.log.1").exists()

    def test_backups_shift_newest_first(self, log_path, handler_factory):
        """Test older backups move to higher indexes."""
        handler = handler_factory(backup_count=3)

        handler.emit(make_record("one"))
        handler.doRollover()
        handler.emit(make_record("two"))
        handler.doRollover()

        assert "two" in read_gzip(log_path.parent / "auth.log.1.gz")
        assert "one" in read_gzip(log_path.parent / "auth.log.2.gz")

    def test_backup_count_limit(self, log_path, handler_factory):
        """Test no more than backup_count backups are kept."""
        handler = handler_factory(backup_count=2)

        for message in ("one", "two", "three"):
            handler.emit(make_record(message))
            handler.doRollover()

        names = sorted(p.name for p in log_path.parent.iterdir())
        assert names == ["auth.log", "auth.log.1.gz", "auth.log.2.gz"]
        assert "three" in read_gzip(log_path.parent / "auth.log.1.gz")
        assert "two" in read_gzip(log_path.parent / "auth.log.2.gz")
        assert handler.backup_files() == [
            log_path.parent / "auth.log.1.gz",
            log_path.parent / "auth.log.2.gz",
        ]

    def test_uncompressed_rotation(self, log_path, handler_factory):
        """Test compress=False keeps plain backup names."""
        handler = handler_factory(backup_count=2, compress=False)
        handler.emit(make_record("plain"))

        handler.doRollover()

        backup = log_path.parent / "auth.log.1"
        assert backup.exists()
        assert "plain" in backup.read_text(encoding="utf-8")


class TestAgePruning:
    """Tests for age-based backup removal."""

    def test_prunes_old_backups_on_rollover(self, log_path, handler_factory):
        """Test a backup older than max_age_days is removed at rollover."""
        handler = handler_factory(backup_count=3, max_age_days=28)

        handler.emit(make_record("old"))
        handler.doRollover()
        age_file(log_path.parent / "auth.log.1.gz", days=30)

        handler.emit(make_record("new"))
        handler.doRollover()

        assert (log_path.parent / "auth.log.1.gz").exists()
        assert not (log_path.parent / "auth.log.2.gz").exists()

    def test_keeps_recent_backups(self, log_path, handler_factory):
        """Test backups within max_age_days are kept."""
        handler = handler_factory(backup_count=3, max_age_days=28)
        handler.emit(make_record("recent"))
        handler.doRollover()
        age_file(log_path.parent / "auth.log.1.gz", days=27)

        assert handler.prune_expired_backups() == []
        assert (log_path.parent / "auth.log.1.gz").exists()

    def test_zero_age_keeps_everything(self, log_path, handler_factory):
        """Test max_age_days=0 disables pruning."""
        handler = handler_factory(backup_count=3, max_age_days=0)
        handler.emit(make_record("ancient"))
        handler.doRollover()
        age_file(log_path.parent / "auth.log.1.gz", days=3650)

        assert handler.prune_expired_backups() == []
        assert (log_path.parent / "auth.log.1.gz").exists()

    def test_prunes_stale_backups_on_open(self, log_path, handler_factory):
        """Test backups left by an earlier run are aged out when the handler opens."""
        first = handler_factory(backup_count=3, max_age_days=28)
        first.emit(make_record("previous run"))
        first.doRollover()
        first.emit(make_record("fresh"))
        first.doRollover()
        first.close()
        age_file(log_path.parent / "auth.log.2.gz", days=40)

        handler_factory(backup_count=3, max_age_days=28)

        assert (log_path.parent / "auth.log.1.gz").exists()
        assert not (log_path.parent / "auth.log.2.gz").exists()
