"""Size-based log file rotation with gzip compression and age-based pruning.

Extends the standard library RotatingFileHandler so rotated files are
compressed and backups older than a configured age are removed.
"""

import gzip
import logging.handlers
import os
import shutil
import time
from pathlib import Path
from typing import List

BYTES_PER_MEGABYTE = 1024 * 1024
SECONDS_PER_DAY = 24 * 60 * 60


class CompressingRotatingFileHandler(logging.handlers.RotatingFileHandler):
    """Rotating file handler that gzips backups and ages them out.

    Backups are named ``<file>.1.gz`` (newest) up to ``<file>.<n>.gz``
    (oldest). With ``compress=False`` the plain ``<file>.<n>`` names of
    the base handler are kept.
    """

    def __init__(
        self,
        filename: str,
        max_size_mb: int = 500,
        backup_count: int = 3,
        max_age_days: int = 0,
        compress: bool = True,
        encoding: str = "utf-8",
    ):
        """
        Args:
            filename: Path of the active log file
            max_size_mb: Size at which the active file is rotated
            backup_count: Number of rotated files to keep
            max_age_days: Remove backups older than this (0 keeps them)
            compress: Whether to gzip rotated files
            encoding: Text encoding of the active file
        """
        super().__init__(
            filename,
            maxBytes=max_size_mb * BYTES_PER_MEGABYTE,
            backupCount=backup_count,
            encoding=encoding,
        )
        self.max_age_days = max_age_days
        self.compress = compress
        self.prune_expired_backups()

    def rotation_filename(self, default_name: str) -> str:
        if self.compress:
            return default_name + ".gz"
        return default_name

    def rotate(self, source: str, dest: str) -> None:
        if not self.compress:
            super().rotate(source, dest)
            return

        if not os.path.exists(source):
            return

        with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
            shutil.copyfileobj(src, dst)
        os.remove(source)

    def doRollover(self) -> None:
        super().doRollover()
        self.prune_expired_backups()

    def backup_files(self) -> List[Path]:
        """Return existing backup files, newest first."""
        backups = []
        for index in range(1, self.backupCount + 1):
            path = Path(self.rotation_filename(f"{self.baseFilename}.{index}"))
            if path.exists():
                backups.append(path)
        return backups

    def prune_expired_backups(self) -> List[Path]:
        """Delete backups whose modification time exceeds max_age_days.

        Returns:
            Paths that were removed
        """
        if self.max_age_days <= 0:
            return []

        cutoff = time.time() - self.max_age_days * SECONDS_PER_DAY
        removed = []
        for path in self.backup_files():
            if path.stat().st_mtime < cutoff:
                path.unlink()
                removed.append(path)
        return removed
