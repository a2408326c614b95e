"""File loggers with size-based rotation and compressed backups."""

from __future__ import annotations

import glob
import gzip
import logging
import os
import shutil
import time
from datetime import timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path

MAX_BYTES = 500 * 1024 * 1024
BACKUP_COUNT = 3
MAX_AGE = timedelta(days=28)

_FORMAT = "%(asctime)s %(message)s"
_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def _gzip_name(name: str) -> str:
    return name + ".gz"


class _CompressedRotatingFileHandler(RotatingFileHandler):
    """Rotates by size, gzips backups and drops those older than ``MAX_AGE``."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            filename,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
            delay=True,
        )
        self.namer = _gzip_name
        self.rotator = self._compress

    def _open(self):  # type: ignore[no-untyped-def]
        Path(self.baseFilename).parent.mkdir(parents=True, exist_ok=True)
        return super()._open()

    def _compress(self, source: str, dest: str) -> None:
        with open(source, "rb") as raw, gzip.open(dest, "wb") as packed:
            shutil.copyfileobj(raw, packed)
        os.remove(source)
        self._remove_expired()

    def _remove_expired(self) -> None:
        cutoff = time.time() - MAX_AGE.total_seconds()
        base = Path(self.baseFilename)
        for backup in base.parent.glob(f"{glob.escape(base.name)}.*.gz"):
            try:
                if backup.stat().st_mtime < cutoff:
                    backup.unlink()
            except OSError:
                continue


def get_logger(file_path: str | os.PathLike[str]) -> logging.Logger:
    """Return a logger writing timestamped lines to ``file_path``."""
    path = os.path.abspath(os.fspath(file_path))
    logger = logging.getLogger(f"rollerkit.file:{path}")
    if not any(isinstance(h, _CompressedRotatingFileHandler) for h in logger.handlers):
        handler = _CompressedRotatingFileHandler(path)
        handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger


def get_roller_logger(home: str | os.PathLike[str]) -> logging.Logger:
    """Return the logger writing to ``roller.log`` inside ``home``."""
    return get_logger(Path(home) / "roller.log")