import gzip
from datetime import datetime, timedelta

import pytest

from rollerkit.logs import BACKUP_COUNT, MAX_BYTES, get_logger, get_roller_logger


@pytest.fixture
def created():
    loggers = []
    yield loggers
    for logger in loggers:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def _flush(logger):
    for handler in logger.handlers:
        handler.flush()


def test_writes_timestamped_lines(tmp_path, created):
    path = tmp_path / "logs" / "service.log"
    logger = get_logger(path)
    created.append(logger)
    logger.info("hello")
    _flush(logger)
    content = path.read_text(encoding="utf-8")
    assert content[19:] == " hello\n"
    stamp = datetime.strptime(content[:19], "%Y/%m/%d %H:%M:%S")
    assert abs(datetime.now() - stamp) < timedelta(minutes=5)


def test_same_path_returns_same_logger(tmp_path, created):
    first = get_logger(tmp_path / "a.log")
    second = get_logger(tmp_path / "a.log")
    created.append(first)
    assert first is second
    assert len(first.handlers) == 1


def test_rotation_limits(tmp_path, created):
    logger = get_logger(tmp_path / "b.log")
    created.append(logger)
    handler = logger.handlers[0]
    assert handler.maxBytes == MAX_BYTES == 500 * 1024 * 1024
    assert handler.backupCount == BACKUP_COUNT == 3


def test_rollover_compresses_backup(tmp_path, created):
    path = tmp_path / "c.log"
    logger = get_logger(path)
    created.append(logger)
    logger.info("first entry")
    handler = logger.handlers[0]
    handler.doRollover()
    backup = tmp_path / "c.log.1.gz"
    with gzip.open(backup, "rt", encoding="utf-8") as packed:
        assert packed.read().endswith("first entry\n")
    logger.info("second entry")
    _flush(logger)
    assert "first entry" not in path.read_text(encoding="utf-8")


def test_roller_logger_location(tmp_path, created):
    logger = get_roller_logger(tmp_path)
    created.append(logger)
    logger.info("started")
    _flush(logger)
    assert (tmp_path / "roller.log").read_text(encoding="utf-8").endswith("started\n")