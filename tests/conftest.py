import logging
from typing import Iterator, List

import pytest

from flashcard_tools import logging_manager as log_mgr
from flashcard_tools.storage import InMemoryStore
from tests.helpers.jisho_stubs import SAMPLE_DICTIONARY, FakeClock, RecordingHandler


_ENV_OVERRIDES = (
    "JISHO_API_BASE",
    "FLASHCARD_JISHO_API_BASE",
    "FLASHCARD_CACHE_TTL_MS",
    "FLASHCARD_STORAGE_PATH",
    "FLASHCARD_STORAGE",
    "FLASHCARD_SERVE_STALE_ON_ERROR",
    "FLASHCARD_LOG_FILE",
    "FLASHCARD_DEBUG",
    "FLASHCARD_REQUEST_TIMEOUT",
    "FLASHCARD_REQUEST_TIMEOUT_SECONDS",
)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore({"dictionary": SAMPLE_DICTIONARY})


@pytest.fixture
def log_records() -> Iterator[List[logging.LogRecord]]:
    """Collect records reaching the package logger, which does not propagate."""
    logger = log_mgr.get_logger()
    handler = RecordingHandler()
    handler.addFilter(log_mgr.LogContextFilter())
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
