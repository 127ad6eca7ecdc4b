from __future__ import annotations

import json
import logging

from flashcard_tools import logging_manager as log_mgr


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.makeLogRecord(
        {"name": "flashcard_tools.test", "levelno": logging.INFO, "levelname": "INFO", "msg": message}
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_promotes_known_fields_and_nests_extras() -> None:
    record = _record("Resolved term", event="lookup.resolve", source="local", attempt=2)

    payload = json.loads(log_mgr.JSONLogFormatter().format(record))

    assert payload["message"] == "Resolved term"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "flashcard_tools.test"
    assert payload["event"] == "lookup.resolve"
    assert payload["source"] == "local"
    assert payload["extra"] == {"attempt": 2}


def test_log_context_is_applied_and_restored(log_records) -> None:
    logger = log_mgr.get_logger().getChild("test")

    with log_mgr.log_context(term="食べる", status=None):
        with log_mgr.log_context(source="remote"):
            logger.info("inner")
        logger.info("outer")
    logger.info("after")

    inner, outer, after = log_records[-3:]
    assert (inner.term, inner.source) == ("食べる", "remote")
    assert outer.term == "食べる"
    assert not hasattr(outer, "source")
    assert not hasattr(outer, "status")
    assert not hasattr(after, "term")


def test_explicit_extra_wins_over_context(log_records) -> None:
    logger = log_mgr.get_logger().getChild("test")

    with log_mgr.log_context(source="local"):
        logger.info("explicit", extra={"source": "remote"})

    assert log_records[-1].source == "remote"


def test_attach_file_handler_writes_json_lines(tmp_path, log_records) -> None:
    log_file = tmp_path / "logs" / "flashcards.log"
    log_mgr.attach_file_handler(log_file)
    logger = log_mgr.get_logger()
    file_handler = logger.handlers[-1]
    try:
        with log_mgr.log_context(term="犬"):
            logger.getChild("test").warning("written")
        file_handler.flush()
        lines = log_file.read_text(encoding="utf-8").splitlines()
    finally:
        logger.removeHandler(file_handler)
        file_handler.close()

    payload = json.loads(lines[-1])
    assert payload["message"] == "written"
    assert payload["term"] == "犬"
