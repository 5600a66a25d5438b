from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("services.dashboard", logging.WARNING, __file__, 1, "Skipping source", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context_keys() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    message = formatter.format(_record(source="a.json", status_code=503, unrelated="x", chart_id=None))

    assert message == "WARNING Skipping source | source=a.json status_code=503"


def test_formatter_without_context() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    assert formatter.format(_record()) == "Skipping source"
