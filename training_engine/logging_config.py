"""Logging for the engine's ``training_engine`` logger namespace.

Engine modules attach structured fields to their records with
``extra=log_context(...)``; the formatters here render those fields either as
a JSON ``context`` object or as trailing ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

ENGINE_LOGGER = "training_engine"
CONTEXT_PREFIX = "ctx_"


def log_context(**fields) -> dict:
    """Build ``extra`` for a log call: ``log_context(skipped_sets=2)``."""
    return {f"{CONTEXT_PREFIX}{key}": value for key, value in fields.items()}


def record_context(record: logging.LogRecord) -> dict:
    """Structured fields carried by a record, prefix stripped."""
    return {
        key[len(CONTEXT_PREFIX):]: value
        for key, value in record.__dict__.items()
        if key.startswith(CONTEXT_PREFIX)
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record, timestamped from the record itself."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
        }
        context = record_context(record)
        if context:
            log_entry["context"] = context
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }
        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines for local runs, context appended as key=value."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return line


def _is_engine_handler(handler: logging.Handler) -> bool:
    return getattr(handler, "training_engine_handler", False)


def setup_logging(level: str = "INFO", json_output: bool = True) -> logging.Logger:
    """Attach a stdout handler to the engine logger.

    Only the engine namespace is configured so a host application's root
    logging is left alone. Calling again after the handler is attached is a
    no-op.
    """
    engine_logger = logging.getLogger(ENGINE_LOGGER)
    if any(_is_engine_handler(h) for h in engine_logger.handlers):
        return engine_logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else TextFormatter())
    handler.training_engine_handler = True
    engine_logger.addHandler(handler)
    engine_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    engine_logger.propagate = False
    return engine_logger


def get_logger(name: str) -> logging.Logger:
    """Get a named logger for a module."""
    return logging.getLogger(name)
