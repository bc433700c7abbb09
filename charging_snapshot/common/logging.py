"""Console and JSON-line logging for a single run."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

from charging_snapshot.common.constants import JSON_LOG_FIELDS
from charging_snapshot.common.fs import ensure_dir
from charging_snapshot.common.time_utils import utc_timestamp_iso

GREEN = "\x1b[32m"
RED = "\x1b[31m"
RESET = "\x1b[0m"


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "run_id": getattr(record, "run_id", None),
            "stage": getattr(record, "stage", None),
            "event": getattr(record, "event", None),
            "status": getattr(record, "status", None),
            "duration_ms": getattr(record, "duration_ms", None),
            "rows_in": getattr(record, "rows_in", None),
            "rows_out": getattr(record, "rows_out", None),
            "bytes": getattr(record, "bytes", None),
            "error_code": getattr(record, "error_code", None),
            "message": record.getMessage(),
        }
        for field in JSON_LOG_FIELDS:
            payload.setdefault(field, None)
        return json.dumps(payload, ensure_ascii=False)


class ColorLineFormatter(logging.Formatter):
    """Plain message lines, green below WARNING and red from WARNING up."""

    def __init__(self, use_color: bool = True) -> None:
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if not self.use_color:
            return line
        color = RED if record.levelno >= logging.WARNING else GREEN
        return f"{color}{line}{RESET}"


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def _level(name: str) -> int:
    name = name.upper()
    if name == "WARN":
        name = "WARNING"
    return logging.getLevelName(name)


def build_logger(
    run_id: str,
    *,
    level: str = "INFO",
    use_color: bool = True,
    log_file: Path | None = None,
) -> logging.Logger:
    logger = logging.getLogger(f"charging_snapshot.{run_id}")
    logger.setLevel(_level(level))
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = False

    console = ColorLineFormatter(use_color=use_color)

    stdout = logging.StreamHandler(sys.stdout)
    stdout.addFilter(_BelowLevelFilter(logging.WARNING))
    stdout.setFormatter(console)
    logger.addHandler(stdout)

    stderr = logging.StreamHandler(sys.stderr)
    stderr.setLevel(logging.WARNING)
    stderr.setFormatter(console)
    logger.addHandler(stderr)

    if log_file is not None:
        ensure_dir(log_file.parent)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.info(message, extra=event_fields)


def log_failure(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.error(message, extra=event_fields)
