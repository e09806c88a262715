# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for distpack.

Packaging runs inside CI, and CI logs get grepped and parsed. Every log entry
is therefore a single JSON line with a timestamp, a level, the source module
and the message, plus whatever context the caller attached via `extra`.

How this works:
  - Modules call `get_logger(__name__)` once at import time. Those loggers
    carry no handlers of their own; they propagate to the package logger
    named "distpack".
  - `configure_logging` owns the package logger. It is called by the CLI
    bootstrap once the log level (and optional log file) is known, so a
    `--log-level DEBUG` reaches loggers that were created long before.
  - Loggers outside the distpack namespace (tests, scripts) get their own
    handlers on first use, same as the package logger.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "distpack.release.locator", "msg": "Resolved artifact", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER_NAME = "distpack"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Attributes every LogRecord has. Anything else on a record came from `extra`.
_RESERVED_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts     ISO 8601 UTC timestamp of the record
      level  log level name
      module the logger name (usually the Python module path)
      msg    the formatted message string

    Exceptions logged with exc_info=True land under "exc" as formatted text,
    so a failing tool invocation keeps its traceback in the same line.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_ATTRS or key.startswith("_"):
                continue
            entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def _attach_handlers(logger: logging.Logger, level: int, log_file: Optional[Path]) -> None:
    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False


def configure_logging(log_level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    (Re)configure the package logger that every distpack module reports to.

    Existing handlers are closed and replaced, so calling this twice (once
    with defaults, once after config is loaded) never duplicates output.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.

    Returns:
        The configured package logger.
    """
    level = _resolve_log_level(log_level)
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    _attach_handlers(logger, level, log_file)
    return logger


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Return a structured JSON logger.

    Loggers inside the "distpack" namespace defer to the package logger for
    output; passing log_level to them only narrows that one logger. Loggers
    outside the namespace are given their own stdout (and optional file)
    handler on first use.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: Optional level override for this logger.
        log_file: Optional log file, only honoured for loggers outside the
                  distpack namespace (the package log file is set through
                  configure_logging).
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level) if log_level is not None else None

    in_package = name == PACKAGE_LOGGER_NAME or name.startswith(PACKAGE_LOGGER_NAME + ".")
    if in_package:
        package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
        if not package_logger.handlers:
            configure_logging("INFO")
        if level is not None and name != PACKAGE_LOGGER_NAME:
            logger.setLevel(level)
        return logger

    effective = level if level is not None else logging.INFO
    logger.setLevel(effective)
    if not logger.handlers:
        _attach_handlers(logger, effective, log_file)
    return logger
