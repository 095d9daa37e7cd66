# src/qa_service/core/logging/formatters.py
"""
Custom logging formatters.

  - JsonFormatter: structured JSON lines for log collectors. Carries the
    observability fields (service, env, version, request_id) plus every `extra`
    attached by the caller, stringifying anything that is not JSON-serializable.

  - ColorFormatter: compact ANSI-colored lines for local development consoles.

The builder (see builder.py) picks one based on `LOG_FORMAT`.
"""

import json
import logging
from importlib import metadata as importlib_metadata
from logging import LogRecord
from typing import Any

PROJECT_NAME = "qa-service"

# LogRecord attributes that are part of every record and are not "extras".
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


def get_project_version() -> str:
    try:
        return importlib_metadata.version(PROJECT_NAME)
    except importlib_metadata.PackageNotFoundError:
        return "0.0.0"


PROJECT_VERSION = get_project_version()


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Construction:
      - env: environment name ("development", "production", ...)
      - service: logical service name included in every line
      - datefmt: passed through to logging.Formatter.formatTime

    `format()` never raises on odd extras: values that fail `json.dumps` are
    replaced by their `str()`.
    """

    def __init__(self, *, env: str | None = None, service: str = PROJECT_NAME, datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "request_id": getattr(record, "request_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in log_record or key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_record[key] = value
            except (TypeError, ValueError):
                log_record[key] = str(value)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development-friendly colored formatter.

    Line layout: TIMESTAMP | LEVEL | LOGGER | REQUEST_ID | MESSAGE, with the
    traceback appended on the following lines when exc_info is set. Only the
    level name is colored.
    """

    COLOR_CODES = {
        "DEBUG": "\033[1;36;47m",  # bold cyan on white
        "INFO": "\033[32m",  # green
        "WARNING": "\033[33m",  # yellow
        "ERROR": "\033[31m",  # red
        "CRITICAL": "\033[1;41m",  # bold on red background
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'request_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)

        return base
