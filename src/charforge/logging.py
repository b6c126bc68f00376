"""Logging configuration for CharForge.

Library modules only ever call :func:`get_logger`.  Handlers are installed
on the ``charforge`` logger by :func:`setup_logging`, which the CLI calls
and embedding applications may call.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from typing import Any, Callable

ROOT_LOGGER = "charforge"
DEFAULT_FORMAT = "%(levelname)-5s | %(name)-20s | %(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-20s | %(message)s"
_SETUP_LOCK = threading.Lock()


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _formatter(json_logs: bool, fmt: str) -> logging.Formatter:
    return JsonFormatter() if json_logs else logging.Formatter(fmt)


def _single_handler(
    logger: logging.Logger,
    matches: Callable[[logging.Handler], bool],
    create: Callable[[], logging.Handler],
) -> logging.Handler:
    """Return the one handler accepted by *matches*, adding it if absent.

    Duplicates left by earlier calls are removed.
    """
    found = [h for h in logger.handlers if matches(h)]
    for extra in found[1:]:
        logger.removeHandler(extra)
    if found:
        return found[0]
    handler = create()
    logger.addHandler(handler)
    return handler


def _is_stderr_handler(handler: logging.Handler) -> bool:
    return (
        isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.FileHandler)
        and getattr(handler, "stream", None) is sys.stderr
    )


def setup_logging(
    level: int | str = logging.INFO,
    verbose: bool = False,
    log_file: str | None = None,
    json_logs: bool = False,
) -> None:
    """Configure the ``charforge`` logger.

    Safe to call repeatedly: the stderr handler and the handler for a
    given ``log_file`` are reused, so output is never duplicated.

    Args:
        level: Logging level as a number or a name such as ``"debug"``.
        verbose: Include timestamps in stderr output.
        log_file: Optional file to log to in addition to stderr.  File
            output always carries timestamps.
        json_logs: Emit JSON lines instead of plain text.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    with _SETUP_LOCK:
        logger = logging.getLogger(ROOT_LOGGER)
        logger.setLevel(level)

        console = _single_handler(
            logger, _is_stderr_handler, lambda: logging.StreamHandler(sys.stderr)
        )
        console.setFormatter(
            _formatter(json_logs, VERBOSE_FORMAT if verbose else DEFAULT_FORMAT)
        )

        if log_file:
            target = os.path.abspath(str(log_file))
            file_handler = _single_handler(
                logger,
                lambda h: isinstance(h, logging.FileHandler)
                and getattr(h, "baseFilename", None) == target,
                lambda: logging.FileHandler(log_file),
            )
            file_handler.setFormatter(_formatter(json_logs, VERBOSE_FORMAT))


def get_logger(name: str) -> logging.Logger:
    """Return the ``charforge.<name>`` logger, e.g. ``get_logger("storage")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
