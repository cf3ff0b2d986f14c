"""File logging for chargefit sessions.

Engine modules log through ``logging.getLogger(__name__)`` under the
``chargefit`` namespace; :func:`setup_logging` attaches one file handler to
that namespace so a run's log captures the CLI messages together with the
per-call records emitted by the service.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import numpy as np
import scipy

from chargefit.ui.console import VERSION

ROOT_LOGGER = "chargefit"
_TEXT_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({})))

# Set while a log file is open
_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """One JSON object per line, carrying any ``extra=`` fields of the record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_FIELDS and key not in entry:
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _session_banner(logger: logging.Logger) -> None:
    logger.info("chargefit %s session started", VERSION)
    logger.info("Command: %s", " ".join(sys.argv))
    logger.info("Working directory: %s", Path.cwd())
    logger.info(
        "Python %s | NumPy %s | SciPy %s | %s",
        sys.version.split()[0],
        np.__version__,
        scipy.__version__,
        sys.platform,
    )


def setup_logging(
    log_file: Path | None,
    *,
    level: int = logging.INFO,
    log_format: str = "text",
) -> logging.Logger | None:
    """Send the ``chargefit`` logger to ``log_file``.

    A previously opened log file is closed first. With ``log_file=None``
    nothing is attached and None is returned. ``log_format="json"`` or a
    ``.json`` suffix selects :class:`JSONFormatter`.
    """
    close_logging(banner=False)
    if log_file is None:
        return None

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    handler.setLevel(level)
    if log_format == "json" or log_file.suffix == ".json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(min(level, logger.level or level))
    logger.addHandler(handler)

    global _handler
    _handler = handler
    _session_banner(logger)
    return logger


def is_logging() -> bool:
    return _handler is not None


def log(message: str, level: str = "info") -> None:
    """Record ``message`` in the session log, if one is open."""
    if _handler is None:
        return
    numeric = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    logging.getLogger(ROOT_LOGGER).log(numeric, message)


def log_section(title: str) -> None:
    if _handler is None:
        return
    logging.getLogger(ROOT_LOGGER).info("--- %s ---", title)


def log_dict(data: dict[str, object]) -> None:
    """Record one ``key = value`` line per entry."""
    if _handler is None:
        return
    logger = logging.getLogger(ROOT_LOGGER)
    width = max((len(key) for key in data), default=0)
    for key, value in data.items():
        logger.info("  %s = %s", key.ljust(width), value)


def close_logging(*, banner: bool = True) -> None:
    """Detach and close the session log handler."""
    global _handler
    if _handler is None:
        return
    logger = logging.getLogger(ROOT_LOGGER)
    if banner:
        logger.info("chargefit session finished")
    logger.removeHandler(_handler)
    _handler.close()
    _handler = None


__all__ = [
    "ROOT_LOGGER",
    "JSONFormatter",
    "close_logging",
    "is_logging",
    "log",
    "log_dict",
    "log_section",
    "setup_logging",
]
