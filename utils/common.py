"""Common utilities for Quest ADB Tool.

This module centralises logging setup, application data directory
resolution, timestamp helpers and trace identifier management used across
the application.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
import platform
import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from pathlib import Path
from typing import Iterator, Optional

from config.constants import LoggingConstants, PathConstants


_TRACE_ID_DEFAULT = "-"
_TRACE_ID_VAR: ContextVar[str] = ContextVar("quest_adb_tool_trace_id", default=_TRACE_ID_DEFAULT)

# Track whether log cleanup has already run for the current process.
_logs_cleaned = False


class TraceIdFilter(logging.Filter):
    """Augment log records with their active trace identifier."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        return True


def generate_trace_id() -> str:
    """Return a new random trace identifier."""
    return uuid.uuid4().hex


def get_trace_id() -> str:
    """Return the current trace identifier ("-" when unset)."""
    return _TRACE_ID_VAR.get()


def set_trace_id(trace_id: Optional[str]) -> Token[str]:
    """Set the active trace identifier and return the context token."""
    value = trace_id or _TRACE_ID_DEFAULT
    return _TRACE_ID_VAR.set(value)


def reset_trace_id(token: Token[str]) -> None:
    """Reset the trace identifier to the previous context."""
    _TRACE_ID_VAR.reset(token)


@contextmanager
def trace_id_scope(trace_id: Optional[str]) -> Iterator[None]:
    """Context manager that temporarily sets the trace identifier."""
    token = set_trace_id(trace_id)
    try:
        yield
    finally:
        reset_trace_id(token)


def resolve_app_data_dir() -> Path:
    """Return the user-scoped application data directory.

    Windows uses ``%LOCALAPPDATA%``, Linux honours ``XDG_DATA_HOME`` and macOS
    uses ``~/Library/Application Support``.
    """
    system = platform.system().lower()
    home_dir = Path.home()

    if system == "windows":
        local_app_data = os.environ.get("LOCALAPPDATA")
        base = Path(local_app_data) if local_app_data else home_dir / "AppData" / "Local"
        return base / PathConstants.APP_DATA_DIR_NAME

    if system == "darwin":
        return home_dir / "Library" / "Application Support" / PathConstants.APP_DATA_DIR_NAME

    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home) / PathConstants.APP_DATA_DIR_NAME
    return home_dir / ".local" / "share" / PathConstants.APP_DATA_DIR_NAME


def resolve_logs_dir() -> Path:
    """Return the directory path where log files should be stored."""
    return resolve_app_data_dir() / PathConstants.LOGS_DIR_NAME


def _cleanup_old_logs(logs_dir: Path, bootstrap_logger: logging.Logger) -> int:
    """Remove diagnostic log files that do not belong to today (runs once per process)."""
    global _logs_cleaned

    if _logs_cleaned:
        return 0

    prefix = LoggingConstants.DIAGNOSTIC_LOG_PREFIX
    today = dt.date.today().strftime("%Y%m%d")
    cleaned_count = 0

    try:
        filenames = os.listdir(logs_dir)
    except OSError:
        bootstrap_logger.exception("Unable to list logs directory", extra={"logs_dir": str(logs_dir)})
        return 0

    for filename in filenames:
        if not (filename.startswith(prefix) and filename.endswith(LoggingConstants.DIAGNOSTIC_LOG_EXT)):
            continue

        date_part = filename[len(prefix):len(prefix) + 8]
        if len(date_part) != 8 or not date_part.isdigit() or date_part == today:
            continue

        old_log_path = logs_dir / filename
        try:
            old_log_path.unlink()
            cleaned_count += 1
        except OSError:
            bootstrap_logger.exception("Error removing stale log file", extra={"stale_log": str(old_log_path)})

    _logs_cleaned = True
    return cleaned_count


def _configure_root_logger(root: logging.Logger) -> None:
    """Attach file and console handlers to the application logger once."""
    if root.handlers:
        return

    bootstrap_logger = logging.getLogger(f"{LoggingConstants.ROOT_LOGGER_NAME}.bootstrap")
    logs_dir = resolve_logs_dir()
    log_filename = f"{LoggingConstants.DIAGNOSTIC_LOG_PREFIX}{timestamp_time()}{LoggingConstants.DIAGNOSTIC_LOG_EXT}"

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_filepath = logs_dir / log_filename
        file_handler = logging.FileHandler(log_filepath, encoding="utf-8")
    except OSError:
        logs_dir = Path.cwd() / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_filepath = logs_dir / log_filename
        file_handler = logging.FileHandler(log_filepath, encoding="utf-8")

    cleaned_count = _cleanup_old_logs(logs_dir, bootstrap_logger)

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(LoggingConstants.FILE_LOG_FORMAT, datefmt=LoggingConstants.DATE_FORMAT)
    )
    file_handler.addFilter(TraceIdFilter())

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LoggingConstants.CONSOLE_LOG_FORMAT))
    console_handler.addFilter(TraceIdFilter())

    root.addHandler(file_handler)
    root.addHandler(console_handler)
    root.setLevel(logging.INFO)
    root.propagate = False

    if cleaned_count > 0:
        root.info("Removed %s old log file(s)", cleaned_count)
    root.info("Log file created: %s", log_filepath)


def get_logger(name: str = LoggingConstants.ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger under the application hierarchy augmented with trace identifiers."""
    root = logging.getLogger(LoggingConstants.ROOT_LOGGER_NAME)
    _configure_root_logger(root)

    if name == LoggingConstants.ROOT_LOGGER_NAME:
        return root

    logger = logging.getLogger(f"{LoggingConstants.ROOT_LOGGER_NAME}.{name}")
    if not any(isinstance(item, TraceIdFilter) for item in logger.filters):
        logger.addFilter(TraceIdFilter())
    return logger


def set_log_level(level: str) -> None:
    """Apply a textual log level to the application logger."""
    normalized = (level or "").upper()
    if normalized not in LoggingConstants.VALID_LOG_LEVELS:
        normalized = LoggingConstants.DEFAULT_LOG_LEVEL
    get_logger().setLevel(getattr(logging, normalized))


def timestamp_time() -> str:
    """Return the current time formatted as YYYYMMDD_HHMMSS."""
    return dt.datetime.now().strftime(LoggingConstants.SESSION_FILE_TIME_FORMAT)


def clock_time(moment: Optional[dt.datetime] = None) -> str:
    """Return ``HH:MM:SS`` for the given moment (defaults to now)."""
    return (moment or dt.datetime.now()).strftime(LoggingConstants.SESSION_TIME_FORMAT)


__all__ = [
    "TraceIdFilter",
    "clock_time",
    "generate_trace_id",
    "get_logger",
    "get_trace_id",
    "reset_trace_id",
    "resolve_app_data_dir",
    "resolve_logs_dir",
    "set_log_level",
    "set_trace_id",
    "timestamp_time",
    "trace_id_scope",
]
