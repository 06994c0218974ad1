"""User-facing session log: timestamped lines kept in memory and on disk."""

from __future__ import annotations

import datetime as dt
import os
import platform
import sys
import threading
from pathlib import Path
from typing import Callable, List, Optional

from config.constants import ApplicationConstants, LoggingConstants, PathConstants
from utils import common

logger = common.get_logger('session_log')

LineListener = Callable[[str], None]


def default_session_log_path(started_at: Optional[dt.datetime] = None) -> Path:
    """Return ``<logs dir>/log_YYYYMMDD_HHMMSS.txt`` for the given start time."""
    started_at = started_at or dt.datetime.now()
    filename = (
        f"{PathConstants.SESSION_LOG_PREFIX}"
        f"{started_at.strftime(LoggingConstants.SESSION_FILE_TIME_FORMAT)}"
        f"{PathConstants.SESSION_LOG_EXT}"
    )
    return common.resolve_logs_dir() / filename


def application_base_dir() -> Path:
    """Directory the application runs from (the frozen executable's folder when bundled)."""
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent.parent


class SessionLog:
    """Append-only sink accepting ``[HH:MM:SS] text`` lines.

    Lines go to an in-memory view, to the session file and to every
    registered listener, in emission order. File writes are serialised with
    a lock so worker threads and the UI thread can both append.
    """

    def __init__(
        self,
        file_path: Optional[Path] = None,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ) -> None:
        self._clock = clock or dt.datetime.now
        self._lock = threading.RLock()
        self._lines: List[str] = []
        self._listeners: List[LineListener] = []
        self.file_path: Optional[Path] = None

        path = Path(file_path) if file_path else default_session_log_path(self._clock())
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.file_path = path
            self._write_file(self._header())
        except OSError as exc:
            logger.error('Session log file unavailable at %s: %s', path, exc)
            self.file_path = None

        self.append(f'[Log] Log file: {self.file_path}')

    def _header(self) -> str:
        started = self._clock().strftime(LoggingConstants.DATE_FORMAT)
        lines = [
            f'=== {ApplicationConstants.APP_NAME} Log ===',
            f'Time: {started}',
            f'OS: {platform.platform()}',
            f'AppBase: {application_base_dir()}',
            '========================',
            '',
            '',
        ]
        return os.linesep.join(lines)

    def _write_file(self, content: str) -> None:
        if self.file_path is None:
            return
        with self._lock:
            with open(self.file_path, 'a', encoding='utf-8', newline='') as handle:
                handle.write(content)

    def add_listener(self, listener: LineListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: LineListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def format_line(self, text: str) -> str:
        return f'[{common.clock_time(self._clock())}] {text}'

    def append(self, text: str) -> str:
        """Record one line and return it as written."""
        line = self.format_line(text)
        with self._lock:
            self._lines.append(line)
            try:
                self._write_file(line + os.linesep)
            except OSError as exc:
                logger.warning('Failed to append to session log %s: %s', self.file_path, exc)

        logger.debug(line)
        for listener in list(self._listeners):
            listener(line)
        return line

    def lines(self) -> List[str]:
        with self._lock:
            return list(self._lines)

    def text(self) -> str:
        return '\n'.join(self.lines())

    def clear_view(self) -> None:
        """Forget the in-memory lines; the file keeps everything."""
        with self._lock:
            self._lines.clear()

    @property
    def directory(self) -> Optional[Path]:
        return self.file_path.parent if self.file_path else None


__all__ = ['SessionLog', 'application_base_dir', 'default_session_log_path']
