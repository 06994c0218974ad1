"""Pre-flight checks and the one-operation-at-a-time rule."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from config.constants import MessageConstants
from utils import common
from utils.adb_models import DeviceState, InstallCounters

logger = common.get_logger('session_guard')

# notify(level, title, message)
Notifier = Callable[[str, str, str], None]


class SessionBusyError(RuntimeError):
    """A state-changing operation was requested while another one is running."""

    def __init__(self, running: str, requested: str) -> None:
        super().__init__(f'Cannot start "{requested}" while "{running}" is running')
        self.running = running
        self.requested = requested


_REJECTIONS = {
    DeviceState.NOT_FOUND: (
        MessageConstants.TITLE_DEVICE_NOT_CONNECTED,
        MessageConstants.WARNING_DEVICE_NOT_CONNECTED,
    ),
    DeviceState.UNAUTHORIZED: (
        MessageConstants.TITLE_AUTHORIZATION_NEEDED,
        MessageConstants.WARNING_DEVICE_UNAUTHORIZED,
    ),
    DeviceState.UNKNOWN: (
        MessageConstants.TITLE_DEVICE_NOT_READY,
        MessageConstants.WARNING_DEVICE_NOT_READY,
    ),
}


def guard(state: DeviceState, notify: Optional[Notifier] = None) -> bool:
    """Return True only for a connected device; otherwise notify and reject."""
    if state is DeviceState.CONNECTED:
        return True

    title, message = _REJECTIONS.get(state, _REJECTIONS[DeviceState.UNKNOWN])
    logger.info('Operation rejected, device state is %s', state.value)
    if notify is not None:
        notify('warning', title, message)
    return False


class SessionState:
    """State shared by every operation of one application session."""

    def __init__(self, counters: Optional[InstallCounters] = None) -> None:
        self.counters = counters if counters is not None else InstallCounters()
        self._lock = threading.Lock()
        self._busy_label: Optional[str] = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy_label is not None

    @property
    def busy_label(self) -> Optional[str]:
        with self._lock:
            return self._busy_label

    def acquire(self, label: str) -> None:
        """Mark the session busy or raise SessionBusyError."""
        with self._lock:
            if self._busy_label is not None:
                raise SessionBusyError(self._busy_label, label)
            self._busy_label = label
        logger.debug('Session busy: %s', label)

    def release(self) -> None:
        with self._lock:
            label, self._busy_label = self._busy_label, None
        logger.debug('Session idle (was %s)', label)


__all__ = ['Notifier', 'SessionBusyError', 'SessionState', 'guard']
