"""Centralised helpers for displaying Qt dialog messages."""

from __future__ import annotations

from typing import Callable, Dict, Optional, TYPE_CHECKING

from PyQt6.QtWidgets import QMessageBox

from utils import common

if TYPE_CHECKING:  # pragma: no cover
    from ui.main_window import MainWindow


logger = common.get_logger("dialog_manager")

DialogCallable = Callable[["MainWindow", str, str], None]


class DialogManager:
    """Provide consistent wrappers around QMessageBox APIs."""

    def __init__(
        self,
        window: "MainWindow",
        info_fn: Optional[DialogCallable] = None,
        warning_fn: Optional[DialogCallable] = None,
        error_fn: Optional[DialogCallable] = None,
    ) -> None:
        self.window = window
        self._info_fn = info_fn or QMessageBox.information
        self._warning_fn = warning_fn or QMessageBox.warning
        self._error_fn = error_fn or QMessageBox.critical

    def show_info(self, title: str, message: str) -> None:
        self._info_fn(self.window, title, message)

    def show_warning(self, title: str, message: str) -> None:
        self._warning_fn(self.window, title, message)

    def show_error(self, title: str, message: str) -> None:
        self._error_fn(self.window, title, message)

    def show_notice(self, level: str, title: str, message: str) -> None:
        """Dispatch a controller notice (``info``/``warning``/``error``)."""
        handlers: Dict[str, Callable[[str, str], None]] = {
            "info": self.show_info,
            "warning": self.show_warning,
            "error": self.show_error,
        }
        handler = handlers.get(level)
        if handler is None:
            logger.warning("Unknown notice level %r, showing as info", level)
            handler = self.show_info
        handler(title, message)


__all__ = ["DialogManager"]
