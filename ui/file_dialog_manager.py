"""Wrapper around QFileDialog invocations for better testability."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from PyQt6.QtWidgets import QFileDialog

from config.constants import PanelText

# (parent, caption, directory, filter) -> (path, selected_filter)
OpenFileFn = Callable[[object, str, str, str], Tuple[str, str]]


class FileDialogManager:
    """Provide higher-level helpers around QFileDialog."""

    def __init__(self, open_file_fn: Optional[OpenFileFn] = None) -> None:
        self._open_file_fn = open_file_fn or QFileDialog.getOpenFileName

    def select_apk_file(self, parent, start_dir: str = '') -> Optional[str]:
        path, _selected_filter = self._open_file_fn(
            parent,
            PanelText.APK_DIALOG_TITLE,
            start_dir,
            PanelText.APK_FILE_FILTER,
        )
        return path or None


__all__ = ["FileDialogManager"]
