"""PyQt6 main window: device status, APK install, text input and session log."""

from __future__ import annotations

import time
from typing import List, Optional

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QCloseEvent, QGuiApplication
from PyQt6.QtWidgets import (
    QCheckBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPlainTextEdit,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from config.config_manager import ConfigManager
from config.constants import (
    ApplicationConstants,
    MessageConstants,
    PanelText,
    UIConstants,
)
from ui.dialog_manager import DialogManager
from ui.file_dialog_manager import FileDialogManager
from ui.session_controller import SessionController
from ui.style_manager import StyleManager
from ui.system_actions_manager import SystemActionsManager
from utils import common
from utils.adb_models import DeviceState, InstallOptions, InstallOutcome
from utils.apk_files import build_apk_preview, single_apk_from_paths
from utils.session_guard import SessionBusyError
from utils.session_log import SessionLog
from utils.time_formatting import format_elapsed

logger = common.get_logger('main_window')

_STATUS_VIEW = {
    DeviceState.NOT_FOUND: (MessageConstants.STATUS_NOT_FOUND, 'bad', False),
    DeviceState.UNAUTHORIZED: (MessageConstants.STATUS_UNAUTHORIZED, 'warn', False),
    DeviceState.CONNECTED: (MessageConstants.STATUS_CONNECTED, 'ok', True),
    DeviceState.UNKNOWN: (MessageConstants.STATUS_UNKNOWN, 'idle', False),
}


def _local_paths_from_mime(mime_data) -> List[str]:
    if mime_data is None or not mime_data.hasUrls():
        return []
    return [url.toLocalFile() for url in mime_data.urls() if url.isLocalFile()]


class ApkDropBox(QGroupBox):
    """Group box that accepts a single dropped .apk file."""

    drop_state_changed = pyqtSignal(bool, bool)  # active, valid
    apk_dropped = pyqtSignal(str)
    invalid_drop = pyqtSignal()

    def __init__(self, title: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(title, parent)
        self.setAcceptDrops(True)

    def dragEnterEvent(self, event) -> None:
        self._update_drag(event)

    def dragMoveEvent(self, event) -> None:
        self._update_drag(event)

    def _update_drag(self, event) -> None:
        valid = single_apk_from_paths(_local_paths_from_mime(event.mimeData())) is not None
        event.setDropAction(Qt.DropAction.CopyAction if valid else Qt.DropAction.IgnoreAction)
        event.accept()
        self.drop_state_changed.emit(True, valid)

    def dragLeaveEvent(self, event) -> None:
        self.drop_state_changed.emit(False, True)
        event.accept()

    def dropEvent(self, event) -> None:
        self.drop_state_changed.emit(False, True)
        apk_path = single_apk_from_paths(_local_paths_from_mime(event.mimeData()))
        event.accept()
        if apk_path is None:
            self.invalid_drop.emit()
            return
        self.apk_dropped.emit(apk_path)


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        session_log: Optional[SessionLog] = None,
        controller: Optional[SessionController] = None,
        dialog_manager: Optional[DialogManager] = None,
        file_dialog_manager: Optional[FileDialogManager] = None,
        system_actions: Optional[SystemActionsManager] = None,
        show_first_run_guide: bool = True,
    ) -> None:
        super().__init__()
        self.config_manager = config_manager or ConfigManager()
        self.session_log = session_log or SessionLog()
        self.controller = controller or SessionController(self.session_log, self.config_manager, parent=self)
        self.dialog_manager = dialog_manager or DialogManager(self)
        self.file_dialog_manager = file_dialog_manager or FileDialogManager()
        self.system_actions = system_actions or SystemActionsManager(self)

        self._busy = False
        self._device_ready = False
        self._install_started_at = 0.0

        self._install_progress_timer = QTimer(self)
        self._install_progress_timer.setInterval(UIConstants.INSTALL_PROGRESS_INTERVAL_MS)
        self._install_progress_timer.timeout.connect(self._tick_install_progress)

        self._auto_refresh_timer = QTimer(self)
        self._auto_refresh_timer.timeout.connect(lambda: self._request_refresh(notify_missing_adb=False))

        self._build_ui()
        self._connect_controller()
        self._restore_settings()

        for line in self.session_log.lines():
            self.log_view.appendPlainText(line)

        self._update_install_stats(self.controller.counters.success_count, self.controller.counters.fail_count)
        self._reset_apk_preview()
        self._set_status_dot('idle')
        self._set_action_enabled(False)

        if show_first_run_guide:
            self._show_first_run_tip()

        QTimer.singleShot(0, self._request_refresh)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        self.setWindowTitle(f'{ApplicationConstants.APP_NAME} v{ApplicationConstants.APP_VERSION}')
        self.setMinimumSize(UIConstants.WINDOW_MIN_WIDTH, UIConstants.WINDOW_MIN_HEIGHT)

        central = QWidget(self)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 16, 16, 16)
        root_layout.setSpacing(12)

        root_layout.addWidget(self._build_status_group())
        root_layout.addWidget(self._build_install_group())
        root_layout.addWidget(self._build_text_group())

        self.busy_label = QLabel('')
        self.busy_label.setVisible(False)
        root_layout.addWidget(self.busy_label)

        root_layout.addWidget(self._build_log_group(), stretch=1)
        self.setCentralWidget(central)

    def _build_status_group(self) -> QGroupBox:
        group = QGroupBox(PanelText.GROUP_STATUS)
        layout = QHBoxLayout(group)

        self.status_dot = QLabel()
        self.status_text = QLabel(MessageConstants.STATUS_UNKNOWN)
        self.status_text.setWordWrap(True)
        layout.addWidget(self.status_dot)
        layout.addWidget(self.status_text, stretch=1)

        self.refresh_button = QPushButton(PanelText.BUTTON_REFRESH)
        self.refresh_button.clicked.connect(lambda: self._request_refresh())
        self.repair_button = QPushButton(PanelText.BUTTON_REPAIR)
        self.repair_button.clicked.connect(self.repair_connection)
        self.guide_button = QPushButton(PanelText.BUTTON_GUIDE)
        self.guide_button.clicked.connect(self.show_guide_dialog)
        self.open_log_button = QPushButton(PanelText.BUTTON_OPEN_LOG)
        self.open_log_button.clicked.connect(self.open_log_folder)

        for button in (self.refresh_button, self.repair_button, self.guide_button, self.open_log_button):
            layout.addWidget(button)
        return group

    def _build_install_group(self) -> QGroupBox:
        group = ApkDropBox(PanelText.GROUP_INSTALL)
        group.drop_state_changed.connect(self._set_install_drop_visual)
        group.apk_dropped.connect(self._on_apk_dropped)
        group.invalid_drop.connect(
            lambda: self.dialog_manager.show_info(MessageConstants.TITLE_INVALID_DROP, MessageConstants.INFO_INVALID_DROP)
        )
        self.install_group = group
        layout = QVBoxLayout(group)

        path_row = QHBoxLayout()
        self.apk_path_box = QLineEdit()
        self.apk_path_box.setPlaceholderText(PanelText.PLACEHOLDER_APK_PATH)
        self.apk_path_box.textChanged.connect(lambda text: self.update_apk_preview(text.strip()))
        self.pick_apk_button = QPushButton(PanelText.BUTTON_PICK_APK)
        self.pick_apk_button.clicked.connect(self.pick_apk)
        path_row.addWidget(self.apk_path_box, stretch=1)
        path_row.addWidget(self.pick_apk_button)
        layout.addLayout(path_row)

        preview_row = QHBoxLayout()
        self.apk_file_label = QLabel()
        self.apk_size_label = QLabel()
        self.apk_package_label = QLabel()
        self.apk_version_label = QLabel()
        for label in (self.apk_file_label, self.apk_size_label, self.apk_package_label, self.apk_version_label):
            preview_row.addWidget(label)
        layout.addLayout(preview_row)

        options_row = QHBoxLayout()
        self.replace_checkbox = QCheckBox(PanelText.CHECK_REPLACE)
        self.downgrade_checkbox = QCheckBox(PanelText.CHECK_DOWNGRADE)
        self.test_apk_checkbox = QCheckBox(PanelText.CHECK_TEST_APK)
        for checkbox in (self.replace_checkbox, self.downgrade_checkbox, self.test_apk_checkbox):
            checkbox.toggled.connect(self._persist_install_options)
            options_row.addWidget(checkbox)
        options_row.addStretch(1)

        self.success_badge = QLabel()
        self.success_badge.setStyleSheet(StyleManager.get_badge_style(True))
        self.fail_badge = QLabel()
        self.fail_badge.setStyleSheet(StyleManager.get_badge_style(False))
        options_row.addWidget(self.success_badge)
        options_row.addWidget(self.fail_badge)

        self.install_button = QPushButton(PanelText.BUTTON_INSTALL)
        self.install_button.clicked.connect(lambda: self.install_apk_from_path(self.apk_path_box.text()))
        options_row.addWidget(self.install_button)
        layout.addLayout(options_row)

        self.install_progress_panel = QWidget()
        progress_layout = QHBoxLayout(self.install_progress_panel)
        progress_layout.setContentsMargins(0, 0, 0, 0)
        self.install_progress_bar = QProgressBar()
        self.install_progress_bar.setRange(0, 0)
        self.install_progress_text = QLabel()
        progress_layout.addWidget(self.install_progress_bar, stretch=1)
        progress_layout.addWidget(self.install_progress_text)
        self.install_progress_panel.setVisible(False)
        layout.addWidget(self.install_progress_panel)
        return group

    def _build_text_group(self) -> QGroupBox:
        group = QGroupBox(PanelText.GROUP_TEXT)
        layout = QHBoxLayout(group)
        self.input_text_box = QLineEdit()
        self.input_text_box.setPlaceholderText(PanelText.PLACEHOLDER_TEXT)
        self.input_text_box.returnPressed.connect(self.send_text)
        self.send_text_button = QPushButton(PanelText.BUTTON_SEND_TEXT)
        self.send_text_button.clicked.connect(self.send_text)
        layout.addWidget(self.input_text_box, stretch=1)
        layout.addWidget(self.send_text_button)
        return group

    def _build_log_group(self) -> QGroupBox:
        group = QGroupBox(PanelText.GROUP_LOG)
        layout = QVBoxLayout(group)
        self.log_view = QPlainTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setStyleSheet(StyleManager.get_log_style())
        layout.addWidget(self.log_view, stretch=1)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        self.clear_log_button = QPushButton(PanelText.BUTTON_CLEAR_LOG)
        self.clear_log_button.clicked.connect(self.clear_log)
        self.copy_log_button = QPushButton(PanelText.BUTTON_COPY_LOG)
        self.copy_log_button.clicked.connect(self.copy_log)
        buttons.addWidget(self.clear_log_button)
        buttons.addWidget(self.copy_log_button)
        layout.addLayout(buttons)
        return group

    def _connect_controller(self) -> None:
        self.controller.status_changed.connect(self._on_status_changed)
        self.controller.adb_missing.connect(self._on_adb_missing)
        self.controller.busy_changed.connect(self._on_busy_changed)
        self.controller.install_started.connect(self._start_install_progress)
        self.controller.install_finished.connect(self._on_install_finished)
        self.controller.counters_changed.connect(self._update_install_stats)
        self.controller.notice.connect(self.dialog_manager.show_notice)
        self.controller.log_line.connect(self.log_view.appendPlainText)

    def _restore_settings(self) -> None:
        ui_settings = self.config_manager.get_ui_settings()
        self.resize(ui_settings.window_width, ui_settings.window_height)

        adb_settings = self.config_manager.get_adb_settings()
        for checkbox, value in (
            (self.replace_checkbox, adb_settings.replace_existing),
            (self.downgrade_checkbox, adb_settings.allow_downgrade),
            (self.test_apk_checkbox, adb_settings.allow_test_apk),
        ):
            checkbox.blockSignals(True)
            checkbox.setChecked(value)
            checkbox.blockSignals(False)

        if ui_settings.auto_refresh_interval > 0:
            self._auto_refresh_timer.start(ui_settings.auto_refresh_interval * 1000)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def _request_refresh(self, notify_missing_adb: bool = True) -> None:
        if self._busy:
            return
        self.controller.refresh_status(notify_missing_adb)

    def _start_operation(self, start) -> None:
        try:
            start()
        except SessionBusyError as exc:
            logger.warning('Rejected overlapping operation: %s', exc)
            self.dialog_manager.show_warning(MessageConstants.TITLE_BUSY, MessageConstants.ERROR_BUSY)

    def repair_connection(self) -> None:
        self._start_operation(self.controller.repair_connection)

    def install_apk_from_path(self, apk_path: str) -> None:
        options = self.current_install_options()
        self._start_operation(lambda: self.controller.install_apk(apk_path, options))

    def send_text(self) -> None:
        text = self.input_text_box.text()
        self._start_operation(lambda: self.controller.send_text(text))

    def current_install_options(self) -> InstallOptions:
        return InstallOptions(
            replace_existing=self.replace_checkbox.isChecked(),
            allow_downgrade=self.downgrade_checkbox.isChecked(),
            allow_test_apk=self.test_apk_checkbox.isChecked(),
        )

    def _persist_install_options(self) -> None:
        options = self.current_install_options()
        try:
            self.config_manager.update_adb_settings(
                replace_existing=options.replace_existing,
                allow_downgrade=options.allow_downgrade,
                allow_test_apk=options.allow_test_apk,
            )
        except OSError as exc:
            logger.warning('Could not persist install options: %s', exc)

    def pick_apk(self) -> None:
        path = self.file_dialog_manager.select_apk_file(self)
        if path:
            self.apk_path_box.setText(path)

    def _on_apk_dropped(self, apk_path: str) -> None:
        self.apk_path_box.setText(apk_path)
        self.install_apk_from_path(apk_path)

    def open_log_folder(self) -> None:
        directory = self.session_log.directory
        if directory is None:
            return
        self.system_actions.open_folder(str(directory))

    def clear_log(self) -> None:
        self.log_view.clear()
        self.controller.clear_log_view()

    def copy_log(self) -> None:
        self.system_actions.copy_to_clipboard(self.log_view.toPlainText())

    # ------------------------------------------------------------------
    # Dialogs
    # ------------------------------------------------------------------
    def show_error(self, title: str, message: str) -> None:
        self.dialog_manager.show_error(title, message)

    def show_guide_dialog(self) -> None:
        self.dialog_manager.show_info(MessageConstants.TITLE_GUIDE, MessageConstants.GUIDE_TEXT)

    def _show_first_run_tip(self) -> None:
        if self.config_manager.get_ui_settings().first_run_completed:
            return
        self.show_guide_dialog()
        try:
            self.config_manager.mark_first_run_completed()
        except OSError as exc:
            logger.warning('Could not store first-run flag: %s', exc)

    # ------------------------------------------------------------------
    # Controller signal handlers
    # ------------------------------------------------------------------
    def _on_status_changed(self, state: DeviceState) -> None:
        text, dot, ready = _STATUS_VIEW.get(state, _STATUS_VIEW[DeviceState.UNKNOWN])
        self.status_text.setText(text)
        self._set_status_dot(dot)
        self._set_action_enabled(ready)

    def _on_adb_missing(self) -> None:
        self.status_text.setText(MessageConstants.STATUS_ADB_MISSING)
        self._set_status_dot('bad')
        self._set_action_enabled(False)

    def _on_busy_changed(self, busy: bool, message: str) -> None:
        self._busy = busy
        for widget in (
            self.pick_apk_button,
            self.replace_checkbox,
            self.downgrade_checkbox,
            self.test_apk_checkbox,
            self.refresh_button,
            self.repair_button,
            self.open_log_button,
            self.guide_button,
            self.clear_log_button,
            self.copy_log_button,
        ):
            widget.setEnabled(not busy)
        self._set_action_enabled(self._device_ready)

        self.busy_label.setText(message or '')
        self.busy_label.setVisible(busy and bool(message))

        if busy:
            QGuiApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        else:
            while QGuiApplication.overrideCursor() is not None:
                QGuiApplication.restoreOverrideCursor()
            self._stop_install_progress()

    def _on_install_finished(self, outcome: InstallOutcome) -> None:
        self._stop_install_progress()
        if outcome.success:
            self.dialog_manager.show_info(
                MessageConstants.TITLE_INSTALL_DONE,
                MessageConstants.INSTALL_SUCCESS_TEMPLATE.format(
                    name=outcome.apk_name, elapsed=outcome.format_elapsed()
                ),
            )
            return
        self.dialog_manager.show_error(
            MessageConstants.TITLE_INSTALL_FAILED,
            MessageConstants.INSTALL_FAILURE_TEMPLATE.format(
                name=outcome.apk_name,
                elapsed=outcome.format_elapsed(),
                reason=outcome.reason_token,
                advice=outcome.advice,
            ),
        )

    # ------------------------------------------------------------------
    # View helpers
    # ------------------------------------------------------------------
    def _set_action_enabled(self, enabled: bool) -> None:
        self._device_ready = enabled
        self.install_button.setEnabled(enabled and not self._busy)
        self.send_text_button.setEnabled(enabled and not self._busy)

    def _set_status_dot(self, status_key: str) -> None:
        self.status_dot.setStyleSheet(StyleManager.get_status_dot_style(status_key))

    def _set_install_drop_visual(self, active: bool, valid: bool) -> None:
        self.install_group.setStyleSheet(StyleManager.get_drop_area_style(active, valid))

    def _update_install_stats(self, success_count: int, fail_count: int) -> None:
        self.success_badge.setText(PanelText.LABEL_SUCCESS_BADGE.format(count=success_count))
        self.fail_badge.setText(PanelText.LABEL_FAIL_BADGE.format(count=fail_count))

    def update_apk_preview(self, apk_path: str) -> None:
        preview = build_apk_preview(apk_path)
        self.apk_file_label.setText(PanelText.LABEL_APK_FILE.format(value=preview.file_name))
        self.apk_size_label.setText(PanelText.LABEL_APK_SIZE.format(value=preview.size_text))
        self.apk_package_label.setText(PanelText.LABEL_APK_PACKAGE.format(value=preview.package_name))
        self.apk_version_label.setText(PanelText.LABEL_APK_VERSION.format(value=preview.version))

    def _reset_apk_preview(self) -> None:
        self.update_apk_preview('')

    def _start_install_progress(self) -> None:
        self._install_started_at = time.monotonic()
        self.install_progress_panel.setVisible(True)
        self.install_progress_text.setText(MessageConstants.INSTALL_PROGRESS_TEMPLATE.format(elapsed=format_elapsed(0)))
        self._install_progress_timer.start()

    def _tick_install_progress(self) -> None:
        if not self.install_progress_panel.isVisible():
            return
        elapsed = time.monotonic() - self._install_started_at
        self.install_progress_text.setText(
            MessageConstants.INSTALL_PROGRESS_TEMPLATE.format(elapsed=format_elapsed(elapsed))
        )

    def _stop_install_progress(self) -> None:
        self._install_progress_timer.stop()
        self.install_progress_panel.setVisible(False)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def closeEvent(self, event: QCloseEvent) -> None:
        self._auto_refresh_timer.stop()
        self._install_progress_timer.stop()
        try:
            self.config_manager.update_ui_settings(window_width=self.width(), window_height=self.height())
        except OSError as exc:
            logger.warning('Could not persist window size: %s', exc)
        if not self.controller.shutdown():
            logger.warning('Closing while an adb command is still running')
        super().closeEvent(event)


__all__ = ['ApkDropBox', 'MainWindow']
