"""Session controller - sequences every device operation of the main window.

Each public operation is started from the UI thread and executed on the
task dispatcher's worker. State-changing operations (repair, install, send
text) take the session busy flag before they are queued and always give it
back when the worker is done, whatever happened in between.
"""

from __future__ import annotations

import os
import time
from typing import Any, Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from config.config_manager import ConfigManager
from config.constants import MessageConstants
from utils import adb_commands, adb_models, adb_tools, common
from utils.adb_models import DeviceState, InstallOptions
from utils.apk_files import is_existing_file
from utils.command_runner import AdbCommandError, CommandRunner
from utils.device_probe import DeviceStateProbe
from utils.install_outcome import InstallOutcomeClassifier
from utils.session_guard import SessionState, guard
from utils.session_log import SessionLog
from utils.task_dispatcher import TaskContext, TaskDispatcher, TaskHandle, get_task_dispatcher
from utils.text_input import encode_input_text

logger = common.get_logger('session_controller')

RunnerFactory = Callable[[str, Optional[float]], CommandRunner]
AdbLocator = Callable[[], str]


class SessionController(QObject):
    """Own the session state and run repair/install/send-text/refresh."""

    status_changed = pyqtSignal(object)  # DeviceState
    adb_missing = pyqtSignal()
    busy_changed = pyqtSignal(bool, str)  # busy, message
    install_started = pyqtSignal()
    install_finished = pyqtSignal(object)  # InstallOutcome
    counters_changed = pyqtSignal(int, int)  # success, fail
    notice = pyqtSignal(str, str, str)  # level, title, message
    log_line = pyqtSignal(str)

    def __init__(
        self,
        session_log: SessionLog,
        config_manager: Optional[ConfigManager] = None,
        dispatcher: Optional[TaskDispatcher] = None,
        session_state: Optional[SessionState] = None,
        runner_factory: Optional[RunnerFactory] = None,
        adb_locator: Optional[AdbLocator] = None,
        clock: Callable[[], float] = time.monotonic,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.session_log = session_log
        self.config_manager = config_manager or ConfigManager()
        self.state = session_state or SessionState()
        self.classifier = InstallOutcomeClassifier(self.state.counters)
        self._dispatcher = dispatcher or get_task_dispatcher()
        self._runner_factory = runner_factory or self._default_runner
        self._adb_locator = adb_locator or self._default_adb_locator
        self._clock = clock

        self._log_listener = self.log_line.emit
        self.session_log.add_listener(self._log_listener)

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------
    def _default_runner(self, adb_path: str, timeout: Optional[float]) -> CommandRunner:
        return CommandRunner(adb_path, self.session_log, default_timeout=timeout)

    def _default_adb_locator(self) -> str:
        return adb_tools.ensure_adb_exists(self.config_manager.get_adb_settings().adb_path)

    def _command_runner(self) -> CommandRunner:
        """Locate adb and build a runner; raises AdbNotFoundError."""
        adb_path = self._adb_locator()
        timeout = self.config_manager.get_adb_settings().command_timeout
        return self._runner_factory(adb_path, timeout)

    def default_install_options(self) -> InstallOptions:
        settings = self.config_manager.get_adb_settings()
        return InstallOptions(
            replace_existing=settings.replace_existing,
            allow_downgrade=settings.allow_downgrade,
            allow_test_apk=settings.allow_test_apk,
        )

    @property
    def busy(self) -> bool:
        return self.state.busy

    @property
    def counters(self) -> adb_models.InstallCounters:
        return self.state.counters

    # ------------------------------------------------------------------
    # Public operations (UI thread)
    # ------------------------------------------------------------------
    def refresh_status(self, notify_missing_adb: bool = True) -> TaskHandle:
        """Probe the device and publish its state; does not take the busy flag."""
        context = TaskContext(name='refresh_status', category='probe')
        return self._dispatcher.submit(self._refresh_status_task, notify_missing_adb, context=context)

    def repair_connection(self) -> TaskHandle:
        """Restart the adb server, then refresh the status."""
        self._begin('repair_connection', MessageConstants.BUSY_REPAIRING)
        return self._submit('repair_connection', self._repair_connection_task)

    def install_apk(self, apk_path: str, options: Optional[InstallOptions] = None) -> TaskHandle:
        """Install one APK on the connected headset."""
        self._begin('install_apk', MessageConstants.BUSY_INSTALLING)
        started_at = self._clock()
        self.install_started.emit()
        return self._submit(
            'install_apk',
            self._install_apk_task,
            (apk_path or '').strip(),
            options or self.default_install_options(),
            started_at,
        )

    def send_text(self, text: str) -> TaskHandle:
        """Type ``text`` on the headset through `input text`."""
        self._begin('send_text', MessageConstants.BUSY_SENDING_TEXT)
        return self._submit('send_text', self._send_text_task, text or '')

    def clear_log_view(self) -> None:
        self.session_log.clear_view()

    def shutdown(self, wait_msecs: int = 2000) -> bool:
        """Stop forwarding log lines and give queued work a bounded time to drain."""
        self.session_log.remove_listener(self._log_listener)
        return self._dispatcher.wait_for_done(wait_msecs)

    # ------------------------------------------------------------------
    # Busy handling
    # ------------------------------------------------------------------
    def _begin(self, label: str, message: str) -> None:
        # Raises SessionBusyError when another operation holds the flag.
        self.state.acquire(label)
        logger.info('Operation started: %s', label)
        self.busy_changed.emit(True, message)

    def _end(self) -> None:
        self.state.release()
        self.busy_changed.emit(False, '')

    def _submit(self, name: str, fn: Callable[..., Any], *args: Any) -> TaskHandle:
        context = TaskContext(name=name, category='session')
        try:
            return self._dispatcher.submit(self._run_operation, name, fn, *args, context=context)
        except Exception:
            self._end()
            raise

    def _run_operation(self, name: str, fn: Callable[..., Any], *args: Any) -> Any:
        """Worker-side wrapper: map known failures to notices, always release busy."""
        try:
            return fn(*args)
        except adb_tools.AdbNotFoundError:
            self._report_adb_missing(notify=True)
        except AdbCommandError as exc:
            logger.error('Operation %s aborted: %s', name, exc)
            self.session_log.append(f'[Error] {exc}')
            self.notice.emit('error', MessageConstants.TITLE_OPERATION_FAILED, str(exc))
        except Exception as exc:
            self.session_log.append(f'[Error] {name} failed: {exc}')
            self.notice.emit('error', MessageConstants.TITLE_OPERATION_FAILED, str(exc))
            raise
        finally:
            logger.info('Operation finished: %s', name)
            self._end()
        return None

    # ------------------------------------------------------------------
    # Worker tasks
    # ------------------------------------------------------------------
    def _notify(self, level: str, title: str, message: str) -> None:
        self.notice.emit(level, title, message)

    def _report_adb_missing(self, notify: bool) -> None:
        self.session_log.append('[Error] adb executable not found')
        self.adb_missing.emit()
        if notify:
            self.notice.emit('error', MessageConstants.TITLE_ADB_MISSING, MessageConstants.ERROR_ADB_MISSING)

    def _probe_and_publish(self, runner: CommandRunner) -> DeviceState:
        state = DeviceStateProbe(runner).probe()
        self.status_changed.emit(state)
        return state

    def _refresh_status_task(self, notify_missing_adb: bool = True) -> Optional[DeviceState]:
        try:
            runner = self._command_runner()
        except adb_tools.AdbNotFoundError:
            self._report_adb_missing(notify=notify_missing_adb)
            return None
        return self._probe_and_publish(runner)

    def _repair_connection_task(self) -> DeviceState:
        runner = self._command_runner()
        runner.run(adb_commands.cmd_kill_adb_server())
        runner.run(adb_commands.cmd_start_adb_server())
        return self._probe_and_publish(runner)

    def _install_apk_task(
        self,
        apk_path: str,
        options: InstallOptions,
        started_at: float,
    ) -> Optional[adb_models.InstallOutcome]:
        runner = self._command_runner()

        if not is_existing_file(apk_path):
            self._notify('warning', MessageConstants.TITLE_INVALID_APK, MessageConstants.WARNING_INVALID_APK)
            return None

        state = DeviceStateProbe(runner).probe()
        if not guard(state, self._notify):
            self.status_changed.emit(state)
            return None

        install_timeout = self.config_manager.get_adb_settings().install_timeout
        result = runner.run(
            adb_commands.cmd_adb_install(os.path.abspath(apk_path), options),
            timeout=install_timeout,
        )

        elapsed = max(self._clock() - started_at, 0.0)
        outcome = self.classifier.classify_result(result, elapsed, apk_name=os.path.basename(apk_path))
        self.counters_changed.emit(self.counters.success_count, self.counters.fail_count)
        self.install_finished.emit(outcome)

        self._probe_and_publish(runner)
        return outcome

    def _send_text_task(self, text: str) -> Optional[adb_models.CommandResult]:
        runner = self._command_runner()

        if not text.strip():
            self._notify('info', MessageConstants.TITLE_NO_TEXT, MessageConstants.INFO_NO_TEXT)
            return None

        state = DeviceStateProbe(runner).probe()
        if not guard(state, self._notify):
            self.status_changed.emit(state)
            return None

        return runner.run(adb_commands.cmd_input_text(encode_input_text(text)))


__all__ = ['SessionController']
