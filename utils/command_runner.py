"""Run adb as a subprocess and record the exchange in the session log."""

from __future__ import annotations

import subprocess
from typing import Callable, Optional, Sequence

from config.constants import ADBConstants
from utils import adb_models, common
from utils.session_log import SessionLog

logger = common.get_logger('command_runner')


class AdbCommandError(RuntimeError):
    """Base class for failures that prevent an adb command from completing."""

    def __init__(self, args: Sequence[str], message: str) -> None:
        super().__init__(message)
        self.command_args = list(args)


class AdbLaunchError(AdbCommandError):
    """The adb process could not be started."""


class AdbCommandTimeoutError(AdbCommandError):
    """adb did not exit within the allotted time and was killed."""

    def __init__(self, args: Sequence[str], timeout: float, partial: adb_models.CommandResult) -> None:
        super().__init__(args, f'adb {" ".join(args)} timed out after {timeout:g}s')
        self.timeout = timeout
        self.partial = partial


PopenFactory = Callable[..., subprocess.Popen]


class CommandRunner:
    """Blocking adb invocation with full output capture.

    ``run`` blocks until the process exits and both streams are drained;
    callers keep it off the UI thread by submitting it to the task
    dispatcher.
    """

    def __init__(
        self,
        adb_path: str,
        session_log: SessionLog,
        default_timeout: Optional[float] = None,
        popen_factory: Optional[PopenFactory] = None,
    ) -> None:
        self.adb_path = adb_path
        self.session_log = session_log
        self.default_timeout = default_timeout
        self._popen = popen_factory or subprocess.Popen

    def run(
        self,
        args: Sequence[str],
        capture_only: bool = False,
        timeout: Optional[float] = None,
    ) -> adb_models.CommandResult:
        """Invoke adb with ``args`` and return its exit code and output.

        When ``capture_only`` is False the command line is logged before
        execution. Output lines and the exit code are always logged.
        """
        args = [str(arg) for arg in args]
        timeout = timeout if timeout is not None else self.default_timeout

        if not capture_only:
            self.session_log.append(f'> adb {" ".join(args)}')
        logger.debug('Running adb %s (timeout=%s)', args, timeout)

        try:
            process = self._popen(
                [self.adb_path, *args],
                shell=False,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding='utf-8',
                errors='replace',
                creationflags=getattr(subprocess, 'CREATE_NO_WINDOW', 0),
            )
        except OSError as exc:
            logger.exception('Failed to launch adb %s', args)
            self.session_log.append(f'[Error] Failed to launch adb: {exc}')
            raise AdbLaunchError(args, f'Failed to launch adb: {exc}') from exc

        try:
            stdout, stderr = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            try:
                stdout, stderr = process.communicate(timeout=ADBConstants.KILL_DRAIN_TIMEOUT)
            except subprocess.TimeoutExpired:
                # A child of the adb server can keep the pipes open after the kill.
                logger.warning('adb %s did not release its pipes after kill', args)
                stdout, stderr = '', ''
            partial = adb_models.CommandResult(
                exit_code=process.returncode if process.returncode is not None else -1,
                stdout=stdout or '',
                stderr=stderr or '',
            )
            self._log_exchange(partial)
            logger.error('adb %s timed out after %ss', args, timeout)
            raise AdbCommandTimeoutError(args, timeout, partial)

        result = adb_models.CommandResult(
            exit_code=process.returncode,
            stdout=stdout or '',
            stderr=stderr or '',
        )
        self._log_exchange(result)
        logger.debug('adb %s exited with %s', args, result.exit_code)
        return result

    def _log_exchange(self, result: adb_models.CommandResult) -> None:
        if result.stdout.strip():
            self.session_log.append(result.stdout.rstrip())
        if result.stderr.strip():
            self.session_log.append(result.stderr.rstrip())
        self.session_log.append(f'(exit={result.exit_code})')
        self.session_log.append('')


__all__ = [
    'AdbCommandError',
    'AdbCommandTimeoutError',
    'AdbLaunchError',
    'CommandRunner',
]
