#!/usr/bin/env python3
"""CommandRunner tests with a fake subprocess."""

import datetime as dt
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.constants import ADBConstants
from utils.command_runner import (
    AdbCommandTimeoutError,
    AdbLaunchError,
    CommandRunner,
)
from utils.session_log import SessionLog


FIXED_NOW = dt.datetime(2024, 5, 1, 9, 30, 15)


class FakeProcess:
    def __init__(self, stdout='', stderr='', returncode=0, hang=False, hang_after_kill=False):
        self._stdout = stdout
        self._stderr = stderr
        self._final_returncode = returncode
        self.returncode = None
        self.hang = hang
        self.hang_after_kill = hang_after_kill
        self.killed = False
        self.communicate_calls = []

    def communicate(self, timeout=None):
        self.communicate_calls.append(timeout)
        if self.hang and (not self.killed or self.hang_after_kill):
            raise subprocess.TimeoutExpired(cmd='adb', timeout=timeout)
        self.returncode = self._final_returncode if not self.killed else -9
        return self._stdout, self._stderr

    def kill(self):
        self.killed = True


class FakePopen:
    def __init__(self, process=None, error=None):
        self.process = process
        self.error = error
        self.calls = []

    def __call__(self, argv, **kwargs):
        self.calls.append((argv, kwargs))
        if self.error is not None:
            raise self.error
        return self.process


class CommandRunnerTest(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.session_log = SessionLog(Path(self.temp_dir.name) / 'log.txt', clock=lambda: FIXED_NOW)
        self.session_log.clear_view()

    def tearDown(self):
        self.temp_dir.cleanup()

    def _runner(self, popen, default_timeout=None):
        return CommandRunner('/opt/adb/adb', self.session_log, default_timeout=default_timeout, popen_factory=popen)

    def test_run_captures_output_and_logs_exchange(self):
        popen = FakePopen(FakeProcess(stdout='Success\n', stderr='', returncode=0))
        result = self._runner(popen).run(['install', '-r', '/tmp/my app.apk'])

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout, 'Success\n')
        self.assertEqual(
            self.session_log.lines(),
            [
                '[09:30:15] > adb install -r /tmp/my app.apk',
                '[09:30:15] Success',
                '[09:30:15] (exit=0)',
                '[09:30:15] ',
            ],
        )

    def test_argv_is_passed_without_shell(self):
        popen = FakePopen(FakeProcess())
        self._runner(popen).run(['install', '/tmp/a b&c.apk'])

        argv, kwargs = popen.calls[0]
        self.assertEqual(argv, ['/opt/adb/adb', 'install', '/tmp/a b&c.apk'])
        self.assertFalse(kwargs['shell'])
        self.assertEqual(kwargs['stdin'], subprocess.DEVNULL)
        self.assertEqual(kwargs['stdout'], subprocess.PIPE)
        self.assertEqual(kwargs['stderr'], subprocess.PIPE)

    def test_capture_only_skips_command_line(self):
        popen = FakePopen(FakeProcess(stdout='List of devices attached\n', stderr=''))
        self._runner(popen).run(['devices'], capture_only=True)

        lines = self.session_log.lines()
        self.assertFalse(any('> adb' in line for line in lines))
        self.assertIn('[09:30:15] List of devices attached', lines)
        self.assertIn('[09:30:15] (exit=0)', lines)

    def test_stderr_logged_after_stdout_and_blank_streams_skipped(self):
        popen = FakePopen(FakeProcess(stdout='   \n', stderr='error: closed\n', returncode=1))
        result = self._runner(popen).run(['shell', 'input', 'text', 'x'])

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(
            self.session_log.lines(),
            [
                '[09:30:15] > adb shell input text x',
                '[09:30:15] error: closed',
                '[09:30:15] (exit=1)',
                '[09:30:15] ',
            ],
        )

    def test_launch_failure_raises(self):
        popen = FakePopen(error=FileNotFoundError('no such file'))

        with self.assertRaises(AdbLaunchError) as ctx:
            self._runner(popen).run(['devices'])

        self.assertEqual(ctx.exception.command_args, ['devices'])
        self.assertTrue(any('[Error] Failed to launch adb' in line for line in self.session_log.lines()))

    def test_timeout_kills_process_and_raises(self):
        process = FakeProcess(stdout='partial', hang=True)
        popen = FakePopen(process)

        with self.assertRaises(AdbCommandTimeoutError) as ctx:
            self._runner(popen, default_timeout=5).run(['install', '/tmp/a.apk'])

        self.assertTrue(process.killed)
        self.assertEqual(process.communicate_calls[0], 5)
        self.assertEqual(ctx.exception.timeout, 5)
        self.assertEqual(ctx.exception.partial.stdout, 'partial')
        self.assertIn('[09:30:15] partial', self.session_log.lines())

    def test_timeout_drain_is_bounded_when_pipes_stay_open(self):
        process = FakeProcess(stdout='partial', hang=True, hang_after_kill=True)

        with self.assertRaises(AdbCommandTimeoutError) as ctx:
            self._runner(FakePopen(process), default_timeout=5).run(['install', '/tmp/a.apk'])

        self.assertEqual(process.communicate_calls, [5, ADBConstants.KILL_DRAIN_TIMEOUT])
        self.assertEqual(ctx.exception.partial.stdout, '')
        self.assertEqual(ctx.exception.partial.exit_code, -1)
        self.assertIn('[09:30:15] (exit=-1)', self.session_log.lines())

    def test_explicit_timeout_overrides_default(self):
        process = FakeProcess(stdout='Success')
        self._runner(FakePopen(process), default_timeout=5).run(['install', '/tmp/a.apk'], timeout=300)
        self.assertEqual(process.communicate_calls, [300])


if __name__ == '__main__':
    unittest.main()
