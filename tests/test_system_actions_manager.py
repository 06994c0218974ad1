import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class DummyWindow:
    def __init__(self):
        self.error_messages = []

    def show_error(self, title, message):
        self.error_messages.append((title, message))


class ClipboardDouble:
    def __init__(self):
        self.text = None

    def setText(self, text):
        self.text = text


class SystemActionsManagerTest(unittest.TestCase):
    def setUp(self):
        from ui.system_actions_manager import SystemActionsManager

        self.window = DummyWindow()
        self.clipboard = ClipboardDouble()
        self.subprocess_calls = []

        def fake_run(cmd):
            self.subprocess_calls.append(cmd)

        self.manager = SystemActionsManager(
            window=self.window,
            clipboard_provider=lambda: self.clipboard,
            subprocess_runner=fake_run,
            platform_resolver=lambda: 'Linux',
        )

    def test_copy_to_clipboard_success(self):
        self.assertTrue(self.manager.copy_to_clipboard('[09:00:00] > adb devices'))
        self.assertEqual(self.clipboard.text, '[09:00:00] > adb devices')
        self.assertFalse(self.window.error_messages)

    def test_copy_to_clipboard_failure(self):
        failing_manager = self.manager.__class__(
            window=self.window,
            clipboard_provider=lambda: (_ for _ in ()).throw(RuntimeError('fail')),
        )
        self.assertFalse(failing_manager.copy_to_clipboard('text'))

    def test_open_folder_linux(self):
        self.manager.open_folder('/tmp/logs')
        self.assertIn(['xdg-open', '/tmp/logs'], self.subprocess_calls)

    def test_open_folder_per_platform(self):
        for system, expected in (('Darwin', 'open'), ('Windows', 'explorer')):
            calls = []
            manager = self.manager.__class__(
                window=self.window,
                subprocess_runner=lambda cmd: calls.append(cmd),
                platform_resolver=lambda system=system: system,
            )
            manager.open_folder('/tmp/logs')
            self.assertEqual(calls, [[expected, '/tmp/logs']])

    def test_open_folder_failure_reports(self):
        failing_manager = self.manager.__class__(
            window=self.window,
            subprocess_runner=lambda cmd: (_ for _ in ()).throw(OSError('boom')),
            platform_resolver=lambda: 'Linux',
        )
        failing_manager.open_folder('/tmp/logs')
        self.assertEqual(len(self.window.error_messages), 1)


if __name__ == '__main__':
    unittest.main()
