import os
import stat
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils import adb_tools


def _make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('#!/bin/sh\n', encoding='utf-8')
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


class AdbToolsTest(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.base_dir = Path(self.temp_dir.name)
        self.which_patcher = patch('utils.adb_tools.shutil.which', return_value=None)
        self.sdk_patcher = patch('utils.adb_tools._sdk_candidates', return_value=[])
        self.which = self.which_patcher.start()
        self.sdk_patcher.start()
        self.addCleanup(self.which_patcher.stop)
        self.addCleanup(self.sdk_patcher.stop)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_bundled_path_is_next_to_application(self):
        path = adb_tools.bundled_adb_path(self.base_dir)
        self.assertEqual(path.parent, self.base_dir / 'adb')
        self.assertIn(path.name, ('adb', 'adb.exe'))

    def test_missing_adb_raises(self):
        with self.assertRaises(adb_tools.AdbNotFoundError):
            adb_tools.ensure_adb_exists('', self.base_dir)
        self.assertIsNone(adb_tools.resolve_adb_path('', self.base_dir))

    def test_not_found_error_is_file_not_found(self):
        self.assertTrue(issubclass(adb_tools.AdbNotFoundError, FileNotFoundError))

    def test_bundled_adb_is_used(self):
        bundled = _make_executable(adb_tools.bundled_adb_path(self.base_dir))
        self.assertEqual(adb_tools.ensure_adb_exists('', self.base_dir), str(bundled))

    def test_configured_path_wins(self):
        _make_executable(adb_tools.bundled_adb_path(self.base_dir))
        configured = _make_executable(self.base_dir / 'custom' / 'adb')

        self.assertEqual(adb_tools.ensure_adb_exists(str(configured), self.base_dir), str(configured))

    def test_invalid_configured_path_falls_through(self):
        bundled = _make_executable(adb_tools.bundled_adb_path(self.base_dir))
        self.assertEqual(
            adb_tools.ensure_adb_exists(str(self.base_dir / 'nope' / 'adb'), self.base_dir),
            str(bundled),
        )

    def test_path_lookup_after_bundled(self):
        on_path = _make_executable(self.base_dir / 'bin' / 'adb')
        self.which.return_value = str(on_path)

        self.assertEqual(adb_tools.ensure_adb_exists('', self.base_dir), str(on_path))

    def test_candidate_order(self):
        self.which.return_value = '/usr/bin/adb'
        candidates = list(adb_tools.candidate_adb_paths(' /custom/adb ', self.base_dir))
        self.assertEqual(
            candidates,
            ['/custom/adb', str(adb_tools.bundled_adb_path(self.base_dir)), '/usr/bin/adb'],
        )


if __name__ == '__main__':
    unittest.main()
