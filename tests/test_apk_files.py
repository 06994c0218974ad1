import os
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils.apk_files import (
    ApkPreview,
    build_apk_preview,
    format_file_size,
    is_existing_file,
    single_apk_from_paths,
)


class ApkFilesTest(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.apk = self.root / 'Game.APK'
        self.apk.write_bytes(b'x' * 2048)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_format_file_size(self):
        self.assertEqual(format_file_size(512), '512 B')
        self.assertEqual(format_file_size(2048), '2.0 KB')
        self.assertEqual(format_file_size(5 * 1024 * 1024 + 512 * 1024), '5.5 MB')
        self.assertEqual(format_file_size(3 * 1024 ** 3), '3.00 GB')

    def test_is_existing_file(self):
        self.assertTrue(is_existing_file(str(self.apk)))
        self.assertTrue(is_existing_file(f'  {self.apk}  '))
        self.assertFalse(is_existing_file(''))
        self.assertFalse(is_existing_file('   '))
        self.assertFalse(is_existing_file(str(self.root)))
        self.assertFalse(is_existing_file(str(self.root / 'missing.apk')))

    def test_single_apk_from_paths(self):
        self.assertEqual(single_apk_from_paths([str(self.apk)]), str(self.apk))

    def test_single_apk_rejects_invalid_drops(self):
        other = self.root / 'notes.txt'
        other.write_text('hi', encoding='utf-8')

        self.assertIsNone(single_apk_from_paths(None))
        self.assertIsNone(single_apk_from_paths([]))
        self.assertIsNone(single_apk_from_paths([str(self.apk), str(self.apk)]))
        self.assertIsNone(single_apk_from_paths([str(other)]))
        self.assertIsNone(single_apk_from_paths([str(self.root / 'missing.apk')]))
        self.assertIsNone(single_apk_from_paths(['  ']))

    def test_build_apk_preview(self):
        preview = build_apk_preview(str(self.apk))
        self.assertEqual(preview.file_name, 'Game.APK')
        self.assertEqual(preview.size_text, '2.0 KB')
        self.assertEqual(preview.package_name, '-')
        self.assertEqual(preview.version, '-')

    def test_build_apk_preview_for_missing_file(self):
        self.assertEqual(build_apk_preview(''), ApkPreview())
        self.assertEqual(build_apk_preview(str(self.root / 'missing.apk')), ApkPreview())


if __name__ == '__main__':
    unittest.main()
