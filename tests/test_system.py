import os
import shutil
import subprocess
import sys
import tempfile
from unittest import TestCase

from cloudsync.util import system
from cloudsync.util.settings import SettingsIO


class TestNormalizePath(TestCase):
    def test_windows_paths(self):
        self.assertEqual(system.normalize_path("C:\\users\\steamuser"), "C:/users/steamuser")
        self.assertEqual(system.normalize_path("C:\\users\\steamuser\\"), "C:/users/steamuser")

    def test_unix_paths(self):
        self.assertEqual(system.normalize_path("/home/player/"), "/home/player")
        self.assertEqual(system.normalize_path("/home//player/./saves/.."), "/home/player")


class TestFileRemoval(TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_delete_file(self):
        path = os.path.join(self.tmp_dir, "archive.tar")
        open(path, "w", encoding="utf-8").close()
        self.assertTrue(system.delete_file(path))
        self.assertFalse(os.path.exists(path))
        self.assertFalse(system.delete_file(path))

    def test_delete_folder(self):
        folder = os.path.join(self.tmp_dir, "steam-123", "nested")
        os.makedirs(folder)
        self.assertTrue(system.delete_folder(os.path.join(self.tmp_dir, "steam-123")))
        self.assertFalse(os.path.exists(os.path.join(self.tmp_dir, "steam-123")))
        self.assertFalse(system.delete_folder(os.path.join(self.tmp_dir, "steam-123")))


class TestExecute(TestCase):
    def test_returncode_and_output(self):
        returncode, stdout, stderr = system.execute_with_returncode(
            [sys.executable, "-c", "import sys; print('out'); sys.stderr.write('err'); sys.exit(3)"]
        )
        self.assertEqual(returncode, 3)
        self.assertEqual(stdout, "out")
        self.assertEqual(stderr, "err")

    def test_timeout(self):
        with self.assertRaises(subprocess.TimeoutExpired):
            system.execute_with_returncode([sys.executable, "-c", "import time; time.sleep(10)"], timeout=0.5)

    def test_missing_program(self):
        with self.assertRaises(OSError):
            system.execute_with_returncode(["/no/such/program"])


class TestSettingsIO(TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.tmp_dir, "cloudsync.conf")

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def write_config(self, content):
        with open(self.config_file, "w", encoding="utf-8") as config_file:
            config_file.write(content)

    def test_missing_file_gives_defaults(self):
        sio = SettingsIO(self.config_file)
        self.assertEqual(sio.read_setting("api_url", default="none"), "none")
        self.assertIsNone(sio.read_float_setting("upload_timeout"))

    def test_read_settings(self):
        self.write_config("[cloudsync]\napi_url = https://api.test\nupload_timeout = 60\n")
        sio = SettingsIO(self.config_file)
        self.assertEqual(sio.read_setting("api_url"), "https://api.test")
        self.assertEqual(sio.read_float_setting("upload_timeout"), 60.0)

    def test_other_sections_are_ignored(self):
        self.write_config("[other]\napi_url = https://api.test\n")
        self.assertEqual(SettingsIO(self.config_file).read_setting("api_url"), "")

    def test_invalid_number(self):
        self.write_config("[cloudsync]\nupload_timeout = soon\n")
        self.assertEqual(SettingsIO(self.config_file).read_float_setting("upload_timeout", default=5), 5)

    def test_broken_file_is_ignored(self):
        self.write_config("api_url = https://api.test\n")
        self.assertEqual(SettingsIO(self.config_file).read_setting("api_url", default="none"), "none")
