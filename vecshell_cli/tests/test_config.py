import dataclasses
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from vecshell_cli.config import ShellConfig, load_config, CONFIG_FILE_ENV, ROOT_ENV
from vecshell_exception_model.exception import ConfigurationException


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.temp_root = tempfile.mkdtemp()
        self.env = patch.dict(os.environ)
        self.env.start()
        os.environ.pop(CONFIG_FILE_ENV, None)
        os.environ.pop(ROOT_ENV, None)

    def tearDown(self):
        self.env.stop()
        shutil.rmtree(self.temp_root)

    def _write_config(self, text):
        path = os.path.join(self.temp_root, "config.yaml")
        with open(path, "w") as f:
            f.write(text)
        os.environ[CONFIG_FILE_ENV] = path
        return path

    def test_defaults(self):
        config = load_config()
        self.assertEqual(config, ShellConfig())
        self.assertEqual(config.base_url, "http://localhost:8000")
        self.assertEqual(config.prompt, "> ")
        self.assertFalse(config.keep_going)

    def test_config_is_immutable(self):
        config = load_config()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            config.base_url = "http://elsewhere"

    def test_config_file_applied(self):
        self._write_config(
            "shell:\n"
            "  base_url: http://chroma:8000\n"
            "  keep_going: true\n"
        )
        config = load_config()
        self.assertEqual(config.base_url, "http://chroma:8000")
        self.assertTrue(config.keep_going)
        self.assertEqual(config.prompt, "> ")

    def test_unknown_file_settings_ignored(self):
        self._write_config("shell:\n  colour: green\n")
        with self.assertLogs("vecshell_cli.config", level="WARNING"):
            config = load_config()
        self.assertEqual(config, ShellConfig())

    def test_missing_config_file_ignored(self):
        os.environ[CONFIG_FILE_ENV] = os.path.join(self.temp_root, "does_not_exist.yaml")
        self.assertEqual(load_config(), ShellConfig())

    def test_precedence(self):
        self._write_config("shell:\n  base_url: http://from-file:8000\n")
        self.assertEqual(load_config().base_url, "http://from-file:8000")

        os.environ[ROOT_ENV] = "http://from-env:8000"
        self.assertEqual(load_config().base_url, "http://from-env:8000")

        config = load_config(root="http://from-flag:8000", keep_going=True, log_level="debug")
        self.assertEqual(config.base_url, "http://from-flag:8000")
        self.assertTrue(config.keep_going)
        self.assertEqual(config.log_level, "DEBUG")

    def test_file_log_level_normalised(self):
        self._write_config("shell:\n  log_level: debug\n")
        self.assertEqual(load_config().log_level, "DEBUG")

    def test_unknown_log_level_rejected(self):
        path = self._write_config("shell:\n  log_level: chatty\n")
        with self.assertRaises(ConfigurationException) as ctx:
            load_config()
        self.assertEqual(ctx.exception.path, path)

        os.environ.pop(CONFIG_FILE_ENV)
        with self.assertRaises(ConfigurationException):
            load_config(log_level="verbose")

    def test_quoted_keep_going_rejected(self):
        self._write_config("shell:\n  keep_going: \"false\"\n")
        with self.assertRaises(ConfigurationException) as ctx:
            load_config()
        self.assertIn("keep_going", ctx.exception.message)

    def test_non_string_base_url_rejected(self):
        self._write_config("shell:\n  base_url: 8000\n")
        with self.assertRaises(ConfigurationException):
            load_config()

    def test_top_level_must_be_mapping(self):
        path = self._write_config("- shell\n- base_url\n")
        with self.assertRaises(ConfigurationException) as ctx:
            load_config()
        self.assertEqual(ctx.exception.path, path)

    def test_shell_section_must_be_mapping(self):
        self._write_config("shell: http://chroma:8000\n")
        with self.assertRaises(ConfigurationException):
            load_config()

    def test_empty_file_and_empty_section_use_defaults(self):
        self._write_config("")
        self.assertEqual(load_config(), ShellConfig())
        self._write_config("shell:\n")
        self.assertEqual(load_config(), ShellConfig())

    def test_malformed_yaml_rejected(self):
        self._write_config("shell: [unclosed\n")
        with self.assertRaises(ConfigurationException):
            load_config()


if __name__ == '__main__':
    unittest.main()
