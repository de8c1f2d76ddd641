"""Tests for JSON config loading and settings validation."""

from __future__ import annotations

import json
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from termpad import config
from termpad.config import ConfigError, Settings, load_config, load_settings, read_config

SRC = Path(__file__).resolve().parents[1] / "src"


class LoadConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = Path(self.tmp.name) / "config.json"

    def test_missing_file_is_empty(self) -> None:
        self.assertEqual(load_config(self.path), {})

    def test_malformed_or_non_object_is_empty(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(load_config(self.path), {})
        self.path.write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(load_config(self.path), {})

    def test_read_config_reports_malformed_file(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ConfigError) as ctx:
            read_config(self.path)
        self.assertIn(str(self.path), str(ctx.exception))
        self.path.unlink()
        self.assertEqual(read_config(self.path), {})

    def test_malformed_file_warning_stays_off_the_terminal(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        code = (
            "import sys\n"
            "from pathlib import Path\n"
            "from termpad.config import load_config\n"
            "assert load_config(Path(sys.argv[1])) == {}\n"
        )
        env = dict(os.environ, PYTHONPATH=str(SRC))
        result = subprocess.run(
            [sys.executable, "-c", code, str(self.path)],
            capture_output=True,
            env=env,
            timeout=30,
        )
        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertEqual(result.stderr, b"")
        self.assertEqual(result.stdout, b"")

    def test_object_is_returned(self) -> None:
        self.path.write_text(json.dumps({"quit_times": 5}), encoding="utf-8")
        self.assertEqual(load_config(self.path), {"quit_times": 5})

    def test_default_path_is_used(self) -> None:
        self.path.write_text(json.dumps({"log_level": "debug"}), encoding="utf-8")
        with mock.patch.object(config, "CONFIG_PATH", self.path):
            self.assertEqual(load_config(), {"log_level": "debug"})


class LoadSettingsTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch.dict(os.environ, {}, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_defaults(self) -> None:
        self.assertEqual(load_settings({}), Settings())
        self.assertEqual(Settings().quit_times, 3)
        self.assertEqual(Settings().message_timeout, 5.0)

    def test_valid_values(self) -> None:
        settings = load_settings(
            {"quit_times": 5, "message_timeout": 2, "log_level": "debug", "log_file": "/tmp/t.log"}
        )
        self.assertEqual(settings, Settings(5, 2.0, "DEBUG", "/tmp/t.log"))

    def test_invalid_values_fall_back(self) -> None:
        settings = load_settings(
            {"quit_times": 0, "message_timeout": True, "log_level": "chatty", "log_file": 7}
        )
        self.assertEqual(settings, Settings())
        self.assertEqual(load_settings({"quit_times": "3"}).quit_times, 3)
        self.assertEqual(load_settings({"message_timeout": -1}).message_timeout, 5.0)

    def test_environment_overrides_log_level(self) -> None:
        os.environ[config.LOG_LEVEL_ENV] = "off"
        self.assertEqual(load_settings({"log_level": "DEBUG"}).log_level, "OFF")


if __name__ == "__main__":
    unittest.main()
