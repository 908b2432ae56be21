#!/usr/bin/env python3
"""
Test suite for configuration loading.
"""

import json
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from unliminotify.config import build_config, load_env_file, split_numbers
from unliminotify.errors import ConfigError


class TestBuildConfig(unittest.TestCase):
    """Test cases for merging flags, environment and config file"""

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.home = Path(self.tmp_dir.name)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def write_config(self, data, name=".unliminotify.json"):
        path = self.home / name
        path.write_text(json.dumps(data))
        return path

    def test_defaults(self):
        config = build_config(home=self.home)
        self.assertEqual(config.cinema_id, 1)
        self.assertEqual(config.notifications_file, "/var/db/unliminotify/notifications")
        self.assertEqual(config.sms_numbers, ())
        self.assertFalse(config.disable_sms)
        self.assertIsNone(config.config_file_used)

    def test_config_file_in_home(self):
        path = self.write_config(
            {"cinema_id": 66, "sms_numbers": ["+441", "+442"], "twilio_from": "+440"}
        )
        config = build_config(home=self.home)
        self.assertEqual(config.cinema_id, 66)
        self.assertEqual(config.sms_numbers, ("+441", "+442"))
        self.assertEqual(config.twilio_from, "+440")
        self.assertEqual(config.config_file_used, str(path))

    def test_empty_config_file_is_reported_as_used(self):
        path = self.write_config({})
        config = build_config(home=self.home)
        self.assertEqual(config.config_file_used, str(path))
        self.assertEqual(config.cinema_id, 1)

    def test_precedence_flags_then_env_then_file(self):
        self.write_config({"cinema_id": 66, "notifications_file": "/from/file"})
        config = build_config(
            flags={"cinema_id": "7", "notifications_file": None},
            environ={"CINEMA_ID": "12", "NOTIFICATIONS_FILE": "/from/env"},
            home=self.home,
        )
        self.assertEqual(config.cinema_id, 7)
        self.assertEqual(config.notifications_file, "/from/env")

    def test_env_numbers_are_comma_separated(self):
        config = build_config(environ={"SMS_NUMBERS": "+441, +442"}, home=self.home)
        self.assertEqual(config.sms_numbers, ("+441", "+442"))

    def test_credentials_from_env(self):
        config = build_config(
            environ={"TWILIO_SID": "AC1", "TWILIO_TOKEN": "tok", "TWILIO_FROM": "+440"},
            home=self.home,
        )
        self.assertEqual((config.twilio_sid, config.twilio_token), ("AC1", "tok"))

    def test_invalid_cinema_id(self):
        with self.assertRaises(ConfigError):
            build_config(flags={"cinema_id": "abc"}, home=self.home)

    def test_explicit_missing_config_raises(self):
        with self.assertRaises(ConfigError):
            build_config(config_path=str(self.home / "nope.json"), home=self.home)

    def test_malformed_config_raises(self):
        (self.home / ".unliminotify.json").write_text("{not json")
        with self.assertRaises(ConfigError):
            build_config(home=self.home)

    def test_logging_section(self):
        self.write_config({"logging": {"console_level": "info", "log_file": "logs/run.log"}})
        config = build_config(home=self.home)
        self.assertEqual(config.console_level, "INFO")
        self.assertEqual(config.log_file, "logs/run.log")


class TestHelpers(unittest.TestCase):
    """Test cases for config helpers"""

    def test_split_numbers(self):
        self.assertEqual(split_numbers(["+441,+442", "+443"]), ("+441", "+442", "+443"))
        self.assertEqual(split_numbers(""), ())
        self.assertEqual(split_numbers(None), ())

    def test_load_env_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            env_file = Path(tmp) / ".env"
            env_file.write_text('# comment\nTWILIO_SID="AC1"\nCINEMA_ID=5\n\nBROKEN\n')
            self.assertEqual(load_env_file(env_file), {"TWILIO_SID": "AC1", "CINEMA_ID": "5"})

    def test_load_missing_env_file(self):
        self.assertEqual(load_env_file("/nonexistent/.env"), {})


if __name__ == "__main__":
    unittest.main()
