"""Tests for config loading."""

import json
import os
import tempfile
import unittest

from config_loader import DEFAULT_CONFIG, load_config


class TestLoadConfig(unittest.TestCase):

    def test_missing_file_gives_defaults(self):
        config = load_config("/nonexistent/config.json")
        self.assertEqual(config, DEFAULT_CONFIG)
        # a copy, not the shared defaults
        config["storage"]["backend"] = "sqlite"
        self.assertEqual(DEFAULT_CONFIG["storage"]["backend"], "memory")

    def test_partial_file_is_merged_over_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "config.json")
            with open(path, "w") as f:
                json.dump({"storage": {"backend": "sqlite"}, "log_level": "DEBUG"}, f)

            config = load_config(path)

        self.assertEqual(config["storage"]["backend"], "sqlite")
        self.assertEqual(config["storage"]["db_path"], "data/geochat.db")
        self.assertEqual(config["log_level"], "DEBUG")
        self.assertEqual(config["cors_origins"], ["*"])


if __name__ == "__main__":
    unittest.main()
