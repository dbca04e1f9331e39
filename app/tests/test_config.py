import os
import unittest
from pathlib import Path
from unittest import mock

from showtime_watch.config import DEFAULT_USER_AGENT, load_config


class ConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            cfg = load_config()
        self.assertEqual(cfg.watchlist_path, Path("./watchlist.json"))
        self.assertEqual(cfg.state_path, Path("./state.json"))
        self.assertEqual(cfg.timezone, "UTC")
        self.assertEqual(cfg.date_mode, "today")
        self.assertFalse(cfg.heartbeat_enabled)
        self.assertFalse(cfg.allow_auto_disable)
        self.assertFalse(cfg.state_commit_enabled)
        self.assertEqual(cfg.workflow_file, "watch.yml")
        self.assertEqual(cfg.request_delay_seconds, 2.0)
        self.assertEqual(cfg.request_timeout_seconds, 30.0)
        self.assertEqual(cfg.user_agent, DEFAULT_USER_AGENT)
        self.assertIsNone(cfg.legacy_watcher_id)
        self.assertEqual(cfg.git_user_name, "github-actions[bot]")

    def test_flags_and_numbers(self) -> None:
        env = {
            "HEARTBEAT_ENABLED": "yes",
            "ALLOW_AUTO_DISABLE": "1",
            "REQUEST_DELAY_SECONDS": "0.5",
            "REQUEST_TIMEOUT_SECONDS": "abc",
            "TELEGRAM_BOT_TOKEN": " 123:abc ",
            "LEGACY_WATCHER_ID": "priya-imax",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            cfg = load_config()
        self.assertTrue(cfg.heartbeat_enabled)
        self.assertTrue(cfg.allow_auto_disable)
        self.assertEqual(cfg.request_delay_seconds, 0.5)
        self.assertEqual(cfg.request_timeout_seconds, 30.0)
        self.assertEqual(cfg.telegram_bot_token, "123:abc")
        self.assertEqual(cfg.legacy_watcher_id, "priya-imax")

    def test_invalid_bool_falls_back_to_default(self) -> None:
        with mock.patch.dict(os.environ, {"HEARTBEAT_ENABLED": "maybe"}, clear=True):
            with self.assertLogs("showtime_watch.config", level="WARNING"):
                cfg = load_config()
        self.assertFalse(cfg.heartbeat_enabled)

    def test_commit_defaults_on_in_actions(self) -> None:
        env = {
            "GITHUB_ACTIONS": "true",
            "GITHUB_WORKFLOW_REF": "owner/repo/.github/workflows/district.yml@refs/heads/main",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            cfg = load_config()
        self.assertTrue(cfg.state_commit_enabled)
        self.assertEqual(cfg.workflow_file, "district.yml")

    def test_explicit_workflow_file_wins(self) -> None:
        env = {
            "WORKFLOW_FILE": "custom.yml",
            "GITHUB_WORKFLOW_REF": "owner/repo/.github/workflows/district.yml@refs/heads/main",
            "STATE_COMMIT_ENABLED": "false",
            "GITHUB_ACTIONS": "true",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            cfg = load_config()
        self.assertEqual(cfg.workflow_file, "custom.yml")
        self.assertFalse(cfg.state_commit_enabled)


if __name__ == "__main__":
    unittest.main()
