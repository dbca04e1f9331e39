import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from showtime_watch import main as main_module


class MainTests(unittest.TestCase):
    def _env(self, tmpdir: str, **extra: str) -> dict:
        env = {
            "WATCHLIST_PATH": str(Path(tmpdir) / "watchlist.json"),
            "STATE_PATH": str(Path(tmpdir) / "state.json"),
            "STATE_COMMIT_ENABLED": "false",
            "REQUEST_DELAY_SECONDS": "0",
            "DATE_MODE": "fixed",
            "FIXED_DATE": "2025-06-01",
        }
        env.update(extra)
        return env

    def test_successful_run_exits_zero_and_seeds_state(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            Path(tmpdir, "watchlist.json").write_text(
                json.dumps([{"id": "m1", "movie": "M", "cinema": "C", "url": "https://example/movie"}]),
                "utf-8",
            )
            with mock.patch.dict(os.environ, self._env(tmpdir), clear=True), mock.patch(
                "showtime_watch.scraper.DateFetcher.fetch_dates",
                return_value=["2025-06-01", "2025-06-03"],
            ) as fetch:
                code = main_module.main()

            self.assertEqual(code, 0)
            fetch.assert_called_once_with("https://example/movie", "2025-06-01")
            state = json.loads(Path(tmpdir, "state.json").read_text("utf-8"))
            self.assertEqual(state, {"m1": {"lastMaxDate": "2025-06-03"}})

    def test_missing_watchlist_exits_one(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with mock.patch.dict(os.environ, self._env(tmpdir), clear=True):
                self.assertEqual(main_module.main(), 1)

    def test_fetch_failure_exits_one_without_saving(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            Path(tmpdir, "watchlist.json").write_text(
                json.dumps([{"id": "m1", "url": "https://example/movie"}]),
                "utf-8",
            )
            with mock.patch.dict(os.environ, self._env(tmpdir), clear=True), mock.patch(
                "showtime_watch.scraper.DateFetcher.fetch_dates",
                side_effect=ConnectionError("down"),
            ):
                self.assertEqual(main_module.main(), 1)
            self.assertFalse(Path(tmpdir, "state.json").exists())

    def test_all_expired_without_permission_exits_zero(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            Path(tmpdir, "watchlist.json").write_text(
                json.dumps([{"id": "m1", "url": "https://example/movie", "expiresAt": "2020-01-01T00:00:00Z"}]),
                "utf-8",
            )
            with mock.patch.dict(os.environ, self._env(tmpdir), clear=True), mock.patch(
                "showtime_watch.github.GitHubWorkflowDisabler.disable"
            ) as disable:
                self.assertEqual(main_module.main(), 0)
            disable.assert_not_called()


if __name__ == "__main__":
    unittest.main()
