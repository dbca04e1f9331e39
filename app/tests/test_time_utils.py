import unittest
from datetime import datetime, timezone
from types import SimpleNamespace

from showtime_watch.messages import (
    format_all_expired_message,
    format_heartbeat_message,
    format_new_date_message,
)
from showtime_watch.models import WatchlistItem
from showtime_watch.time_utils import format_duration, format_long_date, resolve_today


class TimeUtilsTests(unittest.TestCase):
    def test_format_duration(self) -> None:
        self.assertEqual(format_duration(0.25), "250ms")
        self.assertEqual(format_duration(5), "5s")
        self.assertEqual(format_duration(125), "2m 5s")
        self.assertEqual(format_duration(3725), "1h 2m 5s")

    def test_long_date(self) -> None:
        self.assertEqual(format_long_date("2025-06-05"), "Thursday, June 5, 2025")

    def test_today_defaults_to_utc(self) -> None:
        cfg = SimpleNamespace(date_mode="today", fixed_date="", timezone="UTC")
        now = datetime(2025, 6, 1, 23, 30, tzinfo=timezone.utc)
        self.assertEqual(resolve_today(cfg, now), "2025-06-01")

    def test_today_in_configured_zone(self) -> None:
        cfg = SimpleNamespace(date_mode="today", fixed_date="", timezone="Asia/Kolkata")
        now = datetime(2025, 6, 1, 23, 30, tzinfo=timezone.utc)
        self.assertEqual(resolve_today(cfg, now), "2025-06-02")

    def test_fixed_date(self) -> None:
        cfg = SimpleNamespace(date_mode="fixed", fixed_date="2025-06-10", timezone="UTC")
        self.assertEqual(resolve_today(cfg, datetime.now(timezone.utc)), "2025-06-10")
        with self.assertRaises(ValueError):
            resolve_today(SimpleNamespace(date_mode="fixed", fixed_date="", timezone="UTC"), datetime.now(timezone.utc))


class MessageTests(unittest.TestCase):
    def test_new_date_message(self) -> None:
        item = WatchlistItem(id="m1", movie="Dune", cinema="PVR Priya", url="https://example/movie")
        text = format_new_date_message(item, "2025-06-05")
        self.assertIn("Dune", text)
        self.assertIn("PVR Priya", text)
        self.assertIn("Latest date: Thursday, June 5, 2025", text)
        self.assertIn("https://example/movie", text)

    def test_heartbeat_message(self) -> None:
        now = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
        text = format_heartbeat_message(3, now)
        self.assertIn("Active watchers: 3", text)
        self.assertIn("2025-06-01T12:00:00+00:00", text)

    def test_all_expired_message_lists_items(self) -> None:
        item = WatchlistItem(
            id="m1",
            movie="Dune",
            cinema="PVR Priya",
            url="u",
            expires_at=datetime(2025, 5, 31, tzinfo=timezone.utc),
        )
        text = format_all_expired_message([item])
        self.assertIn("Dune @ PVR Priya (expired 2025-05-31)", text)


if __name__ == "__main__":
    unittest.main()
