from datetime import datetime
from typing import List

from .models import WatchlistItem
from .time_utils import format_long_date


def format_new_date_message(item: WatchlistItem, new_date: str) -> str:
    lines = ["🎬 New show dates available!", ""]
    if item.movie:
        lines.append(f"🎞 {item.movie}")
    if item.cinema:
        lines.append(f"📍 {item.cinema}")
    lines.append(f"📅 Latest date: {format_long_date(new_date)}")
    lines.extend(["", f"🔗 {item.url}", "", "Book fast 👀"])
    return "\n".join(lines)


def format_heartbeat_message(active_count: int, now: datetime) -> str:
    return (
        "💓 Showtime watcher is alive\n\n"
        f"Active watchers: {active_count}\n"
        f"Checked at: {now.isoformat(timespec='seconds')}"
    )


def format_all_expired_message(expired: List[WatchlistItem]) -> str:
    lines = ["⏹ All watchers have expired or are disabled."]
    if expired:
        lines.append("")
        for item in expired:
            label = " @ ".join(p for p in (item.movie, item.cinema) if p) or item.id
            until = item.expires_at.date().isoformat() if item.expires_at else "?"
            lines.append(f"• {label} (expired {until})")
    lines.extend(["", "Update the watchlist to resume checks."])
    return "\n".join(lines)
