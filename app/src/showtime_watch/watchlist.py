import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .models import WatchlistItem


def _parse_expiry(raw: Any, item_id: str) -> datetime | None:
    if raw is None or raw == "":
        return None
    try:
        parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(f"watchlist item {item_id!r}: invalid expiresAt {raw!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_enabled(raw: Any, item_id: str) -> bool:
    if raw is None:
        return True
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        val = raw.strip().lower()
        if val in ("1", "true", "yes", "on"):
            return True
        if val in ("0", "false", "no", "off"):
            return False
    raise ValueError(f"watchlist item {item_id!r}: invalid enabled {raw!r}")


def _parse_item(raw: Dict[str, Any], index: int) -> WatchlistItem:
    if not isinstance(raw, dict):
        raise ValueError(f"watchlist entry #{index} is not an object")
    item_id = str(raw.get("id") or "").strip()
    if not item_id:
        raise ValueError(f"watchlist entry #{index} has no id")
    url = str(raw.get("url") or "").strip()
    if not url:
        raise ValueError(f"watchlist item {item_id!r} has no url")
    expiry_raw = raw.get("expiresAt", raw.get("expires_at"))
    return WatchlistItem(
        id=item_id,
        movie=str(raw.get("movie") or ""),
        cinema=str(raw.get("cinema") or ""),
        url=url,
        enabled=_parse_enabled(raw.get("enabled"), item_id),
        expires_at=_parse_expiry(expiry_raw, item_id),
    )


def parse_watchlist(data: Any) -> List[WatchlistItem]:
    if not isinstance(data, list):
        raise ValueError("watchlist must be a JSON list of watcher objects")
    items: List[WatchlistItem] = []
    seen: set[str] = set()
    for index, raw in enumerate(data):
        item = _parse_item(raw, index)
        if item.id in seen:
            raise ValueError(f"duplicate watchlist id {item.id!r}")
        seen.add(item.id)
        items.append(item)
    return items


def load_watchlist(path: Path) -> List[WatchlistItem]:
    items = parse_watchlist(json.loads(path.read_text("utf-8")))
    logging.getLogger(__name__).info(
        "watchlist_loaded path=%s items_total=%s enabled=%s",
        path,
        len(items),
        sum(1 for i in items if i.enabled),
    )
    return items


def is_expired(item: WatchlistItem, now: datetime) -> bool:
    if item.expires_at is None:
        return False
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return item.expires_at < now


def split_active(items: List[WatchlistItem], now: datetime) -> Tuple[List[WatchlistItem], List[WatchlistItem]]:
    """Return ``(active, expired)``; disabled items appear in neither list."""
    active = [i for i in items if i.enabled and not is_expired(i, now)]
    expired = [i for i in items if i.enabled and is_expired(i, now)]
    return active, expired
