from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    total = int(round(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def local_day(cfg, now: datetime) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(cfg.timezone)).date().isoformat()


def resolve_today(cfg, now: datetime) -> str:
    if cfg.date_mode == "fixed":
        if not cfg.fixed_date:
            raise ValueError("DATE_MODE=fixed but FIXED_DATE is empty")
        return date.fromisoformat(cfg.fixed_date).isoformat()
    return local_day(cfg, now)


def format_long_date(value: str) -> str:
    # Thursday, June 5, 2025
    d = date.fromisoformat(value)
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"
