"""Change detection over the watchlist.

One ``Watcher.run()`` is one scheduled execution: load the watchlist and the
last-seen state, handle the all-expired shutdown, send the daily heartbeat,
then check every active watcher in order and flush state once at the end.
"""
import logging
import time
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional

from .messages import format_all_expired_message, format_heartbeat_message, format_new_date_message
from .models import Decision, WatchlistItem
from .persist import NullPersister, StatePersister
from .state import ALL_EXPIRED_NOTIFIED_AT, LAST_HEARTBEAT_DATE, State, StateStore, serialize_state
from .telegram import Notifier
from .watchlist import split_active


def evaluate(previous: Optional[str], dates: List[str]) -> Decision:
    if not dates:
        return Decision(action="skip", previous=previous)
    current = max(dates, key=date.fromisoformat)
    if previous is None:
        return Decision(action="seed", max_date=current)
    if date.fromisoformat(current) > date.fromisoformat(previous):
        return Decision(action="notify", max_date=current, previous=previous)
    return Decision(action="unchanged", max_date=current, previous=previous)


def maybe_send_heartbeat(
    state: State,
    notifier: Notifier,
    *,
    enabled: bool,
    today: str,
    now: datetime,
    active_count: int,
) -> bool:
    if not enabled:
        return False
    if state.meta.get(LAST_HEARTBEAT_DATE) == today:
        return False
    notifier.send(format_heartbeat_message(active_count, now))
    state.meta[LAST_HEARTBEAT_DATE] = today
    logging.getLogger(__name__).info("heartbeat_sent date=%s active=%s", today, active_count)
    return True


class Watcher:
    def __init__(
        self,
        *,
        load_watchlist: Callable[[], List[WatchlistItem]],
        store: StateStore,
        fetcher,
        notifier: Notifier,
        resolve_today: Callable[[datetime], str],
        calendar_day: Optional[Callable[[datetime], str]] = None,
        heartbeat_enabled: bool = False,
        allow_auto_disable: bool = False,
        disabler=None,
        persister: Optional[StatePersister] = None,
        request_delay_seconds: float = 0.0,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._load_watchlist = load_watchlist
        self._store = store
        self._fetcher = fetcher
        self._notifier = notifier
        self._resolve_today = resolve_today
        # heartbeat debounce follows the wall clock even when "today" is pinned
        self._calendar_day = calendar_day or resolve_today
        self._heartbeat_enabled = heartbeat_enabled
        self._allow_auto_disable = allow_auto_disable
        self._disabler = disabler
        self._persister = persister or NullPersister()
        self._delay = request_delay_seconds
        self._now = now
        self._sleep = sleep
        self._logger = logging.getLogger(__name__)

    def check_item(self, item: WatchlistItem, state: State, today: str) -> Decision:
        dates = self._fetcher.fetch_dates(item.url, today)
        decision = evaluate(state.last_max_date(item.id), dates)
        self._logger.info(
            "watcher_check id=%s dates_found=%s max_date=%s previous=%s action=%s",
            item.id,
            len(dates),
            decision.max_date,
            decision.previous,
            decision.action,
        )
        if decision.action == "seed":
            state.set_last_max_date(item.id, decision.max_date)
        elif decision.action == "notify":
            self._notifier.send(format_new_date_message(item, decision.max_date))
            state.set_last_max_date(item.id, decision.max_date)
        return decision

    def _send_all_expired_notice(self, state: State, expired: List[WatchlistItem], now: datetime) -> None:
        self._notifier.send(format_all_expired_message(expired))
        state.meta[ALL_EXPIRED_NOTIFIED_AT] = now.isoformat(timespec="seconds")
        self._logger.info("all_expired_notice_sent expired=%s", len(expired))

    def _handle_all_expired(self, state: State, expired: List[WatchlistItem], now: datetime) -> Dict[str, int]:
        if self._allow_auto_disable:
            if self._disabler is None:
                raise RuntimeError("auto-disable is allowed but no workflow disabler is configured")
            # credentials are checked before the notice goes out
            self._disabler.validate()
            self._send_all_expired_notice(state, expired, now)
            self._disabler.disable()
            return {"all_expired_notified": 1, "workflow_disabled": 1}

        notified = 0
        if state.meta.get(ALL_EXPIRED_NOTIFIED_AT):
            self._logger.info(
                "all_expired_notice_already_sent at=%s",
                state.meta[ALL_EXPIRED_NOTIFIED_AT],
            )
        else:
            self._send_all_expired_notice(state, expired, now)
            notified = 1
        self._logger.info("auto_disable_not_allowed action=none")
        return {"all_expired_notified": notified, "workflow_disabled": 0}

    def _flush(self, state: State, before: str) -> bool:
        if serialize_state(state) == before:
            self._logger.info("state_unchanged")
            return False
        self._store.save(state)
        if self._store.path is not None:
            self._persister.persist(self._store.path)
        return True

    def run(self) -> dict:
        now = self._now()
        today = self._resolve_today(now)
        items = self._load_watchlist()
        state = self._store.load()
        before = serialize_state(state)

        active, expired = split_active(items, now)
        self._logger.info(
            "run_start today=%s watchers_total=%s active=%s expired=%s",
            today,
            len(items),
            len(active),
            len(expired),
        )
        result = {
            "watchers_total": len(items),
            "watchers_active": len(active),
            "checked": 0,
            "seeded": 0,
            "notified": 0,
            "skipped": 0,
            "heartbeat_sent": 0,
            "all_expired": 0,
            "all_expired_notified": 0,
            "workflow_disabled": 0,
            "state_changed": 0,
        }

        if not active:
            result["all_expired"] = 1
            result.update(self._handle_all_expired(state, expired, now))
            result["state_changed"] = int(self._flush(state, before))
            return result

        state.meta.pop(ALL_EXPIRED_NOTIFIED_AT, None)

        if maybe_send_heartbeat(
            state,
            self._notifier,
            enabled=self._heartbeat_enabled,
            today=self._calendar_day(now),
            now=now,
            active_count=len(active),
        ):
            result["heartbeat_sent"] = 1

        for index, item in enumerate(active):
            if index and self._delay > 0:
                self._sleep(self._delay)
            decision = self.check_item(item, state, today)
            result["checked"] += 1
            if decision.action == "seed":
                result["seeded"] += 1
            elif decision.action == "notify":
                result["notified"] += 1
            elif decision.action == "skip":
                result["skipped"] += 1

        result["state_changed"] = int(self._flush(state, before))
        return result
