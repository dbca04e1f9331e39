import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

META_KEY = "_meta"
LAST_MAX_DATE = "lastMaxDate"
LAST_HEARTBEAT_DATE = "lastHeartbeatDate"
ALL_EXPIRED_NOTIFIED_AT = "allExpiredNotifiedAt"

@dataclass
class State:
    # watcher id -> {"lastMaxDate": "YYYY-MM-DD"}
    watchers: Dict[str, Dict[str, str]] = field(default_factory=dict)
    # reserved "_meta" entry: lastHeartbeatDate, allExpiredNotifiedAt
    meta: Dict[str, str] = field(default_factory=dict)

    def last_max_date(self, watcher_id: str) -> Optional[str]:
        entry = self.watchers.get(watcher_id) or {}
        return entry.get(LAST_MAX_DATE) or None

    def set_last_max_date(self, watcher_id: str, value: str) -> None:
        self.watchers.setdefault(watcher_id, {})[LAST_MAX_DATE] = value

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {k: dict(v) for k, v in self.watchers.items()}
        if self.meta:
            data[META_KEY] = dict(self.meta)
        return data


def state_from_dict(data: Any, legacy_watcher_id: Optional[str] = None) -> State:
    logger = logging.getLogger(__name__)
    if not isinstance(data, dict):
        raise ValueError("state must be a JSON object")
    state = State()
    for key, value in data.items():
        if key == META_KEY:
            if isinstance(value, dict):
                state.meta = {str(k): str(v) for k, v in value.items() if v is not None}
            continue
        if key == LAST_MAX_DATE:
            # single-watcher layout: {"lastMaxDate": "..."}
            if value and legacy_watcher_id:
                state.watchers.setdefault(legacy_watcher_id, {}).setdefault(LAST_MAX_DATE, str(value))
                logger.info("state_legacy_migrated watcher_id=%s last_max_date=%s", legacy_watcher_id, value)
            elif value:
                logger.warning("state_legacy_ignored last_max_date=%s reason=no_legacy_watcher_id", value)
            continue
        if isinstance(value, dict):
            state.watchers[str(key)] = {str(k): str(v) for k, v in value.items() if v is not None}
        else:
            logger.warning("state_entry_ignored key=%s", key)
    return state


def serialize_state(state: State) -> str:
    return json.dumps(state.to_dict(), ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def load_state(path: Path, legacy_watcher_id: Optional[str] = None) -> State:
    logger = logging.getLogger(__name__)
    if not path.exists():
        logger.info("state_load_miss path=%s", path)
        return State()
    state = state_from_dict(json.loads(path.read_text("utf-8")), legacy_watcher_id)
    logger.info(
        "state_load_hit path=%s watchers=%s meta_keys=%s",
        path,
        len(state.watchers),
        ",".join(sorted(state.meta)),
    )
    return state


def save_state(path: Path, state: State) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_state(state), "utf-8")
    logging.getLogger(__name__).info(
        "state_saved path=%s watchers=%s",
        path,
        len(state.watchers),
    )


class StateStore:
    path: Optional[Path] = None

    def load(self) -> State:
        raise NotImplementedError

    def save(self, state: State) -> None:
        raise NotImplementedError


class JsonFileStateStore(StateStore):
    def __init__(self, path: Path, legacy_watcher_id: Optional[str] = None) -> None:
        self.path = path
        self._legacy_watcher_id = legacy_watcher_id

    def load(self) -> State:
        return load_state(self.path, self._legacy_watcher_id)

    def save(self, state: State) -> None:
        save_state(self.path, state)


class MemoryStateStore(StateStore):
    """Keeps the serialized form so tests can compare saved bytes."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self.saved: Optional[str] = serialize_state(state_from_dict(initial)) if initial is not None else None
        self.save_count = 0

    def load(self) -> State:
        if self.saved is None:
            return State()
        return state_from_dict(json.loads(self.saved))

    def save(self, state: State) -> None:
        self.saved = serialize_state(state)
        self.save_count += 1

    def as_dict(self) -> Dict[str, Any]:
        return json.loads(self.saved) if self.saved is not None else {}
