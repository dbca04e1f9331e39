from dataclasses import dataclass
from datetime import datetime
from typing import Literal

@dataclass(frozen=True)
class WatchlistItem:
    id: str
    movie: str
    cinema: str
    url: str                                # base listing URL, without fromdate
    enabled: bool = True
    expires_at: datetime | None = None      # timezone-aware

DecisionAction = Literal["skip", "seed", "notify", "unchanged"]

@dataclass(frozen=True)
class Decision:
    action: DecisionAction
    max_date: str | None = None     # newest fetched date (YYYY-MM-DD)
    previous: str | None = None     # stored lastMaxDate before this check
