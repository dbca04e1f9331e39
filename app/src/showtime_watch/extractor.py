import re
from datetime import date
from typing import Set

from bs4 import BeautifulSoup

FROMDATE_RE = re.compile(r"fromdate=(\d{4}-\d{2}-\d{2})")


class DateExtractor:
    """Turns a listing page into the set of bookable ISO dates it links to."""

    def extract(self, html: str) -> Set[str]:
        raise NotImplementedError


class FromDateLinkExtractor(DateExtractor):
    """Reads dates from the day-picker links, e.g. ``?fromdate=2025-06-05``."""

    def __init__(self, selector: str = 'a[href*="fromdate="]') -> None:
        self.selector = selector

    def extract(self, html: str) -> Set[str]:
        soup = BeautifulSoup(html or "", "html.parser")
        dates: Set[str] = set()
        for a in soup.select(self.selector):
            href = a.get("href") or ""
            match = FROMDATE_RE.search(href)
            if not match:
                continue
            token = match.group(1)
            try:
                date.fromisoformat(token)
            except ValueError:
                continue
            dates.add(token)
        return dates
