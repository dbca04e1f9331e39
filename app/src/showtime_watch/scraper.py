import logging
from time import perf_counter
from typing import List
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from .extractor import DateExtractor, FromDateLinkExtractor


def build_listing_url(base_url: str, today: str) -> str:
    parts = urlsplit(base_url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "fromdate"]
    query.append(("fromdate", today))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


class DateFetcher:
    def __init__(
        self,
        session: requests.Session,
        user_agent: str,
        timeout_seconds: float,
        extractor: DateExtractor | None = None,
    ) -> None:
        self._session = session
        self._user_agent = user_agent
        self._timeout = timeout_seconds
        self._extractor = extractor or FromDateLinkExtractor()

    def fetch_dates(self, base_url: str, today: str) -> List[str]:
        logger = logging.getLogger(__name__)
        url = build_listing_url(base_url, today)
        logger.info("fetch_start url=%s", url)
        start_ts = perf_counter()
        resp = self._session.get(
            url,
            headers={"User-Agent": self._user_agent},
            timeout=self._timeout,
        )
        resp.raise_for_status()
        dates = sorted(self._extractor.extract(resp.text))
        logger.info(
            "fetch_end url=%s status=%s duration_ms=%s dates_found=%s",
            url,
            resp.status_code,
            int((perf_counter() - start_ts) * 1000),
            len(dates),
        )
        return dates
