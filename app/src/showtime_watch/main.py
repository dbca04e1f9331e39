import logging
import os
import sys
from functools import partial
from time import perf_counter

import requests

from .config import load_config
from .github import GitHubWorkflowDisabler
from .logging_utils import setup_logging, new_run_id, set_run_id
from .persist import build_persister
from .scraper import DateFetcher
from .state import JsonFileStateStore
from .telegram import build_notifier
from .time_utils import format_duration, local_day, resolve_today
from .watcher import Watcher
from .watchlist import load_watchlist


def build_watcher(cfg, logger: logging.Logger, session: requests.Session) -> Watcher:
    logger.info(
        "run_config watchlist=%s state=%s heartbeat_enabled=%s allow_auto_disable=%s state_commit_enabled=%s timezone=%s date_mode=%s",
        cfg.watchlist_path,
        cfg.state_path,
        cfg.heartbeat_enabled,
        cfg.allow_auto_disable,
        cfg.state_commit_enabled,
        cfg.timezone,
        cfg.date_mode,
    )
    return Watcher(
        load_watchlist=partial(load_watchlist, cfg.watchlist_path),
        store=JsonFileStateStore(cfg.state_path, cfg.legacy_watcher_id),
        fetcher=DateFetcher(session, cfg.user_agent, cfg.request_timeout_seconds),
        notifier=build_notifier(cfg, session, logger),
        resolve_today=partial(resolve_today, cfg),
        calendar_day=partial(local_day, cfg),
        heartbeat_enabled=cfg.heartbeat_enabled,
        allow_auto_disable=cfg.allow_auto_disable,
        disabler=GitHubWorkflowDisabler(
            session,
            cfg.github_repository,
            cfg.workflow_file,
            cfg.github_token,
            cfg.request_timeout_seconds,
        ),
        persister=build_persister(cfg, logger),
        request_delay_seconds=cfg.request_delay_seconds,
    )


def main() -> int:
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))
    logger = logging.getLogger(__name__)
    set_run_id(new_run_id())

    start_ts = perf_counter()
    logger.info("run_started")
    try:
        cfg = load_config()
        with requests.Session() as session:
            result = build_watcher(cfg, logger, session).run()
    except Exception:
        logger.exception("run_failed duration_human=%s", format_duration(perf_counter() - start_ts))
        return 1

    logger.info(
        "run_completed duration_human=%s %s",
        format_duration(perf_counter() - start_ts),
        " ".join(f"{k}={v}" for k, v in result.items()),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
