import contextvars
import logging
import sys
import uuid

_run_id: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s run_id=%(run_id)s %(message)s"


class RunIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _run_id.get()
        return True


def new_run_id() -> str:
    return uuid.uuid4().hex[:12]


def set_run_id(run_id: str) -> None:
    _run_id.set(run_id)


def get_run_id() -> str:
    return _run_id.get()


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    root.setLevel(resolved)

    # Re-running setup (tests, repeated main()) must not stack handlers.
    for handler in list(root.handlers):
        if getattr(handler, "_showtime_watch", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler._showtime_watch = True
    handler.addFilter(RunIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # requests/urllib3 debug output is noisy and may include tokens in URLs.
    logging.getLogger("urllib3").setLevel(max(resolved, logging.WARNING))
