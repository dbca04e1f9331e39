from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv
import logging
import os

load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
)
DEFAULT_WORKFLOW_FILE = "watch.yml"

@dataclass(frozen=True)
class Config:
    watchlist_path: Path
    state_path: Path
    date_mode: str
    fixed_date: str
    timezone: str

    telegram_bot_token: str
    telegram_chat_id: str
    heartbeat_enabled: bool

    allow_auto_disable: bool
    github_repository: str
    github_token: str
    workflow_file: str

    state_commit_enabled: bool
    git_repo_dir: Path
    git_user_name: str
    git_user_email: str
    state_commit_message: str

    request_delay_seconds: float
    request_timeout_seconds: float
    user_agent: str
    legacy_watcher_id: str | None


def _workflow_file() -> str:
    explicit = os.getenv("WORKFLOW_FILE", "").strip()
    if explicit:
        return explicit
    # owner/repo/.github/workflows/watch.yml@refs/heads/main
    ref = os.getenv("GITHUB_WORKFLOW_REF", "").strip()
    if ref:
        path = ref.split("@", 1)[0]
        name = path.rsplit("/", 1)[-1]
        if name:
            return name
    return DEFAULT_WORKFLOW_FILE


def load_config() -> Config:
    logger = logging.getLogger(__name__)

    def _float(name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        try:
            value = float(raw.strip())
        except ValueError:
            logger.warning("invalid %s=%s, using default=%s", name, raw, default)
            return default
        if value < 0:
            logger.warning("invalid %s=%s, using default=%s", name, raw, default)
            return default
        return value

    def _bool(name: str, default: bool) -> bool:
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        val = raw.strip().lower()
        if val in ("1", "true", "yes", "on"):
            return True
        if val in ("0", "false", "no", "off"):
            return False
        logger.warning(
            "invalid %s=%s, using default=%s",
            name,
            raw,
            default,
        )
        return default

    request_timeout_seconds = _float("REQUEST_TIMEOUT_SECONDS", 30.0)
    if request_timeout_seconds == 0:
        logger.warning("invalid REQUEST_TIMEOUT_SECONDS=0, using default=30")
        request_timeout_seconds = 30.0

    running_in_actions = os.getenv("GITHUB_ACTIONS", "").strip().lower() == "true"

    return Config(
        watchlist_path=Path(os.getenv("WATCHLIST_PATH", "./watchlist.json")),
        state_path=Path(os.getenv("STATE_PATH", "./state.json")),
        date_mode=os.getenv("DATE_MODE", "today").strip().lower(),
        fixed_date=os.getenv("FIXED_DATE", "").strip(),
        timezone=os.getenv("TIMEZONE", "UTC").strip() or "UTC",

        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", "").strip(),
        telegram_chat_id=os.getenv("TELEGRAM_CHAT_ID", "").strip(),
        heartbeat_enabled=_bool("HEARTBEAT_ENABLED", False),

        allow_auto_disable=_bool("ALLOW_AUTO_DISABLE", False),
        github_repository=os.getenv("GITHUB_REPOSITORY", "").strip(),
        github_token=os.getenv("GITHUB_TOKEN", "").strip(),
        workflow_file=_workflow_file(),

        state_commit_enabled=_bool("STATE_COMMIT_ENABLED", running_in_actions),
        git_repo_dir=Path(os.getenv("GIT_REPO_DIR", ".")),
        git_user_name=os.getenv("GIT_USER_NAME", "github-actions[bot]"),
        git_user_email=os.getenv(
            "GIT_USER_EMAIL", "github-actions[bot]@users.noreply.github.com"
        ),
        state_commit_message=os.getenv("STATE_COMMIT_MESSAGE", "chore: update watcher state"),

        request_delay_seconds=_float("REQUEST_DELAY_SECONDS", 2.0),
        request_timeout_seconds=request_timeout_seconds,
        user_agent=os.getenv("USER_AGENT", "").strip() or DEFAULT_USER_AGENT,
        legacy_watcher_id=os.getenv("LEGACY_WATCHER_ID", "").strip() or None,
    )
