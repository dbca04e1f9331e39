import logging
import subprocess
from pathlib import Path
from typing import List


class StatePersister:
    def persist(self, path: Path) -> None:
        raise NotImplementedError


class NullPersister(StatePersister):
    def persist(self, path: Path) -> None:
        return None


class GitStatePersister(StatePersister):
    """Commits and pushes the state file. Best effort: failures are only logged."""

    def __init__(
        self,
        repo_dir: Path,
        user_name: str,
        user_email: str,
        message: str,
        logger: logging.Logger,
    ) -> None:
        self._repo_dir = repo_dir
        self._user_name = user_name
        self._user_email = user_email
        self._message = message
        self._logger = logger

    def _git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        cmd: List[str] = ["git", *args]
        return subprocess.run(
            cmd,
            cwd=self._repo_dir,
            check=check,
            capture_output=True,
            text=True,
        )

    def persist(self, path: Path) -> None:
        target = str(Path(path).resolve())
        try:
            self._git("config", "user.name", self._user_name)
            self._git("config", "user.email", self._user_email)
            self._git("add", target)
            staged = self._git("diff", "--cached", "--quiet", "--", target, check=False)
            if staged.returncode == 0:
                self._logger.info("state_commit_skipped path=%s reason=no_changes", path)
                return
            self._git("commit", "-m", self._message)
            self._git("push")
            self._logger.info("state_committed path=%s", path)
        except subprocess.CalledProcessError as exc:
            self._logger.info(
                "state_commit_failed path=%s cmd=%s returncode=%s stderr=%s",
                path,
                " ".join(exc.cmd) if isinstance(exc.cmd, (list, tuple)) else exc.cmd,
                exc.returncode,
                (exc.stderr or "").strip(),
            )
        except OSError:
            self._logger.info("state_commit_failed path=%s reason=git_unavailable", path, exc_info=True)


def build_persister(config, logger: logging.Logger) -> StatePersister:
    if not getattr(config, "state_commit_enabled", False):
        logger.info("state_commit_disabled")
        return NullPersister()
    logger.info("state_commit_enabled repo_dir=%s", config.git_repo_dir)
    return GitStatePersister(
        repo_dir=config.git_repo_dir,
        user_name=config.git_user_name,
        user_email=config.git_user_email,
        message=config.state_commit_message,
        logger=logger,
    )
