import logging

import requests

GITHUB_API = "https://api.github.com"


class WorkflowDisabler:
    def validate(self) -> None:
        return None

    def disable(self) -> None:
        raise NotImplementedError


class GitHubWorkflowDisabler(WorkflowDisabler):
    def __init__(
        self,
        session: requests.Session,
        repository: str,
        workflow_file: str,
        token: str,
        timeout_seconds: float,
    ) -> None:
        self._session = session
        self._repository = repository
        self._workflow_file = workflow_file
        self._token = token
        self._timeout = timeout_seconds

    def validate(self) -> None:
        if not self._repository or not self._token:
            raise ValueError("GITHUB_REPOSITORY and GITHUB_TOKEN are required to disable the workflow")

    def disable(self) -> None:
        self.validate()
        url = f"{GITHUB_API}/repos/{self._repository}/actions/workflows/{self._workflow_file}/disable"
        resp = self._session.put(
            url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self._token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=self._timeout,
        )
        resp.raise_for_status()
        logging.getLogger(__name__).info(
            "workflow_disabled repository=%s workflow=%s status=%s",
            self._repository,
            self._workflow_file,
            resp.status_code,
        )
