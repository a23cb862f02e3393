"""GitHub REST API client"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from bounty_sync.errors import RemoteProviderError
from bounty_sync.services.trackers.base import (
    CreatedIssue,
    RemoteIssue,
    RemoteTrackerClient,
    RepositoryDetails,
)

logger = logging.getLogger(__name__)

ALREADY_EXISTS_CODE = "already_exists"


class GitHubProviderError(RemoteProviderError):
    """GitHub API failure, keeping the upstream `errors` list"""

    provider = "github"

    def __init__(
        self,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        upstream_message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message, upstream_status=upstream_status, upstream_message=upstream_message)
        self.errors = list(errors or [])


class GitHubClient(RemoteTrackerClient):
    """Wrapper for GitHub API operations"""

    provider = "github"

    def __init__(self, access_token: str, base_url: str = "https://api.github.com", timeout: float = 30.0):
        """Initialize GitHub client"""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"token {access_token}",
            }
        )

    @staticmethod
    def _repo_path(owner_path: str, repo_name: str) -> str:
        return f"/repos/{quote(owner_path)}/{quote(repo_name, safe='')}"

    def _request(self, method: str, path: str, context: str, **kwargs) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Any transport error or non-2xx answer becomes a GitHubProviderError
        whose message is prefixed with `context`.
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise GitHubProviderError(f"{context} GitHub error: {e}") from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            upstream_message = body.get("message") or response.text
            logger.error(f"{method} {url} returned {response.status_code}: {upstream_message}")
            raise GitHubProviderError(
                f"{context} GitHub error: {upstream_message}",
                upstream_status=response.status_code,
                upstream_message=upstream_message,
                errors=body.get("errors") if isinstance(body.get("errors"), list) else None,
            )
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"{method} {url} returned a non-JSON body")
            raise GitHubProviderError(
                f"{context} GitHub error: invalid JSON response",
                upstream_status=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise GitHubProviderError(
                f"{context} GitHub error: unexpected response body",
                upstream_status=response.status_code,
            )
        return data

    @staticmethod
    def _require(data: Dict[str, Any], key: str, context: str) -> Any:
        """Return a field every successful response carries, raising if it is absent."""
        value = data.get(key)
        if value is None:
            raise GitHubProviderError(f"{context} GitHub error: response is missing '{key}'")
        return value

    def create_issue(
        self, owner_path: str, repo_name: str, title: str, body: str, labels: List[str]
    ) -> CreatedIssue:
        """Create a new issue"""
        data = self._request(
            "POST",
            f"{self._repo_path(owner_path, repo_name)}/issues",
            "Failed to create issue.",
            json={"title": title, "body": body, "labels": list(labels)},
        )
        created = CreatedIssue(
            url=self._require(data, "html_url", "Failed to create issue."),
            number=self._require(data, "number", "Failed to create issue."),
        )
        logger.info(f"Created issue #{created.number} in {owner_path}/{repo_name}")
        return created

    def get_issue(self, owner_path: str, repo_name: str, number: int) -> RemoteIssue:
        """Get a specific issue by number"""
        data = self._request(
            "GET",
            f"{self._repo_path(owner_path, repo_name)}/issues/{int(number)}",
            "Failed to find the issue.",
        )
        labels = []
        for label in data.get("labels") or []:
            # GitHub returns label objects, but older payloads may carry plain names.
            labels.append(label.get("name") if isinstance(label, dict) else str(label))
        return RemoteIssue(
            title=data.get("title"),
            body=data.get("body"),
            owner_id=(data.get("user") or {}).get("id"),
            assignee_ids=[a.get("id") for a in data.get("assignees") or []],
            labels=labels,
        )

    def get_repository_details(self, owner_path: str, repo_name: str) -> RepositoryDetails:
        """Get repository metadata"""
        data = self._request(
            "GET", self._repo_path(owner_path, repo_name), "Failed to find the issue."
        )
        return RepositoryDetails(id=self._require(data, "id", "Failed to find the issue."))

    def is_already_exists(self, err: RemoteProviderError) -> bool:
        errors = getattr(err, "errors", None) or []
        return any(isinstance(e, dict) and e.get("code") == ALREADY_EXISTS_CODE for e in errors)
