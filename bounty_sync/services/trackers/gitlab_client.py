"""GitLab API client wrapper"""
import gitlab
import logging
from typing import Any, List, Optional

from bounty_sync.errors import RemoteProviderError
from bounty_sync.services.trackers.base import (
    CreatedIssue,
    RemoteIssue,
    RemoteTrackerClient,
    RepositoryDetails,
)

logger = logging.getLogger(__name__)

ALREADY_EXISTS_MESSAGES = ("Label already exists",)


class GitLabProviderError(RemoteProviderError):
    provider = "gitlab"


def _error_message(exc: gitlab.exceptions.GitlabError) -> Optional[str]:
    """GitLab returns either a string or {"message": ...} as the error body."""
    message = getattr(exc, "error_message", None)
    if isinstance(message, dict):
        message = message.get("message", message)
    return None if message is None else str(message)


class GitLabClient(RemoteTrackerClient):
    """Wrapper for GitLab API operations"""

    provider = "gitlab"

    def __init__(self, url: str, access_token: str):
        """Initialize GitLab client"""
        self.url = url
        self.gl = gitlab.Gitlab(url, oauth_token=access_token)
        try:
            self.gl.auth()
        except gitlab.exceptions.GitlabError as e:
            logger.error(f"Failed to authenticate against {url}: {e}")
            raise self._translate(e, "Failed to authenticate.") from e

    @staticmethod
    def _translate(exc: gitlab.exceptions.GitlabError, context: str) -> GitLabProviderError:
        message = _error_message(exc)
        return GitLabProviderError(
            f"{context} GitLab error: {message}",
            upstream_status=getattr(exc, "response_code", None),
            upstream_message=message,
        )

    def get_project(self, owner_path: str, repo_name: str) -> Any:
        """Get project by its full path"""
        return self.gl.projects.get(f"{owner_path}/{repo_name}")

    def create_issue(
        self, owner_path: str, repo_name: str, title: str, body: str, labels: List[str]
    ) -> CreatedIssue:
        """Create a new issue"""
        try:
            project = self.get_project(owner_path, repo_name)
            payload = {"title": title, "description": body}
            # GitLab API expects comma-separated string for `labels`.
            if labels:
                payload["labels"] = ",".join(labels)
            issue = project.issues.create(payload)
        except gitlab.exceptions.GitlabError as e:
            logger.error(f"Failed to create issue in project {owner_path}/{repo_name}: {e}")
            raise self._translate(e, "Failed to create issue.") from e
        logger.info(f"Created issue #{issue.iid} in project {owner_path}/{repo_name}")
        return CreatedIssue(url=issue.web_url, number=issue.iid)

    def get_issue(self, owner_path: str, repo_name: str, number: int) -> RemoteIssue:
        """Get a specific issue by IID"""
        try:
            project = self.get_project(owner_path, repo_name)
            issue = project.issues.get(number)
        except gitlab.exceptions.GitlabError as e:
            logger.error(f"Failed to get issue {number} from project {owner_path}/{repo_name}: {e}")
            raise self._translate(e, "Failed to get issue.") from e

        author = getattr(issue, "author", None) or {}
        assignees = getattr(issue, "assignees", None) or []
        return RemoteIssue(
            title=issue.title,
            body=getattr(issue, "description", None),
            owner_id=author.get("id"),
            assignee_ids=[a.get("id") for a in assignees],
            labels=list(getattr(issue, "labels", None) or []),
        )

    def get_repository_details(self, owner_path: str, repo_name: str) -> RepositoryDetails:
        """Get project metadata"""
        try:
            project = self.get_project(owner_path, repo_name)
        except gitlab.exceptions.GitlabError as e:
            logger.error(f"Failed to get project {owner_path}/{repo_name}: {e}")
            raise self._translate(e, "Failed to get project.") from e
        return RepositoryDetails(id=project.id)

    def is_already_exists(self, err: RemoteProviderError) -> bool:
        return err.upstream_message in ALREADY_EXISTS_MESSAGES
