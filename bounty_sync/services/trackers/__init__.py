"""Remote tracker clients"""

from bounty_sync.services.repo_url import GITHUB, GITLAB
from bounty_sync.services.trackers.base import (
    CreatedIssue,
    RemoteIssue,
    RemoteTrackerClient,
    RepositoryDetails,
)
from bounty_sync.services.trackers.github_client import GitHubClient, GitHubProviderError
from bounty_sync.services.trackers.gitlab_client import GitLabClient, GitLabProviderError
from bounty_sync.errors import UnsupportedProviderError


def create_tracker_client(provider: str, access_token: str, config) -> RemoteTrackerClient:
    """Build the tracker client variant for `provider`.

    This is the only place a provider tag is mapped to a client class.
    """
    if provider == GITHUB:
        return GitHubClient(
            access_token, base_url=config.github_api_base_url, timeout=config.http_timeout_seconds
        )
    if provider == GITLAB:
        return GitLabClient(config.gitlab_api_base_url, access_token)
    raise UnsupportedProviderError(f"Unsupported provider: {provider}")


__all__ = [
    "CreatedIssue",
    "RemoteIssue",
    "RemoteTrackerClient",
    "RepositoryDetails",
    "GitHubClient",
    "GitHubProviderError",
    "GitLabClient",
    "GitLabProviderError",
    "create_tracker_client",
]
