"""Repository URL parsing and provider detection"""

from typing import Dict, Mapping, Tuple
from urllib.parse import urlparse

from bounty_sync.errors import MalformedUrlError, UnsupportedProviderError

GITHUB = "github"
GITLAB = "gitlab"

DEFAULT_PROVIDER_HOSTS: Dict[str, str] = {
    "github.com": GITHUB,
    "gitlab.com": GITLAB,
}


def parse_repo_url(repo_url: str) -> Tuple[str, str]:
    """Split a repository URL into (owner_path, repo_name).

    `repo_name` is the last path segment; `owner_path` is every segment between
    the host and the last one, so nested groups ("org/team/sub") are kept.
    Trailing slashes and ".git" suffixes are not normalized.
    """
    parsed = urlparse(repo_url or "")
    if not parsed.scheme or not parsed.netloc:
        raise MalformedUrlError(f"Repository URL has no scheme or host: {repo_url!r}")

    segments = parsed.path.split("/")[1:]
    if len(segments) < 2:
        raise MalformedUrlError(f"Repository URL has no owner/name path: {repo_url!r}")
    if any(not s for s in segments):
        raise MalformedUrlError(f"Repository URL has an empty path segment: {repo_url!r}")

    return "/".join(segments[:-1]), segments[-1]


def get_provider_type(repo_url: str, hosts: Mapping[str, str] = DEFAULT_PROVIDER_HOSTS) -> str:
    """Return the provider tag for the repository host."""
    host = (urlparse(repo_url or "").hostname or "").lower()
    provider = hosts.get(host)
    if provider is None:
        raise UnsupportedProviderError(f"Unsupported repository host: {host or repo_url!r}")
    return provider
