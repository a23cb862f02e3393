"""Remote tracker client interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from bounty_sync.errors import RemoteProviderError


@dataclass(frozen=True)
class CreatedIssue:
    url: str
    number: int


@dataclass(frozen=True)
class RemoteIssue:
    title: str
    body: Optional[str]
    owner_id: Any
    assignee_ids: List[Any] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RepositoryDetails:
    id: Any


class RemoteTrackerClient(ABC):
    """Operations the issue service needs from a remote tracker.

    Implementations raise their own RemoteProviderError subclass on any
    upstream failure.
    """

    provider: str = ""

    @abstractmethod
    def create_issue(
        self, owner_path: str, repo_name: str, title: str, body: str, labels: List[str]
    ) -> CreatedIssue:
        raise NotImplementedError

    @abstractmethod
    def get_issue(self, owner_path: str, repo_name: str, number: int) -> RemoteIssue:
        raise NotImplementedError

    @abstractmethod
    def get_repository_details(self, owner_path: str, repo_name: str) -> RepositoryDetails:
        raise NotImplementedError

    @abstractmethod
    def is_already_exists(self, err: RemoteProviderError) -> bool:
        """Whether a create failure means the issue/label already exists upstream."""
        raise NotImplementedError
