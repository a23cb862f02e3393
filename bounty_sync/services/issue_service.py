"""Issue search, creation and recreation"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from bounty_sync.config import Settings
from bounty_sync.errors import NotFoundError, RemoteProviderError, ValidationError
from bounty_sync.models import Issue, Project
from bounty_sync.schemas import IssueCreate, IssueRecreate, SearchCriteria, parse_request
from bounty_sync.security import CurrentUser
from bounty_sync.services.datastore import Datastore
from bounty_sync.services.events import (
    ISSUE_CREATED,
    ISSUE_RECREATED,
    EventPublisher,
    build_issue_event,
    serialize_event,
)
from bounty_sync.services.permissions import ensure_edit_permission
from bounty_sync.services.repo_url import (
    DEFAULT_PROVIDER_HOSTS,
    GITHUB,
    GITLAB,
    get_provider_type,
    parse_repo_url,
)
from bounty_sync.services.trackers import RemoteTrackerClient, create_tracker_client

logger = logging.getLogger(__name__)

ASSIGNED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"

# Sort keys over enriched search documents.
_SORT_KEYS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "title": lambda doc: doc["title"],
    "projectTitle": lambda doc: doc["project"]["title"],
    "updatedAt": lambda doc: doc["updated_at"],
    "assignee": lambda doc: doc["assignee"],
    "assignedAt": lambda doc: doc["assigned_at"],
}


@dataclass(frozen=True)
class IssueServiceConfig:
    """Static configuration handed to IssueService"""

    open_for_pickup_label: str = "Open for pickup"
    admin_roles: Tuple[str, ...] = ("Administrator", "Connect Support")
    provider_hosts: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_PROVIDER_HOSTS))
    github_api_base_url: str = "https://api.github.com"
    gitlab_api_base_url: str = "https://gitlab.com"
    http_timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "IssueServiceConfig":
        return cls(
            open_for_pickup_label=settings.open_for_pickup_issue_label,
            admin_roles=tuple(settings.admin_role_list()),
            provider_hosts={
                settings.github_host.lower(): GITHUB,
                settings.gitlab_host.lower(): GITLAB,
            },
            github_api_base_url=settings.github_api_base_url,
            gitlab_api_base_url=settings.gitlab_api_base_url,
            http_timeout_seconds=settings.http_timeout_seconds,
        )


def _format_prize(prize: float) -> str:
    return str(int(prize)) if float(prize).is_integer() else str(prize)


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(ASSIGNED_AT_FORMAT) if value is not None else None


def _sort_docs(docs, sort_by: str, sort_dir: str):
    """Stable sort; missing values come before present ones in ascending order."""
    key = _SORT_KEYS[sort_by]
    return sorted(
        docs,
        key=lambda doc: (key(doc) is not None, key(doc)),
        reverse=(sort_dir == "desc"),
    )


class IssueService:
    """Service for bounty issue search and remote synchronization"""

    def __init__(
        self,
        db: Session,
        publisher: EventPublisher,
        config: Optional[IssueServiceConfig] = None,
        client_factory: Callable[..., RemoteTrackerClient] = create_tracker_client,
    ):
        self.datastore = Datastore(db)
        self.publisher = publisher
        self.config = config or IssueServiceConfig()
        self.client_factory = client_factory

    def search(self, criteria, current_user_handle: str) -> Dict[str, Any]:
        """List issues with `criteria.label` across the user's active projects.

        Sorting and pagination run over the whole filtered set. Returns
        {"pages": 0, "docs": []} when the user owns no active project.
        """
        criteria = parse_request(SearchCriteria, criteria)
        if not current_user_handle:
            raise ValidationError("current user handle is required")

        projects = self.datastore.scan(Project, owner=current_user_handle, archived=False)
        if not projects:
            return {"pages": 0, "docs": []}

        projects_by_id = {p.id: p for p in projects}
        issues = self.datastore.scan(Issue, project_id=list(projects_by_id))

        docs = []
        for issue in issues:
            if criteria.label not in (issue.labels or []):
                continue
            doc = issue.to_dict()
            doc["project"] = projects_by_id[issue.project_id].to_dict()
            doc["assigned_at"] = _format_timestamp(issue.assigned_at)
            docs.append(doc)

        # Without sortBy, default to most recently updated first unless a direction is given.
        sort_by = criteria.sort_by or "updatedAt"
        sort_dir = criteria.sort_dir or ("desc" if criteria.sort_by is None else "asc")
        docs = _sort_docs(docs, sort_by, sort_dir)

        offset = (criteria.page - 1) * criteria.per_page
        return {
            "pages": max(1, math.ceil(len(docs) / criteria.per_page)),
            "docs": docs[offset:offset + criteria.per_page],
        }

    def _get_access_token(self, project: Project, provider: str) -> str:
        """Token of the project's copilot when one is stored, else the owner's."""
        if project.copilot:
            token = self.datastore.get_access_token(project.copilot, provider)
            if token:
                return token
        token = self.datastore.get_access_token(project.owner, provider)
        if not token:
            raise NotFoundError(f"No {provider} access token stored for project {project.id} owner or copilot")
        return token

    def _client_for(self, project: Project):
        """Resolve provider, repository path and tracker client for a project"""
        provider = get_provider_type(project.repo_url, self.config.provider_hosts)
        owner_path, repo_name = parse_repo_url(project.repo_url)
        token = self._get_access_token(project, provider)
        return provider, owner_path, repo_name, self.client_factory(provider, token, self.config)

    def create(self, issue, current_user: CurrentUser) -> Dict[str, Any]:
        """Create a bounty issue on the project's remote tracker.

        An "already exists" answer from the tracker is a no-op reported as
        {"success": False}; any other tracker failure is raised.
        """
        issue = parse_request(IssueCreate, issue)
        project = ensure_edit_permission(
            self.datastore, issue.project_id, current_user, self.config.admin_roles
        )
        provider, owner_path, repo_name, client = self._client_for(project)

        title = f"[${_format_prize(issue.prize)}] {issue.title}"
        try:
            created = client.create_issue(
                owner_path, repo_name, title, issue.comment, [self.config.open_for_pickup_label]
            )
        except RemoteProviderError as e:
            if client.is_already_exists(e):
                logger.info(f"Issue '{title}' already exists in {provider} {owner_path}/{repo_name}")
                return {"success": False}
            raise

        return {"success": True, "url": created.url, "number": created.number}

    def recreate(self, issue, current_user: CurrentUser) -> Dict[str, Any]:
        """Refresh or drop the local record of a remote issue.

        Remote state is fetched first, so a tracker failure leaves the
        datastore and the event bus untouched. With `recreate` false the local
        row is deleted and nothing is published; otherwise exactly one event is
        published, `issue.created` when no local row exists yet.
        """
        issue = parse_request(IssueRecreate, issue)
        project = ensure_edit_permission(
            self.datastore, issue.project_id, current_user, self.config.admin_roles
        )
        provider, owner_path, repo_name, client = self._client_for(project)

        repository = client.get_repository_details(owner_path, repo_name)
        remote_issue = client.get_issue(owner_path, repo_name, issue.number)

        db_issue = self.datastore.query_issue_by_key(repository.id, issue.number, provider)

        if not issue.recreate:
            if db_issue is not None:
                self.datastore.delete(db_issue)
            return {"success": True}

        event = ISSUE_CREATED if db_issue is None else ISSUE_RECREATED
        payload = build_issue_event(
            event,
            provider,
            number=issue.number,
            remote_issue=remote_issue,
            repository_id=repository.id,
            repo_name=repo_name,
            owner_path=owner_path,
        )
        self.publisher.publish(serialize_event(payload))
        logger.info(f"Published {event} for {provider} {owner_path}/{repo_name}#{issue.number}")
        return {"success": True}
