"""Bounty issue endpoints"""
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from bounty_sync.config import settings
from bounty_sync.errors import BountySyncError
from bounty_sync.models.base import get_db
from bounty_sync.schemas import IssueCreate, IssueRecreate, SearchCriteria, SortDirection, SortField
from bounty_sync.security import CurrentUser, get_current_user
from bounty_sync.services.events import EventPublisher, RedisEventPublisher
from bounty_sync.services.issue_service import IssueService, IssueServiceConfig


router = APIRouter(prefix="/api/issues", tags=["issues"])


@lru_cache(maxsize=1)
def get_event_publisher() -> EventPublisher:
    """Process-wide event publisher"""
    return RedisEventPublisher(
        redis_url=settings.redis_url,
        stream_key=settings.event_stream_key,
        maxlen=settings.event_stream_maxlen,
    )


def get_issue_service(
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher),
) -> IssueService:
    return IssueService(db, publisher, IssueServiceConfig.from_settings(settings))


def _to_http(e: BountySyncError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/")
def search_issues(
    label: str = Query(..., min_length=1),
    sort_by: Optional[SortField] = Query(None, alias="sortBy"),
    sort_dir: Optional[SortDirection] = Query(None, alias="sortDir"),
    page: int = Query(..., ge=1),
    per_page: int = Query(..., ge=1, alias="perPage"),
    current_user: CurrentUser = Depends(get_current_user),
    service: IssueService = Depends(get_issue_service),
):
    """Search bounty issues in the current user's projects"""
    criteria = SearchCriteria(
        label=label, sort_by=sort_by, sort_dir=sort_dir, page=page, per_page=per_page
    )
    try:
        return service.search(criteria, current_user.handle)
    except BountySyncError as e:
        raise _to_http(e)


@router.post("/")
def create_issue(
    issue: IssueCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: IssueService = Depends(get_issue_service),
):
    """Create a bounty issue on the project's remote tracker"""
    try:
        return service.create(issue, current_user)
    except BountySyncError as e:
        raise _to_http(e)


@router.post("/recreate")
def recreate_issue(
    issue: IssueRecreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: IssueService = Depends(get_issue_service),
):
    """Republish (or drop) the local record of a remote issue"""
    try:
        return service.recreate(issue, current_user)
    except BountySyncError as e:
        raise _to_http(e)
