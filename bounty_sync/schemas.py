"""Request schemas shared by the service layer and the API"""

from typing import Literal, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, Field

from bounty_sync.errors import ValidationError

SortField = Literal["title", "projectTitle", "updatedAt", "assignee", "assignedAt"]
SortDirection = Literal["asc", "desc"]

ModelT = TypeVar("ModelT", bound=BaseModel)


class SearchCriteria(BaseModel):
    label: str = Field(..., min_length=1)
    # Left unset, the search sorts by most recently updated first.
    sort_by: Optional[SortField] = Field(None, alias="sortBy")
    sort_dir: Optional[SortDirection] = Field(None, alias="sortDir")
    page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1, alias="perPage")

    class Config:
        populate_by_name = True


class IssueCreate(BaseModel):
    project_id: str = Field(..., min_length=1, alias="projectId")
    prize: float = Field(..., allow_inf_nan=False)
    title: str = Field(..., min_length=1)
    comment: str = Field(..., min_length=1)
    repo_url: str = Field(..., min_length=1, alias="repoUrl")

    class Config:
        populate_by_name = True


class IssueRecreate(BaseModel):
    project_id: str = Field(..., min_length=1, alias="projectId")
    number: int
    url: str = Field(..., min_length=1)
    recreate: bool

    class Config:
        populate_by_name = True


def parse_request(model: Type[ModelT], data) -> ModelT:
    """Validate raw input against `model`, raising the service ValidationError."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid {model.__name__}: {e}") from e
