"""Project edit permission checks"""

import logging
from typing import Iterable

from bounty_sync.errors import ForbiddenError, NotFoundError
from bounty_sync.models import Project
from bounty_sync.security import CurrentUser

logger = logging.getLogger(__name__)


def is_admin_user(roles: Iterable[str], admin_roles: Iterable[str]) -> bool:
    """True when any of the user's roles is an administrative one (case-insensitive)."""
    admin = {r.lower() for r in admin_roles}
    return any((role or "").lower() in admin for role in roles or [])


def ensure_edit_permission(datastore, project_id: str, user: CurrentUser, admin_roles: Iterable[str]) -> Project:
    """Load the project and check that `user` may edit it.

    Admins always pass; otherwise the user must be the owner or the copilot.
    Returns the loaded project so callers don't fetch it twice.
    """
    project = datastore.get_by_id(Project, project_id)
    if project is None:
        raise NotFoundError(f"Project with id {project_id} does not exist")

    if is_admin_user(user.roles, admin_roles):
        return project

    if user.handle == project.owner:
        return project
    if project.copilot and user.handle == project.copilot:
        return project

    logger.warning(f"User {user.handle} denied edit access to project {project_id}")
    raise ForbiddenError("You don't have access on this project")
