"""Database models"""

from bounty_sync.models.base import Base
from bounty_sync.models.issue import Issue
from bounty_sync.models.project import Project
from bounty_sync.models.provider_account import ProviderAccount

__all__ = [
    "Base",
    "Project",
    "Issue",
    "ProviderAccount",
]
