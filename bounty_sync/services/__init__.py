"""Services"""

from bounty_sync.services.issue_service import IssueService, IssueServiceConfig

__all__ = ["IssueService", "IssueServiceConfig"]
