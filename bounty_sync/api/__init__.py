"""API routes"""

from bounty_sync.api import issues

__all__ = ["issues"]
