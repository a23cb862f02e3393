"""Datastore access over a SQLAlchemy session"""

import logging
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from bounty_sync.models import Issue, ProviderAccount

logger = logging.getLogger(__name__)


class Datastore:
    """Read/scan/delete helpers used by the issue service.

    Database errors are not translated; they propagate to the caller.
    """

    def __init__(self, db: Session):
        self.db = db

    def scan(self, model, **filters) -> List[Any]:
        """Return all rows of `model` matching `filters`.

        A list/tuple/set value matches with IN; anything else with equality.
        """
        query = self.db.query(model)
        for name, value in filters.items():
            column = getattr(model, name)
            if isinstance(value, (list, tuple, set)):
                query = query.filter(column.in_(list(value)))
            else:
                query = query.filter(column == value)
        return query.all()

    def get_by_id(self, model, row_id) -> Optional[Any]:
        return self.db.get(model, row_id)

    def query_issue_by_key(self, repository_id, number: int, provider: str) -> Optional[Issue]:
        """Look up the local issue for (provider, repository_id, number)"""
        return (
            self.db.query(Issue)
            .filter(
                Issue.repository_id == repository_id,
                Issue.number == number,
                Issue.provider == provider,
            )
            .first()
        )

    def delete(self, row) -> None:
        self.db.delete(row)
        self.db.commit()
        logger.info(f"Deleted {row!r}")

    def get_access_token(self, handle: str, provider: str) -> Optional[str]:
        """Stored remote access token of `handle` for `provider`, if any"""
        account = (
            self.db.query(ProviderAccount)
            .filter(ProviderAccount.handle == handle, ProviderAccount.provider == provider)
            .first()
        )
        return account.access_token if account else None
