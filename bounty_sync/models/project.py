"""Project model"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String

from bounty_sync.models.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Project(Base):
    """A bounty project bound to one remote repository"""

    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=_new_id)
    title = Column(String, nullable=False)

    # Topcoder-style member handles. The copilot is an optional second editor.
    owner = Column(String, nullable=False, index=True)
    copilot = Column(String, nullable=True)

    repo_url = Column(String, nullable=False)
    archived = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "owner": self.owner,
            "copilot": self.copilot,
            "repo_url": self.repo_url,
            "archived": self.archived,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self):
        return f"<Project(title='{self.title}', owner='{self.owner}')>"
