"""Issue model"""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from bounty_sync.models.base import Base
from bounty_sync.models.project import _new_id


class Issue(Base):
    """Local cache of a remote bounty issue.

    The remote tracker stays the source of truth; rows are written by the
    consumer of the issue event stream and only read or deleted here.
    """

    __tablename__ = "issues"
    __table_args__ = (
        UniqueConstraint("provider", "repository_id", "number", name="uq_issues_provider_repo_number"),
    )

    id = Column(String, primary_key=True, default=_new_id)

    project_id = Column(String, ForeignKey("projects.id"), nullable=False, index=True)

    # Remote identity
    provider = Column(String, nullable=False)  # "github" or "gitlab"
    repository_id = Column(Integer, nullable=False)
    number = Column(Integer, nullable=False)

    # Cached remote content
    title = Column(String, nullable=False)
    body = Column(Text, nullable=True)
    prizes = Column(JSON, default=list)
    labels = Column(JSON, default=list)
    assignee = Column(String, nullable=True)
    assigned_at = Column(DateTime, nullable=True)
    status = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, index=True)

    # Relationships
    project = relationship("Project")

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "provider": self.provider,
            "repository_id": self.repository_id,
            "number": self.number,
            "title": self.title,
            "body": self.body,
            "prizes": list(self.prizes or []),
            "labels": list(self.labels or []),
            "assignee": self.assignee,
            "assigned_at": self.assigned_at,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self):
        return f"<Issue(provider={self.provider}, repository_id={self.repository_id}, number={self.number})>"
