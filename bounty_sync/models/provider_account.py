"""Provider account model"""
from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from datetime import datetime
from bounty_sync.models.base import Base


class ProviderAccount(Base):
    """Remote tracker credentials stored for a member handle.

    Written by the token issuance flow; this service only reads them.
    """

    __tablename__ = "provider_accounts"
    __table_args__ = (
        UniqueConstraint("handle", "provider", name="uq_provider_accounts_handle_provider"),
    )

    id = Column(Integer, primary_key=True, index=True)
    handle = Column(String, nullable=False, index=True)
    provider = Column(String, nullable=False)
    username = Column(String, nullable=True)
    access_token = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<ProviderAccount(handle='{self.handle}', provider='{self.provider}')>"
