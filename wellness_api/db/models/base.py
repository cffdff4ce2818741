import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Uuid

from wellness_api.core.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    __abstract__ = True

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class ContentModel(BaseModel):
    """Columns shared by every slugged content collection"""
    __abstract__ = True

    title = Column(String(255), nullable=False)
    slug = Column(String(160), nullable=False, unique=True, index=True)
