"""A request for availability: one per shared link. Immutable after creation."""
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from tribe.db.base import Base


class HangRequest(Base):
    __tablename__ = "hang_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(32), nullable=False, unique=True, index=True)  # public handle; id is never exposed
    title = Column(String(256), nullable=False)
    type = Column(String(64), nullable=False)  # one of constants.CATEGORIES
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
