"""A committed plan: concrete time (and optional place). Created once per promotion; immutable."""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from tribe.db.base import Base


class Plan(Base):
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(32), nullable=False, unique=True, index=True)
    request_id = Column(Integer, ForeignKey("hang_requests.id", ondelete="SET NULL"), nullable=True)  # NULL = created directly
    title = Column(String(256), nullable=False)
    type = Column(String(64), nullable=False)
    note = Column(Text, nullable=True)
    start_ts = Column(DateTime(timezone=True), nullable=False)
    end_ts = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(256), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (CheckConstraint("start_ts < end_ts", name="ck_plans_chronological"),)
