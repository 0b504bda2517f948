"""One row per (plan_id, user_key): latest attendance intent only. Upsert on write; last write wins."""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from tribe.db.base import Base


class Response(Base):
    __tablename__ = "responses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    user_key = Column(String(64), nullable=False)
    user_name = Column(String(128), nullable=True)
    status = Column(String(8), nullable=False)  # in | maybe | out
    arrival = Column(String(32), nullable=True)  # playdates only; one of constants.ARRIVAL_OPTIONS
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("plan_id", "user_key", name="uq_responses_plan_user"),
        CheckConstraint("status IN ('in', 'maybe', 'out')", name="ck_responses_status"),
    )
