"""One participant-submitted availability window [start_ts, end_ts). Never mutated; a participant may submit many."""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.sql import func

from tribe.db.base import Base


class AvailabilityWindow(Base):
    __tablename__ = "availability_windows"

    id = Column(Integer, primary_key=True, autoincrement=True)
    request_id = Column(Integer, ForeignKey("hang_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    user_key = Column(String(64), nullable=False)  # participant identity token
    user_name = Column(String(128), nullable=True)
    start_ts = Column(DateTime(timezone=True), nullable=False)
    end_ts = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (CheckConstraint("start_ts < end_ts", name="ck_availability_windows_chronological"),)
