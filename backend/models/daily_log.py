from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, Text, Date, DateTime, ForeignKey, UniqueConstraint
from database import Base


class DailyLog(Base):
    __tablename__ = "daily_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)
    weight = Column(Float, nullable=True)  # kg
    shower = Column(String(20), nullable=True)  # done / not done
    skin_care = Column(String(20), nullable=True)
    supplement = Column(String(20), nullable=True)
    sleep_time = Column(String(10), nullable=True)  # hours slept as H:MM
    exercises = Column(Text, nullable=True)  # JSON list of activity labels
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_dailylog_user_date"),
    )
