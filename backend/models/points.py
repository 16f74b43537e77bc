from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from database import Base


class PointsRecord(Base):
    __tablename__ = "points"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    daily_points = Column(Integer, default=0)
    weekly_points = Column(Integer, default=0)
    total_points = Column(Integer, default=0)
    rank = Column(String(20), default="iron")
    last_computed_at = Column(DateTime, nullable=True)
