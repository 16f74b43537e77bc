# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.user import User
from models.daily_log import DailyLog
from models.points import PointsRecord

__all__ = [
    "User",
    "DailyLog",
    "PointsRecord",
]
