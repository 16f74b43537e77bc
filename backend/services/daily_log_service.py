"""
daily_log_service.py — Daily Log storage
Upserts one log per user per calendar day and converts stored rows into
scoring entries.
"""

import json
import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.daily_log import DailyLog
from services.points_rules import DailyLogEntry

logger = logging.getLogger(__name__)

LOG_FIELDS = ("weight", "shower", "skin_care", "supplement", "sleep_time", "exercises")


class DailyLogService:
    @staticmethod
    def upsert(db: Session, user_id: int, data: dict) -> DailyLog:
        """Create or partially update the log for data["date"]. Only keys present in data are written."""
        d = data["date"]
        try:
            log = db.query(DailyLog).filter_by(user_id=user_id, date=d).first()
            if not log:
                log = DailyLog(user_id=user_id, date=d)
                db.add(log)

            for key in LOG_FIELDS:
                if key not in data:
                    continue
                value = data[key]
                if key == "exercises" and value is not None:
                    value = json.dumps(list(value))
                setattr(log, key, value)

            db.commit()
            db.refresh(log)
            return log
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save daily log for user {user_id} on {d}: {e}")
            raise

    @staticmethod
    def get(db: Session, user_id: int, day: date) -> DailyLog | None:
        return db.query(DailyLog).filter_by(user_id=user_id, date=day).first()

    @staticmethod
    def get_all(db: Session, user_id: int) -> list[DailyLog]:
        return db.query(DailyLog).filter_by(user_id=user_id).order_by(DailyLog.date.asc()).all()

    @staticmethod
    def delete(db: Session, user_id: int, day: date) -> bool:
        try:
            log = db.query(DailyLog).filter_by(user_id=user_id, date=day).first()
            if not log:
                return False
            db.delete(log)
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete daily log for user {user_id} on {day}: {e}")
            raise

    @staticmethod
    def to_dict(log: DailyLog) -> dict:
        return {
            "date": log.date.isoformat() if log.date else None,
            "weight": log.weight,
            "shower": log.shower,
            "skin_care": log.skin_care,
            "supplement": log.supplement,
            "sleep_time": log.sleep_time,
            "exercises": _load_exercises(log.exercises),
        }

    @staticmethod
    def to_entry(log: DailyLog) -> DailyLogEntry:
        return DailyLogEntry.from_dict(DailyLogService.to_dict(log))


def _load_exercises(raw: str | None) -> list:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return value if isinstance(value, list) else []
