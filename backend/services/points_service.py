"""
points_service.py — Points recompute & storage
Fetches every daily log of a user, runs the points engine once and upserts
the resulting summary into the `points` table.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.points import PointsRecord
from services.daily_log_service import DailyLogService
from services.points_rules import PointsSummary, compute_points_from_logs

logger = logging.getLogger(__name__)


class PointsService:
    @staticmethod
    def recompute(db: Session, user_id: int) -> PointsSummary:
        entries = [DailyLogService.to_entry(log) for log in DailyLogService.get_all(db, user_id)]

        summary = compute_points_from_logs(entries)

        try:
            record = db.query(PointsRecord).filter_by(user_id=user_id).first()
            if not record:
                record = PointsRecord(user_id=user_id)
                db.add(record)

            record.daily_points = summary.daily_points
            record.weekly_points = summary.weekly_points
            record.total_points = summary.total_points
            record.rank = summary.rank
            record.last_computed_at = summary.last_computed_at
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to store points for user {user_id}: {e}")
            raise

        logger.info(
            f"Recomputed points for user {user_id}: {summary.total_points} ({summary.rank}) "
            f"from {len(entries)} logs"
        )
        return summary

    @staticmethod
    def get(db: Session, user_id: int) -> PointsRecord | None:
        return db.query(PointsRecord).filter_by(user_id=user_id).first()

    @staticmethod
    def to_dict(record: PointsRecord) -> dict:
        return {
            "userId": record.user_id,
            "dailyPoints": record.daily_points,
            "weeklyPoints": record.weekly_points,
            "totalPoints": record.total_points,
            "rank": record.rank,
            "lastComputedAt": record.last_computed_at.isoformat() if record.last_computed_at else None,
        }
