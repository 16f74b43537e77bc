from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from services.daily_log_service import DailyLogService
from services.points_service import PointsService

router = APIRouter(prefix="/api/v1/logs", tags=["Daily Logs"])

Status = Literal["done", "not done"]


class DailyLogUpdate(BaseModel):
    weight: Optional[float] = Field(None, allow_inf_nan=False)
    shower: Optional[Status] = None
    skin_care: Optional[Status] = None
    supplement: Optional[Status] = None
    sleep_time: Optional[str] = Field(None, pattern=r"^\d{1,2}:[0-5]\d$")
    exercises: Optional[List[str]] = None


@router.get("")
async def list_logs(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return [DailyLogService.to_dict(l) for l in DailyLogService.get_all(db, user_id)]
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{log_date}")
async def get_log(log_date: date, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    log = DailyLogService.get(db, user_id, log_date)
    if not log:
        return {"status": "success", "data": None}
    return {"status": "success", "data": DailyLogService.to_dict(log)}


@router.put("/{log_date}")
async def save_log(
    log_date: date,
    log_data: DailyLogUpdate,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Upsert the day's log, then refresh the user's points."""
    try:
        data = log_data.model_dump(exclude_unset=True)
        data["date"] = log_date
        log = DailyLogService.upsert(db, user_id, data)
        # The log is committed first; if recompute fails the stored points stay
        # stale until the next save or POST /points/recompute.
        summary = PointsService.recompute(db, user_id)
        return {"status": "success", "data": DailyLogService.to_dict(log), "points": summary.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{log_date}")
async def delete_log(log_date: date, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        if not DailyLogService.delete(db, user_id, log_date):
            raise HTTPException(status_code=404, detail="Log not found")
        summary = PointsService.recompute(db, user_id)
        return {"status": "success", "points": summary.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
