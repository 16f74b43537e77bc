from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from services.points_rules import describe_rules
from services.points_service import PointsService

router = APIRouter(prefix="/api/v1/points", tags=["Points"])


@router.get("")
async def get_points(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Last stored points summary."""
    record = PointsService.get(db, user_id)
    if not record:
        raise HTTPException(status_code=404, detail="Points not computed yet")
    return {"status": "success", "data": PointsService.to_dict(record)}


@router.post("/recompute")
async def recompute_points(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        summary = PointsService.recompute(db, user_id)
        return {"status": "success", "data": {"userId": user_id, **summary.to_dict()}}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/rules")
async def points_rules():
    return describe_rules()
