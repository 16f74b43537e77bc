# ---------- routes/auth_routes.py ----------
"""
Auth routes — username/password accounts backed by the local database.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import hash_password, verify_password, create_token, get_current_user
from database import get_db
from models.user import User

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


# ── Pydantic schemas ──────────────────────────────────────────────
class AuthRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)


def _token_response(user: User) -> dict:
    token = create_token({"user_id": user.id, "username": user.username})
    return {"status": "success", "data": {"token": token, "username": user.username}}


# ── Routes ────────────────────────────────────────────────────────
@router.post("/register")
async def register(body: AuthRequest, db: Session = Depends(get_db)):
    """Create an account and return a token for it."""
    try:
        if db.query(User).filter_by(username=body.username).first():
            raise HTTPException(status_code=409, detail="Username already taken")

        user = User(username=body.username, hashed_password=hash_password(body.password))
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return _token_response(user)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/login")
async def login(body: AuthRequest, db: Session = Depends(get_db)):
    """Authenticate with username + password."""
    try:
        user = db.query(User).filter_by(username=body.username).first()
        if not user or not verify_password(body.password, user.hashed_password):
            logger.warning(f"Failed login for username {body.username!r}")
            raise HTTPException(status_code=401, detail="Invalid username or password")
        return _token_response(user)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/me")
async def me(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Return the current user's profile from the token."""
    user = db.query(User).filter_by(id=user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"status": "success", "data": {"id": user.id, "username": user.username}}
