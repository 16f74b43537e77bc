import os
import sys
import logging

# Ensure this directory is in the path for uvicorn and other runners
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import APP_NAME, CORS_ORIGINS
from database import init_db
from routes.auth_routes import router as auth_router
from routes.daily_log_routes import router as daily_log_router
from routes.points_routes import router as points_router

logger = logging.getLogger(__name__)

# Initialize db configuration
try:
    init_db()
except Exception as e:
    logger.error(f"Database init failed: {e}")
    raise

app = FastAPI(title=APP_NAME)


@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(daily_log_router)
app.include_router(points_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
