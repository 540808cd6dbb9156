"""
API entry point – Acoustic Positions.
Run: uvicorn main:app --reload --port 8000
"""
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env from backend/, the repo root or cwd, so CORS_ALLOW_ORIGINS etc. are set before settings are read
_backend_dir = Path(__file__).resolve().parent
load_dotenv(_backend_dir / ".env")
load_dotenv(_backend_dir.parent / ".env")
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.layouts import router as layouts_router
from app.api.rooms import router as rooms_router
from app.settings import load_settings

settings = load_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Acoustic Positions API",
    description="Backend API: candidate grid for a room, placement of measurement points around sources, rule check.",
    version="0.1.0",
)

# CORS: the browser front end runs on another port and needs Allow-Origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allow_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rooms_router, prefix="/api/rooms", tags=["rooms"])
app.include_router(layouts_router, prefix="/api/layouts", tags=["layouts"])


@app.get("/health")
def health():
    """Availability check (CI/CD, Docker)."""
    return {"status": "ok"}
