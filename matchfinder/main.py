import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from matchfinder.api.v1.endpoints import admin, auth, matches
from matchfinder.core.config import get_settings
from matchfinder.core.database import Base, engine, get_db
from matchfinder.core.logging import setup_logging

# Models must be imported so create_all sees their tables
from matchfinder.models import competition, match, user  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(get_settings())
    Base.metadata.create_all(bind=engine)
    logger.info("Match Finder API started")
    yield
    logger.info("Match Finder API stopped")


app = FastAPI(
    title="Match Finder API",
    description="Upcoming football matches by league, team, date and distance",
    version="1.0.0",
    lifespan=lifespan,
)

# --- 1. CORS ---
# The map frontend is served from another origin during development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- 2. ROUTES ---
app.include_router(auth.router, prefix="/api/v1", tags=["Auth"])
app.include_router(matches.router, prefix="/api/v1", tags=["Matches"])
app.include_router(admin.router, prefix="/api/v1", tags=["Admin"])


@app.get("/")
def read_root():
    return {
        "status": "online",
        "project": "Match Finder",
        "docs": "Go to /docs to see the API",
    }


@app.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "healthy", "database": "connected"}
