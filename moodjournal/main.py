# mood journal backend api
# fastapi app with async mongodb, per-profile entry stores and a pure stats engine

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moodjournal.config import settings
from moodjournal.services.db import db
from moodjournal.services.entry_store import stores
from moodjournal.routers import catalog, data, entries, stats

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: connect to mongodb. shutdown: drop cached stores and close connection."""
    logger.info("Starting mood journal backend...")
    await db.connect()
    logger.info("Mood journal backend ready")
    yield
    logger.info("Shutting down mood journal backend...")
    stores.clear()
    await db.close()


app = FastAPI(
    title="Mood Journal API",
    description="Backend API for the mood journal, daily entries, mood trends and symptom statistics",
    version="0.1.0",
    lifespan=lifespan,
)

# cors, allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# register routers
app.include_router(entries.router)
app.include_router(stats.router)
app.include_router(data.router)
app.include_router(catalog.router)


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "mood-journal-api"}
