"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
from app.notifications.dispatcher import shutdown_dispatcher

# Import routers
from app.routers import availability, calls, users, cron, interactions, matches

# Import all models so Base.metadata knows about them
from app.models.user import User, ProviderAccount  # noqa: F401
from app.models.availability import Availability, SlotStatus  # noqa: F401
from app.models.call import Call, CallResponse  # noqa: F401
from app.models.match import Match  # noqa: F401

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Pickup Planner",
    description="Hourly availability for pickup matches — detects full runs and pings the chat channel",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(availability.router, prefix="/api/availability", tags=["Availability"])
app.include_router(calls.router, prefix="/api/calls", tags=["Calls"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(cron.router, prefix="/api/cron", tags=["Cron"])
app.include_router(interactions.router, prefix="/api/interactions", tags=["Interactions"])
app.include_router(matches.router, prefix="/api/matches", tags=["Matches"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.on_event("shutdown")
def on_shutdown():
    shutdown_dispatcher()


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
