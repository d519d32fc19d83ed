import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pushrun.api.auth import router as auth_router
from pushrun.api.counter import router as counter_router
from pushrun.db import Base, engine
from pushrun.models.user import User  # noqa: F401  (import ensures table is registered)
from pushrun.models.entry import Entry  # noqa: F401
from pushrun.models.goal_settings import GoalSettings  # noqa: F401
from pushrun.core.config import settings


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI()

# Allow CORS for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (users, entries, settings) on startup
Base.metadata.create_all(bind=engine)

app.include_router(auth_router)
app.include_router(counter_router)


@app.get("/")
def root():
    return {"message": "Pushrun backend is running"}
