from uuid import uuid4

from sqlalchemy import Column, Float, ForeignKey, String
from pushrun.db import Base


class GoalSettings(Base):
    __tablename__ = "settings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # One settings row per user
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)

    # Weekly targets; read through normalize_goal so bad values fall back to defaults
    pushups_goal = Column(Float, nullable=True)
    run_km_goal = Column(Float, nullable=True)
