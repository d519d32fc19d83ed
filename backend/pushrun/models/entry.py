from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from pushrun.db import Base


class Entry(Base):
    """One user's exercise counts for one calendar day."""

    __tablename__ = "entries"
    __table_args__ = (
        # At most one entry per user per day
        UniqueConstraint("user_id", "ymd", name="uq_entries_user_ymd"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Calendar day as 'YYYY-MM-DD'
    ymd = Column(String(10), nullable=False)

    # Midnight UTC of `ymd`; used for week range checks
    date = Column(DateTime(timezone=True), nullable=False, index=True)

    pushups = Column(Integer, nullable=False, default=0, server_default="0")
    run_km = Column(Float, nullable=False, default=0.0, server_default="0")

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
