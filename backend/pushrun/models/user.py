from uuid import uuid4

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func
from pushrun.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # Stored lower-cased and stripped
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
