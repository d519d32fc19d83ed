"""Data access for entries, goal settings and users.

The counter logic only depends on the Protocols below. The Sql* classes
implement them on top of a SQLAlchemy session and turn any database failure
into a StoreError.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from pushrun.models.entry import Entry
from pushrun.models.goal_settings import GoalSettings
from pushrun.models.user import User
from pushrun.services.errors import StoreError

logger = logging.getLogger(__name__)


class EntryStore(Protocol):
    def find_one(self, user_id: str, ymd: str) -> Optional[Entry]: ...

    def find_all(self, user_id: str) -> Sequence[Entry]: ...

    def create(self, fields: dict[str, Any]) -> Entry: ...

    def update(self, entry_id: str, fields: dict[str, Any]) -> Entry: ...


class SettingsStore(Protocol):
    def find_one(self, user_id: str) -> Optional[GoalSettings]: ...

    def create(self, fields: dict[str, Any]) -> GoalSettings: ...


class UserStore(Protocol):
    def find_by_email(self, email: str) -> Optional[User]: ...

    def find_by_id(self, user_id: str) -> Optional[User]: ...

    def create(self, fields: dict[str, Any]) -> User: ...


def _wrap(db: Session, exc: SQLAlchemyError, action: str) -> StoreError:
    db.rollback()
    detail = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, IntegrityError):
        return StoreError(f"Failed to {action}.", status=400, data={"detail": detail})
    if isinstance(exc, OperationalError):
        return StoreError("", status=503, data={"detail": detail})
    return StoreError(f"Failed to {action}.", status=500, data={"detail": detail})


class SqlEntryStore:
    def __init__(self, db: Session):
        self.db = db

    def find_one(self, user_id: str, ymd: str) -> Optional[Entry]:
        try:
            return (
                self.db.query(Entry)
                .filter(Entry.user_id == user_id)
                .filter(Entry.ymd == ymd)
                .first()
            )
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "load entry") from e

    def find_all(self, user_id: str) -> list[Entry]:
        try:
            # Most recent first; callers do not rely on the order
            return (
                self.db.query(Entry)
                .filter(Entry.user_id == user_id)
                .order_by(Entry.date.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "load entries") from e

    def create(self, fields: dict[str, Any]) -> Entry:
        entry = Entry(**fields)
        try:
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "create entry") from e
        return entry

    def update(self, entry_id: str, fields: dict[str, Any]) -> Entry:
        try:
            entry = self.db.query(Entry).filter(Entry.id == entry_id).first()
            if not entry:
                raise StoreError("Entry not found.", status=404)
            for key, value in fields.items():
                setattr(entry, key, value)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "update entry") from e
        return entry


class SqlSettingsStore:
    def __init__(self, db: Session):
        self.db = db

    def find_one(self, user_id: str) -> Optional[GoalSettings]:
        try:
            return self.db.query(GoalSettings).filter(GoalSettings.user_id == user_id).first()
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "load settings") from e

    def create(self, fields: dict[str, Any]) -> GoalSettings:
        row = GoalSettings(**fields)
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "create settings") from e
        return row


class SqlUserStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email.lower().strip()).first()
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "load user") from e

    def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "load user") from e

    def create(self, fields: dict[str, Any]) -> User:
        user = User(**fields)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            raise _wrap(self.db, e, "create user") from e
        logger.info("Created user %s", user.id)
        return user
