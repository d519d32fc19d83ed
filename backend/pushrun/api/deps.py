import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from pushrun.core.constants import AUTH_COOKIE_NAME
from pushrun.core.security import decode_session_token
from pushrun.db import get_db
from pushrun.models.user import User
from pushrun.services.errors import StoreError
from pushrun.services.stores import SqlEntryStore, SqlSettingsStore, SqlUserStore

logger = logging.getLogger(__name__)


def get_entry_store(db: Session = Depends(get_db)) -> SqlEntryStore:
    return SqlEntryStore(db)


def get_settings_store(db: Session = Depends(get_db)) -> SqlSettingsStore:
    return SqlSettingsStore(db)


def get_user_store(db: Session = Depends(get_db)) -> SqlUserStore:
    return SqlUserStore(db)


def get_session_user(
    request: Request,
    users: SqlUserStore = Depends(get_user_store),
) -> Optional[User]:
    """Restore the logged-in user from the auth cookie, or None.

    A bad cookie just means "not logged in"; it is left in place.
    """
    raw = request.cookies.get(AUTH_COOKIE_NAME)
    if not raw:
        return None
    payload = decode_session_token(raw)
    if payload is None:
        logger.warning("Ignoring invalid auth cookie")
        return None
    try:
        return users.find_by_id(str(payload["sub"]))
    except StoreError as e:
        logger.error("Failed to restore session status=%s message=%s", e.status, e.message)
        return None
