import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse, RedirectResponse

from pushrun.api.deps import get_session_user, get_user_store
from pushrun.core.constants import (
    AUTH_COOKIE_NAME,
    COUNTER_PATH,
    LOGIN_PATH,
    MIN_PASSWORD_LENGTH,
)
from pushrun.core.security import (
    create_session_token,
    hash_password,
    session_cookie_options,
    verify_password,
)
from pushrun.models.user import User
from pushrun.schemas.auth import LoginRequest, RegisterRequest
from pushrun.services.errors import StoreError, store_error_message
from pushrun.services.stores import SqlUserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _fail(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _logged_in(user: User) -> RedirectResponse:
    resp = RedirectResponse(COUNTER_PATH, status_code=303)
    token = create_session_token(user.id, user.email)
    resp.set_cookie(AUTH_COOKIE_NAME, token, **session_cookie_options())
    return resp


def _check_registration(req: RegisterRequest) -> Optional[str]:
    email = req.email.strip()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        return "Please enter a valid email address."
    if len(req.password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    if req.password != req.password_confirm:
        return "Passwords do not match."
    return None


@router.get(LOGIN_PATH)
def login_page(user: Optional[User] = Depends(get_session_user)):
    if user is not None:
        return RedirectResponse(COUNTER_PATH, status_code=303)
    return {}


@router.post(f"{LOGIN_PATH}/register")
def register(
    email: str = Form(""),
    password: str = Form(""),
    password_confirm: str = Form("", alias="passwordConfirm"),
    users: SqlUserStore = Depends(get_user_store),
):
    req = RegisterRequest(email=email, password=password, password_confirm=password_confirm)
    problem = _check_registration(req)
    if problem:
        return _fail(problem)

    try:
        if users.find_by_email(req.email):
            return _fail("Email already registered.")
        user = users.create(
            {"email": req.email.lower().strip(), "password_hash": hash_password(req.password)}
        )
    except StoreError as e:
        logger.error("Registration failed status=%s message=%s data=%s", e.status, e.message, e.data)
        return _fail(store_error_message(e))

    return _logged_in(user)


@router.post(f"{LOGIN_PATH}/login")
def login(
    email: str = Form(""),
    password: str = Form(""),
    users: SqlUserStore = Depends(get_user_store),
):
    req = LoginRequest(email=email, password=password)
    try:
        user = users.find_by_email(req.email)
    except StoreError as e:
        logger.error("Login lookup failed status=%s message=%s", e.status, e.message)
        user = None
    if not user or not verify_password(req.password, user.password_hash):
        return _fail("Invalid email or password")
    return _logged_in(user)


@router.get("/logout")
def logout():
    resp = RedirectResponse(LOGIN_PATH, status_code=303)
    resp.delete_cookie(AUTH_COOKIE_NAME, path="/")
    return resp
