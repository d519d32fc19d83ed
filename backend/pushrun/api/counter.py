from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse, RedirectResponse

from pushrun.api.deps import get_entry_store, get_session_user, get_settings_store
from pushrun.core.constants import COUNTER_PATH, LOGIN_PATH
from pushrun.models.user import User
from pushrun.services import entries as entry_actions
from pushrun.services.errors import ActionResult
from pushrun.services.progress import load
from pushrun.services.stores import SqlEntryStore, SqlSettingsStore


router = APIRouter(prefix=COUNTER_PATH, tags=["counter"])


def _to_login():
    return RedirectResponse(LOGIN_PATH, status_code=303)


def _respond(result: ActionResult) -> JSONResponse:
    return JSONResponse(status_code=result.status, content=result.body())


@router.get("")
def load_counter(
    user: Optional[User] = Depends(get_session_user),
    entries: SqlEntryStore = Depends(get_entry_store),
    goal_settings: SqlSettingsStore = Depends(get_settings_store),
):
    """
    Today's entry plus this week's totals and progress against goals.
    Creates today's entry and the user's settings on first visit.
    """
    if user is None:
        return _to_login()
    return _respond(load(user.id, entries, goal_settings))


@router.post("/save")
def save(
    ymd: Optional[str] = Form(None),
    pushups: Optional[str] = Form(None),
    run_km: Optional[str] = Form(None, alias="runKm"),
    user: Optional[User] = Depends(get_session_user),
    entries: SqlEntryStore = Depends(get_entry_store),
):
    if user is None:
        return _to_login()
    form = {"ymd": ymd, "pushups": pushups, "runKm": run_km}
    return _respond(entry_actions.save_entry(user.id, form, entries))


@router.post("/quick-add")
def quick_add(
    pushups_delta: Optional[str] = Form(None, alias="pushupsDelta"),
    run_km_delta: Optional[str] = Form(None, alias="runKmDelta"),
    user: Optional[User] = Depends(get_session_user),
    entries: SqlEntryStore = Depends(get_entry_store),
):
    if user is None:
        return _to_login()
    form = {"pushupsDelta": pushups_delta, "runKmDelta": run_km_delta}
    return _respond(entry_actions.quick_add(user.id, form, entries))


@router.post("/add")
def add_typed(
    pushups: Optional[str] = Form(None),
    run_km: Optional[str] = Form(None, alias="runKm"),
    user: Optional[User] = Depends(get_session_user),
    entries: SqlEntryStore = Depends(get_entry_store),
):
    if user is None:
        return _to_login()
    form = {"pushups": pushups, "runKm": run_km}
    return _respond(entry_actions.add_typed(user.id, form, entries))


@router.post("/totals")
def set_totals(
    pushups_total: Optional[str] = Form(None, alias="pushupsTotal"),
    run_km_total: Optional[str] = Form(None, alias="runKmTotal"),
    user: Optional[User] = Depends(get_session_user),
    entries: SqlEntryStore = Depends(get_entry_store),
):
    if user is None:
        return _to_login()
    form = {"pushupsTotal": pushups_total, "runKmTotal": run_km_total}
    return _respond(entry_actions.set_totals(user.id, form, entries))
