"""Form actions that change a day's entry.

Each action validates the form first (nothing invalid reaches the store),
then gets or creates the entry and writes to it. Store errors are logged
and returned as a failed ActionResult.

Increments are read-modify-write without locking, so two concurrent
increments for the same day can lose one of the updates.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional

from pushrun.core.config import settings
from pushrun.core.constants import MAX_PUSHUPS
from pushrun.core.time_utils import today_ymd, ymd_to_timestamp
from pushrun.schemas.entry import EntryRead
from pushrun.services.errors import (
    ActionResult,
    FormValidationError,
    StoreError,
    store_error_message,
)
from pushrun.services.forms import (
    add_typed_request,
    quick_add_request,
    save_entry_request,
    set_totals_request,
)
from pushrun.services.progress import get_or_create_entry
from pushrun.services.stores import EntryStore

logger = logging.getLogger(__name__)

Form = Mapping[str, Optional[str]]


def _entry_body(entry) -> dict:
    return {"entry": EntryRead.model_validate(entry).model_dump(mode="json")}


def _run(action: str, user_id: str, form: Form, parse: Callable, write: Callable) -> ActionResult:
    try:
        # write() may still reject, e.g. an increment pushing the count past the cap
        entry = write(parse(form))
    except FormValidationError as e:
        logger.debug("Rejected %s for user=%s: %s=%s", action, user_id, e.field, e.message)
        return ActionResult.failure(400, e.message, field=e.field)
    except StoreError as e:
        logger.error(
            "%s failed for user=%s status=%s message=%s data=%s",
            action, user_id, e.status, e.message, e.data,
        )
        return ActionResult.failure(500, store_error_message(e))
    return ActionResult.success(**_entry_body(entry))


def _increment(entries: EntryStore, user_id: str, ymd: str, pushups: int, run_km: float, field: str):
    entry = get_or_create_entry(entries, user_id, ymd)
    if pushups == 0 and run_km == 0:
        logger.debug("Nothing to add for user=%s ymd=%s", user_id, ymd)
        return entry
    new_pushups = int(entry.pushups or 0) + pushups
    if new_pushups > MAX_PUSHUPS:
        raise FormValidationError(field, "Pushups total would be too large.")
    fields = {
        "pushups": new_pushups,
        "run_km": float(entry.run_km or 0) + run_km,
    }
    logger.info("Adding pushups=%s run_km=%s for user=%s ymd=%s", pushups, run_km, user_id, ymd)
    return entries.update(entry.id, fields)


def quick_add(user_id: str, form: Form, entries: EntryStore, now: Optional[datetime] = None) -> ActionResult:
    """Add the quick-add button deltas (pushupsDelta, runKmDelta) to today's entry."""
    ymd = today_ymd(now, settings.timezone)
    return _run(
        "quick_add",
        user_id,
        form,
        quick_add_request,
        lambda req: _increment(entries, user_id, ymd, req.pushups_delta, req.run_km_delta, "pushupsDelta"),
    )


def add_typed(user_id: str, form: Form, entries: EntryStore, now: Optional[datetime] = None) -> ActionResult:
    """Add typed-in amounts (pushups, runKm) to today's entry."""
    ymd = today_ymd(now, settings.timezone)
    return _run(
        "add_typed",
        user_id,
        form,
        add_typed_request,
        lambda req: _increment(entries, user_id, ymd, req.pushups, req.run_km, "pushups"),
    )


def set_totals(user_id: str, form: Form, entries: EntryStore, now: Optional[datetime] = None) -> ActionResult:
    """Replace today's totals with pushupsTotal / runKmTotal."""
    ymd = today_ymd(now, settings.timezone)

    def write(req):
        entry = get_or_create_entry(entries, user_id, ymd)
        logger.info(
            "Setting totals pushups=%s run_km=%s for user=%s ymd=%s",
            req.pushups_total, req.run_km_total, user_id, ymd,
        )
        return entries.update(entry.id, {"pushups": req.pushups_total, "run_km": req.run_km_total})

    return _run("set_totals", user_id, form, set_totals_request, write)


def save_entry(user_id: str, form: Form, entries: EntryStore) -> ActionResult:
    """Save absolute values for the day in `ymd` (today if blank).

    A blank runKm leaves the stored distance untouched.
    """

    def write(req):
        payload = {"pushups": req.pushups}
        if req.run_km is not None:
            payload["run_km"] = req.run_km
        existing = entries.find_one(user_id, req.ymd)
        if existing is not None:
            return entries.update(existing.id, payload)
        logger.info("Saving new entry for user=%s ymd=%s", user_id, req.ymd)
        return entries.create(
            {"user_id": user_id, "ymd": req.ymd, "date": ymd_to_timestamp(req.ymd), **payload}
        )

    return _run(
        "save",
        user_id,
        form,
        lambda f: save_entry_request(f, tz_name=settings.timezone),
        write,
    )
