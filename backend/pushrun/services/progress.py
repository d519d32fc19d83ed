"""Weekly progress for the counter page.

Given a user, "now", their entries and their goal settings, work out
today's entry (creating a zeroed one if needed) and this week's totals
and percent-of-goal values.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Iterable, Optional

from pushrun.core.config import settings as app_settings
from pushrun.core.constants import DEFAULT_PUSHUPS_GOAL, DEFAULT_RUN_KM_GOAL
from pushrun.core.time_utils import (
    parse_timestamp,
    today_ymd,
    week_window,
    ymd_to_timestamp,
)
from pushrun.schemas.entry import EntryRead, WeeklyProgress
from pushrun.services.errors import ActionResult, StoreError, store_error_message
from pushrun.services.stores import EntryStore, SettingsStore

logger = logging.getLogger(__name__)


def normalize_goal(value, fallback: float) -> float:
    """Return `value` as a number, or `fallback` if it is missing, not finite or <= 0."""
    if isinstance(value, bool):
        return fallback
    try:
        n = value if isinstance(value, (int, float)) else float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(n) or n <= 0:
        return fallback
    return n


def percent(achieved, goal) -> int:
    """Whole percent of `goal` reached, clamped to 0..100 (0 for a bad goal)."""
    try:
        achieved = float(achieved)
        goal = float(goal)
    except (TypeError, ValueError):
        return 0
    if not goal > 0:
        return 0
    ratio = achieved / goal * 100
    if not math.isfinite(ratio):
        return 0
    # Round half up, not Python's banker's rounding
    return max(0, min(100, int(math.floor(ratio + 0.5))))


def aggregate_week(entries: Iterable, window: tuple[datetime, datetime]) -> tuple[int, float]:
    """Sum pushups and run km over entries whose timestamp is in [start, end)."""
    start, end = window
    week_pushups = 0
    week_run_km = 0.0
    for entry in entries:
        try:
            ts = parse_timestamp(getattr(entry, "date", None))
        except ValueError:
            logger.debug("Skipping entry %s with unreadable date", getattr(entry, "id", None))
            continue
        if start <= ts < end:
            week_pushups += int(getattr(entry, "pushups", 0) or 0)
            week_run_km += float(getattr(entry, "run_km", 0) or 0)
    return week_pushups, week_run_km


def get_or_create_entry(entries: EntryStore, user_id: str, ymd: str):
    """Today's entry for the user, creating a zeroed one if there is none.

    Not locked: two concurrent calls rely on the (user_id, ymd) unique
    constraint to reject the second insert.
    """
    existing = entries.find_one(user_id, ymd)
    if existing is not None:
        return existing
    entry = entries.create(
        {
            "user_id": user_id,
            "ymd": ymd,
            "date": ymd_to_timestamp(ymd),
            "pushups": 0,
            "run_km": 0.0,
        }
    )
    logger.info("Created entry for user=%s ymd=%s", user_id, ymd)
    return entry


def get_or_create_settings(
    goal_settings: SettingsStore,
    user_id: str,
    pushups_goal: float = DEFAULT_PUSHUPS_GOAL,
    run_km_goal: float = DEFAULT_RUN_KM_GOAL,
):
    existing = goal_settings.find_one(user_id)
    if existing is not None:
        return existing
    row = goal_settings.create(
        {
            "user_id": user_id,
            "pushups_goal": pushups_goal,
            "run_km_goal": run_km_goal,
        }
    )
    logger.info("Created default goal settings for user=%s", user_id)
    return row


def load_progress(
    user_id: str,
    entries: EntryStore,
    goal_settings: SettingsStore,
    now: Optional[datetime] = None,
    *,
    tz_name: Optional[str] = None,
    default_pushups_goal: float = DEFAULT_PUSHUPS_GOAL,
    default_run_km_goal: float = DEFAULT_RUN_KM_GOAL,
) -> WeeklyProgress:
    """Build the counter page payload. Store failures propagate as StoreError."""
    if now is None:
        now = datetime.now(timezone.utc)
    ymd = today_ymd(now, tz_name)

    entry = get_or_create_entry(entries, user_id, ymd)
    row = get_or_create_settings(goal_settings, user_id, default_pushups_goal, default_run_km_goal)
    pushups_goal = normalize_goal(getattr(row, "pushups_goal", None), default_pushups_goal)
    run_km_goal = normalize_goal(getattr(row, "run_km_goal", None), default_run_km_goal)

    window = week_window(now)
    week_pushups, week_run_km = aggregate_week(entries.find_all(user_id), window)

    return WeeklyProgress(
        ymd=ymd,
        entry=EntryRead.model_validate(entry),
        week_start=window[0],
        week_end=window[1],
        week_pushups=week_pushups,
        week_run_km=week_run_km,
        pushups_goal=pushups_goal,
        run_km_goal=run_km_goal,
        pushups_percent=percent(week_pushups, pushups_goal),
        run_km_percent=percent(week_run_km, run_km_goal),
    )


def load(
    user_id: str,
    entries: EntryStore,
    goal_settings: SettingsStore,
    now: Optional[datetime] = None,
) -> ActionResult:
    """Page load for the counter: load_progress with store errors turned into a failure."""
    try:
        progress = load_progress(
            user_id,
            entries,
            goal_settings,
            now,
            tz_name=app_settings.timezone,
            default_pushups_goal=app_settings.default_pushups_goal,
            default_run_km_goal=app_settings.default_run_km_goal,
        )
    except StoreError as e:
        logger.error(
            "Failed to load progress for user=%s status=%s message=%s data=%s",
            user_id, e.status, e.message, e.data,
        )
        return ActionResult.failure(500, store_error_message(e))
    return ActionResult.success(**progress.model_dump(mode="json"))
