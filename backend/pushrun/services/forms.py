"""Coerce raw form fields into validated request records.

Form values arrive as strings (or are missing). Everything is checked here,
before any store is touched, and failures raise FormValidationError naming
the offending field.
"""

from __future__ import annotations

import math
import re
from typing import Mapping, Optional

from pushrun.core.constants import MAX_PUSHUPS
from pushrun.core.time_utils import today_ymd, ymd_to_timestamp
from pushrun.schemas.forms import (
    AddTypedRequest,
    QuickAddRequest,
    SaveEntryRequest,
    SetTotalsRequest,
)
from pushrun.services.errors import FormValidationError


# Plain decimal with optional exponent: "12", "3.5", ".5", "1e3"
NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

FIELD_LABELS = {
    "pushups": "Pushups",
    "pushupsDelta": "Pushups",
    "pushupsTotal": "Pushups total",
    "runKm": "Run km",
    "runKmDelta": "Run km",
    "runKmTotal": "Run km total",
    "ymd": "Date",
}


def _label(field: str) -> str:
    return FIELD_LABELS.get(field, field)


def _is_blank(raw) -> bool:
    return raw is None or (isinstance(raw, str) and raw.strip() == "")


def parse_number(
    form: Mapping[str, Optional[str]],
    field: str,
    *,
    required: bool = False,
    default: Optional[float] = None,
) -> Optional[float]:
    """Read `field` as a finite, non-negative number.

    Blank or missing values give `default` unless `required` is set.
    """
    raw = form.get(field)
    if _is_blank(raw):
        if required:
            raise FormValidationError(field, f"{_label(field)} is required.")
        return default
    text = str(raw).strip()
    if not NUMBER_RE.match(text):
        raise FormValidationError(field, f"{_label(field)} must be a number.")
    value = float(text)
    if not math.isfinite(value) or value < 0:
        raise FormValidationError(field, f"{_label(field)} must be a non-negative number.")
    return value


def parse_count(
    form: Mapping[str, Optional[str]],
    field: str,
    *,
    required: bool = False,
    default: Optional[int] = None,
) -> Optional[int]:
    """Like parse_number, but the value must also be a whole number."""
    value = parse_number(form, field, required=required, default=default)
    if value is None:
        return None
    if not float(value).is_integer():
        raise FormValidationError(field, f"{_label(field)} must be a whole number.")
    if value > MAX_PUSHUPS:
        raise FormValidationError(field, f"{_label(field)} is too large.")
    return int(value)


def parse_ymd(form: Mapping[str, Optional[str]], field: str = "ymd", *, tz_name: Optional[str] = None) -> str:
    raw = form.get(field)
    if _is_blank(raw):
        return today_ymd(tz_name=tz_name)
    ymd = str(raw).strip()
    try:
        ymd_to_timestamp(ymd)
    except ValueError:
        raise FormValidationError(field, f"{_label(field)} must be in YYYY-MM-DD format.")
    return ymd


def quick_add_request(form: Mapping[str, Optional[str]]) -> QuickAddRequest:
    return QuickAddRequest(
        pushups_delta=parse_count(form, "pushupsDelta", default=0),
        run_km_delta=parse_number(form, "runKmDelta", default=0.0),
    )


def add_typed_request(form: Mapping[str, Optional[str]]) -> AddTypedRequest:
    return AddTypedRequest(
        pushups=parse_count(form, "pushups", default=0),
        run_km=parse_number(form, "runKm", default=0.0),
    )


def set_totals_request(form: Mapping[str, Optional[str]]) -> SetTotalsRequest:
    return SetTotalsRequest(
        pushups_total=parse_count(form, "pushupsTotal", required=True),
        run_km_total=parse_number(form, "runKmTotal", required=True),
    )


def save_entry_request(form: Mapping[str, Optional[str]], *, tz_name: Optional[str] = None) -> SaveEntryRequest:
    return SaveEntryRequest(
        ymd=parse_ymd(form, tz_name=tz_name),
        pushups=parse_count(form, "pushups", default=0),
        run_km=parse_number(form, "runKm"),
    )
