"""Error types shared by the stores and the counter operations."""

from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from typing import Any, Optional


class FormValidationError(ValueError):
    """A submitted form field is missing, not a number, or out of range."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class StoreError(Exception):
    """A read or write against the backing store failed."""

    def __init__(self, message: str = "", status: Optional[int] = None, data: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data or {}


def store_error_message(exc: BaseException) -> str:
    """Best human-readable message for a failed store call.

    Order: structured ``data["message"]``, then the error's own message,
    then a status-only message, then "unknown error".
    """
    data = getattr(exc, "data", None)
    if isinstance(data, dict):
        msg = data.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg
    msg = getattr(exc, "message", None)
    if not isinstance(msg, str) or not msg.strip():
        msg = str(exc)
    if msg.strip():
        return msg
    status = getattr(exc, "status", None)
    if status:
        return f"Request failed with status {status}."
    return "unknown error"


@dataclass
class ActionResult:
    """Outcome of a page load or form action.

    The HTTP layer turns this into a JSON response with ``status``.
    """

    ok: bool
    status: int = 200
    error: Optional[str] = None
    field: Optional[str] = None
    data: dict[str, Any] = dc_field(default_factory=dict)

    @classmethod
    def success(cls, **data: Any) -> "ActionResult":
        return cls(ok=True, status=200, data=data)

    @classmethod
    def failure(cls, status: int, error: str, field: Optional[str] = None) -> "ActionResult":
        return cls(ok=False, status=status, error=error, field=field)

    def body(self) -> dict[str, Any]:
        if self.ok:
            return {"success": True, **self.data}
        out: dict[str, Any] = {"error": self.error}
        if self.field:
            out["field"] = self.field
        return out
