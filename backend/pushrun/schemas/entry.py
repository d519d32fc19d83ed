from datetime import datetime

from pydantic import BaseModel, ConfigDict


class EntryRead(BaseModel):
    """A single day's entry as returned to the frontend."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    ymd: str
    date: datetime  # midnight UTC of ymd
    pushups: int = 0
    run_km: float = 0.0


class WeeklyProgress(BaseModel):
    """Everything the counter page needs on load."""

    ymd: str
    entry: EntryRead
    week_start: datetime
    week_end: datetime

    week_pushups: int
    week_run_km: float

    pushups_goal: float
    run_km_goal: float

    pushups_percent: int  # 0..100
    run_km_percent: int  # 0..100
