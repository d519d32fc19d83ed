from pydantic import BaseModel, ConfigDict


# Range and format checks happen in services.forms before these are built
class _FormRequest(BaseModel):
    model_config = ConfigDict(frozen=True)


class QuickAddRequest(_FormRequest):
    """Increment today's counts by the button deltas."""

    pushups_delta: int = 0
    run_km_delta: float = 0.0


class AddTypedRequest(_FormRequest):
    """Increment today's counts by values typed into the form."""

    pushups: int = 0
    run_km: float = 0.0


class SetTotalsRequest(_FormRequest):
    """Replace today's counts outright."""

    pushups_total: int
    run_km_total: float


class SaveEntryRequest(_FormRequest):
    """Absolute save for a given day; run_km=None leaves the stored value alone."""

    ymd: str
    pushups: int = 0
    run_km: float | None = None
