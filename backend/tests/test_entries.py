from datetime import datetime, timezone

import pytest

from pushrun.core.constants import MAX_PUSHUPS
from pushrun.core.time_utils import today_ymd, ymd_to_timestamp
from pushrun.services.entries import add_typed, quick_add, save_entry, set_totals
from pushrun.services.errors import StoreError, store_error_message
from pushrun.services.forms import set_totals_request

NOW = datetime(2026, 1, 7, 12, 0, tzinfo=timezone.utc)
TODAY = today_ymd(NOW, "UTC")


@pytest.fixture
def today_store(make_entry_store):
    def build(pushups=0, run_km=0.0, **kwargs):
        return make_entry_store(
            [{"user_id": "u1", "ymd": TODAY, "date": ymd_to_timestamp(TODAY), "pushups": pushups, "run_km": run_km}],
            **kwargs,
        )
    return build


def _today(store):
    return store.find_one("u1", TODAY)


def test_quick_add_increments_existing_entry(today_store):
    store = today_store(pushups=5, run_km=1.5)
    result = quick_add("u1", {"pushupsDelta": "10", "runKmDelta": "2"}, store, now=NOW)
    assert result.ok, result.error
    assert _today(store).pushups == 15
    assert _today(store).run_km == 3.5
    assert result.body()["entry"]["pushups"] == 15


def test_quick_add_creates_entry_when_missing(make_entry_store):
    store = make_entry_store()
    result = quick_add("u1", {"pushupsDelta": "10"}, store, now=NOW)
    assert result.ok
    assert [w[0] for w in store.writes] == ["create", "update"]
    assert _today(store).pushups == 10
    assert _today(store).run_km == 0


def test_quick_add_negative_is_rejected_without_touching_store(today_store):
    store = today_store(pushups=5)
    result = quick_add("u1", {"pushupsDelta": "-1"}, store, now=NOW)
    assert not result.ok
    assert result.status == 400
    assert result.field == "pushupsDelta"
    assert "non-negative" in result.error
    assert store.writes == []
    assert _today(store).pushups == 5


@pytest.mark.parametrize("bad", ["abc", "nan", "inf", "-0.5", "2.5", "1_000", "0x10", "1e20", "1e400"])
def test_add_typed_rejects_bad_pushups(today_store, bad):
    store = today_store()
    result = add_typed("u1", {"pushups": bad, "runKm": "1"}, store, now=NOW)
    assert result.status == 400
    assert result.field == "pushups"
    assert store.writes == []


def test_add_typed_rejects_huge_pushups_before_store(today_store):
    store = today_store()
    result = add_typed("u1", {"pushups": "1e20"}, store, now=NOW)
    assert result.status == 400
    assert result.error == "Pushups is too large."
    assert store.writes == []


def test_add_typed_accepts_largest_count(today_store):
    store = today_store()
    result = add_typed("u1", {"pushups": str(MAX_PUSHUPS)}, store, now=NOW)
    assert result.ok
    assert _today(store).pushups == MAX_PUSHUPS


def test_quick_add_rejects_increment_past_cap(today_store):
    store = today_store(pushups=MAX_PUSHUPS - 1)
    result = quick_add("u1", {"pushupsDelta": "5"}, store, now=NOW)
    assert result.status == 400
    assert result.field == "pushupsDelta"
    assert store.writes == []
    assert _today(store).pushups == MAX_PUSHUPS - 1


def test_run_km_rejects_python_only_number_syntax(today_store):
    store = today_store()
    result = add_typed("u1", {"runKm": "1_000"}, store, now=NOW)
    assert result.status == 400
    assert result.field == "runKm"
    assert store.writes == []


@pytest.mark.parametrize("action, form", [(quick_add, {"pushupsDelta": "0"}), (add_typed, {"pushups": "0", "runKm": "0"})])
def test_zero_increment_on_new_day_only_creates_entry(make_entry_store, action, form):
    store = make_entry_store()
    result = action("u1", form, store, now=NOW)
    assert result.ok
    assert [w[0] for w in store.writes] == ["create"]
    assert _today(store).pushups == 0


def test_add_typed_zero_is_a_no_op(today_store):
    store = today_store(pushups=7, run_km=2.0)
    result = add_typed("u1", {"pushups": "0", "runKm": "0"}, store, now=NOW)
    assert result.ok
    assert store.writes == []
    assert _today(store).pushups == 7


def test_add_typed_blank_fields_count_as_zero(today_store):
    store = today_store(pushups=7, run_km=2.0)
    result = add_typed("u1", {"pushups": "", "runKm": "0.5"}, store, now=NOW)
    assert result.ok
    assert _today(store).pushups == 7
    assert _today(store).run_km == 2.5


def test_set_totals_replaces_values(today_store):
    store = today_store(pushups=100, run_km=9.0)
    result = set_totals("u1", {"pushupsTotal": "20", "runKmTotal": "3.5"}, store, now=NOW)
    assert result.ok
    assert _today(store).pushups == 20
    assert _today(store).run_km == 3.5


def test_set_totals_requires_both_fields(today_store):
    store = today_store(pushups=100)
    result = set_totals("u1", {"pushupsTotal": "20"}, store, now=NOW)
    assert result.status == 400
    assert result.field == "runKmTotal"
    assert store.writes == []


def test_set_totals_request_record():
    req = set_totals_request({"pushupsTotal": " 12 ", "runKmTotal": "4.25"})
    assert req.pushups_total == 12
    assert req.run_km_total == 4.25


def test_save_entry_creates_then_updates(make_entry_store):
    store = make_entry_store()
    result = save_entry("u1", {"ymd": "2026-01-03", "pushups": "40", "runKm": "6"}, store)
    assert result.ok
    entry = store.find_one("u1", "2026-01-03")
    assert (entry.pushups, entry.run_km) == (40, 6.0)
    assert entry.date == ymd_to_timestamp("2026-01-03")

    # blank runKm keeps the stored distance
    result = save_entry("u1", {"ymd": "2026-01-03", "pushups": "12", "runKm": ""}, store)
    assert result.ok
    assert (entry.pushups, entry.run_km) == (12, 6.0)
    assert store.writes[-1] == ("update", entry.id, {"pushups": 12})


def test_save_entry_rejects_bad_date(make_entry_store):
    store = make_entry_store()
    result = save_entry("u1", {"ymd": "07/01/2026", "pushups": "1"}, store)
    assert result.status == 400
    assert result.field == "ymd"
    assert store.writes == []


def test_store_error_becomes_failure(today_store, caplog):
    store = today_store(pushups=1, fail_on={"update"})
    with caplog.at_level("ERROR"):
        result = quick_add("u1", {"pushupsDelta": "1"}, store, now=NOW)
    assert not result.ok
    assert result.status == 500
    assert result.error == "update unavailable"
    assert "quick_add failed" in caplog.text


@pytest.mark.parametrize(
    "exc, expected",
    [
        (StoreError("plain", status=400, data={"message": "Structured"}), "Structured"),
        (StoreError("Failed to update entry.", status=400), "Failed to update entry."),
        (StoreError("", status=503), "Request failed with status 503."),
        (StoreError(""), "unknown error"),
        (RuntimeError("boom"), "boom"),
    ],
)
def test_store_error_message_fallbacks(exc, expected):
    assert store_error_message(exc) == expected


def test_set_totals_store_error_becomes_failure(today_store):
    store = today_store(pushups=100, fail_on={"update"})
    result = set_totals("u1", {"pushupsTotal": "20", "runKmTotal": "3.5"}, store, now=NOW)
    assert result.status == 500
    assert result.error == "update unavailable"
    assert _today(store).pushups == 100


def test_save_entry_store_error_becomes_failure(make_entry_store):
    store = make_entry_store(fail_on={"create"})
    result = save_entry("u1", {"ymd": "2026-01-03", "pushups": "5"}, store)
    assert result.status == 500
    assert result.error == "create unavailable"
    assert store.find_one("u1", "2026-01-03") is None
