from __future__ import annotations
from datetime import datetime, timedelta, timezone
import pytest
from ideathon.services.windows import (
    compute_runtime_state, deadline_status, effective_update_deadline, ensure_utc, next_deadline,
)
from conftest import T0, DAY, make_competition


def test_ensure_utc_converts_aware_values():
    ist = timezone(timedelta(hours=5, minutes=30))
    dt = ensure_utc(datetime(2025, 3, 1, 14, 30, tzinfo=ist))
    assert dt == datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert dt.tzinfo == timezone.utc


def test_effective_update_deadline():
    assert effective_update_deadline(make_competition()) == T0 + 7 * DAY
    assert effective_update_deadline(make_competition(update_deadline=T0 + 9 * DAY)) == T0 + 9 * DAY


@pytest.mark.parametrize("offset,state", [
    (-DAY, "upcoming"),
    (timedelta(0), "open"),
    (7 * DAY, "open"),
    (8 * DAY, "amendments_only"),
    (10 * DAY, "amendments_only"),
    (11 * DAY, "closed"),
])
def test_runtime_state(offset, state):
    ch = make_competition(update_deadline=T0 + 10 * DAY)
    assert compute_runtime_state(ch, T0 + offset) == state


def test_ended_overrides_window():
    assert compute_runtime_state(make_competition(status="ended"), T0 + DAY) == "ended"


def test_next_deadline_moves_to_update_deadline():
    ch = make_competition(update_deadline=T0 + 10 * DAY)
    assert next_deadline(ch, T0 + DAY) == T0 + 7 * DAY
    assert next_deadline(ch, T0 + 8 * DAY) == T0 + 10 * DAY


@pytest.mark.parametrize("left,days,urgency", [
    (timedelta(hours=1), 1, "urgent"),
    (3 * DAY, 3, "urgent"),
    (3 * DAY + timedelta(minutes=1), 4, "approaching"),
    (7 * DAY, 7, "approaching"),
    (8 * DAY, 8, "normal"),
])
def test_deadline_status_rounds_up(left, days, urgency):
    s = deadline_status(T0 + left, T0)
    assert s["days_remaining"] == days
    assert s["urgency"] == urgency
    assert s["is_overdue"] is False


def test_overdue_deadline():
    s = deadline_status(T0, T0 + 2 * DAY)
    assert s == {"deadline": T0, "is_overdue": True, "days_remaining": 0, "urgency": "urgent"}
