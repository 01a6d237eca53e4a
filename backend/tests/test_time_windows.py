from __future__ import annotations
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from app.services.time_windows import ensure_utc, window_state, campaign_phase
import pytest

T0 = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _campaign(status="active", **windows):
    fields = dict(
        status=status,
        registration_start=None, registration_end=None,
        submission_start=None, submission_end=None,
        results_announcement_at=None,
    )
    fields.update(windows)
    return SimpleNamespace(**fields)


def test_ensure_utc_treats_naive_as_utc():
    naive = datetime(2025, 3, 1, 12, 0)
    assert ensure_utc(naive) == T0
    assert ensure_utc(naive).tzinfo == timezone.utc
    assert ensure_utc(None) is None


def test_ensure_utc_converts_other_offsets():
    plus_two = T0.astimezone(timezone(timedelta(hours=2)))
    assert ensure_utc(plus_two) == T0
    assert ensure_utc(plus_two).utcoffset() == timedelta(0)


def test_window_edges_are_inclusive():
    start, end = T0, T0 + timedelta(days=7)
    assert window_state(start, start, end) == "open"
    assert window_state(end, start, end) == "open"
    assert window_state(start - timedelta(microseconds=1), start, end) == "before"
    assert window_state(end + timedelta(microseconds=1), start, end) == "after"


def test_missing_edges_leave_window_open_on_that_side():
    assert window_state(T0, None, None) == "open"
    assert window_state(T0 - timedelta(days=365), None, T0) == "open"
    assert window_state(T0 + timedelta(days=365), T0, None) == "open"


def test_naive_and_aware_mix():
    """Rows read back from sqlite are naive; callers pass aware datetimes."""
    naive_start = datetime(2025, 3, 1, 12, 0)
    assert window_state(T0, naive_start, None) == "open"


@pytest.mark.parametrize("status,expected", [
    ("cancelled", "cancelled"),
    ("completed", "ended"),
    ("draft", "upcoming"),
])
def test_lifecycle_status_wins_over_dates(status, expected):
    ch = _campaign(status, submission_start=T0 - timedelta(days=1), submission_end=T0 + timedelta(days=1))
    assert campaign_phase(ch, T0) == expected


def test_active_campaign_walks_through_phases():
    ch = _campaign(
        registration_start=T0,
        registration_end=T0 + timedelta(days=5),
        submission_start=T0 + timedelta(days=6),
        submission_end=T0 + timedelta(days=10),
        results_announcement_at=T0 + timedelta(days=15),
    )
    assert campaign_phase(ch, T0 - timedelta(days=1)) == "upcoming"
    assert campaign_phase(ch, T0 + timedelta(days=1)) == "registration"
    assert campaign_phase(ch, T0 + timedelta(days=5, hours=12)) == "upcoming"
    assert campaign_phase(ch, T0 + timedelta(days=7)) == "submission"
    assert campaign_phase(ch, T0 + timedelta(days=12)) == "judging"
    assert campaign_phase(ch, T0 + timedelta(days=15)) == "results"


def test_active_campaign_without_dates_is_open_for_registration():
    assert campaign_phase(_campaign(), T0) == "registration"
