from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from typing import Literal

from app.models.campaign import Campaign

WindowState = Literal["before", "open", "after"]


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Return `dt` as an aware UTC datetime.

    Naive values are taken to already be UTC: that is how they come back
    from backends without timezone support (sqlite), and how every
    timestamp is written by this service.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_tz.utc)
    return dt.astimezone(dt_tz.utc)


def window_state(now: datetime, start: datetime | None, end: datetime | None) -> WindowState:
    """
    Locate `now` relative to an optional [start, end] window.

    Both edges are inclusive: an action exactly at `start` or exactly at
    `end` is inside the window. A missing edge leaves that side open.

    Examples:
        >>> from datetime import datetime, timezone
        >>> s = datetime(2025, 3, 1, tzinfo=timezone.utc)
        >>> e = datetime(2025, 3, 10, tzinfo=timezone.utc)
        >>> window_state(s, s, e), window_state(e, s, e)
        ('open', 'open')
        >>> window_state(datetime(2025, 2, 1, tzinfo=timezone.utc), s, None)
        'before'
    """
    now = ensure_utc(now)
    start, end = ensure_utc(start), ensure_utc(end)
    if start is not None and now < start:
        return "before"
    if end is not None and now > end:
        return "after"
    return "open"


def submission_window_state(campaign: Campaign, now: datetime) -> WindowState:
    return window_state(now, campaign.submission_start, campaign.submission_end)


def campaign_phase(campaign: Campaign, now: datetime) -> str:
    """
    Derive the runtime phase of a campaign from its lifecycle status and windows.

    Lifecycle status wins over dates (cancelled/completed/draft). For an
    active campaign the furthest window reached decides:
    registration -> submission -> judging -> results.
    """
    if campaign.status == "cancelled":
        return "cancelled"
    if campaign.status == "completed":
        return "ended"
    if campaign.status == "draft":
        return "upcoming"

    results_at = ensure_utc(campaign.results_announcement_at)
    if results_at and ensure_utc(now) >= results_at:
        return "results"

    sub_state = submission_window_state(campaign, now)
    if sub_state == "after":
        return "judging"
    if sub_state == "open" and (campaign.submission_start or campaign.submission_end):
        return "submission"

    reg_state = window_state(now, campaign.registration_start, campaign.registration_end)
    if reg_state == "open":
        return "registration"
    # before registration opens, or between registration and submissions
    return "upcoming"
