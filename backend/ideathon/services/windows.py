from __future__ import annotations
import math
from datetime import datetime, timedelta, timezone as dt_tz
from ideathon.config import settings
from ideathon.models.competition import Competition

DAY = timedelta(days=1)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize an instant to an aware UTC datetime.

    Naive values are taken to already be UTC (some drivers hand them back
    that way); aware values are converted.

    Examples:
        >>> ensure_utc(datetime(2025, 1, 10, 12, 0)).tzinfo
        datetime.timezone.utc
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_tz.utc)
    return dt.astimezone(dt_tz.utc)


def effective_update_deadline(ch: Competition) -> datetime:
    # Without an explicit update deadline, amendments close with registration.
    return ensure_utc(ch.update_deadline or ch.registration_deadline)


def compute_runtime_state(ch: Competition, now: datetime) -> str:
    if ch.status == "ended":
        return "ended"
    now = ensure_utc(now)
    if now < ensure_utc(ch.opens_at):
        return "upcoming"
    if now <= ensure_utc(ch.registration_deadline):
        return "open"
    if now <= effective_update_deadline(ch):
        return "amendments_only"
    return "closed"


def next_deadline(ch: Competition, now: datetime) -> datetime:
    """Registration deadline while it is still ahead, otherwise the amendment deadline."""
    reg_deadline = ensure_utc(ch.registration_deadline)
    return reg_deadline if ensure_utc(now) <= reg_deadline else effective_update_deadline(ch)


def deadline_status(deadline: datetime, now: datetime) -> dict:
    """
    Summarize how close a deadline is.

    days_remaining rounds partial days up and never goes below zero.
    Urgency: <= URGENT_WITHIN_DAYS is "urgent", <= APPROACHING_WITHIN_DAYS is
    "approaching", anything further out is "normal".
    """
    deadline = ensure_utc(deadline)
    remaining = deadline - ensure_utc(now)
    days = max(0, math.ceil(remaining / DAY))
    if days <= settings.urgent_within_days:
        urgency = "urgent"
    elif days <= settings.approaching_within_days:
        urgency = "approaching"
    else:
        urgency = "normal"
    return {
        "deadline": deadline,
        "is_overdue": remaining < timedelta(0),
        "days_remaining": days,
        "urgency": urgency,
    }
