"""
Pregnancy progress: percent of full term completed and weeks left until the due date.

Progress is derived on demand and never persisted.
"""
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from maternal_svc.core.datetime_utils import to_utc, utc_now
from maternal_svc.schemas.views import PregnancyProgress

FULL_TERM_WEEKS = 40

_WEEK = timedelta(weeks=1)


def percent_complete(
    current_week: Optional[int],
    full_term_weeks: int = FULL_TERM_WEEKS,
    clamp: bool = False,
) -> int:
    """
    Percent of a full-term pregnancy completed, rounded half up.

    Weeks past full term give more than 100 unless ``clamp`` is set.
    """
    week = current_week or 0
    percent = math.floor(week * 100 / full_term_weeks + 0.5)
    if clamp:
        percent = min(max(percent, 0), 100)
    return percent


def weeks_remaining(due_date: Optional[date], now: Optional[datetime] = None) -> int:
    """
    Whole weeks until the due date, rounded up and never negative.

    The due date counts from its midnight UTC. No due date means 0.
    """
    if due_date is None:
        return 0
    now = to_utc(now) if now is not None else utc_now()
    due = datetime.combine(due_date, time.min, tzinfo=timezone.utc)
    weeks = math.ceil((due - now) / _WEEK)
    return max(0, weeks)


def calculate_progress(
    due_date: Optional[date],
    current_week: Optional[int],
    now: Optional[datetime] = None,
    full_term_weeks: int = FULL_TERM_WEEKS,
    clamp: bool = False,
) -> PregnancyProgress:
    """
    Compute pregnancy progress. Never fails; missing inputs count as unset.

    Args:
        due_date: Expected delivery date, if known.
        current_week: Current gestational week, if known (treated as 0 otherwise).
        now: Reference time; defaults to the current UTC time.
        full_term_weeks: Length of a full-term pregnancy.
        clamp: Cap percent complete at 100.

    Example:
        >>> calculate_progress(None, 20).percent_complete
        50
    """
    return PregnancyProgress(
        percent_complete=percent_complete(current_week, full_term_weeks, clamp),
        weeks_remaining=weeks_remaining(due_date, now),
    )
