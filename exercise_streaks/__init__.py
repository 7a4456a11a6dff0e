"""Streak, calendar, and praise engine for a family exercise log.

Usage:
    from exercise_streaks import build_month, classify_praise, compute_streaks

    streaks = compute_streaks(dates, as_of=today)
    cells = build_month(2024, 6, records_by_date, today)
    praise = classify_praise(streaks.current_streak, total_records)
"""

from exercise_streaks.schemas import (
    CalendarCell,
    CellStatus,
    MilestoneResult,
    StreakResult,
)
from exercise_streaks.services.calendar_service import build_month
from exercise_streaks.services.dates_service import (
    CivilDate,
    InvalidDateError,
    add_days,
    compare,
    is_consecutive,
    normalize,
)
from exercise_streaks.services.praise_service import classify_praise
from exercise_streaks.services.streaks_service import compute_streaks

__all__ = [
    "CalendarCell",
    "CellStatus",
    "CivilDate",
    "InvalidDateError",
    "MilestoneResult",
    "StreakResult",
    "add_days",
    "build_month",
    "classify_praise",
    "compare",
    "compute_streaks",
    "is_consecutive",
    "normalize",
]
