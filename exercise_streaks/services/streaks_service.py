"""Streak calculation over a user's record dates.

This is the single implementation behind calendar highlighting, praise
generation, and stats. Rules:
- A streak is a maximal run of calendar-consecutive days with a record
- Several records on one day count once
- current_streak only counts a run that includes the as-of day; a run that
  ended yesterday reports 0 until today is recorded
- longest_streak is the all-time high, independent of the as-of day
- streak_dates holds every day of every run of 2+ days (singletons are
  never highlighted)
"""

from collections.abc import Iterable

from exercise_streaks.schemas import StreakResult
from exercise_streaks.services.dates_service import (
    CivilDate,
    add_days,
    is_consecutive,
)

MIN_HIGHLIGHT_RUN = 2


def _runs(dates: Iterable[CivilDate]) -> list[list[CivilDate]]:
    """Split distinct dates into ascending runs of consecutive days."""
    runs: list[list[CivilDate]] = []
    for d in sorted(set(dates)):
        if runs and is_consecutive(runs[-1][-1], d):
            runs[-1].append(d)
        else:
            runs.append([d])
    return runs


def current_streak(dates: Iterable[CivilDate], as_of: CivilDate) -> int:
    """Length of the run ending on ``as_of``, or 0 if ``as_of`` has no record."""
    unique_dates = dates if isinstance(dates, set | frozenset) else set(dates)
    if as_of not in unique_dates:
        return 0

    streak = 1
    day = as_of
    # Each step moves one day back, so the run can never exceed the set size.
    # Ordinal 1 is 0001-01-01; nothing earlier is representable.
    while streak < len(unique_dates) and day.ordinal > 1:
        day = add_days(day, -1)
        if day not in unique_dates:
            break
        streak += 1
    return streak


def longest_streak(dates: Iterable[CivilDate]) -> int:
    """Longest run ever recorded; 0 for no records."""
    longest = 0
    run_length = 0
    previous: CivilDate | None = None

    for d in sorted(set(dates)):
        if previous is not None and is_consecutive(previous, d):
            run_length += 1
        else:
            run_length = 1
        longest = max(longest, run_length)
        previous = d

    return longest


def streak_dates(dates: Iterable[CivilDate]) -> frozenset[CivilDate]:
    """Every date that belongs to a run of at least two days."""
    return frozenset(
        d for run in _runs(dates) if len(run) >= MIN_HIGHLIGHT_RUN for d in run
    )


def compute_streaks(dates: Iterable[CivilDate], as_of: CivilDate) -> StreakResult:
    """Current streak, longest streak, and highlighted dates in one pass.

    Args:
        dates: Record dates for one user; duplicates are fine
        as_of: The day the current streak must include (usually today)

    Returns:
        StreakResult with the three views of the same history
    """
    unique_dates = frozenset(dates)
    runs = _runs(unique_dates)

    return StreakResult(
        current_streak=current_streak(unique_dates, as_of),
        longest_streak=max((len(run) for run in runs), default=0),
        streak_dates=frozenset(
            d for run in runs if len(run) >= MIN_HIGHLIGHT_RUN for d in run
        ),
    )
