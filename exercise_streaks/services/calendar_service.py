"""Month grid for the calendar view.

The grid is always 6 weeks x 7 days starting on a Sunday, so the layout
never jumps between months of different lengths.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from exercise_streaks.schemas import CalendarCell, CellStatus, RecordSummary
from exercise_streaks.services.dates_service import (
    CivilDate,
    InvalidDateError,
    add_days,
    day_of_week,
    month_start,
)
from exercise_streaks.services.streaks_service import streak_dates as find_streak_dates

GRID_WEEKS = 6
DAYS_PER_WEEK = 7
GRID_SIZE = GRID_WEEKS * DAYS_PER_WEEK


def grid_start(year: int, month: int) -> CivilDate:
    """The Sunday on or before the 1st of the month.

    Raises:
        InvalidDateError: If the month is invalid, or if its 6-week grid
            would reach before 0001-01-01 or past 9999-12-31 (only 0001-01 and
            9999-12 do)
    """
    first = month_start(year, month)
    start_ordinal = first.ordinal - day_of_week(first)
    if start_ordinal < 1 or start_ordinal + GRID_SIZE - 1 > date.max.toordinal():
        raise InvalidDateError(
            (year, month), "6-week grid falls outside 0001-01-01..9999-12-31"
        )
    return add_days(first, -day_of_week(first))


def _cell_status(in_current_month: bool, record_count: int) -> CellStatus:
    if not in_current_month:
        return CellStatus.OTHER_MONTH
    if record_count > 1:
        return CellStatus.MULTIPLE_COMPLETED
    if record_count == 1:
        return CellStatus.COMPLETED
    return CellStatus.NONE


def build_month(
    year: int,
    month: int,
    records_by_date: Mapping[CivilDate, Sequence[RecordSummary]],
    today: CivilDate,
    *,
    streak_dates: Iterable[CivilDate] | None = None,
) -> list[CalendarCell]:
    """Build the 42 cells for one month.

    Args:
        year: Target year
        month: Target month (1-12)
        records_by_date: Records per civil date; dates with no records may
            be absent
        today: Today's civil date in the reference timezone
        streak_dates: Dates in runs of 2+ days. Derived from
            ``records_by_date`` when omitted; pass the full history so runs
            that cross the month edge still highlight.

    Raises:
        InvalidDateError: If ``month`` is not 1-12, or the grid cannot be
            represented (see ``grid_start``)
    """
    start = grid_start(year, month)
    if streak_dates is None:
        highlighted = find_streak_dates(
            d for d, recs in records_by_date.items() if recs
        )
    else:
        highlighted = frozenset(streak_dates)

    cells: list[CalendarCell] = []
    for offset in range(GRID_SIZE):
        cell_date = add_days(start, offset)
        records = tuple(records_by_date.get(cell_date, ()))
        in_current_month = cell_date.month == month
        status = _cell_status(in_current_month, len(records))

        cells.append(
            CalendarCell(
                date=cell_date,
                day_number=cell_date.day,
                in_current_month=in_current_month,
                is_today=cell_date == today,
                record_count=len(records),
                status=status,
                # Only single-record days carry the streak flag
                is_streak_day=cell_date in highlighted
                and status == CellStatus.COMPLETED,
                records=records,
            )
        )

    return cells


def weeks(cells: Sequence[CalendarCell]) -> list[list[CalendarCell]]:
    """Split a flat grid into week rows, Sunday first."""
    return [
        list(cells[i : i + DAYS_PER_WEEK]) for i in range(0, len(cells), DAYS_PER_WEEK)
    ]
