"""Result types and response models.

Services return the frozen dataclasses below; callers that serialize
(an API or UI layer) convert them with the pydantic ``*Response`` models,
which read attributes directly and render ``CivilDate`` as ISO dates.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from exercise_streaks.services.dates_service import CivilDate


class CellStatus(StrEnum):
    """Display status of one calendar cell."""

    NONE = "none"
    COMPLETED = "completed"
    MULTIPLE_COMPLETED = "multiple-completed"
    OTHER_MONTH = "other-month"


@dataclass(frozen=True)
class RecordSummary:
    """What the calendar's day-detail view shows for one record."""

    id: int
    exercise_id: int
    exercise_name: str | None = None
    icon: str | None = None
    is_quick_record: bool = False
    notes: str | None = None


@dataclass(frozen=True)
class StreakResult:
    current_streak: int
    longest_streak: int
    streak_dates: frozenset[CivilDate] = field(default_factory=frozenset)


@dataclass(frozen=True)
class CalendarCell:
    date: CivilDate
    day_number: int
    in_current_month: bool
    is_today: bool
    record_count: int
    status: CellStatus
    is_streak_day: bool
    records: tuple[RecordSummary, ...] = ()


@dataclass(frozen=True)
class CalendarMonth:
    """A rendered month: header plus the 42-cell grid."""

    year: int
    month: int
    cells: list[CalendarCell]
    streaks: StreakResult


@dataclass(frozen=True)
class MilestoneResult:
    message: str
    category: str
    animation: str
    is_milestone: bool


@dataclass(frozen=True)
class RecordDayResult:
    """Outcome of recording a day, as shown right after the tap."""

    record_date: CivilDate
    is_duplicate: bool
    message: str
    praise: MilestoneResult
    record_id: int | None = None
    current_streak: int = 0
    total_records: int = 0


@dataclass(frozen=True)
class UserStats:
    total_records: int
    current_streak: int
    longest_streak: int
    this_month_records: int


@dataclass(frozen=True)
class FamilyStats:
    total_family_records: int
    active_family_members: int
    family_records_today: int


def _civil_to_date(value: object) -> object:
    if isinstance(value, CivilDate):
        return value.to_date()
    return value


class StreakResponse(BaseModel):
    """User's streak information."""

    model_config = ConfigDict(from_attributes=True)

    current_streak: int
    longest_streak: int
    streak_dates: list[date]

    @field_validator("streak_dates", mode="before")
    @classmethod
    def _sorted_dates(cls, value: object) -> object:
        if isinstance(value, set | frozenset):
            return sorted(_civil_to_date(v) for v in value)
        return value


class CalendarCellResponse(BaseModel):
    """One cell of the month grid."""

    model_config = ConfigDict(from_attributes=True)

    date: date
    day_number: int
    in_current_month: bool
    is_today: bool
    record_count: int
    status: CellStatus
    is_streak_day: bool

    @field_validator("date", mode="before")
    @classmethod
    def _civil_date(cls, value: object) -> object:
        return _civil_to_date(value)


class PraiseResponse(BaseModel):
    """Praise shown after recording a day."""

    model_config = ConfigDict(from_attributes=True)

    message: str
    category: str
    animation: str
    is_milestone: bool


class UserStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_records: int
    current_streak: int
    longest_streak: int
    this_month_records: int
