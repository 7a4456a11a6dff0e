"""Civil-date utilities shared by the streak, calendar, and praise logic.

Every date inside the core is a ``CivilDate``: a (year, month, day) triple in
the family's reference timezone. Wall-clock instants are turned into civil
dates exactly once, by ``normalize``, using an explicit fixed UTC offset.
Nothing here reads the process-local timezone or the current time; the only
clock lives behind the ``Clock`` protocol and is injected by callers.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, timezone
from typing import Protocol, Self

# Japan Standard Time, the default reference timezone
JST_OFFSET = timedelta(hours=9)

_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


class InvalidDateError(ValueError):
    """Raised when a value cannot be a valid civil date."""

    def __init__(self, value: object, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid date {value!r}: {reason}")


@dataclass(frozen=True, order=True, slots=True)
class CivilDate:
    """Immutable calendar date without time of day.

    Ordering is lexicographic on (year, month, day). Construction fails fast
    on impossible dates instead of rolling them over.
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        parts = (self.year, self.month, self.day)
        if not all(isinstance(p, int) and not isinstance(p, bool) for p in parts):
            raise InvalidDateError(parts, "year, month and day must be integers")
        if not 1 <= self.year <= 9999:
            raise InvalidDateError(parts, "year out of range")
        if not 1 <= self.month <= 12:
            raise InvalidDateError(parts, "month must be in 1..12")
        last_day = calendar.monthrange(self.year, self.month)[1]
        if not 1 <= self.day <= last_day:
            raise InvalidDateError(
                parts, f"day must be in 1..{last_day} for {self.year}-{self.month:02d}"
            )

    @classmethod
    def from_date(cls, value: date) -> Self:
        return cls(value.year, value.month, value.day)

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse a strict ``YYYY-MM-DD`` string."""
        match = _ISO_DATE_RE.match(value)
        if not match:
            raise InvalidDateError(value, "expected YYYY-MM-DD")
        year, month, day = (int(g) for g in match.groups())
        return cls(year, month, day)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def ordinal(self) -> int:
        """Proleptic Gregorian ordinal, 0001-01-01 being 1."""
        return self.to_date().toordinal()

    def __str__(self) -> str:
        return self.isoformat()


def _as_timezone(offset: timedelta | int) -> timezone:
    if isinstance(offset, bool):
        raise TypeError("offset must be a timedelta or whole hours")
    if isinstance(offset, int):
        offset = timedelta(hours=offset)
    if not timedelta(hours=-24) < offset < timedelta(hours=24):
        raise ValueError(f"offset must be strictly within +/-24h, got {offset}")
    return timezone(offset)


def normalize(
    value: datetime | date | CivilDate | str | int | float,
    offset: timedelta | int,
) -> CivilDate:
    """Return the civil date of ``value`` as observed at the fixed ``offset``.

    Aware datetimes are converted to the reference offset whatever their own
    offset is; naive datetimes and POSIX timestamps are taken as UTC. Plain
    dates and ``YYYY-MM-DD`` strings are already civil and pass through.

    Args:
        value: Instant or date to normalize
        offset: Reference UTC offset, as a timedelta or whole hours

    Raises:
        InvalidDateError: If the value is not a real date or instant
        TypeError: If the value has an unsupported type
    """
    tz = _as_timezone(offset)

    if isinstance(value, CivilDate):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return CivilDate.from_date(value.astimezone(tz).date())
    if isinstance(value, date):
        return CivilDate.from_date(value)
    if isinstance(value, bool):
        raise TypeError(f"Cannot normalize {type(value).__name__} to a date")
    if isinstance(value, int | float):
        try:
            instant = datetime.fromtimestamp(value, tz=UTC)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidDateError(value, "timestamp out of range") from e
        return CivilDate.from_date(instant.astimezone(tz).date())
    if isinstance(value, str):
        text = value.strip()
        if _ISO_DATE_RE.match(text):
            return CivilDate.parse(text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidDateError(value, "not an ISO-8601 date or datetime") from e
        return normalize(parsed, offset)

    raise TypeError(f"Cannot normalize {type(value).__name__} to a date")


def add_days(value: CivilDate, days: int) -> CivilDate:
    """Shift a civil date by whole days, rolling over months and years."""
    try:
        shifted = date.fromordinal(value.ordinal + days)
    except (OverflowError, ValueError) as e:
        raise InvalidDateError(
            value, f"shifting by {days} days leaves 0001..9999"
        ) from e
    return CivilDate.from_date(shifted)


def compare(a: CivilDate, b: CivilDate) -> int:
    """Three-way comparison: -1, 0 or 1."""
    return (a > b) - (a < b)


def is_consecutive(a: CivilDate, b: CivilDate) -> bool:
    """True iff ``b`` is the day right after ``a``."""
    return b.ordinal - a.ordinal == 1


def day_of_week(value: CivilDate) -> int:
    """Day of week with Sunday as 0 and Saturday as 6."""
    return value.to_date().isoweekday() % 7


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidDateError((year, month), "month must be in 1..12")
    return calendar.monthrange(year, month)[1]


def month_start(year: int, month: int) -> CivilDate:
    return CivilDate(year, month, 1)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by ``delta`` months for calendar navigation."""
    if not 1 <= month <= 12:
        raise InvalidDateError((year, month), "month must be in 1..12")
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class Clock(Protocol):
    """Source of "today" in the reference timezone."""

    def today(self) -> CivilDate: ...


class SystemClock:
    """Reads the UTC wall clock and normalizes it to a fixed offset."""

    def __init__(self, offset: timedelta | int = JST_OFFSET):
        self._tz = _as_timezone(offset)

    @property
    def offset(self) -> timedelta:
        return self._tz.utcoffset(None)

    def today(self) -> CivilDate:
        return normalize(datetime.now(UTC), self.offset)


@dataclass(frozen=True)
class FixedClock:
    """Clock pinned to one civil date."""

    day: CivilDate

    def today(self) -> CivilDate:
        return self.day
