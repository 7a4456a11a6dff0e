"""Record service: recording days, stats, and calendar months.

This module is the glue between the record store and the pure engines:
- Recording a day (quick one-tap record or a specific exercise) and
  choosing the praise for it
- User and family stats
- The calendar month with streak highlighting

Every streak figure comes from ``streaks_service``; nothing here counts
consecutive days on its own. Reads that feed praise happen after the
insert, so milestones see the post-insert totals.
"""

from typing import Protocol

from exercise_streaks.core import get_logger
from exercise_streaks.core.config import get_settings
from exercise_streaks.schemas import (
    CalendarMonth,
    FamilyStats,
    RecordDayResult,
    RecordSummary,
    UserStats,
)
from exercise_streaks.services.calendar_service import (
    GRID_SIZE,
    build_month,
    grid_start,
)
from exercise_streaks.services.dates_service import CivilDate, Clock, add_days
from exercise_streaks.services.praise_service import (
    ALREADY_RECORDED_MESSAGE,
    ALREADY_RECORDED_PRAISE,
    MessagePicker,
    classify_praise,
)
from exercise_streaks.services.streaks_service import compute_streaks, current_streak

logger = get_logger(__name__)

RECORDED_MESSAGE = "記録しました"


class StoredUser(Protocol):
    id: int
    default_exercise_id: int | None


class StoredRecord(Protocol):
    id: int


class RecordStore(Protocol):
    """What the services need from persistence."""

    async def get_user(self, user_id: int) -> StoredUser | None: ...

    async def get_exercise(self, exercise_id: int) -> object | None: ...

    async def list_record_dates(self, user_id: int) -> frozenset[CivilDate]: ...

    async def list_records_in_range(
        self, user_id: int, start: CivilDate, end: CivilDate
    ) -> dict[CivilDate, list[RecordSummary]]: ...

    async def list_records_by_date(
        self, user_id: int, year: int, month: int
    ) -> dict[CivilDate, list[RecordSummary]]: ...

    async def count_total_records(self, user_id: int) -> int: ...

    async def count_records_in_month(
        self, user_id: int, year: int, month: int
    ) -> int: ...

    async def has_record_on_date(
        self, user_id: int, record_date: CivilDate
    ) -> bool: ...

    async def has_exercise_on_date(
        self, user_id: int, exercise_id: int, record_date: CivilDate
    ) -> bool: ...

    async def insert_record(
        self,
        user_id: int,
        exercise_id: int,
        record_date: CivilDate,
        *,
        is_quick_record: bool = False,
        notes: str | None = None,
    ) -> StoredRecord: ...

    async def delete_record(self, user_id: int, record_id: int) -> bool: ...

    async def count_all_records(self) -> int: ...

    async def count_active_users_in_month(self, year: int, month: int) -> int: ...

    async def count_records_on_date(self, record_date: CivilDate) -> int: ...


class RecordValidationError(Exception):
    """Raised when a record request fails validation."""

    pass


class UnknownUserError(RecordValidationError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"Unknown user: {user_id}")


class UnknownExerciseError(RecordValidationError):
    def __init__(self, exercise_id: int):
        self.exercise_id = exercise_id
        super().__init__(f"Unknown exercise: {exercise_id}")


class FutureDateError(RecordValidationError):
    """Raised when recording a day after today in the reference timezone."""

    def __init__(self, record_date: CivilDate, today: CivilDate):
        self.record_date = record_date
        self.today = today
        super().__init__(f"Cannot record future date {record_date} (today is {today})")


class RecordNotFoundError(Exception):
    def __init__(self, user_id: int, record_id: int):
        self.user_id = user_id
        self.record_id = record_id
        super().__init__(f"Record {record_id} not found for user {user_id}")


def _reject_future(day: CivilDate, clock: Clock) -> None:
    today = clock.today()
    if day > today:
        raise FutureDateError(day, today)


async def _require_user(store: RecordStore, user_id: int) -> StoredUser:
    user = await store.get_user(user_id)
    if user is None:
        raise UnknownUserError(user_id)
    return user


async def _duplicate_result(
    store: RecordStore,
    user_id: int,
    day: CivilDate,
    dates: frozenset[CivilDate],
) -> RecordDayResult:
    logger.info("record.duplicate", user_id=user_id, record_date=str(day))
    return RecordDayResult(
        record_date=day,
        is_duplicate=True,
        message=ALREADY_RECORDED_MESSAGE,
        praise=ALREADY_RECORDED_PRAISE,
        current_streak=current_streak(dates, day),
        total_records=await store.count_total_records(user_id),
    )


async def _insert_and_praise(
    store: RecordStore,
    user_id: int,
    exercise_id: int,
    day: CivilDate,
    *,
    is_quick_record: bool,
    notes: str | None,
    pick: MessagePicker | None,
) -> RecordDayResult:
    record = await store.insert_record(
        user_id,
        exercise_id,
        day,
        is_quick_record=is_quick_record,
        notes=notes,
    )

    # Snapshot read after the insert so the new record is counted
    dates = await store.list_record_dates(user_id)
    total_records = await store.count_total_records(user_id)
    streak = current_streak(dates, day)
    praise = classify_praise(streak, total_records, pick=pick)

    logger.info(
        "record.created",
        user_id=user_id,
        exercise_id=exercise_id,
        record_id=record.id,
        record_date=str(day),
        current_streak=streak,
        total_records=total_records,
    )
    if praise.is_milestone:
        logger.info(
            "praise.milestone",
            user_id=user_id,
            category=praise.category,
            current_streak=streak,
            total_records=total_records,
        )

    return RecordDayResult(
        record_date=day,
        is_duplicate=False,
        message=RECORDED_MESSAGE,
        praise=praise,
        record_id=record.id,
        current_streak=streak,
        total_records=total_records,
    )


async def record_day(
    store: RecordStore,
    clock: Clock,
    user_id: int,
    day: CivilDate,
    *,
    exercise_id: int | None = None,
    pick: MessagePicker | None = None,
) -> RecordDayResult:
    """Quick-record a day for a user.

    A day that already has any record is a duplicate: nothing is inserted
    and the fixed "already recorded" praise is returned.

    Args:
        store: Record store
        clock: Source of today's date in the reference timezone
        user_id: The user recording
        day: Civil date being recorded; today or earlier
        exercise_id: Exercise to record; defaults to the user's default
            exercise, then the configured fallback
        pick: Strategy for the everyday compliment

    Raises:
        FutureDateError: If ``day`` is after today
        UnknownUserError: If the user does not exist
    """
    _reject_future(day, clock)
    user = await _require_user(store, user_id)

    if await store.has_record_on_date(user_id, day):
        dates = await store.list_record_dates(user_id)
        return await _duplicate_result(store, user_id, day, dates)

    if exercise_id is None:
        exercise_id = user.default_exercise_id or get_settings().default_exercise_id

    return await _insert_and_praise(
        store,
        user_id,
        exercise_id,
        day,
        is_quick_record=True,
        notes=None,
        pick=pick,
    )


async def record_today(
    store: RecordStore,
    clock: Clock,
    user_id: int,
    *,
    exercise_id: int | None = None,
    pick: MessagePicker | None = None,
) -> RecordDayResult:
    """Quick-record today's date in the reference timezone."""
    return await record_day(
        store, clock, user_id, clock.today(), exercise_id=exercise_id, pick=pick
    )


async def record_exercise(
    store: RecordStore,
    clock: Clock,
    user_id: int,
    exercise_id: int,
    day: CivilDate,
    *,
    notes: str | None = None,
    pick: MessagePicker | None = None,
) -> RecordDayResult:
    """Record one specific exercise on a day.

    Unlike ``record_day``, other exercises on the same day are fine; only the
    same exercise twice on one day is a duplicate.

    Raises:
        FutureDateError: If ``day`` is after today
        UnknownUserError: If the user does not exist
        UnknownExerciseError: If the exercise does not exist
    """
    _reject_future(day, clock)
    await _require_user(store, user_id)
    if await store.get_exercise(exercise_id) is None:
        raise UnknownExerciseError(exercise_id)

    if await store.has_exercise_on_date(user_id, exercise_id, day):
        dates = await store.list_record_dates(user_id)
        return await _duplicate_result(store, user_id, day, dates)

    return await _insert_and_praise(
        store,
        user_id,
        exercise_id,
        day,
        is_quick_record=False,
        notes=notes,
        pick=pick,
    )


async def delete_record(store: RecordStore, user_id: int, record_id: int) -> None:
    """Delete one of the user's records.

    Raises:
        RecordNotFoundError: If the user has no such record
    """
    if not await store.delete_record(user_id, record_id):
        raise RecordNotFoundError(user_id, record_id)
    logger.info("record.deleted", user_id=user_id, record_id=record_id)


async def get_user_stats(store: RecordStore, clock: Clock, user_id: int) -> UserStats:
    """Totals and streaks for the stats panel, as of today."""
    today = clock.today()

    dates = await store.list_record_dates(user_id)
    streaks = compute_streaks(dates, today)

    return UserStats(
        total_records=await store.count_total_records(user_id),
        current_streak=streaks.current_streak,
        longest_streak=streaks.longest_streak,
        this_month_records=await store.count_records_in_month(
            user_id, today.year, today.month
        ),
    )


async def get_calendar_month(
    store: RecordStore,
    clock: Clock,
    user_id: int,
    year: int,
    month: int,
) -> CalendarMonth:
    """Month grid with completion marks and streak highlighting."""
    today = clock.today()
    start = grid_start(year, month)

    dates = await store.list_record_dates(user_id)
    records_by_date = await store.list_records_in_range(
        user_id, start, add_days(start, GRID_SIZE - 1)
    )
    # Highlight from the full history so runs crossing the grid edge show
    streaks = compute_streaks(dates, today)

    return CalendarMonth(
        year=year,
        month=month,
        cells=build_month(
            year,
            month,
            records_by_date,
            today,
            streak_dates=streaks.streak_dates,
        ),
        streaks=streaks,
    )


async def get_family_stats(store: RecordStore, clock: Clock) -> FamilyStats:
    today = clock.today()
    return FamilyStats(
        total_family_records=await store.count_all_records(),
        active_family_members=await store.count_active_users_in_month(
            today.year, today.month
        ),
        family_records_today=await store.count_records_on_date(today),
    )
