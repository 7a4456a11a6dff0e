"""Repository for exercise record operations (the record store)."""

from collections import defaultdict
from datetime import date

from sqlalchemy import delete, distinct, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from exercise_streaks.models import Exercise, ExerciseRecord, User
from exercise_streaks.schemas import RecordSummary
from exercise_streaks.services.dates_service import CivilDate, days_in_month


class ExerciseRecordRepository:
    """Record store backed by an async SQLAlchemy session.

    Dates cross this boundary as ``CivilDate``; the DATE column already
    holds the civil date in the reference timezone.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def list_record_dates(self, user_id: int) -> frozenset[CivilDate]:
        """Distinct record dates for a user."""
        result = await self.db.execute(
            select(ExerciseRecord.record_date)
            .where(ExerciseRecord.user_id == user_id)
            .distinct()
        )
        return frozenset(CivilDate.from_date(d) for d in result.scalars().all())

    async def list_records_in_range(
        self,
        user_id: int,
        start: CivilDate,
        end: CivilDate,
    ) -> dict[CivilDate, list[RecordSummary]]:
        """Records per date between ``start`` and ``end`` inclusive."""
        result = await self.db.execute(
            select(ExerciseRecord, Exercise.name, Exercise.icon)
            .join(Exercise, Exercise.id == ExerciseRecord.exercise_id)
            .where(
                ExerciseRecord.user_id == user_id,
                ExerciseRecord.record_date >= start.to_date(),
                ExerciseRecord.record_date <= end.to_date(),
            )
            .order_by(ExerciseRecord.record_date, ExerciseRecord.id)
        )

        by_date: dict[CivilDate, list[RecordSummary]] = defaultdict(list)
        for record, exercise_name, icon in result.all():
            by_date[CivilDate.from_date(record.record_date)].append(
                RecordSummary(
                    id=record.id,
                    exercise_id=record.exercise_id,
                    exercise_name=exercise_name,
                    icon=icon,
                    is_quick_record=record.is_quick_record,
                    notes=record.notes,
                )
            )
        return dict(by_date)

    async def list_records_by_date(
        self, user_id: int, year: int, month: int
    ) -> dict[CivilDate, list[RecordSummary]]:
        """Records per date for one calendar month."""
        return await self.list_records_in_range(
            user_id,
            CivilDate(year, month, 1),
            CivilDate(year, month, days_in_month(year, month)),
        )

    async def count_total_records(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count(ExerciseRecord.id)).where(
                ExerciseRecord.user_id == user_id
            )
        )
        return result.scalar_one()

    async def count_records_in_month(self, user_id: int, year: int, month: int) -> int:
        result = await self.db.execute(
            select(func.count(ExerciseRecord.id)).where(
                ExerciseRecord.user_id == user_id,
                ExerciseRecord.record_date >= date(year, month, 1),
                ExerciseRecord.record_date
                <= date(year, month, days_in_month(year, month)),
            )
        )
        return result.scalar_one()

    async def has_record_on_date(self, user_id: int, record_date: CivilDate) -> bool:
        stmt = exists().where(
            ExerciseRecord.user_id == user_id,
            ExerciseRecord.record_date == record_date.to_date(),
        )
        result = await self.db.execute(select(stmt))
        return result.scalar_one()

    async def has_exercise_on_date(
        self, user_id: int, exercise_id: int, record_date: CivilDate
    ) -> bool:
        stmt = exists().where(
            ExerciseRecord.user_id == user_id,
            ExerciseRecord.exercise_id == exercise_id,
            ExerciseRecord.record_date == record_date.to_date(),
        )
        result = await self.db.execute(select(stmt))
        return result.scalar_one()

    async def get_exercise(self, exercise_id: int) -> Exercise | None:
        return await self.db.get(Exercise, exercise_id)

    async def insert_record(
        self,
        user_id: int,
        exercise_id: int,
        record_date: CivilDate,
        *,
        is_quick_record: bool = False,
        notes: str | None = None,
    ) -> ExerciseRecord:
        """Insert a record; flushed so the id is available immediately."""
        record = ExerciseRecord(
            user_id=user_id,
            exercise_id=exercise_id,
            record_date=record_date.to_date(),
            is_quick_record=is_quick_record,
            notes=notes,
        )
        self.db.add(record)
        await self.db.flush()
        return record

    async def delete_record(self, user_id: int, record_id: int) -> bool:
        """Delete one of the user's records. Returns False if nothing matched."""
        result = await self.db.execute(
            delete(ExerciseRecord).where(
                ExerciseRecord.id == record_id,
                ExerciseRecord.user_id == user_id,
            )
        )
        return result.rowcount > 0

    # Family-wide aggregates

    async def count_all_records(self) -> int:
        result = await self.db.execute(select(func.count(ExerciseRecord.id)))
        return result.scalar_one()

    async def count_active_users_in_month(self, year: int, month: int) -> int:
        result = await self.db.execute(
            select(func.count(distinct(ExerciseRecord.user_id))).where(
                ExerciseRecord.record_date >= date(year, month, 1),
                ExerciseRecord.record_date
                <= date(year, month, days_in_month(year, month)),
            )
        )
        return result.scalar_one()

    async def count_records_on_date(self, record_date: CivilDate) -> int:
        result = await self.db.execute(
            select(func.count(ExerciseRecord.id)).where(
                ExerciseRecord.record_date == record_date.to_date()
            )
        )
        return result.scalar_one()
