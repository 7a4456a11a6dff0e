"""Repository layer for database operations.

Repositories encapsulate all database queries, so services deal in
``CivilDate`` values and dataclasses rather than SQL and ORM rows.

Layer hierarchy:
    Callers -> Services (Business Logic) -> Repositories (Database)
"""

from exercise_streaks.repositories.exercise_record_repository import (
    ExerciseRecordRepository,
)

__all__ = [
    "ExerciseRecordRepository",
]
