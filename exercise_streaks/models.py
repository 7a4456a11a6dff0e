"""SQLAlchemy models for the family exercise log."""

from datetime import UTC, date, datetime
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from exercise_streaks.core.database import Base


def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


class ExerciseCategory(str, PyEnum):
    """Grouping shown in the exercise picker."""

    STRENGTH = "筋トレ"
    CARDIO = "有酸素"
    OTHER = "その他"


class User(Base):
    """A family member keeping their own log."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    color_theme: Mapped[str] = mapped_column(String(20), default="blue")
    # Exercise used for one-tap records; falls back to the configured default
    default_exercise_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )

    records: Mapped[list["ExerciseRecord"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )


class Exercise(Base):
    """Exercise catalog entry.

    Rows with ``user_id`` NULL are system defaults visible to everyone.
    """

    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[ExerciseCategory] = mapped_column(
        Enum(
            ExerciseCategory,
            name="exercise_category",
            native_enum=False,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
    )
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    icon: Mapped[str | None] = mapped_column(String(20), nullable=True)
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class ExerciseRecord(Base):
    """One exercise done by one user on one civil date.

    ``record_date`` is the date in the reference timezone, never a
    timestamp; ``created_at`` is the audit instant.
    """

    __tablename__ = "exercise_records"
    __table_args__ = (
        Index("ix_exercise_records_user_date", "user_id", "record_date"),
        Index("ix_exercise_records_date", "record_date"),
        UniqueConstraint(
            "user_id",
            "exercise_id",
            "record_date",
            name="uq_exercise_records_user_exercise_date",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    exercise_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("exercises.id"),
        nullable=False,
    )
    record_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_quick_record: Mapped[bool] = mapped_column(Boolean, default=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
    )

    user: Mapped["User"] = relationship(back_populates="records")
    exercise: Mapped["Exercise"] = relationship()
