"""SQLAlchemy repository for food logs.

One session per call over a pooled engine keeps every operation atomic on its
own row. Timestamps are stored in UTC; SQLite drops tzinfo on the way back, so
rows are re-tagged as UTC when read.
"""

import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Engine,
    Float,
    String,
    Text,
    Uuid,
    create_engine,
    delete,
    event,
    select,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from food_log.domain.food_logs import (
    CreateFoodLogEntry,
    FoodLogEntry,
    FoodLogMetrics,
    TimeSpan,
    whole_calories,
)
from food_log.services.food_logs import FoodLogRepository


class Base(DeclarativeBase):
    """Base class for food log ORM models."""


class FoodLogRow(Base):
    """A food log entry owned by one user."""

    __tablename__ = "food_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    labels: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    time_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    time_end: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    calories: Mapped[float] = mapped_column(Float, nullable=False)


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite gets WAL mode and cross-thread connections."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)
    engine = create_engine(
        database_url, connect_args={"check_same_thread": False, "timeout": 30}
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    return engine


@dataclass
class SqlFoodLogRepository(FoodLogRepository):
    """SQLAlchemy-backed food log repository."""

    engine: Engine
    session_factory: sessionmaker = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.session_factory = sessionmaker(self.engine, expire_on_commit=False)

    @classmethod
    def create(cls, database_url: str) -> "SqlFoodLogRepository":
        """Build a repository for a database URL, creating the table if needed."""
        engine = build_engine(database_url)
        Base.metadata.create_all(engine)
        return cls(engine)

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    def create_food_log(self, user_id: str, entry: CreateFoodLogEntry) -> uuid.UUID:
        """Insert a row and return its id."""
        row = FoodLogRow(
            id=uuid.uuid4(),
            user_id=user_id,
            name=entry.name,
            labels=list(entry.labels),
            time_start=_to_utc(entry.time.start),
            time_end=_to_utc(entry.time.end),
            calories=entry.metrics.calories,
        )
        with self.session_factory.begin() as session:
            session.add(row)
        return row.id

    def get_food_log(
        self, user_id: str, food_log_id: uuid.UUID
    ) -> FoodLogEntry | None:
        """Return a row scoped to the user."""
        with self.session_factory() as session:
            row = session.scalars(
                select(FoodLogRow)
                .where(FoodLogRow.user_id == user_id)
                .where(FoodLogRow.id == food_log_id)
            ).first()
            return _parse_row(row) if row is not None else None

    def update_food_log(
        self, user_id: str, entry: FoodLogEntry
    ) -> FoodLogEntry | None:
        """Overwrite every mutable column of an existing row."""
        with self.session_factory.begin() as session:
            row = session.scalars(
                select(FoodLogRow)
                .where(FoodLogRow.user_id == user_id)
                .where(FoodLogRow.id == entry.id)
                .with_for_update()
            ).first()
            if row is None:
                return None
            row.name = entry.name
            row.labels = list(entry.labels)
            row.time_start = _to_utc(entry.time.start)
            row.time_end = _to_utc(entry.time.end)
            row.calories = entry.metrics.calories
        return entry

    def delete_food_log(self, user_id: str, food_log_id: uuid.UUID) -> None:
        """Delete a row if present."""
        with self.session_factory.begin() as session:
            session.execute(
                delete(FoodLogRow)
                .where(FoodLogRow.user_id == user_id)
                .where(FoodLogRow.id == food_log_id)
            )

    def list_food_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return rows whose span overlaps the range."""
        with self.session_factory() as session:
            rows = session.scalars(
                select(FoodLogRow)
                .where(FoodLogRow.user_id == user_id)
                .where(FoodLogRow.time_start <= _to_utc(end))
                .where(FoodLogRow.time_end >= _to_utc(start))
                .order_by(FoodLogRow.time_start, FoodLogRow.id)
            )
            return [_parse_row(row) for row in rows]

    def iter_food_logs(
        self, user_id: str, batch_size: int
    ) -> Iterator[FoodLogEntry]:
        """Stream rows for the user using a server-side cursor."""
        with self.session_factory() as session:
            rows = session.scalars(
                select(FoodLogRow)
                .where(FoodLogRow.user_id == user_id)
                .order_by(FoodLogRow.id)
                .execution_options(yield_per=batch_size)
            )
            for row in rows:
                yield _parse_row(row)

    def purge_food_logs(self, user_id: str) -> int:
        """Delete every row for the user."""
        with self.session_factory.begin() as session:
            result = session.execute(
                delete(FoodLogRow).where(FoodLogRow.user_id == user_id)
            )
            return result.rowcount or 0


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _parse_row(row: FoodLogRow) -> FoodLogEntry:
    return FoodLogEntry(
        id=row.id,
        name=row.name,
        labels=list(row.labels or []),
        time=TimeSpan(start=_to_utc(row.time_start), end=_to_utc(row.time_end)),
        metrics=FoodLogMetrics(calories=whole_calories(row.calories)),
    )
