"""Domain models for food log entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class TimeSpan:
    """Time window covered by a food log entry."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class FoodLogMetrics:
    """Measured values for a food log entry."""

    calories: int | float


def whole_calories(value: float) -> int | float:
    """Return whole calorie counts as int so JSON output omits the fraction."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class CreateFoodLogEntry:
    """Food log entry as submitted for creation, before an id is assigned."""

    name: str
    labels: list[str]
    time: TimeSpan
    metrics: FoodLogMetrics


@dataclass(frozen=True)
class FoodLogEntry:
    """Stored food log entry."""

    id: UUID
    name: str
    labels: list[str]
    time: TimeSpan
    metrics: FoodLogMetrics

    @classmethod
    def from_create(
        cls, food_log_id: UUID, entry: CreateFoodLogEntry
    ) -> "FoodLogEntry":
        """Attach a store-assigned id to a create payload."""
        return cls(
            id=food_log_id,
            name=entry.name,
            labels=list(entry.labels),
            time=entry.time,
            metrics=entry.metrics,
        )


EditFoodLogEntry = FoodLogEntry
