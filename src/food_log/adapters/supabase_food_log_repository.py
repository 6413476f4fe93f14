"""Supabase repository for food logs."""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from food_log.domain.food_logs import (
    CreateFoodLogEntry,
    FoodLogEntry,
    FoodLogMetrics,
    TimeSpan,
    whole_calories,
)
from food_log.services.food_logs import FoodLogRepository

_COLUMNS = "id, name, labels, time_start, time_end, calories"


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food logs."""

    client: Client
    table_name: str = "food_logs"

    def create_food_log(self, user_id: str, entry: CreateFoodLogEntry) -> UUID:
        """Insert a food log row and return its id."""
        response = (
            self.client.table(self.table_name)
            .insert({"user_id": user_id, **_to_columns(entry)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log")
        return UUID(response.data[0]["id"])

    def get_food_log(self, user_id: str, food_log_id: UUID) -> FoodLogEntry | None:
        """Return a food log row scoped to the user."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .eq("id", str(food_log_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def update_food_log(
        self, user_id: str, entry: FoodLogEntry
    ) -> FoodLogEntry | None:
        """Replace the row's columns; an empty response means no such row."""
        response = (
            self.client.table(self.table_name)
            .update(_to_columns(entry))
            .eq("user_id", user_id)
            .eq("id", str(entry.id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_food_log(self, user_id: str, food_log_id: UUID) -> None:
        """Delete a food log row if present."""
        self.client.table(self.table_name).delete().eq("user_id", user_id).eq(
            "id", str(food_log_id)
        ).execute()

    def list_food_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return rows whose span overlaps the range."""
        response = (
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .lte("time_start", end.isoformat())
            .gte("time_end", start.isoformat())
            .order("time_start", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def iter_food_logs(self, user_id: str, batch_size: int) -> Iterator[FoodLogEntry]:
        """Page through the user's rows ordered by id."""
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        offset = 0
        while True:
            response = (
                self.client.table(self.table_name)
                .select(_COLUMNS)
                .eq("user_id", user_id)
                .order("id", desc=False)
                .range(offset, offset + batch_size - 1)
                .execute()
            )
            rows = response.data or []
            for row in rows:
                yield _parse_row(row)
            if len(rows) < batch_size:
                return
            offset += batch_size

    def purge_food_logs(self, user_id: str) -> int:
        """Delete every row for the user."""
        response = (
            self.client.table(self.table_name)
            .delete()
            .eq("user_id", user_id)
            .execute()
        )
        return len(response.data or [])


def _to_columns(entry: CreateFoodLogEntry | FoodLogEntry) -> dict[str, object]:
    return {
        "name": entry.name,
        "labels": list(entry.labels),
        "time_start": entry.time.start.isoformat(),
        "time_end": entry.time.end.isoformat(),
        "calories": entry.metrics.calories,
    }


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    else:
        value = datetime.fromisoformat(str(raw))
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _parse_row(row: dict[str, object]) -> FoodLogEntry:
    labels = row.get("labels") or []
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        labels=[str(label) for label in labels] if isinstance(labels, list) else [],
        time=TimeSpan(
            start=_parse_timestamp(row["time_start"]),
            end=_parse_timestamp(row["time_end"]),
        ),
        metrics=FoodLogMetrics(
            calories=whole_calories(float(row.get("calories", 0.0)))
        ),
    )
