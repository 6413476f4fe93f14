"""In-memory repository for food logs."""

import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from food_log.domain.food_logs import CreateFoodLogEntry, FoodLogEntry
from food_log.services.food_logs import FoodLogRepository


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """Process-local food log storage guarded by a lock."""

    entries: dict[str, dict[UUID, FoodLogEntry]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def create_food_log(self, user_id: str, entry: CreateFoodLogEntry) -> UUID:
        """Store an entry under a fresh id."""
        food_log_id = uuid4()
        stored = FoodLogEntry.from_create(food_log_id, entry)
        with self._lock:
            self.entries.setdefault(user_id, {})[food_log_id] = stored
        return food_log_id

    def get_food_log(self, user_id: str, food_log_id: UUID) -> FoodLogEntry | None:
        """Return the user's entry, if present."""
        with self._lock:
            return self.entries.get(user_id, {}).get(food_log_id)

    def update_food_log(
        self, user_id: str, entry: FoodLogEntry
    ) -> FoodLogEntry | None:
        """Replace an existing entry."""
        with self._lock:
            user_entries = self.entries.get(user_id, {})
            if entry.id not in user_entries:
                return None
            user_entries[entry.id] = entry
        return entry

    def delete_food_log(self, user_id: str, food_log_id: UUID) -> None:
        """Remove an entry if present."""
        with self._lock:
            self.entries.get(user_id, {}).pop(food_log_id, None)

    def list_food_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return entries overlapping the range."""
        with self._lock:
            candidates = list(self.entries.get(user_id, {}).values())
        return [
            entry
            for entry in candidates
            if entry.time.start <= end and entry.time.end >= start
        ]

    def iter_food_logs(self, user_id: str, batch_size: int) -> Iterator[FoodLogEntry]:
        """Yield a snapshot of the user's entries."""
        with self._lock:
            snapshot = list(self.entries.get(user_id, {}).values())
        yield from snapshot

    def purge_food_logs(self, user_id: str) -> int:
        """Drop every entry for the user."""
        with self._lock:
            removed = self.entries.pop(user_id, {})
        return len(removed)
