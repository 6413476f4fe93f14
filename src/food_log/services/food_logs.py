"""Food log service."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol
from uuid import UUID

from food_log.domain.food_logs import CreateFoodLogEntry, FoodLogEntry
from food_log.domain.results import (
    Err,
    NotFoundError,
    Ok,
    Result,
    ValidationError,
)
from food_log.services.export import export_food_logs
from food_log.services.validation import (
    validate_create,
    validate_edit,
    validate_query_range,
)

_logger = logging.getLogger(__name__)


class FoodLogRepository(Protocol):
    """Persistence interface for user-scoped food logs."""

    def create_food_log(self, user_id: str, entry: CreateFoodLogEntry) -> UUID:
        """Persist a new entry and return its generated id."""

    def get_food_log(self, user_id: str, food_log_id: UUID) -> FoodLogEntry | None:
        """Return the user's entry with this id, if present."""

    def update_food_log(
        self, user_id: str, entry: FoodLogEntry
    ) -> FoodLogEntry | None:
        """Replace the user's entry with the same id; None when missing."""

    def delete_food_log(self, user_id: str, food_log_id: UUID) -> None:
        """Remove the user's entry if present."""

    def list_food_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return entries whose time span overlaps [start, end]."""

    def iter_food_logs(self, user_id: str, batch_size: int) -> Iterator[FoodLogEntry]:
        """Yield every entry for the user, fetched in batches."""

    def purge_food_logs(self, user_id: str) -> int:
        """Remove every entry for the user and return how many were removed."""


@dataclass
class FoodLogService:
    """Service that validates food log input and delegates to storage."""

    repository: FoodLogRepository
    export_dir: str | Path | None = None
    export_batch_size: int = 1000

    def store_food_log(
        self, user_id: str, candidate: object
    ) -> Result[UUID, ValidationError]:
        """Validate and persist a new entry, returning its id."""
        validated = validate_create(candidate)
        if validated.is_err():
            return _rejected("store", user_id, validated.unwrap_err())
        food_log_id = self.repository.create_food_log(user_id, validated.unwrap())
        _logger.info("Stored food log: user_id=%s id=%s", user_id, food_log_id)
        return Ok(food_log_id)

    def retrieve_food_log(
        self, user_id: str, food_log_id: UUID | str
    ) -> Result[FoodLogEntry, NotFoundError]:
        """Return the user's entry, or NotFoundError if the user has none.

        Ids may be given as UUIDs or their string form; a string that is not a
        UUID cannot name a stored entry and is reported as not found.
        """
        parsed_id = _coerce_id(food_log_id)
        entry = (
            None
            if parsed_id is None
            else self.repository.get_food_log(user_id, parsed_id)
        )
        if entry is None:
            return Err(NotFoundError("food_log", str(food_log_id)))
        return Ok(entry)

    def edit_food_log(
        self, user_id: str, candidate: object
    ) -> Result[FoodLogEntry, ValidationError | NotFoundError]:
        """Validate and replace an existing entry in full."""
        validated = validate_edit(candidate)
        if validated.is_err():
            return _rejected("edit", user_id, validated.unwrap_err())
        entry = validated.unwrap()
        updated = self.repository.update_food_log(user_id, entry)
        if updated is None:
            return Err(NotFoundError("food_log", str(entry.id)))
        _logger.info("Edited food log: user_id=%s id=%s", user_id, entry.id)
        return Ok(updated)

    def delete_food_log(self, user_id: str, food_log_id: UUID | str) -> Ok[bool]:
        """Delete an entry; missing entries are treated as already deleted."""
        parsed_id = _coerce_id(food_log_id)
        if parsed_id is not None:
            self.repository.delete_food_log(user_id, parsed_id)
        return Ok(True)

    def query_food_logs(
        self, user_id: str, start: object, end: object
    ) -> Result[list[FoodLogEntry], ValidationError]:
        """Return the user's entries overlapping the inclusive range."""
        validated = validate_query_range(start, end)
        if validated.is_err():
            return _rejected("query", user_id, validated.unwrap_err())
        span = validated.unwrap()
        return Ok(self.repository.list_food_logs(user_id, span.start, span.end))

    def bulk_export_food_logs(self, user_id: str) -> Ok[Path]:
        """Write every entry for the user to a CSV file and return its path."""
        entries = self.repository.iter_food_logs(user_id, self.export_batch_size)
        path, count = export_food_logs(entries, self.export_dir)
        _logger.info(
            "Exported food logs: user_id=%s rows=%s path=%s", user_id, count, path
        )
        return Ok(path)

    def purge_food_logs(self, user_id: str) -> Ok[bool]:
        """Delete every entry owned by the user."""
        removed = self.repository.purge_food_logs(user_id)
        _logger.info("Purged food logs: user_id=%s removed=%s", user_id, removed)
        return Ok(True)


def _coerce_id(food_log_id: UUID | str) -> UUID | None:
    if isinstance(food_log_id, UUID):
        return food_log_id
    try:
        return UUID(str(food_log_id))
    except ValueError:
        return None


def _rejected(
    operation: str, user_id: str, error: ValidationError
) -> Err[ValidationError]:
    _logger.info(
        "Rejected food log %s: user_id=%s issues=%s",
        operation,
        user_id,
        "; ".join(error.issues),
    )
    return Err(error)
