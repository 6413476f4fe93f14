"""Validation of food log inputs.

Candidates arrive either as plain mappings (decoded JSON, test payloads) or as
the domain dataclasses. Every check runs through pydantic models so that all
failed constraints are reported together, and the normalized value comes back
as domain objects with UTC-aware timestamps.
"""

import dataclasses
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from food_log.config import METRIC_MAX
from food_log.domain.food_logs import (
    CreateFoodLogEntry,
    FoodLogEntry,
    FoodLogMetrics,
    TimeSpan,
    whole_calories,
)
from food_log.domain.results import Err, Ok, Result, ValidationError

Calories = Annotated[
    float, Field(strict=True, ge=0, le=METRIC_MAX, allow_inf_nan=False)
]
Name = Annotated[str, Field(strict=True, min_length=1)]


class _TimeSpanModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def normalize_to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @model_validator(mode="after")
    def check_order(self) -> "_TimeSpanModel":
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self

    def to_domain(self) -> TimeSpan:
        return TimeSpan(start=self.start, end=self.end)


class _MetricsModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    calories: Calories

    def to_domain(self) -> FoodLogMetrics:
        return FoodLogMetrics(calories=whole_calories(self.calories))


class _CreateFoodLogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Name
    labels: list[StrictStr]
    time: _TimeSpanModel
    metrics: _MetricsModel

    def to_domain(self) -> CreateFoodLogEntry:
        return CreateFoodLogEntry(
            name=self.name,
            labels=list(self.labels),
            time=self.time.to_domain(),
            metrics=self.metrics.to_domain(),
        )


class _EditFoodLogModel(_CreateFoodLogModel):
    id: UUID

    def to_entry(self) -> FoodLogEntry:
        return FoodLogEntry(
            id=self.id,
            name=self.name,
            labels=list(self.labels),
            time=self.time.to_domain(),
            metrics=self.metrics.to_domain(),
        )


def validate_create(
    candidate: object,
) -> Result[CreateFoodLogEntry, ValidationError]:
    """Validate a create payload; caller-supplied ids are rejected."""
    try:
        model = _CreateFoodLogModel.model_validate(_as_payload(candidate))
    except PydanticValidationError as exc:
        return Err(_to_validation_error("Invalid food log entry", exc))
    return Ok(model.to_domain())


def validate_edit(candidate: object) -> Result[FoodLogEntry, ValidationError]:
    """Validate an edit payload, which must carry the entry id."""
    try:
        model = _EditFoodLogModel.model_validate(_as_payload(candidate))
    except PydanticValidationError as exc:
        return Err(_to_validation_error("Invalid food log edit", exc))
    return Ok(model.to_entry())


def validate_query_range(
    start: object, end: object
) -> Result[TimeSpan, ValidationError]:
    """Validate a query window; start must not be after end."""
    try:
        model = _TimeSpanModel.model_validate({"start": start, "end": end})
    except PydanticValidationError as exc:
        return Err(_to_validation_error("Invalid query range", exc))
    return Ok(model.to_domain())


def _as_payload(candidate: object) -> object:
    if dataclasses.is_dataclass(candidate) and not isinstance(candidate, type):
        return dataclasses.asdict(candidate)
    if isinstance(candidate, Mapping):
        return dict(candidate)
    return candidate


def _to_validation_error(
    message: str, exc: PydanticValidationError
) -> ValidationError:
    issues = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "value"
        issues.append(f"{location}: {error['msg']}")
    return ValidationError(message=message, issues=tuple(issues))
