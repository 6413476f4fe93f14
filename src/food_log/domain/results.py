"""Result values returned by food log operations."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


class UnwrapError(RuntimeError):
    """Raised when the wrong side of a result is unwrapped."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> object:
        raise UnwrapError(f"Called unwrap_err on Ok: {self.value!r}")


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> object:
        raise UnwrapError(f"Called unwrap on Err: {self.error!r}")

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class ValidationError:
    """Input failed shape or range checks; storage was not touched."""

    message: str
    issues: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NotFoundError:
    """No matching entity exists in the caller's scope."""

    entity: str
    entity_id: str

    @property
    def message(self) -> str:
        return f"{self.entity} {self.entity_id} not found"


FoodLogError = Union[ValidationError, NotFoundError]


def is_validation_error(error: object) -> bool:
    """Return True for validation failures."""
    return isinstance(error, ValidationError)


def is_not_found_error(error: object) -> bool:
    """Return True for not-found failures."""
    return isinstance(error, NotFoundError)
