"""Result value returned by every tracking adapter operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from parceltrack.core.exceptions import BaseApplicationException

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Success carrying a value, or failure carrying a typed exception.

    Adapters never raise across their boundary: transport and payload faults
    are caught and returned as ``Result.fail(...)``. The HTTP layer calls
    :meth:`unwrap` to turn a failure back into the exception, which the
    global exception handlers render.
    """

    value: Optional[T] = None
    error: Optional[BaseApplicationException] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.error_code if self.error is not None else None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value or raise the carried exception."""

        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: BaseApplicationException) -> "Result[T]":
        return cls(error=error)
