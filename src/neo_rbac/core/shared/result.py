"""Result value object for fail-open internal calls.

Cache and audit writes must never fail the operation they accompany. Their
adapters return a ``Result`` instead of raising, and each caller decides in
one place what to do with the error variant.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an operation that reports failure as a value."""

    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Result[T]":
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def unwrap(self) -> Optional[T]:
        """Return the value or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value
