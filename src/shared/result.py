"""Result type for sync outcomes.

Rejections that are part of normal operation (an anonymous caller, a domain
owned by somebody else) travel as ``Err`` values, so callers branch with
``match`` rather than ``try``.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Accepted request carrying its outcome."""

    value: T

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Exception:
        raise ValueError(f"Called unwrap_err on {self!r}")


@dataclass(frozen=True)
class Err(Generic[E]):
    """Rejected request carrying the reason."""

    error: E

    def unwrap(self) -> T:
        """Raise the wrapped error."""
        raise self.error

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
