"""Typed success/failure values returned by fallible token operations."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from apitoken.exceptions import TokenError, TokenErrorKind, error_for

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class TokenResult(Generic[T]):
    """Outcome of a builder or codec operation.

    Exactly one of ``value`` and ``error`` is set.  Expected validation
    failures are reported here instead of being raised; :meth:`unwrap`
    converts a failure into its typed :class:`TokenError` for callers that
    prefer exceptions.
    """

    value: T | None = None
    error: TokenError | None = None

    @classmethod
    def success(cls, value: T) -> "TokenResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: TokenErrorKind, detail: str) -> "TokenResult[T]":
        return cls(error=error_for(kind, detail))

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> TokenErrorKind | None:
        """Error kind, or ``None`` on success."""
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value or raise the carried :class:`TokenError`."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]

    def map(self, fn: Callable[[T], U]) -> "TokenResult[U]":
        """Apply *fn* to a successful value; failures pass through unchanged."""
        if self.error is not None:
            return TokenResult(error=self.error)
        return TokenResult(value=fn(self.value))  # type: ignore[arg-type]

    def __bool__(self) -> bool:
        return self.ok
