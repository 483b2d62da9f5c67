"""Result values returned by auth and task operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from tasktracker_mcp.errors import ClientError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """
    Outcome of a single auth or task operation.

    Exactly one of three shapes:
        - success: ``error is None`` and ``skipped`` is False
        - failure: ``error`` is set
        - skipped: a local precondition did not hold, nothing was sent
    """

    value: T | None = None
    error: ClientError | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.skipped

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ClientError) -> Result[T]:
        return cls(error=error)

    @classmethod
    def skip(cls) -> Result[T]:
        return cls(skipped=True)
