"""Explicit success/failure results returned by the lifecycle engine.

The engine never raises ``WranglerError`` to its callers. Each operation
returns either ``Success`` (with any non-fatal warnings attached) or
``Failure`` carrying the structured error, so a CLI layer can match on
``result.ok`` and ``result.error.kind``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, List, TypeVar, Union

from .exceptions import WranglerError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    warnings: List[WranglerError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: WranglerError

    @property
    def ok(self) -> bool:
        return False

    @property
    def warnings(self) -> List[WranglerError]:
        return []


Result = Union[Success[T], Failure]


def success(value: T, warnings: List[WranglerError] | None = None) -> Success[T]:
    return Success(value=value, warnings=list(warnings or []))


def failure(error: WranglerError) -> Failure:
    return Failure(error=error)


__all__ = ["Success", "Failure", "Result", "success", "failure"]
