"""Typed success/error values returned by service operations.

Services raise domain errors internally; ``as_result`` turns them into an
``Err`` at the operation boundary so callers branch on the variant instead of
catching exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, TypeVar, Union

from .exceptions import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: DomainError

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Err]


def as_result(func: Callable[..., T]) -> Callable[..., Result[T]]:
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return Ok(func(*args, **kwargs))
        except DomainError as exc:
            return Err(exc)

    return wrapper
