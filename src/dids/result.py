"""
Parse outcomes returned as values.

Every public parser returns either ``Ok(value)`` or ``Err(error)``; nothing is
raised to the caller unless it asks for it with ``unwrap()``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from src.core.exceptions import ValidationError

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self):
        raise ValidationError("called unwrap_err() on an Ok value", extra={"value": self.value})


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise ValidationError(str(self.error), extra={"error": self.error})

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
