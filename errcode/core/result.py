"""Ok / Err: failures handed back as values.

Decoding a payload, constructing a value through ``ErrorValue.create`` and
loading config all return a ``Result`` instead of raising. Callers branch
with ``match``::

    match loads(text):
        case Ok(value):
            print(render(value))
        case Err(failure):
            print(failure.pretty())

``unwrap`` exists for tests and scripts that would rather crash.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeGuard

__all__ = ["Err", "Ok", "Result", "is_err", "is_ok"]


def _describe(failure: object) -> str:
    pretty = getattr(failure, "pretty", None)
    if callable(pretty):
        return str(pretty())
    return repr(failure)


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: object) -> T:
        return self.value

    def unwrap_err(self) -> None:
        raise ValueError(f"called unwrap_err on Ok: {self.value!r}")

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failure. ``error`` is one of the frozen failure dataclasses."""

    error: E

    def unwrap(self) -> None:
        """Raise ValueError with the failure's ``pretty()`` text when it has one."""
        raise ValueError(f"called unwrap on Err: {_describe(self.error)}")

    def unwrap_or[T](self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]


def is_ok[T, E](result: Result[T, E]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err[T, E](result: Result[T, E]) -> TypeGuard[Err[E]]:
    return isinstance(result, Err)
