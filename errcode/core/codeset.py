"""Set algebra over error codes.

A ``CodeSet`` names the codes an operation may produce, or the codes a caller
handles. Comparing the two answers the exhaustiveness question: anything in
``produced - handled`` is a code the caller would let through unhandled.
Turning that into a lint finding is left to whatever tool consumes this.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .result import Err, Ok, Result
from .structured import as_obj_list, json_type
from .value import ErrorValue, code_of

__all__ = [
    "CodeListError",
    "CodeSet",
    "Coverage",
    "check_coverage",
    "difference",
    "is_subset_of",
    "parse_code_list",
    "union",
]


@dataclass(frozen=True, slots=True)
class CodeSet:
    """Unordered collection of distinct, non-empty codes.

    Iteration is in sorted order so output built from a set is stable.
    """

    codes: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        codes: object = self.codes
        if not isinstance(codes, frozenset):
            raise TypeError(f"codes must be a frozenset, got {type(codes).__name__}")
        for code in self.codes:
            if not isinstance(code, str) or not code:  # pyright: ignore[reportUnnecessaryIsInstance]
                raise ValueError(f"not a valid code: {code!r}")

    @classmethod
    def of(cls, *codes: str) -> CodeSet:
        return cls(frozenset(codes))

    @classmethod
    def from_iterable(cls, codes: Iterable[str]) -> CodeSet:
        return cls(frozenset(codes))

    @classmethod
    def from_errors(cls, errors: Iterable[ErrorValue], *, deep: bool = False) -> CodeSet:
        """Collect the codes of ``errors``; with ``deep``, of their causes too."""
        if deep:
            return cls(frozenset(node.code for err in errors for node in err.walk()))
        return cls(frozenset(err.code for err in errors))

    # -------- algebra --------

    def union(self, other: CodeSet) -> CodeSet:
        return CodeSet(self.codes | other.codes)

    def difference(self, other: CodeSet) -> CodeSet:
        """Codes in this set that are not in ``other``."""
        return CodeSet(self.codes - other.codes)

    def intersection(self, other: CodeSet) -> CodeSet:
        return CodeSet(self.codes & other.codes)

    def is_subset_of(self, other: CodeSet) -> bool:
        return self.codes <= other.codes

    def is_superset_of(self, other: CodeSet) -> bool:
        return self.codes >= other.codes

    def __or__(self, other: object) -> CodeSet:
        if not isinstance(other, CodeSet):
            return NotImplemented
        return self.union(other)

    def __sub__(self, other: object) -> CodeSet:
        if not isinstance(other, CodeSet):
            return NotImplemented
        return self.difference(other)

    def __and__(self, other: object) -> CodeSet:
        if not isinstance(other, CodeSet):
            return NotImplemented
        return self.intersection(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, CodeSet):
            return NotImplemented
        return self.is_subset_of(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, CodeSet):
            return NotImplemented
        return self.is_superset_of(other)

    # -------- container protocol --------

    def __contains__(self, item: object) -> bool:
        """Accept a bare code or anything exposing a ``code`` attribute."""
        if isinstance(item, str):
            return item in self.codes
        code = code_of(item)
        return code is not None and code in self.codes

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.codes))

    def __len__(self) -> int:
        return len(self.codes)

    def __bool__(self) -> bool:
        return bool(self.codes)

    def sorted(self) -> list[str]:
        return sorted(self.codes)

    def __repr__(self) -> str:
        return f"CodeSet({', '.join(repr(c) for c in self)})"


def union(a: CodeSet, b: CodeSet) -> CodeSet:
    return a.union(b)


def difference(a: CodeSet, b: CodeSet) -> CodeSet:
    return a.difference(b)


def is_subset_of(a: CodeSet, b: CodeSet) -> bool:
    return a.is_subset_of(b)


@dataclass(frozen=True, slots=True)
class Coverage:
    """How a handled set lines up against a produced set."""

    produced: CodeSet
    handled: CodeSet

    @property
    def unhandled(self) -> CodeSet:
        """Produced codes the caller does not handle."""
        return self.produced.difference(self.handled)

    @property
    def unused(self) -> CodeSet:
        """Handled codes that can never be produced."""
        return self.handled.difference(self.produced)

    @property
    def exhaustive(self) -> bool:
        return self.produced.is_subset_of(self.handled)

    @property
    def exact(self) -> bool:
        return self.exhaustive and self.handled.is_subset_of(self.produced)


def check_coverage(produced: CodeSet, handled: CodeSet) -> Coverage:
    return Coverage(produced=produced, handled=handled)


@dataclass(frozen=True, slots=True)
class CodeListError:
    """A declared code list could not be read."""

    message: str
    line: int | None = None

    def pretty(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


def parse_code_list(text: str) -> Result[CodeSet, CodeListError]:
    """Parse a declared code list.

    Accepts a JSON array of strings, or plain text with one code per line
    where blank lines and ``#`` comments are ignored. Duplicates collapse.
    """
    stripped = text.strip()
    if stripped.startswith("["):
        try:
            data: object = json.loads(stripped)
        except json.JSONDecodeError as e:
            return Err(CodeListError(f"invalid JSON: {e.msg}", e.lineno))
        items = as_obj_list(data)
        if items is None:
            return Err(CodeListError(f"expected a JSON array of codes, got {json_type(data)}"))
        codes: list[str] = []
        for i, item in enumerate(items):
            if not isinstance(item, str) or not item:
                return Err(CodeListError(f"entry {i} is not a non-empty string: {item!r}"))
            codes.append(item)
        return Ok(CodeSet.from_iterable(codes))

    codes = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        code = line.split("#", 1)[0].strip()
        if not code:
            continue
        if any(ch.isspace() for ch in code):
            return Err(CodeListError(f"more than one code on a line: {code!r}", lineno))
        codes.append(code)
    return Ok(CodeSet.from_iterable(codes))
