"""Lexical convention for error codes.

A conventional code is a non-empty run of ASCII letters and digits split into
"hunks" by single hyphens, e.g. ``myapp-error-config-missing``. The
recommended shape is ``<package>[-error]-<condition>``, but only the lexical
rules are checked here.

The check is advisory: the codec accepts any non-empty string as a code.
Construction helpers use it as an opt-in guard (``check_format=True``) so
that generated codes don't drift from the convention unnoticed.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from enum import StrEnum

from .result import Err, Ok, Result

__all__ = [
    "ERROR_MARKER",
    "CodeFormatViolation",
    "CodeParts",
    "ViolationKind",
    "check_code",
    "hunks",
    "is_conventional",
    "normalize_code",
    "split_code",
    "validate_code",
]

ERROR_MARKER = "error"

_ALLOWED = frozenset(string.ascii_letters + string.digits + "-")
_SEPARATOR_RUN_RE = re.compile(r"[\s_.]+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")


class ViolationKind(StrEnum):
    EMPTY = "empty"
    DISALLOWED_CHARACTER = "disallowed-character"
    LEADING_HYPHEN = "leading-hyphen"
    TRAILING_HYPHEN = "trailing-hyphen"
    EMPTY_HUNK = "empty-hunk"


@dataclass(frozen=True, slots=True)
class CodeFormatViolation:
    """First point at which a code departs from the convention.

    Attributes:
        code: The code that was checked.
        kind: What went wrong.
        position: Index into ``code`` of the offending character, if any.
        character: The offending character for ``disallowed-character``.
    """

    code: str
    kind: ViolationKind
    position: int | None = None
    character: str | None = None

    def pretty(self) -> str:
        match self.kind:
            case ViolationKind.EMPTY:
                return "code is empty"
            case ViolationKind.DISALLOWED_CHARACTER:
                return (
                    f"{self.code!r}: disallowed character {self.character!r} "
                    f"at position {self.position}"
                )
            case ViolationKind.LEADING_HYPHEN:
                return f"{self.code!r}: starts with a hyphen"
            case ViolationKind.TRAILING_HYPHEN:
                return f"{self.code!r}: ends with a hyphen"
            case ViolationKind.EMPTY_HUNK:
                return f"{self.code!r}: empty hunk at position {self.position}"


def check_code(code: str) -> CodeFormatViolation | None:
    """Return the first convention violation in ``code``, or None."""
    if not code:
        return CodeFormatViolation(code, ViolationKind.EMPTY)

    for i, ch in enumerate(code):
        if ch not in _ALLOWED:
            return CodeFormatViolation(code, ViolationKind.DISALLOWED_CHARACTER, i, ch)

    if code.startswith("-"):
        return CodeFormatViolation(code, ViolationKind.LEADING_HYPHEN, 0)
    if code.endswith("-"):
        return CodeFormatViolation(code, ViolationKind.TRAILING_HYPHEN, len(code) - 1)

    double = code.find("--")
    if double != -1:
        return CodeFormatViolation(code, ViolationKind.EMPTY_HUNK, double + 1)
    return None


def validate_code(code: str) -> Result[str, CodeFormatViolation]:
    violation = check_code(code)
    if violation is not None:
        return Err(violation)
    return Ok(code)


def is_conventional(code: str) -> bool:
    return check_code(code) is None


def hunks(code: str) -> tuple[str, ...]:
    """Split a code into its hyphen-delimited hunks."""
    if not code:
        return ()
    return tuple(code.split("-"))


@dataclass(frozen=True, slots=True)
class CodeParts:
    """Recommended structure of a code: ``<package>[-error]-<condition>``."""

    package: str
    marked: bool
    condition: tuple[str, ...]


def split_code(code: str) -> CodeParts | None:
    """Describe ``code`` in terms of the recommended structure.

    Returns None for codes with a single hunk, which carry no package prefix.
    """
    parts = hunks(code)
    if len(parts) < 2:
        return None

    package, rest = parts[0], parts[1:]
    marked = len(rest) > 1 and rest[0] == ERROR_MARKER
    if marked:
        rest = rest[1:]
    return CodeParts(package=package, marked=marked, condition=rest)


def normalize_code(code: str) -> str:
    """Coerce ``code`` towards the convention.

    Lowercases, turns whitespace/underscore/dot runs into hyphens, drops any
    other disallowed character, collapses repeated hyphens and trims hyphens
    at both ends. The result can be empty.
    """
    s = code.strip().lower()
    s = _SEPARATOR_RUN_RE.sub("-", s)
    s = _DISALLOWED_RE.sub("", s)
    s = _HYPHEN_RUN_RE.sub("-", s)
    return s.strip("-")
