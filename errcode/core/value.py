"""The error value: a code, and optionally a message, details and causes.

An ``ErrorValue`` is immutable. Its ``code`` is the only field meant for
branching; ``message`` is prose for humans and ``details`` is a flat
string-to-string mapping for machines. ``cause`` is an ordered sequence of
further error values, so a value is the root of a tree.

Presence is significant: ``message=None`` (absent) differs from
``message=""`` and ``details=None`` differs from ``details={}``. The same goes
for ``cause=None`` versus ``cause=[]``.

Traversals over the tree (equality, ``walk``, cycle detection) use explicit
stacks so deeply nested values don't exhaust the interpreter stack.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .codes import CodeFormatViolation, check_code
from .result import Err, Ok, Result

if TYPE_CHECKING:
    from .codeset import CodeSet

__all__ = [
    "Coded",
    "ErrorBuilder",
    "ErrorValue",
    "InvalidReason",
    "InvalidValue",
    "InvalidValueError",
    "check_acyclic",
    "code_of",
    "same_kind",
]


class InvalidReason(StrEnum):
    EMPTY_CODE = "empty-code"
    CODE_NOT_STRING = "code-not-string"
    MESSAGE_NOT_STRING = "message-not-string"
    DETAILS_NOT_MAPPING = "details-not-mapping"
    DETAIL_KEY_NOT_STRING = "detail-key-not-string"
    DETAIL_NOT_STRING = "detail-not-string"
    CAUSE_NOT_ERROR = "cause-not-error"
    CYCLIC_CAUSE = "cyclic-cause"
    CODE_FORMAT = "code-format"


@dataclass(frozen=True, slots=True)
class InvalidValue:
    """Construction-time violation.

    Attributes:
        reason: Which rule was broken.
        message: Human-readable description.
        violation: The lint finding when ``reason`` is ``code-format``.
    """

    reason: InvalidReason
    message: str
    violation: CodeFormatViolation | None = None

    def pretty(self) -> str:
        return f"invalid error value ({self.reason}): {self.message}"


class InvalidValueError(ValueError):
    """Raised by direct ``ErrorValue(...)`` construction with bad arguments.

    ``ErrorValue.create`` and ``ErrorBuilder.build`` return the same
    ``InvalidValue`` payload as ``Err`` instead.
    """

    def __init__(self, invalid: InvalidValue) -> None:
        super().__init__(invalid.message)
        self.invalid = invalid


@runtime_checkable
class Coded(Protocol):
    """Anything that exposes a string ``code``.

    Error types from other libraries can take part in code-based
    classification by growing a ``code`` attribute; no base class is needed.
    """

    @property
    def code(self) -> str: ...


def code_of(obj: object) -> str | None:
    """Return the code carried by ``obj``, or None if it has no usable code."""
    if not isinstance(obj, Coded):
        return None
    code = obj.code
    if not isinstance(code, str) or not code:
        return None
    return code


def same_kind(a: object, b: object) -> bool:
    """True when both objects carry the same non-empty code."""
    code = code_of(a)
    return code is not None and code == code_of(b)


def _invalid(reason: InvalidReason, message: str) -> InvalidValueError:
    return InvalidValueError(InvalidValue(reason, message))


def _freeze_details(details: object) -> Mapping[str, str] | None:
    if details is None:
        return None
    if not isinstance(details, Mapping):
        raise _invalid(
            InvalidReason.DETAILS_NOT_MAPPING,
            f"details must be a mapping, got {type(details).__name__}",
        )
    frozen: dict[str, str] = {}
    for key, val in details.items():  # pyright: ignore[reportUnknownVariableType]
        if not isinstance(key, str):
            raise _invalid(
                InvalidReason.DETAIL_KEY_NOT_STRING, f"detail key {key!r} is not a string"
            )
        if not isinstance(val, str):
            raise _invalid(
                InvalidReason.DETAIL_NOT_STRING,
                f"detail {key!r} must be a string, got {type(val).__name__}",
            )
        frozen[key] = val
    return MappingProxyType(frozen)


def _freeze_cause(cause: object) -> tuple[ErrorValue, ...] | None:
    if cause is None:
        return None
    if isinstance(cause, ErrorValue):
        return (cause,)
    if isinstance(cause, (str, bytes)) or not isinstance(cause, Sequence):
        raise _invalid(
            InvalidReason.CAUSE_NOT_ERROR,
            f"cause must be a sequence of error values, got {type(cause).__name__}",
        )
    items: tuple[object, ...] = tuple(cause)  # pyright: ignore[reportUnknownArgumentType]
    for i, item in enumerate(items):
        if not isinstance(item, ErrorValue):
            raise _invalid(
                InvalidReason.CAUSE_NOT_ERROR,
                f"cause[{i}] is {type(item).__name__}, not an error value",
            )
    return items  # pyright: ignore[reportReturnType]


@dataclass(frozen=True, slots=True, eq=False)
class ErrorValue:
    """An immutable error identified by its ``code``.

    Attributes:
        code: Non-empty identifier of the error's kind.
        message: Optional prose for humans. Never parsed.
        details: Optional flat string-to-string annotations.
        cause: Optional ordered upstream errors (stored as a tuple).
    """

    code: str
    message: str | None = None
    details: Mapping[str, str] | None = None
    cause: Sequence[ErrorValue] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.code, str):  # pyright: ignore[reportUnnecessaryIsInstance]
            raise _invalid(
                InvalidReason.CODE_NOT_STRING,
                f"code must be a string, got {type(self.code).__name__}",
            )
        if not self.code:
            raise _invalid(InvalidReason.EMPTY_CODE, "code must not be empty")
        if self.message is not None and not isinstance(self.message, str):  # pyright: ignore[reportUnnecessaryIsInstance]
            raise _invalid(
                InvalidReason.MESSAGE_NOT_STRING,
                f"message must be a string, got {type(self.message).__name__}",
            )
        object.__setattr__(self, "details", _freeze_details(self.details))
        object.__setattr__(self, "cause", _freeze_cause(self.cause))

    @classmethod
    def create(
        cls,
        code: str,
        message: str | None = None,
        details: Mapping[str, str] | None = None,
        cause: Sequence[ErrorValue] | ErrorValue | None = None,
        *,
        check_format: bool = False,
    ) -> Result[ErrorValue, InvalidValue]:
        """Build a value, returning construction failures as ``Err``.

        With ``check_format`` the code must also follow the lexical
        convention (see ``errcode.core.codes``).
        """
        try:
            value = cls(code, message, details, cause)  # pyright: ignore[reportArgumentType]
        except InvalidValueError as e:
            return Err(e.invalid)

        if check_format:
            violation = check_code(value.code)
            if violation is not None:
                return Err(InvalidValue(InvalidReason.CODE_FORMAT, violation.pretty(), violation))
        return Ok(value)

    # -------- structure --------

    @property
    def causes(self) -> tuple[ErrorValue, ...]:
        """The causes, or an empty tuple when ``cause`` is absent."""
        if self.cause is None:
            return ()
        return tuple(self.cause)

    def walk(self) -> Iterator[ErrorValue]:
        """Yield this value and every nested cause, depth first, in order."""
        stack: list[ErrorValue] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.causes))

    def codes(self) -> CodeSet:
        """Every code appearing anywhere in this tree."""
        from .codeset import CodeSet

        return CodeSet.from_iterable(node.code for node in self.walk())

    def is_kind(self, code: str) -> bool:
        return self.code == code

    # -------- immutable updates --------

    def with_message(self, message: str | None) -> ErrorValue:
        return replace(self, message=message)

    def with_details(self, details: Mapping[str, str] | None) -> ErrorValue:
        return replace(self, details=details)

    def with_cause(self, *causes: ErrorValue) -> ErrorValue:
        """Return a copy with ``causes`` appended to the existing ones."""
        return replace(self, cause=self.causes + causes)

    # -------- equality --------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorValue):
            return NotImplemented
        pending: list[tuple[ErrorValue, ErrorValue]] = [(self, other)]
        while pending:
            a, b = pending.pop()
            if a is b:
                continue
            if not _shallow_equal(a, b):
                return False
            pending.extend(zip(a.causes, b.causes))
        return True

    def __hash__(self) -> int:
        details = None if self.details is None else frozenset(self.details.items())
        cause = None if self.cause is None else tuple(c.code for c in self.cause)
        return hash((self.code, self.message, details, cause))

    def __repr__(self) -> str:
        """Shallow: causes are summarized by count and their codes."""
        parts = [repr(self.code)]
        if self.message is not None:
            parts.append(f"message={self.message!r}")
        if self.details is not None:
            parts.append(f"details={dict(self.details)!r}")
        if self.cause is not None:
            codes = ", ".join(c.code for c in self.causes)
            parts.append(f"cause=<{len(self.causes)}: {codes}>" if codes else "cause=<0>")
        return f"ErrorValue({', '.join(parts)})"


def _shallow_equal(a: ErrorValue, b: ErrorValue) -> bool:
    if a.code != b.code or a.message != b.message:
        return False
    if (a.details is None) != (b.details is None):
        return False
    if a.details is not None and b.details is not None and dict(a.details) != dict(b.details):
        return False
    if (a.cause is None) != (b.cause is None):
        return False
    return len(a.causes) == len(b.causes)


def _has_cycle[N](root: N, children: Callable[[N], Sequence[N]]) -> bool:
    """Iterative DFS looking for a back-edge.

    Shared sub-trees are fine; only a node reachable from itself is a cycle.
    """
    done: set[int] = set()
    on_path: set[int] = {id(root)}
    stack: list[tuple[N, Sequence[N], int]] = [(root, children(root), 0)]
    while stack:
        node, kids, i = stack[-1]
        if i < len(kids):
            stack[-1] = (node, kids, i + 1)
            child = kids[i]
            if id(child) in on_path:
                return True
            if id(child) not in done:
                on_path.add(id(child))
                stack.append((child, children(child), 0))
            continue
        stack.pop()
        on_path.discard(id(node))
        done.add(id(node))
    return False


def check_acyclic(value: ErrorValue) -> Result[ErrorValue, InvalidValue]:
    """Verify that no value in the tree lists itself as a transitive cause.

    Values built through the constructor can't form cycles, since causes
    must exist before the value that holds them. This catches trees that
    were patched after construction.
    """
    if _has_cycle(value, lambda node: node.causes):
        return Err(InvalidValue(InvalidReason.CYCLIC_CAUSE, f"{value.code!r} is its own cause"))
    return Ok(value)


class ErrorBuilder:
    """Mutable, chainable construction of error values.

    Causes may be finished values or other builders; ``build`` turns the
    whole builder graph into a value tree.

    Example:
        result = (
            ErrorBuilder("myapp-error-config")
            .message("config file is unreadable")
            .detail("path", "/etc/myapp.toml")
            .caused_by(ErrorValue("os-error-permission-denied"))
            .build()
        )
    """

    def __init__(self, code: str) -> None:
        self._code = code
        self._message: str | None = None
        self._details: dict[str, str] | None = None
        self._causes: list[ErrorValue | ErrorBuilder] | None = None

    @property
    def code(self) -> str:
        return self._code

    def message(self, message: str) -> ErrorBuilder:
        self._message = message
        return self

    def detail(self, key: str, value: str) -> ErrorBuilder:
        if self._details is None:
            self._details = {}
        self._details[key] = value
        return self

    def details(self, details: Mapping[str, str]) -> ErrorBuilder:
        """Merge ``details`` in; an empty mapping still marks details present."""
        if self._details is None:
            self._details = {}
        self._details.update(details)
        return self

    def caused_by(self, *causes: ErrorValue | ErrorBuilder) -> ErrorBuilder:
        """Append causes; calling with none marks an empty cause list present."""
        if self._causes is None:
            self._causes = []
        self._causes.extend(causes)
        return self

    def _builder_children(self) -> list[ErrorBuilder]:
        return [c for c in self._causes or () if isinstance(c, ErrorBuilder)]

    def build(self, *, check_format: bool = False) -> Result[ErrorValue, InvalidValue]:
        if _has_cycle(self, ErrorBuilder._builder_children):
            return Err(
                InvalidValue(
                    InvalidReason.CYCLIC_CAUSE,
                    f"builder {self._code!r} is reachable from its own causes",
                )
            )

        built: dict[int, ErrorValue] = {}
        stack: list[tuple[ErrorBuilder, bool]] = [(self, False)]
        while stack:
            builder, expanded = stack.pop()
            if id(builder) in built:
                continue
            if not expanded:
                stack.append((builder, True))
                for child in reversed(builder._builder_children()):
                    if id(child) not in built:
                        stack.append((child, False))
                continue

            causes = None
            if builder._causes is not None:
                causes = [
                    built[id(c)] if isinstance(c, ErrorBuilder) else c for c in builder._causes
                ]
            result = ErrorValue.create(
                builder._code,
                builder._message,
                builder._details,
                causes,
                check_format=check_format,
            )
            if isinstance(result, Err):
                return result
            built[id(builder)] = result.value

        return Ok(built[id(self)])
