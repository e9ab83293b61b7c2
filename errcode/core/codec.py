"""Conversion between error values and their serial form.

The serial form is a plain mapping, ready for JSON::

    {"code": "app-error-thing",
     "message": "human text",
     "details": {"k": "v"},
     "cause": [{"code": "inner-error"}]}

Only ``code`` is required. Optional fields are emitted only when present,
and ``cause`` is always a list, even for a single cause. Unknown keys in an
incoming payload are ignored so producers can add fields without breaking
older consumers.

Both directions walk the tree with an explicit stack. ``decode`` also caps
nesting at ``max_depth`` to bound the work done on hostile payloads.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum

from .result import Err, Ok, Result
from .structured import StrDict, as_obj_list, as_str_dict, first_non_str_entry, json_type
from .value import ErrorValue

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "NODE_FIELD",
    "DecodeError",
    "InvalidJson",
    "MalformedField",
    "MissingCode",
    "MissingReason",
    "decode",
    "dumps",
    "encode",
    "loads",
]

DEFAULT_MAX_DEPTH = 256

# Field name reported when a node itself is not a JSON object.
NODE_FIELD = "<node>"


def format_path(path: tuple[int, ...]) -> str:
    """Render a cause path, e.g. ``(0, 2)`` -> ``cause[0].cause[2]``."""
    if not path:
        return "<root>"
    return ".".join(f"cause[{i}]" for i in path)


class MissingReason(StrEnum):
    ABSENT = "absent"
    NOT_STRING = "not-string"
    EMPTY = "empty"


@dataclass(frozen=True, slots=True)
class MissingCode:
    """A node in the payload has no usable ``code``.

    Attributes:
        reason: Whether the key was absent, not a string, or empty.
        path: Cause indices leading from the root to the failing node.
    """

    reason: MissingReason
    path: tuple[int, ...] = ()

    @property
    def location(self) -> str:
        return format_path(self.path)

    def pretty(self) -> str:
        match self.reason:
            case MissingReason.ABSENT:
                what = "code is missing"
            case MissingReason.NOT_STRING:
                what = "code is not a string"
            case MissingReason.EMPTY:
                what = "code is empty"
        return f"{self.location}: {what}"


@dataclass(frozen=True, slots=True)
class MalformedField:
    """A field is present but has the wrong shape.

    Attributes:
        field: ``message``, ``details``, ``cause`` or ``NODE_FIELD``.
        detail: What was wrong with it.
        path: Cause indices leading from the root to the failing node.
    """

    field: str
    detail: str
    path: tuple[int, ...] = ()

    @property
    def location(self) -> str:
        return format_path(self.path)

    def pretty(self) -> str:
        return f"{self.location}: {self.field}: {self.detail}"


@dataclass(frozen=True, slots=True)
class InvalidJson:
    """The text handed to ``loads`` is not JSON."""

    message: str
    line: int | None = None
    column: int | None = None

    def pretty(self) -> str:
        if self.line is None:
            return f"invalid JSON: {self.message}"
        return f"invalid JSON at line {self.line}, column {self.column}: {self.message}"


DecodeError = MissingCode | MalformedField


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------


def encode(value: ErrorValue) -> StrDict:
    """Serialize ``value`` to a mapping with keys in canonical order.

    Canonical order is ``code, message, details, cause``.
    """
    root: StrDict = {}
    stack: list[tuple[ErrorValue, StrDict]] = [(value, root)]
    while stack:
        node, out = stack.pop()
        out["code"] = node.code
        if node.message is not None:
            out["message"] = node.message
        if node.details is not None:
            out["details"] = dict(node.details)
        if node.cause is not None:
            children: list[StrDict] = [{} for _ in node.cause]
            out["cause"] = children
            stack.extend(zip(node.cause, children))
    return root


def _json_str(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


def _layout(level: int, indent: int | None) -> tuple[str, str, str]:
    """Opening break, item separator and closing break for a container."""
    if indent is None:
        return "", ", ", ""
    inner = "\n" + " " * (indent * (level + 1))
    return inner, "," + inner, "\n" + " " * (indent * level)


def _object_pieces(
    node: ErrorValue, level: int, indent: int | None
) -> list[str | tuple[ErrorValue, int]]:
    """Text for one node; each cause is left as a ``(node, level)`` placeholder."""
    open_, sep, close = _layout(level, indent)
    fields = [f'"code": {_json_str(node.code)}']
    if node.message is not None:
        fields.append(f'"message": {_json_str(node.message)}')
    if node.details is not None:
        if node.details:
            d_open, d_sep, d_close = _layout(level + 1, indent)
            items = d_sep.join(f"{_json_str(k)}: {_json_str(v)}" for k, v in node.details.items())
            fields.append(f'"details": {{{d_open}{items}{d_close}}}')
        else:
            fields.append('"details": {}')

    pieces: list[str | tuple[ErrorValue, int]] = ["{" + open_ + sep.join(fields)]
    if node.cause is not None:
        if node.cause:
            c_open, c_sep, c_close = _layout(level + 1, indent)
            pieces.append(f'{sep}"cause": [{c_open}')
            for i, child in enumerate(node.cause):
                if i:
                    pieces.append(c_sep)
                pieces.append((child, level + 2))
            pieces.append(f"{c_close}]")
        else:
            pieces.append(f'{sep}"cause": []')
    pieces.append(close + "}")
    return pieces


def dumps(value: ErrorValue, *, indent: int | None = None) -> str:
    """JSON text for ``value``, laid out like ``json.dumps(encode(value))``.

    Written from an explicit stack, so any value that can be built can be
    dumped regardless of nesting.
    """
    out: list[str] = []
    stack: list[str | tuple[ErrorValue, int]] = [(value, 0)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
        else:
            node, level = item
            stack.extend(reversed(_object_pieces(node, level, indent)))
    return "".join(out)


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


@dataclass(slots=True)
class _Node:
    code: str
    message: str | None
    details: dict[str, str] | None
    has_cause: bool
    children: list[int] = field(default_factory=list)


def _read_node(raw: object, path: tuple[int, ...]) -> Result[tuple[_Node, list[object]], DecodeError]:
    """Validate one node's own fields; causes are returned unparsed."""
    data = as_str_dict(raw)
    if data is None:
        return Err(MalformedField(NODE_FIELD, f"expected an object, got {json_type(raw)}", path))

    if "code" not in data:
        return Err(MissingCode(MissingReason.ABSENT, path))
    code = data["code"]
    if not isinstance(code, str):
        return Err(MissingCode(MissingReason.NOT_STRING, path))
    if not code:
        return Err(MissingCode(MissingReason.EMPTY, path))

    message: str | None = None
    if "message" in data:
        raw_message = data["message"]
        if not isinstance(raw_message, str):
            return Err(
                MalformedField("message", f"expected a string, got {json_type(raw_message)}", path)
            )
        message = raw_message

    details: dict[str, str] | None = None
    if "details" in data:
        raw_details = data["details"]
        if not isinstance(raw_details, dict):
            return Err(
                MalformedField("details", f"expected an object, got {json_type(raw_details)}", path)
            )
        bad = first_non_str_entry(raw_details)  # pyright: ignore[reportUnknownArgumentType]
        if bad is not None:
            key, val = bad
            if not isinstance(key, str):
                return Err(MalformedField("details", f"key {key!r} is not a string", path))
            return Err(
                MalformedField(
                    "details", f"value for {key!r} must be a string, got {json_type(val)}", path
                )
            )
        details = dict(raw_details)  # pyright: ignore[reportUnknownArgumentType]

    raw_causes: list[object] = []
    has_cause = "cause" in data
    if has_cause:
        causes = as_obj_list(data["cause"])
        if causes is None:
            return Err(
                MalformedField("cause", f"expected an array, got {json_type(data['cause'])}", path)
            )
        raw_causes = causes

    return Ok((_Node(code, message, details, has_cause), raw_causes))


def decode(
    data: object, *, max_depth: int | None = DEFAULT_MAX_DEPTH
) -> Result[ErrorValue, DecodeError]:
    """Parse a serial mapping into an error value.

    Nodes are checked depth first in document order; the first failing node
    is reported together with its cause path. ``max_depth`` counts cause
    levels below the root; None disables the limit.
    """
    nodes: list[_Node] = []
    stack: list[tuple[object, tuple[int, ...], int | None]] = [(data, (), None)]
    while stack:
        raw, path, parent = stack.pop()
        if max_depth is not None and len(path) > max_depth:
            return Err(
                MalformedField("cause", f"nesting exceeds maximum depth of {max_depth}", path[:-1])
            )

        read = _read_node(raw, path)
        if isinstance(read, Err):
            return read
        node, raw_causes = read.value

        index = len(nodes)
        nodes.append(node)
        if parent is not None:
            nodes[parent].children.append(index)
        for i in reversed(range(len(raw_causes))):
            stack.append((raw_causes[i], (*path, i), index))

    # Children always come after their parent, so build back to front.
    built: list[ErrorValue | None] = [None] * len(nodes)
    for index in reversed(range(len(nodes))):
        node = nodes[index]
        cause = None
        if node.has_cause:
            cause = [built[i] for i in node.children]
        built[index] = ErrorValue(node.code, node.message, node.details, cause)  # pyright: ignore[reportArgumentType]

    root = built[0]
    assert root is not None
    return Ok(root)


def loads(
    text: str | bytes, *, max_depth: int | None = DEFAULT_MAX_DEPTH
) -> Result[ErrorValue, DecodeError | InvalidJson]:
    """Parse JSON text and decode it."""
    try:
        data: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(InvalidJson(e.msg, e.lineno, e.colno))
    except UnicodeDecodeError as e:
        return Err(InvalidJson(f"not valid UTF-8: {e.reason}"))
    except RecursionError:
        return Err(InvalidJson("nesting too deep to parse"))
    return decode(data, max_depth=max_depth)
