"""Human-readable rendering of error values.

Rules, applied down the chain of single causes:

- ``code``                                  only a code
- ``code: message``                         with a message
- ``code: <rendered cause>``                with exactly one cause
- ``code: message: <rendered cause>``       with both

When a node has more than one cause, the chain stops there and the
configured ``MultiCausePolicy`` decides what to print:

- ``list-codes`` (default): ``code: message: [first-code, second-code]``
- ``elide``: ``code: message: <2 causes elided; see serialized form>``

``details`` never appear in the output. A present but empty cause list
renders the same as an absent one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .value import ErrorValue

__all__ = [
    "DEFAULT_RENDER_OPTIONS",
    "MultiCausePolicy",
    "RenderOptions",
    "render",
]

SEGMENT_SEPARATOR = ": "


class MultiCausePolicy(StrEnum):
    LIST_CODES = "list-codes"
    ELIDE = "elide"


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Rendering knobs.

    Attributes:
        multi_cause: What to print for a node with several causes.
        separator: Joins cause codes under ``list-codes``.
    """

    multi_cause: MultiCausePolicy = MultiCausePolicy.LIST_CODES
    separator: str = ", "


DEFAULT_RENDER_OPTIONS = RenderOptions()


def _multi_cause_segment(causes: tuple[ErrorValue, ...], options: RenderOptions) -> str:
    match options.multi_cause:
        case MultiCausePolicy.LIST_CODES:
            return "[" + options.separator.join(c.code for c in causes) + "]"
        case MultiCausePolicy.ELIDE:
            return f"<{len(causes)} causes elided; see serialized form>"


def render(value: ErrorValue, options: RenderOptions = DEFAULT_RENDER_OPTIONS) -> str:
    segments: list[str] = []
    node = value
    while True:
        segments.append(node.code)
        if node.message is not None:
            segments.append(node.message)

        causes = node.causes
        if len(causes) == 1:
            node = causes[0]
            continue
        if len(causes) > 1:
            segments.append(_multi_cause_segment(causes, options))
        break
    return SEGMENT_SEPARATOR.join(segments)
