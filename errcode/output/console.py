"""Console output abstraction.

Commands write through ``ConsoleProtocol`` so they never touch Rich
directly. ``RichConsole`` is the production backend and ``MockConsole``
captures output for tests.

Besides styled lines, consoles can print an error value as a tree (one
node per line with its message and details), which is what
``errcode render --tree`` shows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from errcode.core.value import ErrorValue

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
    "tree_lines",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    DIM = auto()
    CODE = auto()  # An error code

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Where commands send their output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        ...

    def warning(self, message: str) -> None: ...

    def tree(self, value: ErrorValue) -> None:
        """Print the whole cause tree of ``value``."""
        ...


def _node_label(node: ErrorValue) -> tuple[str, str | None]:
    """Code and the trailing text shown next to it in a tree."""
    parts: list[str] = []
    if node.message is not None:
        parts.append(node.message)
    if node.details:
        parts.append(" ".join(f"{k}={v}" for k, v in sorted(node.details.items())))
    return node.code, " ".join(parts) if parts else None


def tree_lines(value: ErrorValue, *, indent: str = "  ") -> list[str]:
    """Plain-text tree: one line per node, indented by depth."""
    lines: list[str] = []
    stack: list[tuple[ErrorValue, int]] = [(value, 0)]
    while stack:
        node, depth = stack.pop()
        code, text = _node_label(node)
        line = f"{indent * depth}{code}"
        if text:
            line += f": {text}"
        lines.append(line)
        stack.extend((c, depth + 1) for c in reversed(node.causes))
    return lines


class RichConsole:
    """Console implementation backed by Rich."""

    def __init__(self) -> None:
        # Import Rich lazily to avoid an import-time dependency in the core
        from rich.console import Console

        self._console = Console(highlight=False)
        self._stderr = Console(stderr=True, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.DIM: "dim",
            Style.CODE: "cyan bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        from rich.text import Text

        self._console.print(Text.assemble(("OK", "green"), " ", message))

    def error(self, message: str) -> None:
        from rich.text import Text

        self._stderr.print(Text.assemble(("error:", "red bold"), " ", message))

    def warning(self, message: str) -> None:
        from rich.text import Text

        self._stderr.print(Text.assemble(("warning:", "yellow"), " ", message))

    def tree(self, value: ErrorValue) -> None:
        from rich.text import Text
        from rich.tree import Tree

        def label(node: ErrorValue) -> Text:
            code, text = _node_label(node)
            out = Text(code, style=self._style_map[Style.CODE])
            if text:
                out.append(f": {text}")
            return out

        root = Tree(label(value))
        stack: list[tuple[ErrorValue, Tree]] = [(value, root)]
        while stack:
            node, branch = stack.pop()
            for child in node.causes:
                stack.append((child, branch.add(label(child))))
        self._console.print(root)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"OK {message}", Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"warning: {message}", Style.WARNING))

    def tree(self, value: ErrorValue) -> None:
        for line in tree_lines(value):
            self.outputs.append(OutputRecord(line, Style.DEFAULT))

    # Test helper methods

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all records containing substring."""
        return [o for o in self.outputs if substring in o.message]
