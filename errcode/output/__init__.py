"""Console output and failure presentation."""

from .console import ConsoleProtocol, MockConsole, RichConsole, Style
from .errors import failure_exit_code, print_failure

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "failure_exit_code",
    "print_failure",
]
