"""Failure presentation utilities.

Centralized formatting and exit code mapping for the failure values the core
returns, so every command reports them the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from errcode.core.codec import InvalidJson, MalformedField, MissingCode
from errcode.core.codes import CodeFormatViolation
from errcode.core.config import ConfigError
from errcode.core.errors import ExitCode
from errcode.core.value import InvalidValue
from errcode.output.console import Style

if TYPE_CHECKING:
    from errcode.output.console import ConsoleProtocol

__all__ = ["Failure", "failure_exit_code", "print_failure"]

Failure = (
    MissingCode | MalformedField | InvalidJson | InvalidValue | CodeFormatViolation | ConfigError
)


def print_failure(failure: Failure, console: ConsoleProtocol) -> None:
    """Print a failure value to the console with appropriate formatting."""
    match failure:
        case MissingCode() | MalformedField():
            console.error(f"invalid error payload: {failure.pretty()}")
            if failure.path:
                console.print(f"failing node: {failure.location}", Style.DIM)
        case InvalidJson():
            console.error(failure.pretty())
        case InvalidValue(violation=violation) if violation is not None:
            console.error(violation.pretty())
        case InvalidValue():
            console.error(failure.pretty())
        case CodeFormatViolation():
            console.error(failure.pretty())
        case ConfigError():
            console.error(f"config: {failure.pretty()}")


def failure_exit_code(failure: Failure) -> int:
    """Get exit code for a failure value."""
    match failure:
        case MissingCode() | MalformedField() | InvalidJson() | InvalidValue():
            return int(ExitCode.INVALID_PAYLOAD)
        case CodeFormatViolation():
            return int(ExitCode.LINT_FAILED)
        case ConfigError():
            return int(ExitCode.USER_ERROR)
