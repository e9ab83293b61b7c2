"""Process exit codes for the errcode CLI.

These values are returned to the shell and should remain stable:
- 0: Success
- 1: User error (bad arguments, unreadable config)
- 2: Invalid payload (not JSON, missing code, malformed field)
- 3: Lint failed (code convention violations, unhandled codes)
- 4: I/O error (input file not found or unreadable)
"""

from enum import IntEnum

__all__ = ["ExitCode"]


class ExitCode(IntEnum):
    OK = 0
    USER_ERROR = 1
    INVALID_PAYLOAD = 2
    LINT_FAILED = 3
    IO_ERROR = 4

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ExitCode.OK
