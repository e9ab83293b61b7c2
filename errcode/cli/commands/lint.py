from __future__ import annotations

import typer

from errcode.cli.context import build_context
from errcode.core.codes import ERROR_MARKER, check_code, split_code
from errcode.core.errors import ExitCode
from errcode.output.errors import print_failure


def lint(
    codes: list[str] = typer.Argument(..., help="Codes to check against the naming convention."),
    structure: bool = typer.Option(
        False,
        "--structure",
        help="Also warn about codes without a package hunk.",
    ),
) -> None:
    """Check error codes against the naming convention."""
    ctx = build_context()

    failed = 0
    for code in codes:
        violation = check_code(code)
        if violation is not None:
            print_failure(violation, ctx.console)
            failed += 1
            continue

        parts = split_code(code)
        if structure and parts is None:
            ctx.console.warning(f"{code!r}: no package hunk (expected <package>-{ERROR_MARKER}-...)")
        ctx.console.success(code)
        if parts is not None:
            ctx.debug(f"package={parts.package} condition={'-'.join(parts.condition)}")

    if failed:
        ctx.console.error(f"{failed} of {len(codes)} codes break the convention")
        raise typer.Exit(code=int(ExitCode.LINT_FAILED))
