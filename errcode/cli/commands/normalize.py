from __future__ import annotations

import typer

from errcode.cli.context import build_context
from errcode.core.codes import normalize_code
from errcode.core.errors import ExitCode


def normalize(
    codes: list[str] = typer.Argument(..., help="Codes to rewrite into the naming convention."),
) -> None:
    """Print each code rewritten to follow the convention."""
    ctx = build_context()

    empty = False
    for code in codes:
        normalized = normalize_code(code)
        if not normalized:
            ctx.console.error(f"{code!r}: nothing left after normalization")
            empty = True
            continue
        ctx.console.print(normalized)

    if empty:
        raise typer.Exit(code=int(ExitCode.USER_ERROR))
