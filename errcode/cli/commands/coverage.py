from __future__ import annotations

import typer

from errcode.cli.commands._helpers import read_or_exit
from errcode.cli.context import CLIContext, build_context
from errcode.core.codeset import CodeSet, check_coverage, parse_code_list
from errcode.core.errors import ExitCode
from errcode.core.result import Err
from errcode.output.console import Style


def coverage(
    produced: str = typer.Argument(..., help="File listing the codes an operation may produce."),
    handled: str = typer.Argument(..., help="File listing the codes the caller handles."),
    exact: bool = typer.Option(
        False,
        "--exact",
        help="Also fail on handled codes that are never produced.",
    ),
) -> None:
    """Report produced codes that the caller does not handle.

    Code lists are either a JSON array of strings or one code per line
    (blank lines and # comments ignored).
    """
    ctx = build_context()
    produced_set = _load_codes(ctx, produced)
    handled_set = _load_codes(ctx, handled)

    report = check_coverage(produced_set, handled_set)
    ctx.console.print(
        f"produced: {len(report.produced)} codes, handled: {len(report.handled)} codes",
        Style.DIM,
    )
    for code in report.unhandled:
        ctx.console.print(f"unhandled: {code}", Style.ERROR)
    for code in report.unused:
        ctx.console.print(f"unused: {code}", Style.WARNING)

    strict = exact or ctx.config.lint.strict
    if not report.exhaustive:
        ctx.console.error(f"{len(report.unhandled)} produced codes are not handled")
        raise typer.Exit(code=int(ExitCode.LINT_FAILED))
    if strict and not report.exact:
        ctx.console.error(f"{len(report.unused)} handled codes are never produced")
        raise typer.Exit(code=int(ExitCode.LINT_FAILED))

    ctx.console.success("every produced code is handled")


def _load_codes(ctx: CLIContext, source: str) -> CodeSet:
    text = read_or_exit(ctx, source)
    result = parse_code_list(text)
    if isinstance(result, Err):
        ctx.console.error(f"{source}: {result.error.pretty()}")
        raise typer.Exit(code=int(ExitCode.USER_ERROR))
    ctx.debug(f"{source}: {len(result.value)} codes")
    return result.value
