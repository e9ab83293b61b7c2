from __future__ import annotations

from dataclasses import replace

import typer

from errcode.cli.commands._helpers import STDIN, read_or_exit
from errcode.cli.context import build_context
from errcode.core.codec import dumps, loads
from errcode.core.render import MultiCausePolicy, render
from errcode.core.result import Err
from errcode.output.errors import failure_exit_code, print_failure


def render_cmd(
    source: str = typer.Argument(STDIN, help="JSON file holding an error payload (- for stdin)"),
    tree: bool = typer.Option(False, "--tree", help="Show every cause with messages and details."),
    as_json: bool = typer.Option(False, "--json", help="Print the canonical JSON form instead."),
    multi_cause: MultiCausePolicy | None = typer.Option(
        None,
        "--multi-cause",
        help="How to show a node with several causes (overrides config).",
    ),
) -> None:
    """Decode an error payload and print it for humans."""
    ctx = build_context()
    text = read_or_exit(ctx, source)

    max_depth = ctx.config.codec.max_depth
    ctx.debug(f"max depth: {max_depth if max_depth is not None else 'unlimited'}")
    result = loads(text, max_depth=max_depth)
    if isinstance(result, Err):
        print_failure(result.error, ctx.console)
        raise typer.Exit(code=failure_exit_code(result.error))
    value = result.value

    if as_json:
        ctx.console.print(dumps(value, indent=2))
        return
    if tree:
        ctx.console.tree(value)
        return

    options = ctx.config.render
    if multi_cause is not None:
        options = replace(options, multi_cause=multi_cause)
    ctx.console.print(render(value, options))
