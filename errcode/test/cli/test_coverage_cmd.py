from __future__ import annotations

from pathlib import Path

import pytest
import typer

from errcode.cli.context import CLIContext
from errcode.core.config import Config, LintConfig
from errcode.core.errors import ExitCode
from errcode.output.console import MockConsole, Style


def _install(monkeypatch: pytest.MonkeyPatch, config: Config | None = None) -> MockConsole:
    import errcode.cli.commands.coverage as coverage_cmd

    console = MockConsole()
    ctx = CLIContext(config=config or Config(), config_path=None, console=console)
    monkeypatch.setattr(coverage_cmd, "build_context", lambda: ctx)
    return console


def _lists(tmp_path: Path, produced: str, handled: str) -> tuple[str, str]:
    p = tmp_path / "produced.txt"
    h = tmp_path / "handled.txt"
    p.write_text(produced, encoding="utf-8")
    h.write_text(handled, encoding="utf-8")
    return str(p), str(h)


def test_exhaustive(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.coverage import coverage

    console = _install(monkeypatch)
    produced, handled = _lists(tmp_path, "a\nb\n", '["a", "b"]')
    coverage(produced=produced, handled=handled, exact=False)

    assert console.messages[-1] == "OK every produced code is handled"


def test_unhandled_codes_fail(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.coverage import coverage

    console = _install(monkeypatch)
    produced, handled = _lists(tmp_path, "a\nc\nb\n", "a\n")
    with pytest.raises(typer.Exit) as exc:
        coverage(produced=produced, handled=handled, exact=False)

    assert exc.value.exit_code == int(ExitCode.LINT_FAILED)
    unhandled = [o.message for o in console.outputs if o.style == Style.ERROR]
    assert unhandled[:2] == ["unhandled: b", "unhandled: c"]


def test_unused_only_warns_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.coverage import coverage

    console = _install(monkeypatch)
    produced, handled = _lists(tmp_path, "a\n", "a\nb\n")
    coverage(produced=produced, handled=handled, exact=False)

    assert "unused: b" in console.messages
    assert not console.has_error()


def test_exact_flag_fails_on_unused(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.coverage import coverage

    _install(monkeypatch)
    produced, handled = _lists(tmp_path, "a\n", "a\nb\n")
    with pytest.raises(typer.Exit) as exc:
        coverage(produced=produced, handled=handled, exact=True)

    assert exc.value.exit_code == int(ExitCode.LINT_FAILED)


def test_strict_config_fails_on_unused(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.coverage import coverage

    _install(monkeypatch, Config(lint=LintConfig(strict=True)))
    produced, handled = _lists(tmp_path, "a\n", "a\nb\n")
    with pytest.raises(typer.Exit) as exc:
        coverage(produced=produced, handled=handled, exact=False)

    assert exc.value.exit_code == int(ExitCode.LINT_FAILED)


def test_bad_code_list(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.coverage import coverage

    console = _install(monkeypatch)
    produced, handled = _lists(tmp_path, "a b\n", "a\n")
    with pytest.raises(typer.Exit) as exc:
        coverage(produced=produced, handled=handled, exact=False)

    assert exc.value.exit_code == int(ExitCode.USER_ERROR)
    assert "line 1" in console.text
