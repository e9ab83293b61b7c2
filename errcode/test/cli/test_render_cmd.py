from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

from errcode.cli.context import CLIContext
from errcode.core.config import Config
from errcode.core.errors import ExitCode
from errcode.core.render import MultiCausePolicy, RenderOptions
from errcode.output.console import MockConsole

PAYLOAD = {
    "code": "app-error-load",
    "message": "could not load",
    "details": {"path": "/tmp/x"},
    "cause": [{"code": "os-error-denied"}],
}


def _ctx(config: Config | None = None) -> CLIContext:
    return CLIContext(config=config or Config(), config_path=None, console=MockConsole())


def _install(monkeypatch: pytest.MonkeyPatch, ctx: CLIContext) -> MockConsole:
    import errcode.cli.commands.render as render_cmd

    monkeypatch.setattr(render_cmd, "build_context", lambda: ctx)
    assert isinstance(ctx.console, MockConsole)
    return ctx.console


def _write(tmp_path: Path, payload: object) -> str:
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_renders_payload(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.render import render_cmd

    console = _install(monkeypatch, _ctx())
    render_cmd(source=_write(tmp_path, PAYLOAD), tree=False, as_json=False, multi_cause=None)

    assert console.messages == ["app-error-load: could not load: os-error-denied"]


def test_tree_shows_details(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.render import render_cmd

    console = _install(monkeypatch, _ctx())
    render_cmd(source=_write(tmp_path, PAYLOAD), tree=True, as_json=False, multi_cause=None)

    assert console.messages == ["app-error-load: could not load path=/tmp/x", "  os-error-denied"]


def test_json_output_is_canonical(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.render import render_cmd

    payload = {"cause": [{"code": "y"}], "extra": 1, "code": "x"}
    console = _install(monkeypatch, _ctx())
    render_cmd(source=_write(tmp_path, payload), tree=False, as_json=True, multi_cause=None)

    assert json.loads(console.text) == {"code": "x", "cause": [{"code": "y"}]}
    assert console.text.index('"code"') < console.text.index('"cause"')


def test_multi_cause_option_overrides_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    from errcode.cli.commands.render import render_cmd

    payload = {"code": "x", "cause": [{"code": "a"}, {"code": "b"}]}
    config = Config(render=RenderOptions(separator=" / "))
    console = _install(monkeypatch, _ctx(config))

    render_cmd(source=_write(tmp_path, payload), tree=False, as_json=False, multi_cause=None)
    render_cmd(
        source=_write(tmp_path, payload),
        tree=False,
        as_json=False,
        multi_cause=MultiCausePolicy.ELIDE,
    )

    assert console.messages == ["x: [a / b]", "x: <2 causes elided; see serialized form>"]


def test_invalid_payload_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.render import render_cmd

    console = _install(monkeypatch, _ctx())
    with pytest.raises(typer.Exit) as exc:
        render_cmd(
            source=_write(tmp_path, {"code": "x", "cause": [{"message": "no code"}]}),
            tree=False,
            as_json=False,
            multi_cause=None,
        )

    assert exc.value.exit_code == int(ExitCode.INVALID_PAYLOAD)
    assert "cause[0]: code is missing" in console.text


def test_not_json_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.render import render_cmd

    path = tmp_path / "payload.json"
    path.write_text("not json", encoding="utf-8")
    console = _install(monkeypatch, _ctx())
    with pytest.raises(typer.Exit) as exc:
        render_cmd(source=str(path), tree=False, as_json=False, multi_cause=None)

    assert exc.value.exit_code == int(ExitCode.INVALID_PAYLOAD)
    assert "invalid JSON" in console.text


def test_missing_file_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.render import render_cmd

    console = _install(monkeypatch, _ctx())
    with pytest.raises(typer.Exit) as exc:
        render_cmd(source=str(tmp_path / "nope.json"), tree=False, as_json=False, multi_cause=None)

    assert exc.value.exit_code == int(ExitCode.IO_ERROR)
    assert console.has_error()


def test_depth_limit_from_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    from errcode.cli.commands.render import render_cmd
    from errcode.core.config import CodecConfig

    payload = {"code": "a", "cause": [{"code": "b", "cause": [{"code": "c"}]}]}
    _install(monkeypatch, _ctx(Config(codec=CodecConfig(max_depth=1))))
    with pytest.raises(typer.Exit) as exc:
        render_cmd(source=_write(tmp_path, payload), tree=False, as_json=False, multi_cause=None)

    assert exc.value.exit_code == int(ExitCode.INVALID_PAYLOAD)


def test_json_output_of_deep_payload_without_depth_limit(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    from errcode.cli.commands.render import render_cmd
    from errcode.core.config import CodecConfig

    payload: dict[str, object] = {"code": "leaf"}
    for i in range(300):
        payload = {"code": f"level-{i}", "cause": [payload]}
    console = _install(monkeypatch, _ctx(Config(codec=CodecConfig(max_depth=None))))
    render_cmd(source=_write(tmp_path, payload), tree=False, as_json=True, multi_cause=None)

    assert json.loads(console.text) == payload
