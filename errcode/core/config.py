"""Typed configuration loading.

Configuration is optional. It lives in a TOML file::

    [render]
    multi_cause = "list-codes"   # or "elide"
    separator = ", "

    [codec]
    max_depth = 256

    [lint]
    strict = false

Missing keys fall back to defaults; keys with the wrong type are reported as
a ``ConfigError`` rather than silently ignored.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .codec import DEFAULT_MAX_DEPTH
from .render import MultiCausePolicy, RenderOptions
from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_table, json_type

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_NAME",
    "CodecConfig",
    "Config",
    "ConfigError",
    "LintConfig",
    "find_config",
    "load_config",
]

CONFIG_ENV_VAR = "ERRCODE_CONFIG"
DEFAULT_CONFIG_NAME = "errcode.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def pretty(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


@dataclass(frozen=True, slots=True)
class CodecConfig:
    """Decoding limits. ``max_depth`` of None disables the nesting cap."""

    max_depth: int | None = DEFAULT_MAX_DEPTH


@dataclass(frozen=True, slots=True)
class LintConfig:
    """With ``strict``, coverage also fails on handled-but-never-produced codes."""

    strict: bool = False


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    render: RenderOptions = field(default_factory=RenderOptions)
    codec: CodecConfig = field(default_factory=CodecConfig)
    lint: LintConfig = field(default_factory=LintConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: A key is present with an unusable value.
        """
        render: StrDict = get_table(data, "render") or {}
        codec: StrDict = get_table(data, "codec") or {}
        lint: StrDict = get_table(data, "lint") or {}

        return cls(
            render=_render_options(render),
            codec=CodecConfig(max_depth=_max_depth(codec)),
            lint=LintConfig(strict=_flag(lint, "strict", "lint.strict")),
        )


def _render_options(table: StrDict) -> RenderOptions:
    defaults = RenderOptions()
    multi_cause = defaults.multi_cause
    if "multi_cause" in table:
        raw = table["multi_cause"]
        try:
            multi_cause = MultiCausePolicy(raw)
        except ValueError:
            choices = ", ".join(p.value for p in MultiCausePolicy)
            raise ValueError(f"render.multi_cause must be one of {choices}, got {raw!r}") from None

    separator = defaults.separator
    if "separator" in table:
        raw = table["separator"]
        if not isinstance(raw, str):
            raise ValueError(f"render.separator must be a string, got {json_type(raw)}")
        separator = raw

    return RenderOptions(multi_cause=multi_cause, separator=separator)


def _max_depth(table: StrDict) -> int | None:
    if "max_depth" not in table:
        return DEFAULT_MAX_DEPTH
    raw = table["max_depth"]
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise ValueError(f"codec.max_depth must be a non-negative integer, got {raw!r}")
    # 0 disables the limit; TOML has no null.
    return raw or None


def _flag(table: StrDict, key: str, name: str) -> bool:
    raw = table.get(key, False)
    if not isinstance(raw, bool):
        raise ValueError(f"{name} must be a boolean, got {json_type(raw)}")
    return raw


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except ValueError as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def find_config(explicit: Path | None = None, *, cwd: Path | None = None) -> Path | None:
    """Locate the config file to use.

    Order: explicit path, ``$ERRCODE_CONFIG``, ``errcode.toml`` in ``cwd``.
    An explicit or environment path is returned even if it doesn't exist, so
    the caller can report it.
    """
    if explicit is not None:
        return explicit

    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()

    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_NAME
    if candidate.is_file():
        return candidate
    return None
