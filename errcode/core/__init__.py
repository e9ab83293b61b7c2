"""Core error value model: no I/O beyond config loading, no console output."""

from .codec import (
    DEFAULT_MAX_DEPTH,
    DecodeError,
    InvalidJson,
    MalformedField,
    MissingCode,
    MissingReason,
    decode,
    dumps,
    encode,
    loads,
)
from .codes import (
    CodeFormatViolation,
    CodeParts,
    ViolationKind,
    check_code,
    hunks,
    is_conventional,
    normalize_code,
    split_code,
    validate_code,
)
from .codeset import CodeSet, Coverage, check_coverage, difference, is_subset_of, union
from .config import Config, ConfigError, load_config
from .errors import ExitCode
from .render import MultiCausePolicy, RenderOptions, render
from .result import Err, Ok, Result, is_err, is_ok
from .value import (
    Coded,
    ErrorBuilder,
    ErrorValue,
    InvalidReason,
    InvalidValue,
    InvalidValueError,
    check_acyclic,
    code_of,
    same_kind,
)

__all__ = [
    # codec
    "DEFAULT_MAX_DEPTH",
    "DecodeError",
    "InvalidJson",
    "MalformedField",
    "MissingCode",
    "MissingReason",
    "decode",
    "dumps",
    "encode",
    "loads",
    # codes
    "CodeFormatViolation",
    "CodeParts",
    "ViolationKind",
    "check_code",
    "hunks",
    "is_conventional",
    "normalize_code",
    "split_code",
    "validate_code",
    # codeset
    "CodeSet",
    "Coverage",
    "check_coverage",
    "difference",
    "is_subset_of",
    "union",
    # config
    "Config",
    "ConfigError",
    "load_config",
    # errors
    "ExitCode",
    # render
    "MultiCausePolicy",
    "RenderOptions",
    "render",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # value
    "Coded",
    "ErrorBuilder",
    "ErrorValue",
    "InvalidReason",
    "InvalidValue",
    "InvalidValueError",
    "check_acyclic",
    "code_of",
    "same_kind",
]
