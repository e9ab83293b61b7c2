"""errcode: errors as plain values identified by a stable string code."""

from errcode.core import (
    CodeSet,
    ErrorBuilder,
    ErrorValue,
    InvalidValue,
    MalformedField,
    MissingCode,
    check_code,
    decode,
    dumps,
    encode,
    loads,
    render,
)

__version__ = "0.1.0"

__all__ = [
    "CodeSet",
    "ErrorBuilder",
    "ErrorValue",
    "InvalidValue",
    "MalformedField",
    "MissingCode",
    "__version__",
    "check_code",
    "decode",
    "dumps",
    "encode",
    "loads",
    "render",
]
