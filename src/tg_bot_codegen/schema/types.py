"""Closed set of schema types.

A schema type is one of:

    Scalar        True, u8, u16, u32, i32, u64, i64, f64, bool, String
    Option[T]     optional field, wraps exactly one level
    ArrayOf[T]    Vec<T>
    RawTy(name)   a type defined elsewhere (``crate::types::<name>``)
    Url           ``url::Url``
    DateTime      ``chrono::DateTime<Utc>``

In a schema document scalars, ``Url`` and ``DateTime`` are written as bare
strings; the wrapping variants are one-key mappings such as
``{Option: {RawTy: ChatId}}``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union, assert_never


class Scalar(str, Enum):
    TRUE = "True"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    F64 = "f64"
    BOOL = "bool"
    STRING = "String"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Option:
    inner: Type

    def __str__(self) -> str:
        return f"Option<{self.inner}>"


@dataclass(frozen=True)
class ArrayOf:
    inner: Type

    def __str__(self) -> str:
        return f"Vec<{self.inner}>"


@dataclass(frozen=True)
class RawTy:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Url:
    def __str__(self) -> str:
        return "Url"


@dataclass(frozen=True)
class DateTime:
    def __str__(self) -> str:
        return "DateTime<Utc>"


Type = Union[Scalar, Option, ArrayOf, RawTy, Url, DateTime]

_SCALARS = {s.value: s for s in Scalar}
_UNIT_VARIANTS = {"Url": Url, "DateTime": DateTime}


def parse_type(value: Any) -> Type:
    """Build a Type from its schema document form.

    Raises ValueError on anything that is not a known type expression.
    """
    if isinstance(value, (Scalar, Option, ArrayOf, RawTy, Url, DateTime)):
        return value

    if isinstance(value, str):
        if value in _SCALARS:
            return _SCALARS[value]
        if value in _UNIT_VARIANTS:
            return _UNIT_VARIANTS[value]()
        raise ValueError(f"unknown type {value!r}")

    if isinstance(value, dict) and len(value) == 1:
        ((tag, arg),) = value.items()
        if tag == "Option":
            return Option(parse_type(arg))
        if tag == "ArrayOf":
            return ArrayOf(parse_type(arg))
        if tag == "RawTy":
            if not isinstance(arg, str) or not arg:
                raise ValueError(f"RawTy expects a type name, got {arg!r}")
            return RawTy(arg)
        raise ValueError(f"unknown type constructor {tag!r}")

    raise ValueError(f"invalid type expression {value!r}")


def dump_type(ty: Type) -> Any:
    """Inverse of parse_type."""
    match ty:
        case Scalar():
            return ty.value
        case Option(inner):
            return {"Option": dump_type(inner)}
        case ArrayOf(inner):
            return {"ArrayOf": dump_type(inner)}
        case RawTy(name):
            return {"RawTy": name}
        case Url():
            return "Url"
        case DateTime():
            return "DateTime"
        case _:
            assert_never(ty)
