"""Type-driven decisions made while emitting a payload.

Every function here matches over the full set of schema type variants;
adding a variant makes the type checker point at each of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union, assert_never

from tg_bot_codegen.schema.base import Method, Param
from tg_bot_codegen.schema.naming import unescape_keyword
from tg_bot_codegen.schema.types import ArrayOf, DateTime, Option, RawTy, Scalar, Type, Url

# Raw types callers may pass anything `Into` of.
INTO_RAW_TYPES = frozenset({"Recipient", "ChatId", "TargetMessage", "ReplyMarkup"})

# Raw types wrapping alternatives that can't be compared or hashed.
NOT_EQ_HASH_RAW_TYPES = frozenset({"MaskPosition", "InlineQueryResult"})

# Raw types whose fields are serialized into the parent object.
FLATTEN_RAW_TYPES = frozenset({"InputSticker", "TargetMessage"})

# Raw types that carry file contents and force a multipart request.
MULTIPART_RAW_TYPES = frozenset({"InputFile", "InputSticker"})

DATE_CODEC = "crate::types::serde_date_from_unix_timestamp"
OPT_DATE_CODEC = "crate::types::serde_opt_date_from_unix_timestamp"


# -- conversion strategy ------------------------------------------------------


@dataclass(frozen=True)
class Id:
    """The parameter is taken as is."""

    ty: Type


@dataclass(frozen=True)
class Into:
    """The parameter accepts anything `Into<ty>`."""

    ty: Type


@dataclass(frozen=True)
class Collect:
    """The parameter accepts any `IntoIterator<Item = ty>`."""

    ty: Type


Convert = Union[Id, Into, Collect]


def convert_for(ty: Type) -> Convert:
    match ty:
        case Scalar.STRING:
            return Into(ty)
        case Scalar():
            return Id(ty)
        case Option(inner):
            return convert_for(inner)
        case ArrayOf(inner):
            return Collect(inner)
        case RawTy(name):
            if name in INTO_RAW_TYPES:
                return Into(ty)
            return Id(ty)
        case Url():
            return Id(ty)
        case DateTime():
            return Into(ty)
        case _:
            assert_never(ty)


def convert_suffix(convert: Convert) -> str:
    """Marker appended to a field's type in the payload macro input."""
    match convert:
        case Id():
            return ""
        case Into():
            return " [into]"
        case Collect():
            return " [collect]"
        case _:
            assert_never(convert)


# -- derives ------------------------------------------------------------------


def _ty_eq_hash_suitable(ty: Type) -> bool:
    match ty:
        case Scalar.F64:
            return False
        case Scalar():
            return True
        case Option(inner) | ArrayOf(inner):
            return _ty_eq_hash_suitable(inner)
        case RawTy(name):
            return name not in NOT_EQ_HASH_RAW_TYPES
        case Url() | DateTime():
            return True
        case _:
            assert_never(ty)


def eq_hash_suitable(method: Method) -> bool:
    """Whether the payload can derive `Eq` and `Hash`."""
    return all(_ty_eq_hash_suitable(p.ty) for p in method.params)


def default_needed(method: Method) -> bool:
    """Whether the payload can derive `Default`, i.e. every param is optional."""
    return all(isinstance(p.ty, Option) for p in method.params)


# -- multipart ----------------------------------------------------------------


def _ty_is_multipart(ty: Type) -> bool:
    match ty:
        case RawTy(name):
            return name in MULTIPART_RAW_TYPES
        case Option(inner):
            return isinstance(inner, RawTy) and inner.name in MULTIPART_RAW_TYPES
        case Scalar() | ArrayOf() | Url() | DateTime():
            return False
        case _:
            assert_never(ty)


def multipart_fields(method: Method) -> list[str]:
    """Names of the params carrying file contents, in declaration order."""
    return [p.name for p in method.params if _ty_is_multipart(p.ty)]


def has_multipart(method: Method) -> bool:
    return bool(multipart_fields(method))


# -- serde attributes ---------------------------------------------------------


def serde_attrs(param: Param) -> list[str]:
    """`#[serde(...)]` attributes for a payload field, outermost first."""
    optional = isinstance(param.ty, Option)
    ty = param.ty.inner if optional else param.ty
    attrs = []

    match ty:
        case RawTy(name) if name in FLATTEN_RAW_TYPES:
            attrs.append("#[serde(flatten)]")
        case DateTime():
            codec = OPT_DATE_CODEC if optional else DATE_CODEC
            attrs.append(f'#[serde(with = "{codec}")]')
        case Scalar() | Option() | ArrayOf() | RawTy() | Url():
            pass
        case _:
            assert_never(ty)

    wire_name = unescape_keyword(param.name)
    if wire_name is not None:
        attrs.append(f'#[serde(rename = "{wire_name}")]')

    return attrs
