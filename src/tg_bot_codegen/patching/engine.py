"""Doc patch engine.

A patch rule is a ``(target, operation)`` pair. Rules run strictly in
table order; each one is applied to every doc its target selects. Later
rules see the docs as earlier rules left them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import NamedTuple, Union, assert_never

from tg_bot_codegen.errors import PatchError
from tg_bot_codegen.logging import get_logger
from tg_bot_codegen.schema.base import Doc, Method, Schema

logger = get_logger("patching")


# -- targets ------------------------------------------------------------------


@dataclass(frozen=True)
class AnyMethod:
    """Method doc and all param docs of the methods passing the filter."""

    method_name: str | None = None


@dataclass(frozen=True)
class ExactMethod:
    """Doc of one named method."""

    method_name: str


@dataclass(frozen=True)
class Field:
    """Param docs passing both filters."""

    method_name: str | None = None
    field_name: str | None = None


Target = Union[AnyMethod, ExactMethod, Field]


def is_exact(target: Target) -> bool:
    """Whether the target names its docs precisely enough to demand a match."""
    match target:
        case AnyMethod():
            return False
        case ExactMethod():
            return True
        case Field(method_name=m, field_name=f):
            return m is not None and f is not None
        case _:
            assert_never(target)


def _check(name_filter: str | None, name: str) -> bool:
    return name_filter is None or name_filter == name


def select_docs(target: Target, method: Method) -> Iterator[Doc]:
    """Yield the docs of ``method`` that ``target`` applies to."""
    match target:
        case AnyMethod(method_name=m):
            if _check(m, method.original_name):
                yield method.doc
                for param in method.params:
                    yield param.descr
        case ExactMethod(method_name=m):
            if m == method.original_name:
                yield method.doc
        case Field(method_name=m, field_name=f):
            if _check(m, method.original_name):
                for param in method.params:
                    if _check(f, param.name):
                        yield param.descr
        case _:
            assert_never(target)


# -- operations ---------------------------------------------------------------


@dataclass(frozen=True)
class ReplaceLink:
    name: str
    value: str


@dataclass(frozen=True)
class AddLink:
    name: str
    value: str


@dataclass(frozen=True)
class RemoveLink:
    name: str


@dataclass(frozen=True)
class FullReplace:
    """Replace the whole text, which must currently equal ``text``."""

    text: str
    with_: str


@dataclass(frozen=True)
class Replace:
    text: str
    with_: str


@dataclass(frozen=True)
class Custom:
    func: Callable[[Doc], None]


Operation = Union[ReplaceLink, AddLink, RemoveLink, FullReplace, Replace, Custom]


class Rule(NamedTuple):
    target: Target
    operation: Operation


def apply_operation(doc: Doc, operation: Operation, target: Target) -> None:
    """Apply one operation to one doc in place.

    Raises PatchError when the doc does not look the way the rule expects.
    """
    match operation:
        case ReplaceLink(name=name, value=value):
            if name in doc.md_links:
                doc.md_links[name] = value
            elif is_exact(target):
                raise PatchError(f"{target} doesn't have link {name!r}")
        case AddLink(name=name, value=value):
            doc.md_links[name] = value
        case RemoveLink(name=name):
            doc.md_links.pop(name, None)
        case FullReplace(text=text, with_=with_):
            if doc.md != text:
                raise PatchError(
                    f"{target}: expected doc text {text!r}, found {doc.md!r}"
                )
            doc.md = with_
        case Replace(text=text, with_=with_):
            doc.md = doc.md.replace(text, with_)
        case Custom(func=func):
            func(doc)
        case _:
            assert_never(operation)


def patch_schema(schema: Schema, rules: Sequence[Rule]) -> Schema:
    """Run a rule table over every method of the schema, in table order."""
    for target, operation in rules:
        hits = 0
        for method in schema.methods:
            for doc in select_docs(target, method):
                apply_operation(doc, operation, target)
                hits += 1
        logger.debug("%s %s: %d docs", target, type(operation).__name__, hits)

    return schema
