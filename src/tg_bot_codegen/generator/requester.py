"""Requester trait surface and the `requester_forward!` macro.

Required params that are converted (`Into` / `IntoIterator`) become
generics of the trait method. Each generic is named after the shortest
prefix of its param name that tells it apart from its neighbours in
sorted order, e.g. ``chat_id`` and ``sticker`` become ``C`` and ``S``,
while ``chat_id`` and ``chat_name`` become ``Chat_i`` and ``Chat_n``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import assert_never

from tg_bot_codegen.errors import AmbiguousPrefixError
from tg_bot_codegen.generator.banner import banner
from tg_bot_codegen.generator.classify import Collect, Id, Into, convert_for
from tg_bot_codegen.generator.payload import split_params
from tg_bot_codegen.schema.base import Method, Schema
from tg_bot_codegen.schema.naming import to_upper_first

# Shares no prefix with any identifier.
SENTINEL = "\0"

WHERE_SEPARATOR = ",\n        "


def min_prefix(left: str, right: str) -> str | None:
    """Prefix of ``left`` up to and including the first character differing from ``right``.

    None if the names agree on their whole common length.
    """
    for i, (l, r) in enumerate(zip(left, right)):
        if l != r:
            return left[: i + 1]
    return None


def _prefix_or_raise(left: str, right: str) -> str:
    prefix = min_prefix(left, right)
    if prefix is None:
        raise AmbiguousPrefixError(f"no prefix tells {left!r} apart from {right!r}")
    return prefix


def generic_names(param_names: list[str]) -> dict[str, str]:
    """Map each param name to its generic parameter name.

    Raises AmbiguousPrefixError if two params end up with the same name.
    """
    names = sorted(param_names)
    prefixes: dict[str, str] = {}

    for left, right in zip(names, names[1:]):
        prefixes[left] = _prefix_or_raise(left, right)

    if len(names) == 1:
        prefixes[names[0]] = _prefix_or_raise(names[0], SENTINEL)
    elif len(names) > 1:
        prefixes[names[-1]] = _prefix_or_raise(names[-1], names[-2])

    generics = {name: to_upper_first(prefix) for name, prefix in prefixes.items()}
    if len(set(generics.values())) != len(names):
        raise AmbiguousPrefixError(f"generic names clash: {generics}")
    return generics


@dataclass
class Signature:
    """Generic params, argument list and bounds of one trait method."""

    generics: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    bounds: list[str] = field(default_factory=list)

    def render_generics(self) -> str:
        return f"<{', '.join(self.generics)}>" if self.generics else ""

    def render_args(self) -> str:
        return ", ".join(self.args)

    def render_where(self) -> str:
        return f" where {WHERE_SEPARATOR.join(self.bounds)}" if self.bounds else ""


def build_signature(method: Method) -> Signature:
    """Compute the trait signature of a method from its required params."""
    required, _ = split_params(method)
    converts = [(p, convert_for(p.ty)) for p in required]
    generics = generic_names([p.name for p, c in converts if not isinstance(c, Id)])

    sig = Signature()
    for param, convert in converts:
        match convert:
            case Id():
                sig.args.append(f"{param.name}: {param.ty}")
                continue
            case Into(ty):
                bound = f"Into<{ty}>"
            case Collect(ty):
                bound = f"IntoIterator<Item = {ty}>"
            case _:
                assert_never(convert)

        generic = generics[param.name]
        sig.generics.append(generic)
        sig.args.append(f"{param.name}: {generic}")
        sig.bounds.append(f"{generic}: {bound}")

    return sig


def render_trait_method(method: Method) -> str:
    sig = build_signature(method)
    args = sig.render_args()
    return (
        f"    type {method.type_name}: Request<Payload = {method.type_name}, Err = Self::Err>;\n"
        "\n"
        f"    /// For Telegram documentation see [`{method.type_name}`].\n"
        f"    fn {method.ident}{sig.render_generics()}(&self{', ' if args else ''}{args})"
        f" -> Self::{method.type_name}{sig.render_where()};\n"
    )


def render_forward_rule(method: Method) -> str:
    sig = build_signature(method)
    args = sig.render_args()
    return (
        f"    (@method {method.ident} $body:ident $ty:ident) => {{\n"
        f"        type {method.type_name} = $ty![{method.type_name}];\n"
        "\n"
        f"        fn {method.ident}{sig.render_generics()}(&self{', ' if args else ''}{args})"
        f" -> Self::{method.type_name}{sig.render_where()} {{\n"
        "            let this = self;\n"
        f"            $body!({method.ident} this ({args}))\n"
        "        }\n"
        "    };\n"
    )


def render_requester(schema: Schema) -> str:
    """Render the `Requester` trait items for all methods, in schema order."""
    items = "\n".join(render_trait_method(m) for m in schema.methods)
    return f"{banner('block')}\n{items}"


FORWARD_MACRO_HEAD = """\
macro_rules! requester_forward {
    ($i:ident $(, $rest:ident )* $(,)? => $body:ident, $ty:ident ) => {
        requester_forward!(@method $i $body $ty);
        $(
            requester_forward!(@method $rest $body $ty);
        )*
    };
"""


def render_requester_forward(schema: Schema) -> str:
    """Render `requester_forward!`, which implements trait methods by delegation."""
    rules = "".join(f"\n{render_forward_rule(m)}" for m in schema.methods)
    return f"{banner('macro')}\n{FORWARD_MACRO_HEAD}{rules}}}\n"
