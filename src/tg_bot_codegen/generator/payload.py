"""Payload generator: one `impl_payload!` invocation per schema method."""

from typing import assert_never

from tg_bot_codegen.generator.banner import banner
from tg_bot_codegen.generator.classify import (
    convert_for,
    convert_suffix,
    default_needed,
    eq_hash_suitable,
    multipart_fields,
    serde_attrs,
)
from tg_bot_codegen.generator.doc import render_doc
from tg_bot_codegen.logging import get_logger
from tg_bot_codegen.schema.base import Method, Param, Schema
from tg_bot_codegen.schema.types import ArrayOf, DateTime, Option, RawTy, Scalar, Type, Url

logger = get_logger("generator.payload")

# Payloads holding media that can't be compared, even without a file field.
MEDIA_PAYLOADS = frozenset({"SendMediaGroup", "EditMessageMedia", "EditMessageMediaInline"})

FIELD_INDENT = " " * 12


def _ty_uses(ty: Type) -> tuple[str, str] | None:
    """Return ("external" | "crate", use line) for a type, None for prelude types."""
    match ty:
        case Scalar.TRUE:
            return "crate", "use crate::types::True;"
        case Scalar():
            return None
        case Option(inner) | ArrayOf(inner):
            return _ty_uses(inner)
        case RawTy(name):
            return "crate", f"use crate::types::{name};"
        case Url():
            return "external", "use url::Url;"
        case DateTime():
            return "external", "use chrono::{DateTime, Utc};"
        case _:
            assert_never(ty)


def render_uses(method: Method) -> str:
    """Render the `use` lines of a payload file, external crates first.

    Both groups are sorted; sets have no stable iteration order.
    """
    groups: dict[str, set[str]] = {"external": {"use serde::Serialize;"}, "crate": set()}

    for ty in [method.return_ty, *(p.ty for p in method.params)]:
        use = _ty_uses(ty)
        if use is not None:
            kind, line = use
            groups[kind].add(line)

    blocks = ["\n".join(sorted(lines)) for lines in groups.values() if lines]
    return "\n\n".join(blocks)


def render_derive(method: Method) -> str:
    if multipart_fields(method) or method.type_name in MEDIA_PAYLOADS:
        return "#[derive(Debug, Clone, Serialize)]"

    eq_hash = " Eq, Hash," if eq_hash_suitable(method) else ""
    default = " Default," if default_needed(method) else ""
    return f"#[derive(Debug, PartialEq,{eq_hash}{default} Clone, Serialize)]"


def render_field(param: Param) -> str:
    """Render one field; optional params are shown with their inner type."""
    ty = param.ty.inner if isinstance(param.ty, Option) else param.ty

    lines = [render_doc(param.descr, indent=len(FIELD_INDENT))]
    lines += [FIELD_INDENT + attr for attr in serde_attrs(param)]
    lines.append(f"{FIELD_INDENT}pub {param.name}: {ty}{convert_suffix(convert_for(ty))},")
    return "\n".join(lines)


def split_params(method: Method) -> tuple[list[Param], list[Param]]:
    """Partition params into (required, optional), keeping declaration order."""
    required = [p for p in method.params if not isinstance(p.ty, Option)]
    optional = [p for p in method.params if isinstance(p.ty, Option)]
    return required, optional


def _render_block(label: str, params: list[Param]) -> str:
    if not params:
        return ""
    fields = "\n".join(render_field(p) for p in params)
    return f"        {label} {{\n{fields}\n        }}"


class PayloadGenerator:
    """Generates the payload source files for every method of a schema."""

    def generate(self, schema: Schema) -> dict[str, str]:
        """Generate payload files.

        Returns a dict of {filename: content} in schema order.
        """
        files = {}
        for method in schema.methods:
            file_name = f"{method.ident}.rs"
            files[file_name] = f"{banner('file')}\n{self.render(method)}"
            logger.debug("rendered %s", file_name)
        return files

    def render(self, method: Method) -> str:
        """Render the body of a single payload file."""
        required, optional = split_params(method)
        for param in optional:
            if isinstance(param.ty.inner, Option):
                logger.warning(
                    "%s.%s is %s; rendering it as a single optional %s",
                    method.original_name,
                    param.name,
                    param.ty,
                    param.ty.inner,
                )
        blocks = [b for b in (_render_block("required", required), _render_block("optional", optional)) if b]

        markers = ""
        fields = multipart_fields(method)
        if fields:
            markers += f"    @[multipart = {', '.join(fields)}]\n"
        if method.ident == "get_updates":
            markers += "    @[timeout_secs = timeout]\n"

        return (
            f"{render_uses(method)}\n"
            "\n"
            "impl_payload! {\n"
            f"{markers}{render_doc(method.doc, method.sibling)}\n"
            f"    {render_derive(method)}\n"
            f"    pub {method.type_name} ({method.type_name}Setters) => {method.return_ty} {{\n"
            + "\n".join(blocks)
            + ("\n" if blocks else "")
            + "    }\n"
            "}\n"
        )
