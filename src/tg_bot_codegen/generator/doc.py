"""Render schema docs as `///` comment blocks."""

from tg_bot_codegen.schema.base import Doc
from tg_bot_codegen.schema.naming import to_upper_first


def render_doc(doc: Doc, sibling: str | None = None, indent: int = 4) -> str:
    """Render a doc, an optional "See also" note and its link table.

    Links are emitted in key order so that output is stable across runs.
    """
    lines = doc.md.split("\n")

    if sibling is not None:
        name = to_upper_first(sibling)
        lines += ["", f"See also: [`{name}`](crate::payloads::{name})"]

    if doc.md_links:
        lines.append("")
        lines += [f"[{key}]: {url}" for key, url in sorted(doc.md_links.items())]

    pad = " " * indent
    return "\n".join(f"{pad}/// {line}".rstrip() for line in lines)
