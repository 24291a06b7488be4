"""Identifier helpers shared by the patch engine and the generators."""

from .base import Schema

RAW_IDENT_PREFIX = "r#"

# Rust keywords a parameter may plausibly be named after. `self`, `Self`,
# `super` and `crate` can't be raw identifiers and never appear as params.
RESERVED_WORDS = frozenset({
    "as", "async", "await", "break", "const", "continue", "dyn", "else",
    "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let",
    "loop", "match", "mod", "move", "mut", "pub", "ref", "return", "static",
    "struct", "trait", "true", "type", "unsafe", "use", "where", "while",
    "abstract", "become", "box", "do", "final", "macro", "override", "priv",
    "try", "typeof", "unsized", "virtual", "yield",
})


def to_upper_first(s: str) -> str:
    """Upper-case the first character only: ``sendMessage`` -> ``SendMessage``."""
    if not s:
        return s
    return s[0].upper() + s[1:]


def escape_keyword(name: str) -> str:
    if name in RESERVED_WORDS:
        return RAW_IDENT_PREFIX + name
    return name


def unescape_keyword(name: str) -> str | None:
    """Return the wire name of an escaped identifier, or None if it wasn't escaped."""
    if name.startswith(RAW_IDENT_PREFIX):
        return name[len(RAW_IDENT_PREFIX):]
    return None


def escape_keywords(schema: Schema) -> Schema:
    """Rewrite every parameter name that collides with a reserved word."""
    for method in schema.methods:
        for param in method.params:
            param.name = escape_keyword(param.name)
    return schema
