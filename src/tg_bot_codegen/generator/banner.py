"""Provenance banner put in front of every generated artifact."""

GENERATOR_URL = "https://github.com/teloxide/cg"
SCHEMA_URL = "https://github.com/WaffleLapkin/tg-methods-schema"

BANNER_KINDS = ("file", "block", "macro")


def banner(kind: str) -> str:
    """Return the "do not edit" comment for a generated file, block or macro."""
    if kind not in BANNER_KINDS:
        raise ValueError(f"unknown banner kind {kind!r}")
    return "\n".join([
        f"// This {kind} is auto generated by [`cg`] from [`schema`].",
        "//",
        f"// **DO NOT EDIT THIS {kind.upper()}**,",
        "//",
        "// Edit `cg` or `schema` instead.",
        "//",
        f"// [cg]: {GENERATOR_URL}",
        f"// [`schema`]: {SCHEMA_URL}",
    ])
