"""Module list and re-exports for the generated payloads directory."""

from tg_bot_codegen.generator.banner import banner
from tg_bot_codegen.schema.base import Schema


def render_payload_index(schema: Schema) -> str:
    """Render `payloads.rs` module declarations and the `setters.rs` re-export.

    The two parts are separated by blank lines and each carries its own banner.
    """
    mods = "\n".join(f"mod {m.ident};" for m in schema.methods)
    uses = "\n".join(
        f"pub use {m.ident}::{{{m.type_name}, {m.type_name}Setters}};"
        for m in schema.methods
    )
    setters = "\n".join(f"    {m.type_name}Setters as _," for m in schema.methods)

    return (
        f"{banner('block')}\n"
        f"{mods}\n"
        "\n"
        f"{uses}\n"
        "\n\n\n"
        f"{banner('file')}\n"
        "#[doc(no_inline)]\n"
        "pub use crate::payloads::{\n"
        f"{setters}\n"
        "};\n"
    )
