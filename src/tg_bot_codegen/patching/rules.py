"""The doc patch table applied to every freshly loaded schema.

Order matters: the cross-link rewrite moves link keys around, so any
rule addressing a link by its original key has to come before it.
"""

from tg_bot_codegen.schema.base import Doc
from tg_bot_codegen.schema.naming import to_upper_first

from .engine import AnyMethod, Custom, ExactMethod, Replace, ReplaceLink, Rule

BOT_API_ANCHOR = "https://core.telegram.org/bots/api#"

# Keys containing any of these are prose, not names.
WORD_SEPARATORS = ("-", "_", ".", " ")

# Lower-case keys that look like method names but refer to general sections.
NOT_METHODS = frozenset({"update", "games", "videos", "photos"})

# Keys pointing somewhere their spelling doesn't suggest.
LINK_OVERRIDES = {
    "unbanned": "crate::payloads::UnbanChatMember",
}


def rewrite_intra_links(doc: Doc) -> None:
    """Point Bot API anchors at the generated payloads and types.

    ``[sendMessage]: https://core.telegram.org/bots/api#sendmessage`` becomes
    ``[`SendMessage`]: crate::payloads::SendMessage`` and every ``[sendMessage]``
    in the text becomes ``[`SendMessage`]``. Every other key, excluded
    words included, is taken as a type and pointed at ``crate::types``
    unchanged.
    """
    renames: list[tuple[str, str]] = []

    for key, url in sorted(doc.md_links.items()):
        if not url.startswith(BOT_API_ANCHOR):
            continue
        if not key or any(sep in key for sep in WORD_SEPARATORS):
            continue

        if key in LINK_OVERRIDES:
            doc.md_links[key] = LINK_OVERRIDES[key]
        elif key[0].islower() and key not in NOT_METHODS:
            target = to_upper_first(key)
            doc.md_links[key] = f"crate::payloads::{target}"
            renames.append((key, target))
        else:
            doc.md_links[key] = f"crate::types::{key}"
            renames.append((key, key))

    for key, target in renames:
        url = doc.md_links.pop(key)
        doc.md = doc.md.replace(f"[{key}]", f"[`{target}`]")
        doc.md_links[f"`{target}`"] = url


DOC_PATCHES: tuple[Rule, ...] = (
    Rule(
        AnyMethod(),
        ReplaceLink(name="More info on Sending Files »", value="crate::types::InputFile"),
    ),
    Rule(AnyMethod(), Custom(rewrite_intra_links)),
    Rule(
        ExactMethod("addStickerToSet"),
        Replace(
            text="You **must** use exactly one of the fields _png\\_sticker_ or _tgs\\_sticker_. ",
            with_="",
        ),
    ),
)
