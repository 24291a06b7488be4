from pathlib import Path

import pytest

from tg_bot_codegen.errors import PatchError
from tg_bot_codegen.patching.engine import (
    AddLink,
    AnyMethod,
    Custom,
    ExactMethod,
    Field,
    FullReplace,
    RemoveLink,
    Replace,
    ReplaceLink,
    Rule,
    patch_schema,
)
from tg_bot_codegen.patching.rules import DOC_PATCHES, rewrite_intra_links
from tg_bot_codegen.schema.base import Doc, Method, Param, Schema
from tg_bot_codegen.schema.loader import load_schema

FIXTURES = Path(__file__).parent / "fixtures"


def _method(name: str, doc: Doc, params: dict[str, Doc] | None = None) -> Method:
    return Method(
        names=(name, name[0].upper() + name[1:], name),
        return_ty="True",
        doc=doc,
        tg_doc="",
        tg_category="",
        params=[Param(name=n, ty="bool", descr=d) for n, d in (params or {}).items()],
    )


def _schema(*methods: Method) -> Schema:
    return Schema(api_version={"ver": "6.2", "date": ""}, methods=list(methods))


class TestTargets:
    def test_any_method_patches_method_and_params(self):
        m = _method("sendA", Doc(md="x"), {"p": Doc(md="x"), "q": Doc(md="x")})
        patch_schema(_schema(m), [Rule(AnyMethod(), Replace(text="x", with_="y"))])
        assert m.doc.md == "y"
        assert [p.descr.md for p in m.params] == ["y", "y"]

    def test_any_method_filter(self):
        a = _method("sendA", Doc(md="x"))
        b = _method("sendB", Doc(md="x"))
        patch_schema(_schema(a, b), [Rule(AnyMethod("sendB"), Replace(text="x", with_="y"))])
        assert (a.doc.md, b.doc.md) == ("x", "y")

    def test_exact_method_leaves_params(self):
        m = _method("sendA", Doc(md="x"), {"p": Doc(md="x")})
        patch_schema(_schema(m), [Rule(ExactMethod("sendA"), Replace(text="x", with_="y"))])
        assert m.doc.md == "y"
        assert m.params[0].descr.md == "x"

    def test_field_filters(self):
        m = _method("sendA", Doc(md="x"), {"p": Doc(md="x"), "q": Doc(md="x")})
        patch_schema(_schema(m), [Rule(Field(field_name="q"), Replace(text="x", with_="y"))])
        assert m.doc.md == "x"
        assert [p.descr.md for p in m.params] == ["x", "y"]


class TestOperations:
    def test_replace_link(self):
        m = _method("sendA", Doc(md="", md_links={"k": "old"}))
        patch_schema(_schema(m), [Rule(ExactMethod("sendA"), ReplaceLink(name="k", value="new"))])
        assert m.doc.md_links == {"k": "new"}

    def test_replace_missing_link_under_wide_target_is_skipped(self):
        m = _method("sendA", Doc(md=""))
        patch_schema(_schema(m), [Rule(AnyMethod(), ReplaceLink(name="k", value="new"))])
        assert m.doc.md_links == {}

    def test_replace_missing_link_under_exact_target_fails(self):
        m = _method("sendA", Doc(md=""))
        with pytest.raises(PatchError, match="doesn't have link"):
            patch_schema(_schema(m), [Rule(ExactMethod("sendA"), ReplaceLink(name="k", value="new"))])

    def test_exact_field_target_fails_on_missing_link(self):
        m = _method("sendA", Doc(md=""), {"p": Doc(md="")})
        rule = Rule(Field("sendA", "p"), ReplaceLink(name="k", value="new"))
        with pytest.raises(PatchError):
            patch_schema(_schema(m), [rule])

    def test_add_and_remove_link(self):
        m = _method("sendA", Doc(md="", md_links={"a": "1"}))
        patch_schema(
            _schema(m),
            [
                Rule(ExactMethod("sendA"), AddLink(name="b", value="2")),
                Rule(ExactMethod("sendA"), RemoveLink(name="a")),
                Rule(ExactMethod("sendA"), RemoveLink(name="absent")),
            ],
        )
        assert m.doc.md_links == {"b": "2"}

    def test_full_replace(self):
        m = _method("sendA", Doc(md="Old text."))
        patch_schema(_schema(m), [Rule(ExactMethod("sendA"), FullReplace(text="Old text.", with_="New text."))])
        assert m.doc.md == "New text."

    def test_full_replace_mismatch(self):
        m = _method("sendA", Doc(md="Changed upstream."))
        with pytest.raises(PatchError, match="expected doc text"):
            patch_schema(_schema(m), [Rule(ExactMethod("sendA"), FullReplace(text="Old text.", with_="New text."))])

    def test_full_replace_detects_second_pass(self):
        m = _method("sendA", Doc(md="Old text."))
        schema = _schema(m)
        rules = [Rule(ExactMethod("sendA"), FullReplace(text="Old text.", with_="New text."))]
        patch_schema(schema, rules)
        with pytest.raises(PatchError):
            patch_schema(schema, rules)

    def test_custom(self):
        def shout(doc: Doc) -> None:
            doc.md = doc.md.upper()

        m = _method("sendA", Doc(md="hi"))
        patch_schema(_schema(m), [Rule(ExactMethod("sendA"), Custom(shout))])
        assert m.doc.md == "HI"

    def test_rules_run_in_order(self):
        def fresh_doc() -> Doc:
            return Doc(md="See [Message].", md_links={"Message": "https://core.telegram.org/bots/api#message"})

        m = _method("sendA", fresh_doc())
        replace = Rule(ExactMethod("sendA"), ReplaceLink(name="Message", value="crate::types::Message"))
        rewrite = Rule(ExactMethod("sendA"), Custom(rewrite_intra_links))

        patch_schema(_schema(m), [replace, rewrite])
        assert m.doc.md_links == {"Message": "crate::types::Message"}

        m = _method("sendA", fresh_doc())
        with pytest.raises(PatchError):
            patch_schema(_schema(m), [rewrite, replace])


class TestIntraLinks:
    def test_method_link(self):
        doc = Doc(
            md="Use [getChatMember] first.",
            md_links={"getChatMember": "https://core.telegram.org/bots/api#getchatmember"},
        )
        rewrite_intra_links(doc)
        assert doc.md == "Use [`GetChatMember`] first."
        assert doc.md_links == {"`GetChatMember`": "crate::payloads::GetChatMember"}

    def test_type_link(self):
        doc = Doc(md="Returns [Message].", md_links={"Message": "https://core.telegram.org/bots/api#message"})
        rewrite_intra_links(doc)
        assert doc.md == "Returns [`Message`]."
        assert doc.md_links == {"`Message`": "crate::types::Message"}

    def test_override(self):
        doc = Doc(md="Unless [unbanned].", md_links={"unbanned": "https://core.telegram.org/bots/api#unbanchatmember"})
        rewrite_intra_links(doc)
        assert doc.md == "Unless [unbanned]."
        assert doc.md_links == {"unbanned": "crate::payloads::UnbanChatMember"}

    def test_untouched_links(self):
        links = {
            "wiki": "https://en.wikipedia.org/wiki/Push_technology",
            "More info on Sending Files »": "https://core.telegram.org/bots/api#sending-files",
            "inline_mode": "https://core.telegram.org/bots/api#inline-mode",
        }
        doc = Doc(md="[wiki] [inline_mode]", md_links=dict(links))
        rewrite_intra_links(doc)
        assert doc.md == "[wiki] [inline_mode]"
        assert doc.md_links == links

    def test_excluded_words_become_type_links(self):
        doc = Doc(
            md="See [update] and [games], or [2fa].",
            md_links={
                "update": "https://core.telegram.org/bots/api#update",
                "games": "https://core.telegram.org/bots/api#games",
                "2fa": "https://core.telegram.org/bots/api#2fa",
            },
        )
        rewrite_intra_links(doc)
        assert doc.md == "See [`update`] and [`games`], or [`2fa`]."
        assert doc.md_links == {
            "`update`": "crate::types::update",
            "`games`": "crate::types::games",
            "`2fa`": "crate::types::2fa",
        }


class TestDocPatches:
    def test_fixture(self):
        schema = patch_schema(load_schema(FIXTURES / "methods.yaml"), DOC_PATCHES)
        methods = {m.original_name: m for m in schema.methods}

        sticker = methods["sendSticker"].params[1].descr
        assert sticker.md_links == {"More info on Sending Files »": "crate::types::InputFile"}

        assert methods["sendSticker"].doc.md_links == {
            "animated": "https://telegram.org/blog/animated-stickers",
            "`Message`": "crate::types::Message",
        }

        assert methods["addStickerToSet"].doc.md == (
            "Use this method to add a new sticker to a set created by the bot. Returns _True_ on success."
        )

    def test_names_are_not_touched(self):
        schema = patch_schema(load_schema(FIXTURES / "methods.yaml"), DOC_PATCHES)
        poll = schema.methods[3]
        assert [p.name for p in poll.params] == ["chat_id", "question", "options", "type", "close_date"]
