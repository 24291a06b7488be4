"""Data models for a loaded Telegram Bot API methods schema.

The loader validates the schema document into these models; the patch
engine edits ``Doc`` text and links in place; the generators only read.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, PlainValidator

from .types import Type, dump_type, parse_type

SchemaType = Annotated[Type, PlainValidator(parse_type), PlainSerializer(dump_type)]


class Doc(BaseModel):
    """Markdown text plus its reference-style link table."""

    model_config = ConfigDict(extra="forbid")

    md: str
    md_links: dict[str, str] = {}


class Param(BaseModel):
    """A single method parameter."""

    model_config = ConfigDict(extra="forbid")

    name: str
    ty: SchemaType
    descr: Doc


class Method(BaseModel):
    """A single Bot API method.

    ``names`` holds the original name, the type name and the identifier
    form, e.g. ``("sendMessage", "SendMessage", "send_message")``.
    """

    model_config = ConfigDict(extra="forbid")

    names: tuple[str, str, str]
    return_ty: SchemaType
    doc: Doc
    tg_doc: str
    tg_category: str
    notes: list[Doc] = []
    params: list[Param]
    sibling: str | None = None

    @property
    def original_name(self) -> str:
        return self.names[0]

    @property
    def type_name(self) -> str:
        return self.names[1]

    @property
    def ident(self) -> str:
        return self.names[2]


class ApiVersion(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ver: str
    date: str


class Schema(BaseModel):
    """The whole schema: API version and methods in declaration order.

    Upstream schema files spell the categories table ``tg_categoryes``;
    both spellings are accepted.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    api_version: ApiVersion
    methods: list[Method]
    tg_categories: dict[str, str] = Field(default={}, alias="tg_categoryes")
