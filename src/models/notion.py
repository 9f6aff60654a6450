"""Typed views of the Notion API responses the unfurler reads.

Raw JSON is validated into these models at the fetch boundary; anything
that does not fit is rejected there instead of being trusted downstream.
Unknown keys are ignored. A block's type-specific body is validated too,
so a malformed block fails the whole listing rather than the renderer.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Annotations(BaseModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False


class RichText(BaseModel):
    """One run of rich text."""

    type: str = "text"
    plain_text: str
    href: str | None = None
    annotations: Annotations = Field(default_factory=Annotations)


class TitleProperty(BaseModel):
    title: list[RichText] = Field(default_factory=list)


class PageParent(BaseModel):
    """``database_id`` for database rows, ``page_id`` for nested pages."""

    type: str


class Icon(BaseModel):
    type: str
    emoji: str | None = None


class PageProperties(BaseModel):
    """The two title properties a page can carry.

    Database rows expose their title as ``Name``; freestanding pages as
    ``title``. Other properties are ignored.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: TitleProperty | None = None
    name: TitleProperty | None = Field(None, alias="Name")


class NotionPage(BaseModel):
    id: str
    parent: PageParent | None = None
    properties: PageProperties = Field(default_factory=PageProperties)
    icon: Icon | None = None


class NotionDatabase(BaseModel):
    id: str
    title: list[RichText] = Field(default_factory=list)
    icon: Icon | None = None


class FileSource(BaseModel):
    url: str = ""


class BlockBody(BaseModel):
    """Type-specific block content; every field the markdown export reads."""

    rich_text: list[RichText] = Field(default_factory=list)
    caption: list[RichText] = Field(default_factory=list)
    checked: bool = False
    icon: Icon | None = None
    language: str | None = None
    expression: str | None = None
    title: str | None = None
    url: str | None = None
    cells: list[list[RichText]] = Field(default_factory=list)

    # Media blocks: ``type`` names which of ``external``/``file`` holds the URL
    type: str | None = None
    external: FileSource | None = None
    file: FileSource | None = None

    @property
    def file_url(self) -> str:
        source = self.external if self.type == "external" else self.file
        return source.url if source is not None else ""


class Block(BaseModel):
    """A content block; its body is read from the key named by ``type``."""

    id: str
    type: str
    has_children: bool = False
    body: BlockBody = Field(default_factory=BlockBody)

    @model_validator(mode="before")
    @classmethod
    def _extract_body(cls, data: Any) -> Any:
        if isinstance(data, dict) and "body" not in data:
            kind = data.get("type")
            if isinstance(kind, str) and data.get(kind) is not None:
                data = {**data, "body": data[kind]}
        return data


class BlockChildren(BaseModel):
    """One page of ``GET /blocks/{id}/children``."""

    results: list[Block] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None
