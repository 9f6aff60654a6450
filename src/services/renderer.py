"""Build Slack preview cards for Notion pages and databases."""

from __future__ import annotations

import logging
from typing import Protocol

from src.config import Settings
from src.models.document import PreviewCard
from src.models.errors import TitleError
from src.models.notion import Icon, NotionDatabase, NotionPage

logger = logging.getLogger(__name__)

ELLIPSIS = "…"
DATABASE_PREVIEW_TEXT = "This is a full database page."
FOOTER = "Notion"


class NotionMetadataSource(Protocol):
    """Page and database metadata fetches (NotionClient satisfies this)."""

    async def retrieve_page(self, page_id: str) -> NotionPage: ...

    async def retrieve_database(self, database_id: str) -> NotionDatabase: ...


class MarkdownSource(Protocol):
    """Page body rendering (PageMarkdownExporter satisfies this)."""

    async def page_to_markdown(self, page_id: str) -> str: ...


def page_title(page: NotionPage) -> str:
    """Derive the display title of a page from its parent-specific property.

    Raises:
        TitleError: If the parent type is unknown or the title is empty.
    """
    parent_type = page.parent.type if page.parent is not None else None
    if parent_type == "database_id":
        prop = page.properties.name
    elif parent_type == "page_id":
        prop = page.properties.title
    else:
        raise TitleError(
            f"Failed to guess title of page {page.id}: parent type {parent_type!r}"
        )

    if prop is None or not prop.title:
        raise TitleError(f"Failed to guess title from pageId: {page.id}")
    return _with_icon(prop.title[0].plain_text, page.icon)


def database_title(database: NotionDatabase) -> str:
    """Derive the display title of a database.

    Raises:
        TitleError: If the database has no title text.
    """
    if not database.title:
        raise TitleError(f"Failed to guess title from databaseId: {database.id}")
    return _with_icon(database.title[0].plain_text, database.icon)


def _with_icon(title: str, icon: Icon | None) -> str:
    if icon is not None and icon.emoji:
        return f"{icon.emoji} {title}"
    return title


def summarize(markdown: str, max_lines: int, max_chars: int) -> str:
    """Cut a page body down to a short preview.

    Keeps the first ``max_lines`` non-empty lines; if that reaches
    ``max_chars`` characters it is cut to ``max_chars - 1`` plus an ellipsis.
    """
    lines = [line for line in markdown.split("\n") if line]
    head = "\n".join(lines[:max_lines])
    if len(head) >= max_chars:
        head = head[: max_chars - 1] + ELLIPSIS
    return head


class PreviewRenderer:
    """Fetch metadata for a classified reference and assemble its card."""

    def __init__(
        self,
        settings: Settings,
        notion: NotionMetadataSource,
        markdown: MarkdownSource,
    ) -> None:
        self._settings = settings
        self._notion = notion
        self._markdown = markdown

    async def render_page(self, url: str, page_id: str) -> PreviewCard:
        """Build the card for a single page, including a body preview.

        Raises:
            FetchError: If the page or its content cannot be retrieved.
            TitleError: If no title can be derived.
        """
        page = await self._notion.retrieve_page(page_id)
        title = page_title(page)

        body = await self._markdown.page_to_markdown(page_id)
        text = summarize(
            body,
            self._settings.summary_number_of_lines,
            self._settings.summary_number_of_characters,
        )
        logger.info("Rendered page preview", extra={"page_id": page_id, "url": url})
        return self._card(title=title, url=url, text=text)

    async def render_database(self, url: str, database_id: str) -> PreviewCard:
        """Build the card for a full database view (no body fetch).

        Raises:
            FetchError: If the database cannot be retrieved.
            TitleError: If no title can be derived.
        """
        database = await self._notion.retrieve_database(database_id)
        title = database_title(database)
        logger.info("Rendered database preview", extra={"database_id": database_id, "url": url})
        return self._card(title=title, url=url, text=DATABASE_PREVIEW_TEXT)

    def _card(self, *, title: str, url: str, text: str) -> PreviewCard:
        return PreviewCard(
            author_icon=self._settings.notion_icon_url,
            author_name=f"{self._settings.notion_workspace}'s Notion",
            title=title,
            title_link=url,
            text=text,
            footer=FOOTER,
        )
