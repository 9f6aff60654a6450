"""Unit tests for preview card rendering."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.config import Settings
from src.models.errors import FetchError, TitleError
from src.models.notion import NotionDatabase, NotionPage
from src.services.renderer import (
    DATABASE_PREVIEW_TEXT,
    ELLIPSIS,
    PreviewRenderer,
    database_title,
    page_title,
    summarize,
)

URL = "https://www.notion.so/acme/Roadmap-abc123"


def _page(parent_type: str | None, properties: dict[str, Any], icon: dict | None = None) -> NotionPage:
    data: dict[str, Any] = {"object": "page", "id": "abc123", "properties": properties}
    if parent_type is not None:
        data["parent"] = {"type": parent_type, parent_type: "parent-id"}
    if icon is not None:
        data["icon"] = icon
    return NotionPage.model_validate(data)


def _title(text: str) -> dict[str, Any]:
    return {"id": "title", "type": "title", "title": [{"type": "text", "plain_text": text}]}


class TestPageTitle:
    """Tests for page_title."""

    def test_database_row_uses_name_property(self) -> None:
        page = _page("database_id", {"Name": _title("Foo"), "Status": {"type": "select"}})
        assert page_title(page) == "Foo"

    def test_freestanding_page_uses_title_property(self) -> None:
        page = _page("page_id", {"title": _title("Bar")})
        assert page_title(page) == "Bar"

    def test_icon_is_prefixed(self) -> None:
        page = _page("database_id", {"Name": _title("Foo")}, icon={"type": "emoji", "emoji": "🔥"})
        assert page_title(page) == "🔥 Foo"

    def test_non_emoji_icon_is_ignored(self) -> None:
        icon = {"type": "external", "external": {"url": "https://example.com/i.png"}}
        page = _page("page_id", {"title": _title("Bar")}, icon=icon)
        assert page_title(page) == "Bar"

    def test_uses_first_text_run_only(self) -> None:
        prop = {
            "title": [
                {"type": "text", "plain_text": "First"},
                {"type": "text", "plain_text": " second"},
            ]
        }
        page = _page("page_id", {"title": prop})
        assert page_title(page) == "First"

    def test_database_row_without_name_raises(self) -> None:
        page = _page("database_id", {"title": _title("Bar")})
        with pytest.raises(TitleError):
            page_title(page)

    def test_empty_title_runs_raise(self) -> None:
        page = _page("page_id", {"title": {"title": []}})
        with pytest.raises(TitleError):
            page_title(page)

    @pytest.mark.parametrize("parent_type", ["workspace", "block_id", None])
    def test_unknown_parent_raises(self, parent_type: str | None) -> None:
        page = _page(parent_type, {"title": _title("Bar"), "Name": _title("Foo")})
        with pytest.raises(TitleError):
            page_title(page)


class TestDatabaseTitle:
    """Tests for database_title."""

    def test_title_with_icon(self) -> None:
        database = NotionDatabase.model_validate(
            {
                "id": "db1",
                "title": [{"plain_text": "Tasks"}],
                "icon": {"type": "emoji", "emoji": "✅"},
            }
        )
        assert database_title(database) == "✅ Tasks"

    def test_missing_title_raises(self) -> None:
        database = NotionDatabase.model_validate({"id": "db1", "title": []})
        with pytest.raises(TitleError):
            database_title(database)


class TestSummarize:
    """Tests for the preview body truncation."""

    def test_keeps_first_non_empty_lines(self) -> None:
        markdown = "\n\n".join(f"line {i}" for i in range(10))
        assert summarize(markdown, 5, 200) == "line 0\nline 1\nline 2\nline 3\nline 4"

    def test_short_body_is_unchanged(self) -> None:
        assert summarize("# Title\n\nhello", 5, 200) == "# Title\nhello"

    def test_over_budget_is_truncated_with_ellipsis(self) -> None:
        markdown = "\n".join("x" * 60 for _ in range(10))
        head = summarize(markdown, 5, 200)
        assert len(head) == 200
        assert head.endswith(ELLIPSIS)
        assert head[:-1] == ("x" * 60 + "\n") * 3 + "x" * 16

    def test_exactly_at_budget_is_truncated(self) -> None:
        head = summarize("y" * 200, 5, 200)
        assert len(head) == 200
        assert head == "y" * 199 + ELLIPSIS

    def test_just_under_budget_is_kept(self) -> None:
        assert summarize("y" * 199, 5, 200) == "y" * 199

    def test_empty_body(self) -> None:
        assert summarize("", 5, 200) == ""


class TestPreviewRenderer:
    """Tests for PreviewRenderer."""

    @pytest.fixture
    def notion(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def markdown(self) -> AsyncMock:
        return AsyncMock()

    @pytest.fixture
    def renderer(self, settings: Settings, notion: AsyncMock, markdown: AsyncMock) -> PreviewRenderer:
        return PreviewRenderer(settings, notion, markdown)

    @pytest.mark.asyncio
    async def test_render_page_builds_branded_card(
        self, renderer: PreviewRenderer, notion: AsyncMock, markdown: AsyncMock
    ) -> None:
        notion.retrieve_page.return_value = _page(
            "page_id", {"title": _title("Roadmap")}, icon={"type": "emoji", "emoji": "🗺️"}
        )
        markdown.page_to_markdown.return_value = "# Goals\n\n- ship\n- celebrate\n"

        card = await renderer.render_page(URL, "abc123")

        notion.retrieve_page.assert_awaited_once_with("abc123")
        markdown.page_to_markdown.assert_awaited_once_with("abc123")
        assert card.title == "🗺️ Roadmap"
        assert card.title_link == URL
        assert card.text == "# Goals\n- ship\n- celebrate"
        assert card.author_name == "acme's Notion"
        assert card.author_icon == "https://www.notion.so/front-static/favicon.ico"
        assert card.footer == "Notion"

    @pytest.mark.asyncio
    async def test_render_page_respects_configured_limits(
        self, settings: Settings, notion: AsyncMock, markdown: AsyncMock
    ) -> None:
        limited = settings.model_copy(
            update={"summary_number_of_lines": 2, "summary_number_of_characters": 10}
        )
        renderer = PreviewRenderer(limited, notion, markdown)
        notion.retrieve_page.return_value = _page("page_id", {"title": _title("T")})
        markdown.page_to_markdown.return_value = "alpha\nbeta\ngamma"

        card = await renderer.render_page(URL, "abc123")

        assert card.text == "alpha\nbet" + ELLIPSIS

    @pytest.mark.asyncio
    async def test_title_error_skips_content_fetch(
        self, renderer: PreviewRenderer, notion: AsyncMock, markdown: AsyncMock
    ) -> None:
        notion.retrieve_page.return_value = _page("workspace", {"title": _title("T")})

        with pytest.raises(TitleError):
            await renderer.render_page(URL, "abc123")
        markdown.page_to_markdown.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(
        self, renderer: PreviewRenderer, notion: AsyncMock
    ) -> None:
        notion.retrieve_page.side_effect = FetchError("boom", status_code=404)

        with pytest.raises(FetchError):
            await renderer.render_page(URL, "abc123")

    @pytest.mark.asyncio
    async def test_render_database(
        self, renderer: PreviewRenderer, notion: AsyncMock, markdown: AsyncMock
    ) -> None:
        notion.retrieve_database.return_value = NotionDatabase.model_validate(
            {"id": "db1", "title": [{"plain_text": "Tasks"}]}
        )

        card = await renderer.render_database(URL, "db1")

        notion.retrieve_database.assert_awaited_once_with("db1")
        markdown.page_to_markdown.assert_not_awaited()
        assert card.title == "Tasks"
        assert card.text == DATABASE_PREVIEW_TEXT
        assert card.to_attachment() == {
            "author_icon": "https://www.notion.so/front-static/favicon.ico",
            "author_name": "acme's Notion",
            "title": "Tasks",
            "title_link": URL,
            "text": DATABASE_PREVIEW_TEXT,
            "footer": "Notion",
        }
