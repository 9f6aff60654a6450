"""Render a Notion page's block tree as markdown.

Only used to build the short text preview, so the output aims to read well
as plain text rather than to round-trip every block type.
"""

from __future__ import annotations

import logging
from typing import Protocol

from src.models.notion import Block, RichText

logger = logging.getLogger(__name__)

_INDENT = "  "

_HEADING_PREFIX = {
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
}

# Blocks whose children are rendered nested below them
_CONTAINER_TYPES = frozenset(
    {
        "paragraph",
        "bulleted_list_item",
        "numbered_list_item",
        "to_do",
        "toggle",
        "quote",
        "callout",
        "column_list",
        "column",
        "synced_block",
        "table",
        "heading_1",
        "heading_2",
        "heading_3",
    }
)

# Blocks that only group their children and render nothing themselves
_TRANSPARENT_TYPES = frozenset({"column_list", "column", "synced_block", "table"})


class BlockSource(Protocol):
    """Anything that can list a block's children (NotionClient does)."""

    async def list_block_children(self, block_id: str) -> list[Block]: ...


def rich_text_to_markdown(runs: list[RichText]) -> str:
    """Join rich text runs, applying inline annotations and links."""
    parts: list[str] = []
    for run in runs:
        text = run.plain_text
        if not text:
            continue
        if run.type == "equation":
            parts.append(f"${text}$")
            continue
        ann = run.annotations
        if ann.code:
            text = f"`{text}`"
        if ann.bold:
            text = f"**{text}**"
        if ann.italic:
            text = f"_{text}_"
        if ann.strikethrough:
            text = f"~~{text}~~"
        if run.href:
            text = f"[{text}]({run.href})"
        parts.append(text)
    return "".join(parts)


def _caption(block: Block) -> str:
    return rich_text_to_markdown(block.body.caption)


def block_to_markdown(block: Block, number: int = 1) -> str | None:
    """Render one block without its children.

    Args:
        block: The block to render.
        number: Position within a run of numbered list items.

    Returns:
        Markdown text (possibly multi-line), or None for unsupported blocks.
    """
    body = block.body
    kind = block.type
    text = rich_text_to_markdown(body.rich_text)

    if kind == "paragraph":
        return text
    if kind in _HEADING_PREFIX:
        return _HEADING_PREFIX[kind] + text
    if kind == "bulleted_list_item":
        return "- " + text
    if kind == "numbered_list_item":
        return f"{number}. " + text
    if kind == "to_do":
        mark = "x" if body.checked else " "
        return f"- [{mark}] " + text
    if kind == "toggle":
        return text
    if kind == "quote":
        return "> " + text
    if kind == "callout":
        emoji = body.icon.emoji if body.icon else None
        return f"> {emoji} {text}" if emoji else f"> {text}"
    if kind == "code":
        return f"```{body.language or ''}\n{text}\n```"
    if kind == "divider":
        return "---"
    if kind == "equation":
        return f"$$\n{body.expression or ''}\n$$"
    if kind == "child_page":
        return "## " + (body.title or "")
    if kind == "child_database":
        return body.title or ""
    if kind in ("bookmark", "embed", "link_preview"):
        url = body.url or ""
        caption = _caption(block) if kind != "link_preview" else ""
        return f"[{caption or kind}]({url})"
    if kind == "image":
        return f"![{_caption(block)}]({body.file_url})"
    if kind in ("video", "file", "pdf", "audio"):
        return f"[{_caption(block) or kind}]({body.file_url})"
    if kind == "table_row":
        rendered = [rich_text_to_markdown(cell) for cell in body.cells]
        return "| " + " | ".join(rendered) + " |"

    logger.debug("Skipping unsupported block type %s", kind)
    return None


class PageMarkdownExporter:
    """Fetch a page's blocks and render them as one markdown string.

    Args:
        source: Block children provider, usually a NotionClient.
        max_depth: How many levels of nested children to fetch.
    """

    def __init__(self, source: BlockSource, max_depth: int = 3) -> None:
        self._source = source
        self._max_depth = max_depth

    async def page_to_markdown(self, page_id: str) -> str:
        """Render the page body.

        Raises:
            FetchError: If any block listing fails.
        """
        lines = await self._render_children(page_id, depth=0)
        return "\n".join(lines)

    async def _render_children(self, block_id: str, depth: int) -> list[str]:
        blocks = await self._source.list_block_children(block_id)
        lines: list[str] = []
        number = 0
        for block in blocks:
            number = number + 1 if block.type == "numbered_list_item" else 0
            child_depth = depth
            if block.type not in _TRANSPARENT_TYPES:
                text = block_to_markdown(block, number=number or 1)
                if text is None:
                    continue
                indent = _INDENT * depth
                lines.extend(indent + line if line else "" for line in text.split("\n"))
                child_depth = depth + 1
            if (
                block.has_children
                and block.type in _CONTAINER_TYPES
                and child_depth <= self._max_depth
            ):
                lines.extend(await self._render_children(block.id, child_depth))
        return lines
