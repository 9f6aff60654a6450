"""Recognise Notion page and database URLs.

Notion does not document its URL scheme; these are the observed rules::

    https://www.notion.so/<workspace>/<slug>-<id>
        a page
    https://www.notion.so/<workspace>/<db-id>?v=<view-id>&p=<page-id>
        a page previewed inside a database
    https://www.notion.so/<workspace>/<db-id>?v=<view-id>
        a full database page
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlsplit

from src.models.document import NotionReference, ReferenceKind
from src.models.errors import FormatError

# The ID is whatever follows the last hyphen of a "<slug>-<id>" segment.
_ID_PATTERN = re.compile(r"([^-]+)$")


def unescape_url(url: str) -> str:
    """Undo the HTML escaping Slack applies to ``&`` in unfurl URLs."""
    return url.replace("&amp;", "&")


def classify_url(url: str, workspace: str) -> NotionReference | None:
    """Classify an (unescaped) URL as a page, a database, or neither.

    Args:
        url: The shared URL, already passed through ``unescape_url``.
        workspace: Configured Notion workspace. Empty never matches.

    Returns:
        A NotionReference, or None when the URL is not ours or carries no ID.

    Raises:
        FormatError: If the path is not exactly ``/<workspace>/<segment>``.
    """
    parts = urlsplit(url)
    elems = parts.path.split("/")
    if len(elems) != 3:
        raise FormatError(url, parts.path)

    if not workspace or elems[1] != workspace:
        return None

    query = parse_qs(parts.query, keep_blank_values=True)

    # A focused page wins over the database view it is shown in.
    if "p" in query:
        page_id = query["p"][0]
        if not page_id:
            return None
        return NotionReference(kind=ReferenceKind.PAGE, id=page_id, url=url)

    match = _ID_PATTERN.search(elems[2])
    if match is None:
        return None
    target_id = match.group(1)

    if "v" in query:
        return NotionReference(kind=ReferenceKind.DATABASE, id=target_id, url=url)
    return NotionReference(kind=ReferenceKind.PAGE, id=target_id, url=url)
