"""Async client for the parts of the Notion REST API used to build previews.

Every response is validated into the models of ``src.models.notion`` here,
so callers only ever see typed records or a FetchError.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.config import Settings
from src.models.errors import FetchError
from src.models.notion import Block, BlockChildren, NotionDatabase, NotionPage

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

# Maximum page size accepted by the block children endpoint
_PAGE_SIZE = 100


class NotionClient:
    """Fetch pages, databases and block children from Notion.

    A fresh ``httpx.AsyncClient`` is opened per operation; nothing is cached
    between calls.
    """

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.notion.com/v1",
        api_version: str = "2022-06-28",
        timeout: float = 30.0,
        debug: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise the client.

        Args:
            token: Notion integration token.
            base_url: API root, without trailing slash.
            api_version: Value for the ``Notion-Version`` header.
            timeout: Per-request timeout in seconds.
            debug: Log raw page/database payloads at DEBUG level.
            transport: Optional transport override (tests use MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": api_version,
        }
        self._timeout = timeout
        self._debug = debug
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> NotionClient:
        return cls(
            token=settings.notion_api_token,
            base_url=settings.notion_api_base_url,
            api_version=settings.notion_api_version,
            timeout=settings.notion_timeout_seconds,
            debug=settings.debug,
        )

    async def retrieve_page(self, page_id: str) -> NotionPage:
        """Fetch page metadata (parent, properties, icon).

        Raises:
            FetchError: On HTTP/transport failure or an unexpected payload.
        """
        async with self._client() as client:
            data = await self._get(client, f"/pages/{page_id}")
        if self._debug:
            logger.debug("Notion page payload: %s", data, extra={"page_id": page_id})
        return self._validate(NotionPage, data, f"page {page_id}")

    async def retrieve_database(self, database_id: str) -> NotionDatabase:
        """Fetch database metadata (title, icon).

        Raises:
            FetchError: On HTTP/transport failure or an unexpected payload.
        """
        async with self._client() as client:
            data = await self._get(client, f"/databases/{database_id}")
        if self._debug:
            logger.debug(
                "Notion database payload: %s", data, extra={"database_id": database_id}
            )
        return self._validate(NotionDatabase, data, f"database {database_id}")

    async def list_block_children(self, block_id: str) -> list[Block]:
        """Fetch all direct children of a block (or page), following cursors.

        Raises:
            FetchError: On HTTP/transport failure or an unexpected payload.
        """
        blocks: list[Block] = []
        params: dict[str, Any] = {"page_size": _PAGE_SIZE}
        async with self._client() as client:
            while True:
                data = await self._get(client, f"/blocks/{block_id}/children", params)
                page = self._validate(BlockChildren, data, f"children of {block_id}")
                blocks.extend(page.results)
                if not page.has_more or not page.next_cursor:
                    break
                params = {"page_size": _PAGE_SIZE, "start_cursor": page.next_cursor}
        return blocks

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _get(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            raise FetchError(f"Notion request GET {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.error(
                "Notion request failed",
                extra={"status": response.status_code, "url": path},
            )
            raise FetchError(
                f"Notion request GET {path} returned {response.status_code}: "
                f"{response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(f"Notion response for GET {path} is not JSON") from e
        if not isinstance(data, dict):
            raise FetchError(f"Notion response for GET {path} is not an object")
        return data

    @staticmethod
    def _validate(model: type[_ModelT], data: dict[str, Any], what: str) -> _ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise FetchError(f"Unexpected Notion payload for {what}: {e}") from e
