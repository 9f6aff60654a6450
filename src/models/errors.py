"""Error taxonomy for link unfurling.

Every per-link failure derives from ``UnfurlError`` so the event handler can
drop a single link without aborting the rest of the batch.
"""

from __future__ import annotations


class UnfurlError(Exception):
    """Base class for failures that only affect one shared link."""


class FormatError(UnfurlError):
    """The shared URL does not have the ``/<workspace>/<slug-or-id>`` shape."""

    def __init__(self, url: str, path: str) -> None:
        self.url = url
        self.path = path
        super().__init__(f"Unexpected pathname {path!r} in {url}")


class TitleError(UnfurlError):
    """No display title could be derived from the fetched metadata."""


class FetchError(UnfurlError):
    """Retrieving metadata or content from Notion failed.

    Covers HTTP errors, transport errors and payloads that fail schema
    validation.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ConfigurationError(Exception):
    """Required configuration is missing. Reported at startup, never raised."""
