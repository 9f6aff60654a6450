"""JSON-lines logging for the unfurler.

Each record becomes one JSON object on stdout. Context passed through
``extra=`` is lifted to top-level keys so a single Slack event or Notion
fetch can be followed across log lines.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Slack event context, then Notion fetch context, then per-event counters
_EXTRA_FIELDS = (
    "channel",
    "message_ts",
    "url",
    "page_id",
    "database_id",
    "status",
    "num_links",
    "num_unfurls",
)


class JSONFormatter(logging.Formatter):
    """Render a record and its unfurl context as one JSON line.

    Page titles and emoji icons are written as-is rather than escaped.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(log_level: str = "INFO") -> None:
    """Send all logging to stdout through JSONFormatter.

    Args:
        log_level: Root level name; DEBUG also surfaces raw Notion payloads.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level.upper())

    # HTTP and Socket Mode clients log every request at INFO/DEBUG
    for name in ("httpcore", "httpx", "slack_sdk", "aiohttp"):
        logging.getLogger(name).setLevel(logging.WARNING)
