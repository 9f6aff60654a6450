"""Slack-side models for link_shared events and conversation context."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SharedLink(BaseModel):
    """A link as reported by Slack: the escaped URL and its registered domain."""

    url: str
    domain: str


class ShareEvent(BaseModel):
    """A ``link_shared`` event. Ephemeral, one per Slack delivery."""

    channel: str = Field(..., description="Conversation the links were posted in")
    message_ts: str = Field(..., description="Timestamp of the message to unfurl")
    links: list[SharedLink] = Field(default_factory=list)

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> ShareEvent:
        """Build from the ``event`` object of an Events API payload."""
        return cls(
            channel=event["channel"],
            message_ts=event["message_ts"],
            links=[SharedLink.model_validate(link) for link in event.get("links", [])],
        )


class ConversationInfo(BaseModel):
    """Subset of the ``conversations.info`` channel object."""

    id: str
    is_shared: bool = False
    is_ext_shared: bool = False

    @property
    def is_cross_workspace(self) -> bool:
        return self.is_shared or self.is_ext_shared
