"""Shared Pydantic data models for groupme-webhook-bot."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class SenderType(str, Enum):
    USER = "user"
    BOT = "bot"
    SYSTEM = "system"


class AuditEventType(str, Enum):
    WEBHOOK_RECEIVED = "webhook_received"
    WEBHOOK_REJECTED = "webhook_rejected"
    REPLY_SENT = "reply_sent"
    REPLY_FAILED = "reply_failed"


# --- GroupMe Models ---


class GroupMeMessage(BaseModel):
    """A message callback as GroupMe posts it to the bot's callback URL.

    Only ``sender_type`` and ``text`` are type-checked; they alone decide
    whether a body is a message. The identifying fields are passed through
    untyped for logging, so an odd value in one of them never drops a message.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    sender_type: str | None = None  # "user", "bot" or "system"
    text: str | None = None
    id: Any = None
    group_id: Any = None
    sender_id: Any = None
    user_id: Any = None
    name: Any = None
    source_guid: Any = None
    avatar_url: Any = None
    created_at: Any = None
    system: Any = None
    attachments: Any = Field(default_factory=list)


class OutboundMessage(BaseModel):
    """Body of a POST to the bot send endpoint."""

    model_config = ConfigDict(frozen=True)

    bot_id: str
    text: str


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    source_ip: str | None = None
    action: str
    result: str  # "success" | "failure" | "rejected"
    details: dict[str, object] | None = None
