"""Shared test fixtures for groupme-webhook-bot."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.audit.logger import AuditLogger
from src.config import BotConfig
from src.models import AuditEvent, AuditEventType
from src.webhook.sender import GroupMeSender

TEST_ACCESS_TOKEN = "test-access-token"
TEST_BOT_ID = "test-bot-id"


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


@pytest.fixture
def mock_sender() -> MagicMock:
    """A GroupMeSender whose send() succeeds without touching the network."""
    sender = MagicMock(spec=GroupMeSender)
    sender.send = AsyncMock(return_value=True)
    return sender


# --- Factory functions for test data ---


def make_config(**kwargs: Any) -> BotConfig:
    """Factory for BotConfig with sensible defaults."""
    defaults: dict[str, Any] = {
        "access_token": TEST_ACCESS_TOKEN,
        "bot_id": TEST_BOT_ID,
    }
    defaults.update(kwargs)
    return BotConfig(**defaults)


def make_groupme_payload(**kwargs: Any) -> dict[str, Any]:
    """A GroupMe message callback body, as documented for bots."""
    defaults: dict[str, Any] = {
        "attachments": [],
        "avatar_url": "https://i.groupme.com/123456789",
        "created_at": 1302623328,
        "group_id": "1234567890",
        "id": "1234567890",
        "name": "John",
        "sender_id": "12345",
        "sender_type": "user",
        "source_guid": "GUID",
        "system": False,
        "text": "Hello world",
        "user_id": "1234567890",
    }
    defaults.update(kwargs)
    return defaults


def make_audit_event(**kwargs: Any) -> AuditEvent:
    """Factory for AuditEvent with sensible defaults."""
    defaults: dict[str, Any] = {
        "event_type": AuditEventType.WEBHOOK_RECEIVED,
        "action": "POST /",
        "result": "success",
    }
    defaults.update(kwargs)
    return AuditEvent(**defaults)
