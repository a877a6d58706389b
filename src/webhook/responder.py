"""Message responder — decides whether an inbound message gets a reply."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from src.models import GroupMeMessage, SenderType

if TYPE_CHECKING:
    from src.webhook.sender import GroupMeSender

logger = logging.getLogger(__name__)

TRIGGER_SUBSTRING = "bot"
REPLY_TEXT = "OMG! Are you guys gossiping about me?!?!"


def parse_message(payload: Any) -> GroupMeMessage | None:
    """Validate a decoded webhook body. Returns None if it is not a message."""
    if not isinstance(payload, dict):
        return None
    try:
        return GroupMeMessage.model_validate(payload)
    except ValidationError:
        return None


def should_reply(message: GroupMeMessage) -> bool:
    """Only human senders whose text contains the trigger get a reply.

    The check is a case-sensitive substring search, so "robot" matches.
    """
    if message.sender_type != SenderType.USER.value:
        return False
    if message.text is None:
        return False
    return TRIGGER_SUBSTRING in message.text


class MessageResponder:
    """Applies the reply rule to each inbound message."""

    def __init__(self, sender: GroupMeSender) -> None:
        self._sender = sender

    async def on_message(self, payload: Any) -> bool:
        """Handle one decoded webhook body. Returns True if a reply was sent."""
        try:
            message = parse_message(payload)
            if message is None:
                logger.debug("Ignoring webhook body that is not a GroupMe message")
                return False
            if not should_reply(message):
                return False
            logger.info(
                "Trigger matched in group %s from sender %s",
                message.group_id, message.sender_id,
            )
            return await self._sender.send(REPLY_TEXT)
        except Exception:
            # The webhook caller already has its 200; nothing to propagate to
            logger.exception("Unexpected error while handling GroupMe message")
            return False
