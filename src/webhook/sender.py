"""GroupMe bot API sender.

Posts a message as the bot to the bot's group:
``POST <send_url>?token=<access token>`` with a JSON body of
``{"bot_id": ..., "text": ...}``. Delivery is best effort: failures are
logged and audited, never retried and never raised.
"""

from __future__ import annotations

import logging

import httpx

from src.audit.logger import AuditLogger
from src.config import DEFAULT_SEND_URL, BotConfig
from src.models import AuditEvent, AuditEventType, OutboundMessage

logger = logging.getLogger(__name__)

_MAX_LOGGED_BODY = 200


class GroupMeSender:
    """Sends bot messages through the GroupMe bot API."""

    def __init__(
        self,
        access_token: str,
        bot_id: str,
        send_url: str = DEFAULT_SEND_URL,
        timeout: float = 10.0,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self._access_token = access_token
        self._bot_id = bot_id
        self._send_url = send_url
        self._timeout = timeout
        self._audit = audit_logger

    @classmethod
    def from_config(
        cls, config: BotConfig, audit_logger: AuditLogger | None = None,
    ) -> GroupMeSender:
        return cls(
            access_token=config.access_token,
            bot_id=config.bot_id,
            send_url=config.send_url,
            timeout=config.send_timeout,
            audit_logger=audit_logger,
        )

    def build_message(self, text: str) -> OutboundMessage:
        return OutboundMessage(bot_id=self._bot_id, text=text)

    async def send(self, text: str) -> bool:
        """Post ``text`` as the bot. Returns True if the platform accepted it."""
        message = self.build_message(text)
        headers = {"Accept": "application/json"}

        try:
            async with httpx.AsyncClient(verify=True) as client:
                resp = await client.post(
                    self._send_url,
                    params={"token": self._access_token},
                    json=message.model_dump(),
                    headers=headers,
                    timeout=self._timeout,
                )
        except httpx.HTTPError as exc:
            # Log the type only: str(exc) can include the tokenized URL
            logger.error("GroupMe send failed: %s", type(exc).__name__)
            self._record(AuditEventType.REPLY_FAILED, "failure", {"error": type(exc).__name__})
            return False

        if resp.status_code >= 400:
            logger.error(
                "GroupMe send rejected: status=%s body=%s",
                resp.status_code,
                resp.text[:_MAX_LOGGED_BODY],
            )
            self._record(
                AuditEventType.REPLY_FAILED, "failure", {"status": resp.status_code},
            )
            return False

        logger.info("GroupMe message sent as bot %s", self._bot_id)
        self._record(AuditEventType.REPLY_SENT, "success", {"status": resp.status_code})
        return True

    def _record(
        self, event_type: AuditEventType, result: str, details: dict[str, object],
    ) -> None:
        if self._audit:
            self._audit.log(AuditEvent(
                event_type=event_type,
                action="send",
                result=result,
                details={"bot_id": self._bot_id, **details},
            ))
