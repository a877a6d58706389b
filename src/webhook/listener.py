"""FastAPI webhook listener for GroupMe bot callbacks.

Every path accepts the callback. POST bodies are read to completion,
parsed as JSON and acknowledged with ``200 OK`` before the message is
handed to the responder as a background task.
"""

from __future__ import annotations

import json
import logging

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.background import BackgroundTask

from src.audit.logger import AuditLogger
from src.config import BotConfig
from src.models import AuditEvent, AuditEventType
from src.webhook.responder import MessageResponder
from src.webhook.sender import GroupMeSender

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class BodyTooLargeError(Exception):
    """Raised when a request body exceeds the configured limit."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Request body exceeds {limit} bytes")


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    return create_app(BotConfig.from_env())


def build_audit_logger(config: BotConfig) -> AuditLogger | None:
    if not config.audit_log_path:
        return None
    return AuditLogger(
        config.audit_log_path,
        max_bytes=config.audit_log_max_bytes,
        backup_count=config.audit_log_backup_count,
    )


async def read_body(request: Request, limit: int) -> bytes:
    """Accumulate the request stream, in arrival order, into one buffer."""
    chunks: list[bytes] = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            raise BodyTooLargeError(limit)
        chunks.append(chunk)
    return b"".join(chunks)


def create_app(
    config: BotConfig,
    responder: MessageResponder | None = None,
    audit_logger: AuditLogger | None = None,
) -> FastAPI:
    """Create the webhook app."""
    if audit_logger is None:
        audit_logger = build_audit_logger(config)
    if responder is None:
        responder = MessageResponder(GroupMeSender.from_config(config, audit_logger))

    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)

    def _audit(
        request: Request,
        event_type: AuditEventType,
        result: str,
        details: dict[str, object] | None = None,
    ) -> None:
        if audit_logger:
            audit_logger.log(AuditEvent(
                event_type=event_type,
                source_ip=request.client.host if request.client else None,
                action=f"{request.method} {request.url.path}",
                result=result,
                details=details,
            ))

    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def webhook(request: Request, path: str) -> Response:
        if request.method != "POST":
            _audit(request, AuditEventType.WEBHOOK_REJECTED, "rejected",
                   {"reason": "method_not_allowed"})
            return PlainTextResponse(
                "Only POST requests are allowed",
                status_code=405,
                headers={"Allow": "POST"},
            )

        try:
            body = await read_body(request, config.max_body_bytes)
        except BodyTooLargeError:
            logger.warning("Rejected webhook body larger than %d bytes", config.max_body_bytes)
            _audit(request, AuditEventType.WEBHOOK_REJECTED, "rejected",
                   {"reason": "body_too_large"})
            return PlainTextResponse("Request body too large", status_code=413)

        try:
            payload = json.loads(body)
        except ValueError:
            # Covers both json.JSONDecodeError and UnicodeDecodeError
            logger.warning("Rejected webhook body that is not valid JSON")
            _audit(request, AuditEventType.WEBHOOK_REJECTED, "rejected",
                   {"reason": "invalid_json"})
            return PlainTextResponse("Invalid JSON body", status_code=400)

        _audit(request, AuditEventType.WEBHOOK_RECEIVED, "success")
        return PlainTextResponse(
            "OK",
            status_code=200,
            background=BackgroundTask(responder.on_message, payload),
        )

    return app
