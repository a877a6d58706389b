"""Process configuration — read once from the environment at startup."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_SEND_URL = "https://api.groupme.com/v3/bots/post"

_REQUIRED = ("ACCESS_TOKEN", "BOT_ID")

# env var -> BotConfig field, for the optional settings
_OPTIONAL = {
    "PORT": "port",
    "HOST": "host",
    "GROUPME_API_URL": "send_url",
    "SEND_TIMEOUT_SECONDS": "send_timeout",
    "MAX_BODY_BYTES": "max_body_bytes",
    "LOG_LEVEL": "log_level",
    "AUDIT_LOG_PATH": "audit_log_path",
    "AUDIT_LOG_MAX_BYTES": "audit_log_max_bytes",
    "AUDIT_LOG_BACKUP_COUNT": "audit_log_backup_count",
}


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


class BotConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1, repr=False)
    bot_id: str = Field(min_length=1)
    port: int = Field(default=8000, ge=1, le=65535)
    host: str = "0.0.0.0"
    send_url: str = DEFAULT_SEND_URL
    send_timeout: float = Field(default=10.0, gt=0)
    max_body_bytes: int = Field(default=1_048_576, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    audit_log_path: str | None = None
    audit_log_max_bytes: int = Field(default=10_485_760, gt=0)
    audit_log_backup_count: int = Field(default=5, ge=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BotConfig:
        """Build the config from environment variables.

        Missing secrets are a startup failure, not something to discover on
        the first send.
        """
        env = os.environ if environ is None else environ

        missing = [name for name in _REQUIRED if not env.get(name)]
        if missing:
            raise ConfigError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )

        values: dict[str, str] = {
            "access_token": env["ACCESS_TOKEN"],
            "bot_id": env["BOT_ID"],
        }
        for var, field_name in _OPTIONAL.items():
            raw = env.get(var)
            if raw:
                values[field_name] = raw

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            raise ConfigError(f"Invalid configuration for: {', '.join(fields)}") from exc
