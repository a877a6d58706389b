"""Click CLI for running the GroupMe webhook bot."""

from __future__ import annotations

import asyncio
import logging

import click
import uvicorn

from src.config import BotConfig, ConfigError
from src.webhook.listener import build_audit_logger, create_app
from src.webhook.sender import GroupMeSender

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _load_config() -> BotConfig:
    try:
        return BotConfig.from_env()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@click.group()
def cli() -> None:
    """GroupMe webhook bot."""


@cli.command()
@click.option("--host", default=None, help="Bind address (overrides HOST).")
def serve(host: str | None) -> None:
    """Listen for GroupMe callbacks on $PORT."""
    config = _load_config()
    _configure_logging(config.log_level)
    app = create_app(config)
    logging.getLogger(__name__).info(
        "Listening for GroupMe callbacks on %s:%d", host or config.host, config.port,
    )
    uvicorn.run(
        app,
        host=host or config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


@cli.command()
@click.argument("text")
def send(text: str) -> None:
    """Post TEXT to the bot's group."""
    config = _load_config()
    _configure_logging(config.log_level)
    sender = GroupMeSender.from_config(config, build_audit_logger(config))
    if not asyncio.run(sender.send(text)):
        raise click.ClickException("GroupMe rejected the message; see log for details")
    click.echo("Message sent")
