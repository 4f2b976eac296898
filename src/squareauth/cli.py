"""`squareauth` command line interface."""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

import click

from .provider import SquareProvider
from .settings import load_provider_config


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """True if the variable is set to "1", "true", or "yes" (case insensitive)."""
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def configure_logging(debug: bool = False) -> None:
    """Configure the root logger to write to stderr.

    Args:
        debug: Enable debug logging; also enabled by SQUAREAUTH_DEBUG
    """
    if not debug:
        debug = get_env_flag("SQUAREAUTH_DEBUG")
    level = logging.DEBUG if debug else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    root_logger.addHandler(stream_handler)


def output_result(result: Any, json_output: bool = False) -> None:
    if json_output:
        click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))
    else:
        click.echo(result)


def output_error(error: Exception, json_output: bool = False) -> None:
    if json_output:
        click.echo(json.dumps({"status": "error", "error": str(error)}, indent=2))
    else:
        click.echo(f"Error: {error}", err=True)
    raise click.Abort()


def _load_provider(config_path: Path | None) -> SquareProvider:
    return SquareProvider.from_settings(load_provider_config(config_path))


@click.group()
def main() -> None:
    """Square OAuth helper commands."""


@main.command(name="auth-url")
@click.option("--state", required=True, help="Opaque state value echoed back on the callback")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to squareauth.yml",
)
@click.option("--scope", "scopes", multiple=True, help="Extra scope to request (repeatable)")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def auth_url(
    state: str,
    config_path: Path | None,
    scopes: tuple[str, ...],
    json_output: bool,
    debug: bool,
) -> None:
    """Print the Square authorization URL for STATE.

    \b
    Examples:
        squareauth auth-url --state abc123
        squareauth auth-url --state abc123 --scope ITEMS_READ --scope ORDERS_READ
    """
    configure_logging(debug)
    try:
        settings = load_provider_config(config_path)
        if scopes:
            settings = settings.model_copy(update={"scopes": [*settings.scopes, *scopes]})
        provider = SquareProvider.from_settings(settings)
        session = provider.begin_auth(state)
        output_result(session.get_auth_url(), json_output)
    except (FileNotFoundError, ValueError) as e:
        output_error(e, json_output)


@main.command(name="refresh")
@click.argument("refresh_token")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to squareauth.yml",
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def refresh(
    refresh_token: str,
    config_path: Path | None,
    json_output: bool,
    debug: bool,
) -> None:
    """Exchange REFRESH_TOKEN for a new access token."""
    configure_logging(debug)
    try:
        provider = _load_provider(config_path)
        token = asyncio.run(provider.refresh_token(refresh_token))
    except Exception as e:
        output_error(e, json_output)
    else:
        output_result(dict(token) if json_output else token.get("access_token"), json_output)
