"""Configuration loader for the Square provider.

Reads a YAML file with a `square:` section, resolves `${VAR}` environment
references and validates the result.

Example squareauth.yml:

    square:
      client_id: ${SQUARE_CLIENT_ID}
      client_secret: ${SQUARE_CLIENT_SECRET}
      callback_url: https://app.example.com/auth/square/callback
      environment: sandbox
      scopes:
        - ITEMS_READ
        - ORDERS_READ
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import SquareAuthConfigModel

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z0-9_]+)\}")

CONFIG_ENV_VAR = "SQUAREAUTH_CONFIG"
DEFAULT_CONFIG_FILE = "squareauth.yml"


def load_provider_config(config_path: Path | None = None) -> SquareAuthConfigModel:
    """Load the Square provider configuration.

    Args:
        config_path: Optional path to the config file.
                    If not provided, looks for:
                    1. SQUAREAUTH_CONFIG environment variable
                    2. ./squareauth.yml

    Returns:
        Validated SquareAuthConfigModel

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid or references an unset variable
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else Path.cwd() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(f"Square auth config file not found at {config_path}")

    logger.debug(f"Loading Square auth config from: {config_path}")

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML config file {config_path}: {e}") from e

    if not isinstance(raw_config, dict) or "square" not in raw_config:
        raise ValueError(f"Config file {config_path} has no 'square' section")

    section = resolve_env_references(raw_config["square"])

    try:
        return SquareAuthConfigModel.model_validate(section)
    except ValidationError as e:
        raise ValueError(f"Invalid Square auth config: {e}") from e


def resolve_env_references(value: Any) -> Any:
    """Replace `${VAR}` references in strings, recursing into lists and dicts."""
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_lookup_env_var, value)
    if isinstance(value, list):
        return [resolve_env_references(item) for item in value]
    if isinstance(value, dict):
        return {key: resolve_env_references(item) for key, item in value.items()}
    return value


def _lookup_env_var(match: re.Match[str]) -> str:
    var_name = match.group(1)
    value = os.environ.get(var_name)
    if value is None:
        raise ValueError(f"Environment variable not found: {var_name}")
    return value
