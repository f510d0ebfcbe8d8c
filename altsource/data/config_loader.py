from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import aiofiles
import yaml
from pydantic import ValidationError

from altsource.domain.errors import ConfigurationError
from altsource.domain.models import RepositoryConfig

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def parse_repository_config(content: str, path: Path) -> RepositoryConfig:
    """
    Parse and validate repository configuration text.

    The format is chosen by the file suffix: YAML for `.yaml` / `.yml`,
    JSON otherwise.

    Raises:
        ConfigurationError: On syntax errors or schema violations.
    """
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            raw: Any = yaml.safe_load(content)
        else:
            raw = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(path, f"syntax error: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(path, "top-level value must be an object")

    try:
        return RepositoryConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(path, str(e)) from e


async def load_repository_config(path: Path) -> RepositoryConfig:
    """
    Load the repository configuration from `path`.

    Called once at startup; any failure is fatal for the server.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    if not path.is_file():
        raise ConfigurationError(path, "file not found")

    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(path, f"cannot read file: {e}") from e

    config = parse_repository_config(content, path)
    logger.info(f"Loaded configuration for {config.name} ({len(config.apps)} apps) from {path}")
    return config
