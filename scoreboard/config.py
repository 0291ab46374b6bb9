"""
Configuration loader
"""
import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from scoreboard.models import ServerConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/server.yaml"
CONFIG_ENV_VAR = "SCOREBOARD_CONFIG"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> ServerConfig:
    """
    Load configuration from YAML file

    Args:
        config_path: Path to config file

    Returns:
        ServerConfig object

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    return ServerConfig(**data)


def resolve_config(config_path: Optional[str] = None) -> ServerConfig:
    """
    Pick the config for this process

    An explicit path (argument or SCOREBOARD_CONFIG) must exist. When neither
    is given and the default file is missing, built-in defaults are used.
    """
    explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        return load_config(explicit)

    if not Path(DEFAULT_CONFIG_PATH).exists():
        logger.info(f"No {DEFAULT_CONFIG_PATH}, using default configuration")
        return ServerConfig()

    return load_config(DEFAULT_CONFIG_PATH)
