from __future__ import annotations

"""
Configuration Domain Management.

Handles the runtime configuration of a mapping run and its persistent
storage as JSON in the user data directory. Falls back to defaults on any
missing or corrupted state.
"""

import json
import logging
import os
from typing import Any, Dict

from dirmap.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
DEFAULT_OUTPUT_PATH = "map"
DEFAULT_COMPRESSION_LEVEL = 3
MIN_COMPRESSION_LEVEL = 1
MAX_COMPRESSION_LEVEL = 22


def get_config_file() -> str:
    """Resolve the absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "start_path": "",
        "output_path": DEFAULT_OUTPUT_PATH,

        # Codec
        "compression_level": DEFAULT_COMPRESSION_LEVEL,

        # Walk (0 lets the executor pick its own worker count)
        "max_workers": 0,

        # Diagnostics
        "log_level": "INFO",
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration or defaults on failure.
    """
    defaults = get_default_config()
    config_file = get_config_file()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return defaults

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return defaults

    # Only known keys survive the merge
    for key in defaults:
        if key in data:
            defaults[key] = data[key]
    return defaults


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the provided configuration to disk.

    Args:
        config: The configuration dictionary to save.
    """
    config_file = get_config_file()
    try:
        os.makedirs(os.path.dirname(config_file), exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(config, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
