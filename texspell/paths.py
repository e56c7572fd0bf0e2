"""Centralized path configuration for the application."""

import os
from pathlib import Path

def get_config_root() -> Path:
    """
    Get the root directory for configuration files.

    Respects the TEXSPELL_CONFIG_DIR environment variable.
    If not set, defaults to ./config under the current working directory.
    """
    env_path = os.getenv("TEXSPELL_CONFIG_DIR")
    if env_path:
        return Path(env_path)
    return Path("config")

def get_config_file() -> Path:
    """Get the path to the spelling configuration file."""
    env_path = os.getenv("TEXSPELL_CONFIG")
    if env_path:
        return Path(env_path)
    return get_config_root() / "spelling.yaml"
