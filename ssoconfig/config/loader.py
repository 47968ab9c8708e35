"""
SSOConfig - SSO session management for the shared credentials config file.

Configuration loader for loading and validating config.yaml.
"""

import logging
import os
import re
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ssoconfig.config.schema import SsoConfigSettings

logger = logging.getLogger(__name__)

USER_CONFIG_DIR = Path.home() / ".ssoconfig"
USER_CONFIG_PATH = USER_CONFIG_DIR / "config.yaml"
LOCAL_CONFIG_DIR_NAME = ".ssoconfig"


class ConfigError(Exception):
    """Raised when the settings file cannot be read or fails validation."""


def _expand_env_vars(value: str) -> str:
    """
    Expand environment variables in a string.

    Args:
        value: String potentially containing environment variables

    Returns:
        String with environment variables expanded
    """
    if not isinstance(value, str):
        return value

    try:
        dotenv_path = Path.cwd() / ".env"
        if dotenv_path.exists():
            load_dotenv(dotenv_path)
    except (FileNotFoundError, OSError):
        pass

    # ${VAR} or $VAR
    pattern = re.compile(r"\$\{([^}^{]+)\}|\$([a-zA-Z0-9_]+)")

    def _replace_var(match):
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, "")

    return pattern.sub(_replace_var, value)


def _process_config_dict(config_dict: Dict) -> Dict:
    """Expand environment variables in every string of a nested settings dict."""
    result = {}

    for key, value in config_dict.items():
        if isinstance(value, dict):
            result[key] = _process_config_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _process_config_dict(item) if isinstance(item, dict) else
                _expand_env_vars(item) if isinstance(item, str) else
                item
                for item in value
            ]
        elif isinstance(value, str):
            result[key] = _expand_env_vars(value)
        else:
            result[key] = value

    return result


def _find_config_file() -> Optional[Path]:
    """
    Find the settings file to use.

    Returns:
        Path to the settings file, or None when only defaults apply
    """
    local_config = Path.cwd() / LOCAL_CONFIG_DIR_NAME / "config.yaml"
    if local_config.exists():
        return local_config

    if USER_CONFIG_PATH.exists():
        return USER_CONFIG_PATH

    return None


def load_config(config_path: Optional[Union[str, Path]] = None) -> SsoConfigSettings:
    """
    Load and validate the SSOConfig settings.

    Args:
        config_path: Optional path to the settings file

    Returns:
        Validated SsoConfigSettings object

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid
    """
    if config_path is None:
        config_path = _find_config_file()
        if config_path is None:
            logger.debug("No settings file found, using defaults")
            return SsoConfigSettings()
    else:
        config_path = Path(config_path)

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read {config_path}: {str(e)}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML in {config_path}: {str(e)}") from e

    if not isinstance(config_dict, dict):
        raise ConfigError(f"Invalid configuration format in {config_path}")

    try:
        config = SsoConfigSettings(**_process_config_dict(config_dict))
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {str(e)}") from e

    logger.debug(f"Loaded settings from {config_path}")
    return config


def save_config(config: Union[SsoConfigSettings, Dict], config_path: Optional[Union[str, Path]] = None) -> Path:
    """
    Save the settings to a file.

    Args:
        config: The SsoConfigSettings object or dictionary to save
        config_path: Where to save (default: the file in use, else the user config)

    Returns:
        Path to the saved settings file
    """
    if config_path is None:
        config_path = _find_config_file() or USER_CONFIG_PATH
    config_path = Path(config_path)
    config_path.parent.mkdir(exist_ok=True, parents=True)

    if hasattr(config, "model_dump"):
        config_dict = config.model_dump(exclude_none=True)
    else:
        config_dict = config

    with open(config_path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

    return config_path
