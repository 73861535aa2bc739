# pico_setup/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the application.

Handles loading settings from Pydantic model defaults, environment
variables, a YAML file and command-line arguments, applying a specific
order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (via Pydantic's BaseSettings)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .config import CONFIG_FILE_DEFAULT
from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

# Maps argparse destinations to AppSettings fields.
CLI_TO_SETTINGS_FIELDS: Dict[str, str] = {
    "output_dir": "output_dir",
    "shell_profile": "shell_profile",
    "jobs": "jobs",
    "sdk_branch": "sdk_branch",
    "state_file": "state_file",
    "log_prefix": "log_prefix",
    "skip_openocd": "skip_openocd",
    "skip_vscode": "skip_vscode",
    "skip_uart": "skip_uart",
    "no_picoprobe": "include_picoprobe",
}


class ConfigurationError(Exception):
    """Raised when the resolved configuration does not validate."""


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates a dictionary `source` with values from another dictionary
    `overrides`. Nested dictionaries are merged; None values in `overrides` never
    replace an existing value.

    Parameters:
        source: Dict[str, Any]
            The dictionary to be updated. This dictionary gets modified in place.
        overrides: Dict[str, Any]
            The dictionary containing values to update or add to the `source`.

    Returns:
        Dict[str, Any]:
            The updated dictionary after applying all `overrides` to the input `source`.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def load_yaml_config(
    config_file_path: Path,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """Read a YAML mapping; a missing or unusable file yields an empty dict."""
    logger_to_use = current_logger if current_logger else module_logger
    yaml_config_path = Path(config_file_path)

    if not (yaml_config_path.exists() and yaml_config_path.is_file()):
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data and isinstance(yaml_data, dict):
        logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
        return yaml_data
    if yaml_data is not None:
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
    return {}


def _cli_overrides(cli_args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for cli_key, cli_value in vars(cli_args).items():
        field_name = CLI_TO_SETTINGS_FIELDS.get(cli_key)
        if field_name is None or cli_value is None:
            continue
        # store_true flags only override when set.
        if isinstance(cli_value, bool) and not cli_value:
            continue
        if cli_key == "no_picoprobe":
            overrides[field_name] = False
        else:
            overrides[field_name] = cli_value
    return overrides


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings with the following precedence:
    1. Pydantic Model Defaults.
    2. Environment Variables (SKIP_OPENOCD, MSYSTEM, PICO_SETUP_JOBS, ...).
    3. Values from the YAML configuration file.
    4. Command-Line Arguments (highest precedence, overrides all else).

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the YAML configuration file. Defaults to
            pico_setup.yaml in the current directory.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        ConfigurationError: The merged values do not validate.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        # BaseSettings loads environment variables here.
        current_values_dict = AppSettings().model_dump(exclude_defaults=False)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise ConfigurationError(f"Configuration error: {e}") from e

    yaml_path = Path(config_file_path or CONFIG_FILE_DEFAULT)
    current_values_dict = _deep_update(
        current_values_dict, load_yaml_config(yaml_path, logger_to_use)
    )

    if cli_args:
        current_values_dict = _deep_update(
            current_values_dict, _cli_overrides(cli_args)
        )

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise ConfigurationError(f"Configuration error: {e}") from e

    logger_to_use.debug("Successfully loaded and validated application settings")
    return final_settings
