# pico_setup/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) interactions for the Pico setup.
"""

import datetime
import logging
from typing import Optional

from pico_common.command_utils import log_pico_setup
from pico_common.system_utils import get_current_script_hash
from pico_setup import config as static_config
from pico_setup.config_models import AppSettings
from pico_setup.platform_detect import HostPlatform

module_logger = logging.getLogger(__name__)


def cli_prompt_for_rerun(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> bool:
    """
    Ask the user on the terminal whether to re-run something.

    Parameters:
    prompt_message : str
        The message to display in the CLI when prompting the user.
    app_settings : AppSettings
        The application settings object providing logging symbols.
    current_logger_instance : Optional[logging.Logger]
        The logger instance to use for logging.

    Returns:
    bool
        True if the user answers "y" or "Y", otherwise False (also on EOF).
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = app_settings.symbols
    try:
        user_input = (
            input(f"   {symbols.get('info', 'ℹ️')} {prompt_message} (y/N): ")
            .strip()
            .lower()
        )
        return user_input == "y"
    except EOFError:
        log_pico_setup(
            f"{symbols.get('warning', '!')} No user input (EOF), defaulting to 'N' for prompt: '{prompt_message}'",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False


def format_configuration(
    app_config: AppSettings,
    host_platform: Optional[HostPlatform] = None,
    script_hash: Optional[str] = None,
) -> str:
    symbols = app_config.symbols
    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    if host_platform is not None:
        config_text += f"  Detected Platform:             {host_platform.value}\n"
    config_text += f"  Shell Variant (MSYSTEM):       {app_config.msystem or 'N/A'}\n"
    config_text += f"  Output Directory:              {app_config.output_dir}\n"
    config_text += f"  Shell Profile:                 {app_config.shell_profile}\n"
    config_text += f"  SDK Branch:                    {app_config.sdk_branch}\n"
    config_text += f"  Clone URL Prefix:              {app_config.github_prefix}\n"
    config_text += f"  CMake Generator:               {app_config.cmake_generator or 'default'}\n"
    config_text += f"  Make Jobs:                     {app_config.jobs}\n"
    config_text += f"  Use sudo:                      {app_config.use_sudo}\n\n"

    config_text += "  Skip Flags:\n"
    config_text += f"    OpenOCD:                     {app_config.skip_openocd}\n"
    config_text += f"    VS Code:                     {app_config.skip_vscode}\n"
    config_text += f"    UART:                        {app_config.skip_uart}\n"
    config_text += f"  OpenOCD with picoprobe:        {app_config.include_picoprobe}\n\n"

    config_text += f"  State File Path:               {app_config.state_file_path}\n"
    config_text += f"  Script Hash:                   {script_hash or 'N/A'}\n"
    config_text += f"  Script Version (static):       {static_config.SCRIPT_VERSION}\n"
    config_text += f"  Timestamp (current view):      {datetime.datetime.now().strftime('%Y-%m-%d-%H%M%S')}\n"
    return config_text


def view_configuration(
    app_config: AppSettings,
    host_platform: Optional[HostPlatform] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Log the effective configuration and where it came from."""
    logger_to_use = current_logger if current_logger else module_logger
    current_hash = get_current_script_hash(
        project_root_dir=static_config.PICO_SETUP_PACKAGE_ROOT,
        app_settings=app_config,
        logger_instance=logger_to_use,
        include_dirs=static_config.HASHED_PACKAGE_DIRS,
    )
    config_text = format_configuration(app_config, host_platform, current_hash)

    log_pico_setup(
        "Displaying current configuration:", "info", logger_to_use, app_config
    )
    log_pico_setup(f"\n{config_text}\n", "info", logger_to_use, app_config)
