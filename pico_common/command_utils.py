# pico_common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing external commands and logging their output.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Union

from pico_setup.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def log_pico_setup(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a message from the installer at the requested level.

    Args:
        message (str): The log message to be recorded.
        level (str): The severity level of the log message. Defaults to "info". Common options
            include "debug", "info", "warning", "error", "critical" and "success"
            (logged at INFO).
        current_logger (Optional[logging.Logger]): A logger instance to use for logging. If not
            provided, a module-level logger will be used.
        app_settings (Optional[AppSettings]): Optional application settings.
        exc_info (bool): Include exception details in the log record. Defaults to False.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def _get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    if app_settings and app_settings.symbols:
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def _get_elevated_command_prefix(
    app_settings: Optional[AppSettings] = None,
) -> List[str]:
    """
    Determines the command prefix that ensures elevated privileges when required.

    Returns an empty list when sudo is disabled in the settings (the MINGW64
    shell has no sudo), when the platform has no notion of an effective user
    id, or when the process already runs as root. Otherwise returns ["sudo"].
    """
    if app_settings is not None and not app_settings.use_sudo:
        return []
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None or geteuid() == 0:
        return []
    return ["sudo"]


def run_command(
    command: List[Union[str, os.PathLike]],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a system command and logs the process details and results.

    Commands are always argument lists and never go through a shell, so
    paths with spaces (e.g. the output directory) need no quoting.

    Args:
        command: The program and its arguments. Path objects are converted
            to strings.
        app_settings (Optional[AppSettings]): Settings providing logging symbols.
        check (bool): Raise CalledProcessError on a non-zero exit code. Defaults to True.
        capture_output (bool): Capture standard output and standard error. Defaults to False.
        text (bool): Interpret the output streams as text. Defaults to True.
        current_logger (Optional[logging.Logger]): Logger used for details.
        cwd (Optional[str]): Working directory for the command.
        env (Optional[Dict[str, str]]): Environment for the command. Defaults to the
            inherited environment of the current process.

    Returns:
        subprocess.CompletedProcess: The completed process instance.

    Raises:
        subprocess.CalledProcessError: The process returned a non-zero exit code and
            check is True.
        FileNotFoundError: The executable is not installed or not in PATH.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = _get_symbols(app_settings)
    command_to_run = [str(part) for part in command]
    command_to_log_str = subprocess.list2cmdline(command_to_run)

    log_pico_setup(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}",
        "info",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command_to_run,
            check=check,
            capture_output=capture_output,
            text=text,
            cwd=cwd,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        log_pico_setup(
            f"{symbols.get('error', '❌')} Command `{command_to_log_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        for stream_name, stream in (("stdout", e.stdout), ("stderr", e.stderr)):
            if stream and stream.strip():
                log_pico_setup(
                    f"   {stream_name}: {stream.strip()}",
                    "error",
                    effective_logger,
                    app_settings,
                )
        raise
    except FileNotFoundError as e:
        log_pico_setup(
            f"{symbols.get('error', '❌')} Command not found: {e.filename or command_to_run[0]}. "
            "Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise

    if capture_output:
        for stream_name, stream in (("stdout", result.stdout), ("stderr", result.stderr)):
            if stream and stream.strip():
                log_pico_setup(
                    f"   {stream_name}: {stream.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
    return result


def run_elevated_command(
    command: List[Union[str, os.PathLike]],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a command with elevated permissions.

    The sudo prefix is added only when it is needed and allowed by the
    settings; everything else is delegated to run_command.
    """
    prefix = _get_elevated_command_prefix(app_settings)
    return run_command(
        prefix + list(command),
        app_settings,
        check=check,
        capture_output=capture_output,
        current_logger=current_logger,
        cwd=cwd,
        env=env,
    )


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None


def query_pacman_package(
    package_name: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """
    Returns the installed version of an MSYS2 package, or None.

    Runs `pacman -Q <package>` whose output is "<name> <version>" for an
    installed package. A missing package or a missing pacman binary both
    yield None.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = _get_symbols(app_settings)
    try:
        result = run_command(
            ["pacman", "-Q", package_name],
            app_settings,
            check=False,
            capture_output=True,
            text=True,
            current_logger=logger_to_use,
        )
    except FileNotFoundError:
        log_pico_setup(
            f"{symbols.get('error', '❌')} pacman command not found. Cannot query package '{package_name}'.",
            "error",
            logger_to_use,
            app_settings,
        )
        return None

    if result.returncode != 0 or not result.stdout:
        return None
    parts = result.stdout.strip().split()
    if len(parts) != 2 or parts[0] != package_name:
        return None
    return parts[1]
