# pico_common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions used while provisioning the host.
"""

import logging
from pathlib import Path
from typing import Optional

from pico_setup.config_models import SYMBOLS_DEFAULT, AppSettings

from .command_utils import log_pico_setup

module_logger = logging.getLogger(__name__)


def ensure_directory(
    directory: Path,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """Create a directory (and parents) if it does not exist yet."""
    logger_to_use = current_logger if current_logger else module_logger
    directory = Path(directory)
    if not directory.is_dir():
        symbols = app_settings.symbols if app_settings else SYMBOLS_DEFAULT
        log_pico_setup(
            f"{symbols.get('info', 'ℹ️')} Creating {directory}",
            "info",
            logger_to_use,
            app_settings,
        )
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def append_line_if_missing(
    file_path: Path,
    line: str,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Append a line to a text file unless an identical line is already there.

    The file and its parent directory are created when missing.

    Parameters:
        file_path (Path): File to append to, e.g. the user's shell profile.
        line (str): The line to add, without a trailing newline.
        app_settings (Optional[AppSettings]): Settings providing logging symbols.
        current_logger (Optional[logging.Logger]): Logger instance to use.

    Returns:
        bool: True if the line was appended, False if it was already present.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols if app_settings else SYMBOLS_DEFAULT
    file_path = Path(file_path)

    existing = ""
    if file_path.is_file():
        existing = file_path.read_text(encoding="utf-8")
        if line in existing.splitlines():
            log_pico_setup(
                f"{symbols.get('info', 'ℹ️')} '{line}' already present in {file_path}",
                "info",
                logger_to_use,
                app_settings,
            )
            return False

    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "a", encoding="utf-8") as f:
        if existing and not existing.endswith("\n"):
            f.write("\n")
        f.write(f"{line}\n")
    log_pico_setup(
        f"{symbols.get('info', 'ℹ️')} Appended '{line}' to {file_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    return True
