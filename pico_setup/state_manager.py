# pico_setup/state_manager.py
# -*- coding: utf-8 -*-
"""
Manages the state file for tracking installation progress.

The state file is plain text: comment lines starting with '#' hold the
SCRIPT_HASH and version of the installer that wrote it, every other line
is the tag of a completed step. A different SCRIPT_HASH invalidates the
recorded progress.
"""

import datetime
import logging
import re
from pathlib import Path
from typing import List, Optional

from pico_common.command_utils import log_pico_setup
from pico_common.system_utils import get_current_script_hash
from pico_setup import config as static_config
from pico_setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)

SCRIPT_HASH_PATTERN = re.compile(r"^# SCRIPT_HASH:\s*(\S+)", re.MULTILINE)


def _current_hash(
    app_settings: AppSettings, logger_to_use: logging.Logger
) -> Optional[str]:
    return get_current_script_hash(
        project_root_dir=static_config.PICO_SETUP_PACKAGE_ROOT,
        app_settings=app_settings,
        logger_instance=logger_to_use,
        include_dirs=static_config.HASHED_PACKAGE_DIRS,
    )


def _read_state_lines(state_file: Path) -> List[str]:
    if not state_file.is_file():
        return []
    return state_file.read_text(encoding="utf-8").splitlines()


def initialize_state_system(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Initialize the state management system.
    Ensures state directory and file exist. Checks script hash.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    state_file = app_settings.state_file_path

    current_hash = _current_hash(app_settings, logger_to_use)
    if not current_hash:
        log_pico_setup(
            f"{symbols.get('critical', '🔥')} Could not calculate current SCRIPT_HASH. "
            "Recorded progress cannot be validated.",
            "critical",
            logger_to_use,
            app_settings,
        )

    if not state_file.is_file():
        log_pico_setup(
            f"{symbols.get('info', 'ℹ️')} State file {state_file} does not exist. Initializing.",
            "info",
            logger_to_use,
            app_settings,
        )
        clear_state_file(
            app_settings,
            script_hash_to_write=current_hash,
            current_logger=logger_to_use,
        )
        return

    match = SCRIPT_HASH_PATTERN.search(state_file.read_text(encoding="utf-8"))
    stored_hash = match.group(1) if match else None
    if not current_hash or stored_hash != current_hash:
        reason = (
            "Could not calculate current hash"
            if not current_hash
            else f"SCRIPT_HASH mismatch. Stored: {stored_hash}, Current: {current_hash}"
        )
        log_pico_setup(
            f"{symbols.get('warning', '!')} {reason}. Clearing recorded progress.",
            "warning",
            logger_to_use,
            app_settings,
        )
        clear_state_file(
            app_settings,
            script_hash_to_write=current_hash,
            current_logger=logger_to_use,
        )


def clear_state_file(
    app_settings: AppSettings,
    script_hash_to_write: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    state_file = app_settings.state_file_path
    log_pico_setup(
        f"{symbols.get('info', 'ℹ️')} Clearing state file: {state_file}",
        "info",
        logger_to_use,
        app_settings,
    )

    effective_hash = script_hash_to_write
    if effective_hash is None:
        effective_hash = (
            _current_hash(app_settings, logger_to_use) or "UNKNOWN_HASH_AT_CLEAR"
        )

    content_to_write = f"# SCRIPT_HASH: {effective_hash}\n"
    content_to_write += (
        f"# Human-readable Script Version: {static_config.SCRIPT_VERSION}\n"
    )
    content_to_write += f"# State cleared/re-initialized on {datetime.datetime.now().isoformat()}\n"

    state_file.parent.mkdir(parents=True, exist_ok=True)
    state_file.write_text(content_to_write, encoding="utf-8")
    log_pico_setup(
        f"{symbols.get('success', '✅')} State file re-initialized with SCRIPT_HASH: {effective_hash}.",
        "success",
        logger_to_use,
        app_settings,
    )


def mark_step_completed(
    step_tag: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    state_file = app_settings.state_file_path

    if step_tag in view_completed_steps(app_settings, logger_to_use):
        log_pico_setup(
            f"{symbols.get('info', 'ℹ️')} Step '{step_tag}' was already marked as completed.",
            "info",
            logger_to_use,
            app_settings,
        )
        return

    log_pico_setup(
        f"{symbols.get('info', 'ℹ️')} Marking step '{step_tag}' as completed.",
        "info",
        logger_to_use,
        app_settings,
    )
    state_file.parent.mkdir(parents=True, exist_ok=True)
    with open(state_file, "a", encoding="utf-8") as f:
        f.write(f"{step_tag}\n")


def is_step_completed(
    step_tag: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    return step_tag in view_completed_steps(app_settings, current_logger)


def view_completed_steps(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> List[str]:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    try:
        lines = _read_state_lines(app_settings.state_file_path)
    except OSError as e:
        log_pico_setup(
            f"{symbols.get('error', '❌')} Could not read state file {app_settings.state_file_path}: {e}",
            "error",
            logger_to_use,
            app_settings,
        )
        return []
    return [
        line.strip()
        for line in lines
        if line.strip() and not line.startswith("#")
    ]
