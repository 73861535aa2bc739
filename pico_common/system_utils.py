# pico_common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the Pico setup script.

This module includes host introspection helpers (CPU information, machine
architecture) and the project hash used to invalidate recorded progress.
"""

import hashlib
import logging
import platform
from pathlib import Path
from typing import List, Optional, Sequence

from pico_common.command_utils import log_pico_setup
from pico_setup.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

CACHED_SCRIPT_HASH: Optional[str] = None


def read_cpuinfo(
    cpuinfo_path: Path,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Return the contents of the CPU information file, or an empty string.

    Hosts without /proc (MSYS2, macOS) simply have no CPU information to
    inspect, which is not an error.
    """
    logger_to_use = current_logger if current_logger else module_logger
    try:
        return Path(cpuinfo_path).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        log_pico_setup(
            f"CPU information file {cpuinfo_path} not present.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return ""
    except OSError as e:
        symbols = app_settings.symbols if app_settings else SYMBOLS_DEFAULT
        log_pico_setup(
            f"{symbols.get('warning', '!')} Could not read {cpuinfo_path}: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return ""


def get_machine_architecture() -> str:
    """Equivalent of `uname -m`."""
    return platform.machine()


def calculate_project_hash(
    project_root_dir: Path,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    include_dirs: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """
    Calculate a SHA256 hash of all .py files within the project directory.

    The hash includes both file content and relative file paths (normalized to
    POSIX style) to detect additions, deletions, renames, and content changes.

    Args:
        project_root_dir: The root directory of the project (Path object).
        app_settings: The application settings object for accessing symbols.
        current_logger: Optional logger instance.
        include_dirs: Subdirectories of the root to hash. Defaults to the
            whole root. Paths stay relative to the root either way.

    Returns:
        The hex digest of the SHA256 hash as a string, or None if an error
        occurs.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    hasher = hashlib.sha256()

    project_root = Path(project_root_dir)
    if not project_root.is_dir():
        log_pico_setup(
            f"{symbols.get('error', '❌')} Project root directory '{project_root}' not found for hashing.",
            "error",
            logger_to_use,
            app_settings,
        )
        return None

    search_roots = (
        [project_root / name for name in include_dirs]
        if include_dirs
        else [project_root]
    )
    py_files_found: List[Path] = [
        path_object
        for search_root in search_roots
        if search_root.is_dir()
        for path_object in search_root.rglob("*.py")
        if path_object.is_file()
    ]

    if not py_files_found:
        log_pico_setup(
            f"{symbols.get('warning', '!')} No .py files found under '{project_root}' for hashing. Hash will be of an empty set.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return hasher.hexdigest()

    sorted_files = sorted(
        py_files_found,
        key=lambda p: p.relative_to(project_root).as_posix(),
    )

    for file_path in sorted_files:
        try:
            hasher.update(
                file_path.relative_to(project_root).as_posix().encode("utf-8")
            )
            hasher.update(file_path.read_bytes())
        except OSError as e_file:
            log_pico_setup(
                f"{symbols.get('error', '❌')} Error reading file {file_path} for hashing: {e_file}",
                "error",
                logger_to_use,
                app_settings,
            )
            return None

    final_hash = hasher.hexdigest()
    log_pico_setup(
        f"{symbols.get('debug', '🐛')} Calculated SCRIPT_HASH: {final_hash} from {len(sorted_files)} .py files in {project_root}.",
        "debug",
        logger_to_use,
        app_settings,
    )
    return final_hash


def get_current_script_hash(
    project_root_dir: Path,
    app_settings: AppSettings,
    logger_instance: Optional[logging.Logger] = None,
    include_dirs: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """
    Get the current script hash, calculating it if not already cached.
    """
    global CACHED_SCRIPT_HASH
    if CACHED_SCRIPT_HASH is None:
        try:
            CACHED_SCRIPT_HASH = calculate_project_hash(
                project_root_dir,
                app_settings,
                current_logger=logger_instance,
                include_dirs=include_dirs,
            )
        except Exception as e:
            logger = logger_instance or logging.getLogger(__name__)
            warning_symbol = app_settings.symbols.get("warning", "⚠️")
            logger.warning(
                f"{warning_symbol} Could not calculate project hash: {e}",
                exc_info=False,
            )
    return CACHED_SCRIPT_HASH
