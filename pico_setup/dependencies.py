# pico_setup/dependencies.py
# -*- coding: utf-8 -*-
"""
Dependency resolution and installation.

Builds the OS package list for the detected platform and skip flags and
hands it to the platform's package manager in a single transaction.
"""

import logging
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from pico_common.command_utils import (
    command_exists,
    log_pico_setup,
    query_pacman_package,
    run_command,
    run_elevated_command,
)
from pico_common.network_utils import download_file
from pico_setup import config as static_config
from pico_setup.config_models import AppSettings
from pico_setup.platform_detect import HostPlatform, uses_apt

module_logger = logging.getLogger(__name__)


def _extend_unique(target: List[str], packages: Iterable[str]) -> None:
    for package in packages:
        if package not in target:
            target.append(package)


def resolve_dependencies(
    host_platform: HostPlatform,
    app_settings: AppSettings,
    git_present: Optional[bool] = None,
    current_logger: Optional[logging.Logger] = None,
) -> List[str]:
    """
    Compute the package list for a platform.

    Args:
        host_platform: The detected host platform.
        app_settings: Settings carrying the skip flags.
        git_present: Whether git is already installed. Only consulted on
            MINGW64, where an existing git (e.g. Git for Windows) is kept.
            Looked up on PATH when not given.
        current_logger: Optional logger instance.

    Returns:
        Ordered package names without duplicates. Empty for platforms whose
        dependencies cannot be installed automatically.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    deps: List[str] = []

    if uses_apt(host_platform):
        _extend_unique(deps, static_config.APT_GIT_PACKAGES)
        _extend_unique(deps, static_config.APT_SDK_PACKAGES)
        if app_settings.skip_openocd:
            log_pico_setup(
                f"{symbols.get('info', 'ℹ️')} Skipping OpenOCD (debug support)",
                "info",
                logger_to_use,
                app_settings,
            )
        else:
            _extend_unique(deps, static_config.APT_OPENOCD_PACKAGES)
        if app_settings.skip_vscode:
            log_pico_setup(
                f"{symbols.get('info', 'ℹ️')} Skipping VSCODE",
                "info",
                logger_to_use,
                app_settings,
            )
        else:
            _extend_unique(deps, static_config.APT_VSCODE_PACKAGES)
        return deps

    if host_platform is HostPlatform.WINDOWS_MINGW64:
        if git_present is None:
            git_present = command_exists("git")
        if not git_present:
            _extend_unique(deps, static_config.PACMAN_GIT_PACKAGES)
        _extend_unique(deps, static_config.PACMAN_SDK_PACKAGES)
        if app_settings.skip_openocd:
            log_pico_setup(
                f"{symbols.get('info', 'ℹ️')} Skipping OpenOCD (debug support)",
                "info",
                logger_to_use,
                app_settings,
            )
        else:
            _extend_unique(deps, static_config.PACMAN_OPENOCD_PACKAGES)
        return deps

    return deps


def install_dependencies(
    host_platform: HostPlatform,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Invoke the platform's package manager once with the full package list."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    deps = resolve_dependencies(
        host_platform, app_settings, current_logger=logger_to_use
    )

    if uses_apt(host_platform):
        log_pico_setup(
            f"{symbols.get('package', '📦')} Installing Dependencies: {' '.join(deps)}",
            "info",
            logger_to_use,
            app_settings,
        )
        run_elevated_command(
            ["apt", "update"], app_settings, current_logger=logger_to_use
        )
        run_elevated_command(
            ["apt", "install", "-y", *deps],
            app_settings,
            current_logger=logger_to_use,
        )
    elif host_platform is HostPlatform.WINDOWS_MINGW64:
        log_pico_setup(
            f"{symbols.get('package', '📦')} Installing Dependencies: {' '.join(deps)}",
            "info",
            logger_to_use,
            app_settings,
        )
        run_command(
            ["pacman", "-S", "--needed", *deps],
            app_settings,
            current_logger=logger_to_use,
        )
        downgrade_broken_libusb(app_settings, logger_to_use)
    else:
        log_pico_setup(
            f"{symbols.get('warning', '!')} Unknown install system, dependencies need to be installed manually!",
            "warning",
            logger_to_use,
            app_settings,
        )


def downgrade_broken_libusb(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Replace the MSYS2 libusb release that makes openocd and picotool segfault.

    Returns True when a downgrade was performed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    installed_version = query_pacman_package(
        static_config.LIBUSB_PACKAGE_NAME, app_settings, logger_to_use
    )
    if installed_version != static_config.LIBUSB_BROKEN_VERSION:
        return False

    log_pico_setup(
        f"{symbols.get('warning', '!')} Downgrade libusb to fix segfaults with openocd and picotool",
        "warning",
        logger_to_use,
        app_settings,
    )
    package_file_name = static_config.LIBUSB_FALLBACK_URL.rsplit("/", 1)[-1]
    with tempfile.TemporaryDirectory() as temp_download:
        package_path = download_file(
            static_config.LIBUSB_FALLBACK_URL,
            Path(temp_download) / package_file_name,
            app_settings,
            logger_to_use,
        )
        run_command(
            ["pacman", "-U", str(package_path)],
            app_settings,
            current_logger=logger_to_use,
        )
    return True
