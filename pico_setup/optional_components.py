# pico_setup/optional_components.py
# -*- coding: utf-8 -*-
"""
Optional subsystems: OpenOCD from source, Visual Studio Code with the
Pico extensions, and the Raspberry Pi UART reconfiguration.

Each subsystem has a `should_*` predicate, consulted by the step runner,
and an action that performs the work.
"""

import logging
from pathlib import Path
from typing import List, Optional

from pico_common.command_utils import (
    log_pico_setup,
    run_command,
    run_elevated_command,
)
from pico_common.network_utils import download_file
from pico_common.system_utils import get_machine_architecture
from pico_setup import config as static_config
from pico_setup.config_models import AppSettings
from pico_setup.repositories import RepositorySpec, clone_repository, clone_url

module_logger = logging.getLogger(__name__)


# --- OpenOCD ---


def openocd_dir(app_settings: AppSettings) -> Path:
    return app_settings.output_dir / static_config.OPENOCD_DIR_NAME


def should_build_openocd(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """An existing openocd checkout wins over the skip flag."""
    logger_to_use = current_logger if current_logger else module_logger
    if openocd_dir(app_settings).is_dir():
        log_pico_setup(
            "openocd already exists so skipping",
            "info",
            logger_to_use,
            app_settings,
        )
        return False
    if app_settings.skip_openocd:
        log_pico_setup("Won't build OpenOCD", "info", logger_to_use, app_settings)
        return False
    return True


def openocd_branch(app_settings: AppSettings) -> str:
    if app_settings.include_picoprobe:
        return static_config.OPENOCD_PICOPROBE_BRANCH
    return static_config.OPENOCD_BRANCH


def openocd_configure_args(app_settings: AppSettings) -> List[str]:
    args = list(static_config.OPENOCD_CONFIGURE_ARGS)
    if (app_settings.msystem or "").strip() != "MINGW64":
        args += static_config.OPENOCD_LINUX_CONFIGURE_ARGS
    if app_settings.include_picoprobe:
        args += static_config.OPENOCD_PICOPROBE_CONFIGURE_ARGS
    return args


def build_openocd(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    log_pico_setup(
        f"{symbols.get('gear', '⚙️')} Building OpenOCD",
        "info",
        logger_to_use,
        app_settings,
    )
    source_dir = openocd_dir(app_settings)
    spec = RepositorySpec(
        name=static_config.OPENOCD_DIR_NAME,
        url=clone_url(static_config.OPENOCD_DIR_NAME, app_settings),
        destination=source_dir,
        branch=openocd_branch(app_settings),
    )
    clone_repository(spec, app_settings, logger_to_use, depth=1)

    cwd = str(source_dir)
    run_command(["./bootstrap"], app_settings, current_logger=logger_to_use, cwd=cwd)
    run_command(
        ["./configure", *openocd_configure_args(app_settings)],
        app_settings,
        current_logger=logger_to_use,
        cwd=cwd,
    )
    run_command(
        ["make", f"-j{app_settings.jobs}"],
        app_settings,
        current_logger=logger_to_use,
        cwd=cwd,
    )
    run_elevated_command(
        ["make", "install"],
        app_settings,
        current_logger=logger_to_use,
        cwd=cwd,
    )


# --- Visual Studio Code ---


def vscode_deb_path(app_settings: AppSettings) -> Path:
    return app_settings.output_dir / static_config.VSCODE_DEB_NAME


def should_install_vscode(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    logger_to_use = current_logger if current_logger else module_logger
    if app_settings.skip_vscode:
        log_pico_setup("Won't include VSCODE", "info", logger_to_use, app_settings)
        return False
    if vscode_deb_path(app_settings).is_file():
        log_pico_setup(
            f"Skipping vscode as {static_config.VSCODE_DEB_NAME} exists",
            "info",
            logger_to_use,
            app_settings,
        )
        return False
    return True


def vscode_deb_url(machine: Optional[str] = None) -> str:
    machine = machine if machine is not None else get_machine_architecture()
    if "aarch64" in machine:
        return static_config.VSCODE_DEB_URL_ARM64
    return static_config.VSCODE_DEB_URL_ARMHF


def install_vscode(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    log_pico_setup(
        f"{symbols.get('package', '📦')} Installing VSCODE",
        "info",
        logger_to_use,
        app_settings,
    )
    deb_path = download_file(
        vscode_deb_url(),
        vscode_deb_path(app_settings),
        app_settings,
        logger_to_use,
    )
    run_elevated_command(
        ["apt", "install", "-y", f"./{deb_path.name}"],
        app_settings,
        current_logger=logger_to_use,
        cwd=str(deb_path.parent),
    )
    run_elevated_command(
        ["apt", "install", "-y", *static_config.APT_VSCODE_EXTRA_PACKAGES],
        app_settings,
        current_logger=logger_to_use,
    )
    for extension in static_config.VSCODE_EXTENSIONS:
        run_command(
            ["code", "--install-extension", extension],
            app_settings,
            current_logger=logger_to_use,
        )


# --- UART ---


def should_configure_uart(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    logger_to_use = current_logger if current_logger else module_logger
    if app_settings.skip_uart:
        log_pico_setup("Skipping uart configuration", "info", logger_to_use, app_settings)
        return False
    return True


def configure_uart(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    run_elevated_command(
        ["apt", "install", "-y", *static_config.APT_UART_PACKAGES],
        app_settings,
        current_logger=logger_to_use,
    )
    log_pico_setup(
        "Disabling Linux serial console (UART) so we can use it for pico",
        "info",
        logger_to_use,
        app_settings,
    )
    run_elevated_command(
        static_config.RASPI_CONFIG_DISABLE_SERIAL_CONSOLE,
        app_settings,
        current_logger=logger_to_use,
    )
    log_pico_setup(
        f"{symbols.get('warning', '!')} You must run sudo reboot to finish UART setup",
        "warning",
        logger_to_use,
        app_settings,
    )
