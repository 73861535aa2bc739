# pico_setup/platform_detect.py
# -*- coding: utf-8 -*-
"""
Host platform detection.

Classifies the host as a Raspberry Pi, an MSYS2 MINGW64 shell, an
unsupported MSYS2 shell, or a generic (untested) Linux machine, and derives
the settings each platform forces.
"""

import logging
from enum import Enum
from typing import Optional

from pico_common.command_utils import log_pico_setup
from pico_common.system_utils import read_cpuinfo
from pico_setup import config as static_config
from pico_setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)

RASPBERRY_PI_MARKER = "Raspberry"
MSYSTEM_MINGW64 = "MINGW64"
UNSUPPORTED_MSYSTEMS = ("MSYS", "MINGW32")


class HostPlatform(str, Enum):
    RASPBERRY_PI = "raspberry-pi"
    WINDOWS_MINGW64 = "windows-mingw64"
    WINDOWS_MSYS_UNSUPPORTED = "windows-msys-unsupported"
    OTHER_LINUX = "other-linux"


class UnsupportedPlatformError(RuntimeError):
    """The host shell cannot run the installer."""


def detect_platform(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> HostPlatform:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    cpuinfo = read_cpuinfo(app_settings.cpuinfo_path, app_settings, logger_to_use)
    msystem = (app_settings.msystem or "").strip()

    if RASPBERRY_PI_MARKER in cpuinfo:
        log_pico_setup(
            f"{symbols.get('info', 'ℹ️')} Running on a Raspberry Pi",
            "info",
            logger_to_use,
            app_settings,
        )
        return HostPlatform.RASPBERRY_PI
    if msystem == MSYSTEM_MINGW64:
        log_pico_setup(
            f"{symbols.get('info', 'ℹ️')} Running in minGW64",
            "info",
            logger_to_use,
            app_settings,
        )
        return HostPlatform.WINDOWS_MINGW64
    if msystem in UNSUPPORTED_MSYSTEMS:
        log_pico_setup(
            f"{symbols.get('error', '❌')} Running in an {msystem} shell, which is not supported.",
            "error",
            logger_to_use,
            app_settings,
        )
        return HostPlatform.WINDOWS_MSYS_UNSUPPORTED

    log_pico_setup(
        f"{symbols.get('warning', '!')} Not running on a Raspberry Pi. Use at your own risk!",
        "warning",
        logger_to_use,
        app_settings,
    )
    return HostPlatform.OTHER_LINUX


def ensure_supported_platform(host_platform: HostPlatform) -> None:
    if host_platform is HostPlatform.WINDOWS_MSYS_UNSUPPORTED:
        raise UnsupportedPlatformError("Run setup in a MINGW64 shell, please!")


def apply_platform_overrides(
    app_settings: AppSettings,
    host_platform: HostPlatform,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Return settings adjusted for the detected platform.

    MINGW64 has no VS Code .deb, no Raspberry Pi UART and no sudo, and CMake
    would default to "NMake Makefiles" there, so Ninja is forced.
    """
    if host_platform is not HostPlatform.WINDOWS_MINGW64:
        return app_settings

    logger_to_use = current_logger if current_logger else module_logger
    log_pico_setup(
        "MINGW64: skipping VS Code and UART setup, disabling sudo, using the Ninja generator.",
        "info",
        logger_to_use,
        app_settings,
    )
    return app_settings.model_copy(
        update={
            "skip_vscode": True,
            "skip_uart": True,
            "use_sudo": False,
            "cmake_generator": static_config.NINJA_GENERATOR,
        }
    )


def uses_apt(host_platform: HostPlatform) -> bool:
    return host_platform in (HostPlatform.RASPBERRY_PI, HostPlatform.OTHER_LINUX)
