# pico_setup/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the Pico development
environment installer, including defaults, type annotations, and
descriptions. Skip flags and the shell variant are read from the same
environment variables the legacy shell installer honoured
(SKIP_OPENOCD, SKIP_VSCODE, SKIP_UART, MSYSTEM, CMAKE_GENERATOR); every
other field may be set with the PICO_SETUP_ prefix.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
OUTPUT_DIR_NAME_DEFAULT: str = "pico"
JOBS_DEFAULT: int = 4
SDK_BRANCH_DEFAULT: str = "master"
GITHUB_PREFIX_DEFAULT: str = "https://github.com/raspberrypi/"
GITHUB_SUFFIX_DEFAULT: str = ".git"
CPUINFO_PATH_DEFAULT: str = "/proc/cpuinfo"
PICOTOOL_INSTALL_DIR_DEFAULT: str = "/usr/local/bin"
STATE_FILE_NAME_DEFAULT: str = ".pico_setup_state"
LOG_PREFIX_DEFAULT: str = "[PICO-SETUP]"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_prefix="PICO_SETUP_",
        extra="ignore",
        env_ignore_empty=True,
        populate_by_name=True,
    )

    skip_openocd: bool = Field(
        default=False,
        validation_alias=AliasChoices("skip_openocd", "SKIP_OPENOCD"),
        description="Skip installing OpenOCD dependencies and building OpenOCD.",
    )
    skip_vscode: bool = Field(
        default=False,
        validation_alias=AliasChoices("skip_vscode", "SKIP_VSCODE"),
        description="Skip installing Visual Studio Code and its extensions.",
    )
    skip_uart: bool = Field(
        default=False,
        validation_alias=AliasChoices("skip_uart", "SKIP_UART"),
        description="Skip disabling the Linux serial console on the UART.",
    )
    msystem: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("msystem", "MSYSTEM"),
        description="MSYS2 shell variant (MINGW64, MINGW32, MSYS) if any.",
    )
    cmake_generator: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("cmake_generator", "CMAKE_GENERATOR"),
        description="CMake generator; 'Ninja' switches the build tool to ninja.",
    )

    output_dir: Path = Field(
        default_factory=lambda: Path.cwd() / OUTPUT_DIR_NAME_DEFAULT,
        description="Directory that receives every cloned repository.",
    )
    shell_profile: Path = Field(
        default_factory=lambda: Path.home() / ".bashrc",
        description="Shell profile that receives PICO_*_PATH exports.",
    )
    jobs: int = Field(default=JOBS_DEFAULT, ge=1, description="Parallel job count for make.")
    sdk_branch: str = Field(default=SDK_BRANCH_DEFAULT, description="Branch cloned for the pico-* repositories.")
    github_prefix: str = Field(default=GITHUB_PREFIX_DEFAULT, description="Clone URL prefix.")
    github_suffix: str = Field(default=GITHUB_SUFFIX_DEFAULT, description="Clone URL suffix.")
    include_picoprobe: bool = Field(
        default=True,
        description="Build OpenOCD from the picoprobe branch with picoprobe support.",
    )
    use_sudo: bool = Field(
        default=True,
        description="Prefix privileged commands with sudo when not running as root.",
    )
    cpuinfo_path: Path = Field(
        default=Path(CPUINFO_PATH_DEFAULT),
        description="CPU information file inspected for Raspberry Pi detection.",
    )
    picotool_install_dir: Path = Field(
        default=Path(PICOTOOL_INSTALL_DIR_DEFAULT),
        description="Directory the picotool binary is copied into.",
    )
    state_file: Optional[Path] = Field(
        default=None,
        description="Progress state file. Defaults to a file inside output_dir.",
    )
    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT, description="Prefix for log messages.")

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))

    @property
    def state_file_path(self) -> Path:
        return self.state_file or (self.output_dir / STATE_FILE_NAME_DEFAULT)

    @property
    def uses_ninja(self) -> bool:
        return (self.cmake_generator or "").strip() == "Ninja"
