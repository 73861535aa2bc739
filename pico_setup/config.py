# pico_setup/config.py
"""
Centralized constants for the Pico development environment setup.

This module defines the package lists for apt and pacman installation,
the repositories that are cloned, the examples and tools that are built,
the OpenOCD and VS Code parameters, and the state file configuration.
"""

from pathlib import Path

# Represents the version of the setup script logic.
SCRIPT_VERSION: str = "1.0.0"

# Packages hashed to detect changes in the installer itself.
PICO_SETUP_PACKAGE_ROOT: Path = Path(__file__).resolve().parent.parent
HASHED_PACKAGE_DIRS: tuple[str, ...] = ("pico_common", "pico_setup")

# --- Package Lists (apt: Raspberry Pi OS / Debian based hosts) ---
APT_GIT_PACKAGES: list[str] = ["git"]
APT_SDK_PACKAGES: list[str] = ["cmake", "gcc-arm-none-eabi", "gcc", "g++"]
APT_OPENOCD_PACKAGES: list[str] = [
    "gdb-multiarch",
    "automake",
    "autoconf",
    "build-essential",
    "texinfo",
    "libtool",
    "libftdi-dev",
    "libusb-1.0-0-dev",
]
# wget stays in the set so the host can fetch .deb files by hand as well.
APT_VSCODE_PACKAGES: list[str] = ["wget"]
APT_UART_PACKAGES: list[str] = ["minicom"]
# Needed on some Raspberry Pi OS images before VS Code starts.
APT_VSCODE_EXTRA_PACKAGES: list[str] = [
    "libx11-xcb1",
    "libxcb-dri3-0",
    "libdrm2",
    "libgbm1",
    "libegl-mesa0",
]

# --- Package Lists (pacman: MSYS2 MINGW64 shell) ---
PACMAN_GIT_PACKAGES: list[str] = ["git"]
PACMAN_SDK_PACKAGES: list[str] = [
    "base-devel",
    "mingw-w64-x86_64-arm-none-eabi-toolchain",
    "mingw-w64-x86_64-toolchain",
    "mingw-w64-x86_64-cmake",
    "mingw-w64-x86_64-ninja",
]
PACMAN_OPENOCD_PACKAGES: list[str] = ["base-devel", "mingw-w64-x86_64-toolchain"]

# libusb 1.0.24-2 makes openocd and picotool segfault under MINGW64.
LIBUSB_PACKAGE_NAME: str = "mingw-w64-x86_64-libusb"
LIBUSB_BROKEN_VERSION: str = "1.0.24-2"
LIBUSB_FALLBACK_URL: str = (
    "http://repo.msys2.org/mingw/x86_64/"
    "mingw-w64-x86_64-libusb-1.0.23-1-any.pkg.tar.xz"
)

# --- Repositories ---
SDK_REPOSITORIES: list[str] = ["sdk", "examples", "extras", "playground"]
SDK_REPOSITORY_PREFIX: str = "pico-"
ENV_VAR_PREFIX: str = "PICO_"
ENV_VAR_SUFFIX: str = "_PATH"
TOOL_REPOSITORIES: list[str] = ["picoprobe", "picotool"]

# --- Builds ---
NINJA_GENERATOR: str = "Ninja"
EXAMPLES_CMAKE_ARGS: list[str] = ["-DCMAKE_BUILD_TYPE=Debug"]
EXAMPLES_TO_BUILD: list[str] = ["blink", "hello_world"]
MINGW_PICOTOOL_CMAKE_ARGS: list[str] = [
    "-DLIBUSB_INCLUDE_DIR=/mingw64/include/libusb-1.0"
]

# --- OpenOCD ---
OPENOCD_DIR_NAME: str = "openocd"
OPENOCD_BRANCH: str = "rp2040"
OPENOCD_PICOPROBE_BRANCH: str = "picoprobe"
OPENOCD_CONFIGURE_ARGS: list[str] = ["--enable-ftdi"]
OPENOCD_LINUX_CONFIGURE_ARGS: list[str] = [
    "--enable-sysfsgpio",
    "--enable-bcm2835gpio",
]
OPENOCD_PICOPROBE_CONFIGURE_ARGS: list[str] = ["--enable-picoprobe"]

# --- VS Code ---
VSCODE_DEB_NAME: str = "vscode.deb"
VSCODE_DEB_URL_ARM64: str = "https://aka.ms/linux-arm64-deb"
VSCODE_DEB_URL_ARMHF: str = "https://aka.ms/linux-armhf-deb"
VSCODE_EXTENSIONS: list[str] = [
    "marus25.cortex-debug",
    "ms-vscode.cmake-tools",
    "ms-vscode.cpptools",
]

# --- UART ---
RASPI_CONFIG_DISABLE_SERIAL_CONSOLE: list[str] = [
    "raspi-config",
    "nonint",
    "do_serial",
    "2",
]

# --- Configuration file ---
CONFIG_FILE_DEFAULT: str = "pico_setup.yaml"
