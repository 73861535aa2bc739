# pico_setup/build.py
# -*- coding: utf-8 -*-
"""
Build orchestration for the pico-examples and the picoprobe/picotool tools.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from pico_common.command_utils import (
    log_pico_setup,
    run_command,
    run_elevated_command,
)
from pico_common.file_utils import ensure_directory
from pico_setup import config as static_config
from pico_setup.config_models import AppSettings
from pico_setup.repositories import (
    build_environment,
    clone_repository,
    tool_repository,
)

module_logger = logging.getLogger(__name__)


def select_build_command(app_settings: AppSettings) -> List[str]:
    """`ninja` for the Ninja generator, parallel `make` otherwise."""
    if app_settings.uses_ninja:
        return ["ninja"]
    return ["make", f"-j{app_settings.jobs}"]


def cmake_configure(
    source_dir: Path,
    app_settings: AppSettings,
    extra_args: Optional[List[str]] = None,
    current_logger: Optional[logging.Logger] = None,
    env: Optional[Dict[str, str]] = None,
) -> Path:
    """Run `cmake ../` in `<source_dir>/build` and return the build directory."""
    logger_to_use = current_logger if current_logger else module_logger
    build_dir = ensure_directory(Path(source_dir) / "build", app_settings, logger_to_use)
    run_command(
        ["cmake", "../", *(extra_args or [])],
        app_settings,
        current_logger=logger_to_use,
        cwd=str(build_dir),
        env=env,
    )
    return build_dir


def build_examples(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    env = build_environment(app_settings)
    examples_dir = app_settings.output_dir / "pico-examples"

    build_dir = cmake_configure(
        examples_dir,
        app_settings,
        static_config.EXAMPLES_CMAKE_ARGS,
        logger_to_use,
        env,
    )
    build_command = select_build_command(app_settings)

    if app_settings.uses_ninja:
        # Ninja is fast enough to build every example.
        log_pico_setup(
            f"{symbols.get('gear', '⚙️')} Building examples...",
            "info",
            logger_to_use,
            app_settings,
        )
        run_command(
            build_command,
            app_settings,
            current_logger=logger_to_use,
            cwd=str(build_dir),
            env=env,
        )
        return

    for example in static_config.EXAMPLES_TO_BUILD:
        log_pico_setup(
            f"{symbols.get('gear', '⚙️')} Building {example}",
            "info",
            logger_to_use,
            app_settings,
        )
        run_command(
            build_command,
            app_settings,
            current_logger=logger_to_use,
            cwd=str(build_dir / example),
            env=env,
        )


def tool_cmake_args(repo_name: str, app_settings: AppSettings) -> List[str]:
    if repo_name == "picotool" and (app_settings.msystem or "").strip() == "MINGW64":
        return list(static_config.MINGW_PICOTOOL_CMAKE_ARGS)
    return []


def install_picotool(
    build_dir: Path,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    install_dir = app_settings.picotool_install_dir
    log_pico_setup(
        f"{symbols.get('package', '📦')} Installing picotool to {install_dir / 'picotool'}",
        "info",
        logger_to_use,
        app_settings,
    )
    run_elevated_command(
        ["mkdir", "-p", str(install_dir)],
        app_settings,
        current_logger=logger_to_use,
    )
    run_elevated_command(
        ["cp", "picotool", f"{install_dir}/"],
        app_settings,
        current_logger=logger_to_use,
        cwd=str(build_dir),
    )
    return install_dir / "picotool"


def build_tool_repository(
    repo_name: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Clone (when missing), configure and build one tool repository."""
    logger_to_use = current_logger if current_logger else module_logger
    env = build_environment(app_settings)
    spec = tool_repository(repo_name, app_settings)
    clone_repository(spec, app_settings, logger_to_use)

    build_dir = cmake_configure(
        spec.destination,
        app_settings,
        tool_cmake_args(repo_name, app_settings),
        logger_to_use,
        env,
    )
    run_command(
        select_build_command(app_settings),
        app_settings,
        current_logger=logger_to_use,
        cwd=str(build_dir),
        env=env,
    )
    if repo_name == "picotool":
        install_picotool(build_dir, app_settings, logger_to_use)


def build_tool_repositories(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    for repo_name in static_config.TOOL_REPOSITORIES:
        build_tool_repository(repo_name, app_settings, current_logger)
