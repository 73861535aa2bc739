# pico_setup/repositories.py
# -*- coding: utf-8 -*-
"""
Repository acquisition.

Clones the pico-* SDK repositories (with submodules) into the output
directory and publishes their locations as PICO_<NAME>_PATH variables in
the user's shell profile and in the current process.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from pico_common.command_utils import log_pico_setup, run_command
from pico_common.file_utils import append_line_if_missing, ensure_directory
from pico_setup import config as static_config
from pico_setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositorySpec:
    name: str
    url: str
    destination: Path
    branch: Optional[str] = None
    submodules: bool = False
    env_var: Optional[str] = None


def env_var_name(repo_name: str) -> str:
    """`sdk` -> `PICO_SDK_PATH`."""
    return f"{static_config.ENV_VAR_PREFIX}{repo_name.upper()}{static_config.ENV_VAR_SUFFIX}"


def clone_url(repo_name: str, app_settings: AppSettings) -> str:
    return f"{app_settings.github_prefix}{repo_name}{app_settings.github_suffix}"


def sdk_repositories(app_settings: AppSettings) -> List[RepositorySpec]:
    specs = []
    for repo in static_config.SDK_REPOSITORIES:
        full_name = f"{static_config.SDK_REPOSITORY_PREFIX}{repo}"
        specs.append(
            RepositorySpec(
                name=full_name,
                url=clone_url(full_name, app_settings),
                destination=app_settings.output_dir / full_name,
                branch=app_settings.sdk_branch,
                submodules=True,
                env_var=env_var_name(repo),
            )
        )
    return specs


def tool_repository(repo_name: str, app_settings: AppSettings) -> RepositorySpec:
    return RepositorySpec(
        name=repo_name,
        url=clone_url(repo_name, app_settings),
        destination=app_settings.output_dir / repo_name,
    )


def clone_repository(
    spec: RepositorySpec,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    depth: Optional[int] = None,
) -> bool:
    """
    Clone a repository unless its destination already exists.

    Returns True if a clone was performed, False if the destination was
    already there.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    if spec.destination.is_dir():
        log_pico_setup(
            f"{symbols.get('info', 'ℹ️')} {spec.destination} already exists so skipping",
            "info",
            logger_to_use,
            app_settings,
        )
        return False

    ensure_directory(spec.destination.parent, app_settings, logger_to_use)
    log_pico_setup(
        f"{symbols.get('gear', '⚙️')} Cloning {spec.url}",
        "info",
        logger_to_use,
        app_settings,
    )
    clone_cmd = ["git", "clone"]
    if spec.branch:
        clone_cmd += ["-b", spec.branch]
    if depth:
        clone_cmd.append(f"--depth={depth}")
    clone_cmd += [spec.url, str(spec.destination)]
    run_command(clone_cmd, app_settings, current_logger=logger_to_use)

    if spec.submodules:
        run_command(
            ["git", "submodule", "update", "--init"],
            app_settings,
            current_logger=logger_to_use,
            cwd=str(spec.destination),
        )
    return True


def export_env_var(
    name: str,
    value: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    quote: bool = False,
) -> None:
    """Add `export NAME=value` to the shell profile and the process environment."""
    logger_to_use = current_logger if current_logger else module_logger
    rendered = f'"{value}"' if quote else value
    log_pico_setup(
        f"Adding {name} to {app_settings.shell_profile}",
        "info",
        logger_to_use,
        app_settings,
    )
    append_line_if_missing(
        app_settings.shell_profile,
        f"export {name}={rendered}",
        app_settings,
        logger_to_use,
    )
    os.environ[name] = value


def acquire_sdk_repositories(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> List[str]:
    """
    Clone every SDK repository that is missing and export its path.

    Returns the names of the repositories that were cloned.
    """
    logger_to_use = current_logger if current_logger else module_logger
    ensure_directory(app_settings.output_dir, app_settings, logger_to_use)

    cloned = []
    for spec in sdk_repositories(app_settings):
        if clone_repository(spec, app_settings, logger_to_use):
            cloned.append(spec.name)
            if spec.env_var:
                export_env_var(
                    spec.env_var,
                    str(spec.destination),
                    app_settings,
                    logger_to_use,
                    quote=True,
                )
    return cloned


def export_cmake_generator(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Persist CMAKE_GENERATOR; CMake on Windows defaults to "NMake Makefiles"."""
    if not app_settings.cmake_generator:
        return
    export_env_var(
        "CMAKE_GENERATOR",
        app_settings.cmake_generator,
        app_settings,
        current_logger,
        quote=True,
    )


def build_environment(
    app_settings: AppSettings,
    base_env: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """
    Environment for build commands.

    Carries PICO_<NAME>_PATH for every SDK repository present on disk and
    the configured CMAKE_GENERATOR, whether or not this run cloned them.
    """
    env = dict(os.environ if base_env is None else base_env)
    for spec in sdk_repositories(app_settings):
        if spec.env_var and spec.destination.is_dir():
            env[spec.env_var] = str(spec.destination)
    if app_settings.cmake_generator:
        env["CMAKE_GENERATOR"] = app_settings.cmake_generator
    return env
