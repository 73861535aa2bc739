# pico_setup/main_installer.py
# -*- coding: utf-8 -*-
"""
Main entry point and orchestrator for the Pico development environment setup.

Handles argument parsing, logging setup, platform detection, and runs the
declarative list of setup steps. Without arguments the full bootstrap runs:
dependencies, SDK repositories, example builds, picoprobe/picotool, then
the optional OpenOCD, VS Code and UART steps.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from pico_common.command_utils import log_pico_setup
from pico_common.core_utils import get_log_level_from_env, setup_logging
from pico_setup import config as static_config
from pico_setup.build import build_examples, build_tool_repositories
from pico_setup.cli_handler import cli_prompt_for_rerun, view_configuration
from pico_setup.config_loader import ConfigurationError, load_app_settings
from pico_setup.config_models import AppSettings
from pico_setup.dependencies import install_dependencies
from pico_setup.optional_components import (
    build_openocd,
    configure_uart,
    install_vscode,
    should_build_openocd,
    should_configure_uart,
    should_install_vscode,
)
from pico_setup.platform_detect import (
    HostPlatform,
    UnsupportedPlatformError,
    apply_platform_overrides,
    detect_platform,
    ensure_supported_platform,
)
from pico_setup.repositories import acquire_sdk_repositories, export_cmake_generator
from pico_setup.state_manager import (
    clear_state_file,
    initialize_state_system,
    view_completed_steps,
)
from pico_setup.step_executor import (
    SetupStep,
    always_rerun,
    never_rerun,
    run_setup_steps,
)

logger = logging.getLogger(__name__)

DEPENDENCIES_TAG = "DEPENDENCIES"
SDK_REPOSITORIES_TAG = "SDK_REPOSITORIES"
CMAKE_GENERATOR_TAG = "CMAKE_GENERATOR_EXPORT"
BUILD_EXAMPLES_TAG = "BUILD_EXAMPLES"
BUILD_TOOLS_TAG = "BUILD_TOOLS"
OPENOCD_TAG = "OPENOCD"
VSCODE_TAG = "VSCODE"
UART_TAG = "UART"

# CLI flag -> step tag. The CMake generator export always accompanies the
# repository step.
STEP_FLAGS: Dict[str, List[str]] = {
    "deps": [DEPENDENCIES_TAG],
    "sdk_repos": [SDK_REPOSITORIES_TAG, CMAKE_GENERATOR_TAG],
    "examples": [BUILD_EXAMPLES_TAG],
    "tools": [BUILD_TOOLS_TAG],
    "openocd": [OPENOCD_TAG],
    "vscode": [VSCODE_TAG],
    "uart": [UART_TAG],
}


def build_setup_steps(host_platform: HostPlatform) -> List[SetupStep]:
    """
    The full bootstrap, in execution order.

    Package installation and cloning are idempotent and re-run on every
    invocation, so a changed skip flag or a deleted checkout is picked up.
    The builds and optional components resume from the state file.
    """
    return [
        SetupStep(
            DEPENDENCIES_TAG,
            "Install OS package dependencies",
            lambda s, cl: install_dependencies(host_platform, s, cl),
            always_run=True,
        ),
        SetupStep(
            SDK_REPOSITORIES_TAG,
            "Clone pico SDK repositories",
            acquire_sdk_repositories,
            always_run=True,
        ),
        SetupStep(
            CMAKE_GENERATOR_TAG,
            "Export CMAKE_GENERATOR to the shell profile",
            export_cmake_generator,
            predicate=lambda s, cl: host_platform is HostPlatform.WINDOWS_MINGW64,
        ),
        SetupStep(BUILD_EXAMPLES_TAG, "Build pico examples", build_examples),
        SetupStep(BUILD_TOOLS_TAG, "Build picoprobe and picotool", build_tool_repositories),
        SetupStep(OPENOCD_TAG, "Build OpenOCD", build_openocd, predicate=should_build_openocd),
        SetupStep(VSCODE_TAG, "Install VS Code", install_vscode, predicate=should_install_vscode),
        SetupStep(UART_TAG, "Configure UART", configure_uart, predicate=should_configure_uart),
    ]


def select_steps(parsed_args: argparse.Namespace) -> Dict[str, str]:
    """
    Map the tags requested through individual step flags to the flag name.

    An empty mapping means no step flag was given and every step runs.
    """
    selected: Dict[str, str] = {}
    for flag_dest, tags in STEP_FLAGS.items():
        if getattr(parsed_args, flag_dest, False):
            for tag in tags:
                selected[tag] = f"--{flag_dest.replace('_', '-')}"
    return selected


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pico-setup",
        description="Raspberry Pi Pico development environment installer. "
        "Installs dependencies, clones the SDK repositories and builds the tools.",
        epilog="Example: SKIP_VSCODE=1 pico-setup --output-dir ~/pico",
    )
    parser.add_argument("--config", default=None,
                        help=f"YAML configuration file (default: {static_config.CONFIG_FILE_DEFAULT}).")
    parser.add_argument("--view-config", action="store_true", help="View current configuration settings and exit.")
    parser.add_argument("--view-state", action="store_true", help="View completed setup steps and exit.")
    parser.add_argument("--clear-state", action="store_true", help="Clear all recorded progress and exit.")
    parser.add_argument("--force", action="store_true", help="Re-run steps already marked as completed.")
    parser.add_argument("--interactive", action="store_true",
                        help="Ask before re-running steps already marked as completed.")

    config_group = parser.add_argument_group("Configuration Overrides")
    config_group.add_argument("-o", "--output-dir", type=Path, default=None,
                              help="Directory receiving the cloned repositories (default: ./pico).")
    config_group.add_argument("--shell-profile", type=Path, default=None,
                              help="Shell profile receiving PICO_*_PATH exports (default: ~/.bashrc).")
    config_group.add_argument("-j", "--jobs", type=int, default=None, help="Parallel jobs for make.")
    config_group.add_argument("--sdk-branch", default=None, help="Branch of the pico-* repositories.")
    config_group.add_argument("--state-file", type=Path, default=None, help="Progress state file.")
    config_group.add_argument("--skip-openocd", action="store_true", help="Do not install or build OpenOCD.")
    config_group.add_argument("--skip-vscode", action="store_true", help="Do not install VS Code.")
    config_group.add_argument("--skip-uart", action="store_true", help="Do not reconfigure the UART.")
    config_group.add_argument("--no-picoprobe", action="store_true",
                              help="Build OpenOCD from the rp2040 branch without picoprobe support.")

    log_group = parser.add_argument_group("Logging")
    log_group.add_argument("--log-level", default=None, help="Logging level (default: LOGLEVEL or INFO).")
    log_group.add_argument("--log-file", default=None, help="Also write the log to this file.")
    log_group.add_argument("-l", "--log-prefix", default=None, help="Prefix for log messages.")

    task_group = parser.add_argument_group("Individual Step Flags")
    task_group.add_argument("--deps", action="store_true", help="Install OS package dependencies only.")
    task_group.add_argument("--sdk-repos", action="store_true", help="Clone the pico SDK repositories only.")
    task_group.add_argument("--examples", action="store_true", help="Build the pico examples only.")
    task_group.add_argument("--tools", action="store_true", help="Build picoprobe and picotool only.")
    task_group.add_argument("--openocd", action="store_true", help="Build OpenOCD only.")
    task_group.add_argument("--vscode", action="store_true", help="Install VS Code only.")
    task_group.add_argument("--uart", action="store_true", help="Configure the UART only.")
    return parser


def _resolve_log_level(level_name: Optional[str]) -> int:
    if level_name:
        level = logging.getLevelName(level_name.strip().upper())
        if isinstance(level, int):
            return level
    return get_log_level_from_env()


def run_bootstrap(
    app_settings: AppSettings,
    host_platform: HostPlatform,
    parsed_args: argparse.Namespace,
) -> int:
    symbols = app_settings.symbols
    initialize_state_system(app_settings, current_logger=logger)

    steps = build_setup_steps(host_platform)
    selected = select_steps(parsed_args)
    if selected:
        steps = [step for step in steps if step.tag in selected]
        log_pico_setup(
            f"{symbols.get('rocket', '🚀')}====== Running Specified Individual Step(s) ======",
            "info",
            logger,
            app_settings,
        )
    else:
        log_pico_setup(
            f"{symbols.get('rocket', '🚀')}====== Starting Full Pico Setup ======",
            "info",
            logger,
            app_settings,
        )

    if parsed_args.force:
        rerun_prompt = always_rerun
    elif parsed_args.interactive:
        rerun_prompt = cli_prompt_for_rerun
    else:
        rerun_prompt = never_rerun

    result = run_setup_steps(
        steps,
        app_settings,
        current_logger=logger,
        prompt_user_for_rerun=rerun_prompt,
        cli_flags=selected,
    )
    if not result.success:
        log_pico_setup(
            f"{symbols.get('critical', '🔥')} Setup failed at step {result.failed_step}. "
            "Re-run to resume from the failed step.",
            "critical",
            logger,
            app_settings,
        )
        return 1

    log_pico_setup(
        f"{symbols.get('sparkles', '✨')} All requested operations completed successfully. "
        f"Open a new shell or source {app_settings.shell_profile} to pick up the PICO_*_PATH variables.",
        "success",
        logger,
        app_settings,
    )
    return 0


def main(args: Optional[List[str]] = None) -> int:
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    # Console only until the settings are known; reconfigured below.
    setup_logging(log_level=_resolve_log_level(parsed_args.log_level))
    try:
        app_settings = load_app_settings(
            cli_args=parsed_args,
            config_file_path=parsed_args.config,
            current_logger=logger,
        )
    except ConfigurationError as e:
        log_pico_setup(str(e), "critical", logger)
        return 2

    setup_logging(
        log_level=_resolve_log_level(parsed_args.log_level),
        log_file=parsed_args.log_file,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )
    symbols = app_settings.symbols
    log_pico_setup(
        f"{symbols.get('sparkles', '✨')} Starting Pico Setup (Script Version: {static_config.SCRIPT_VERSION})...",
        "info",
        logger,
        app_settings,
    )

    host_platform = detect_platform(app_settings, current_logger=logger)
    try:
        ensure_supported_platform(host_platform)
    except UnsupportedPlatformError as e:
        log_pico_setup(f"{symbols.get('critical', '🔥')} {e}", "critical", logger, app_settings)
        return 1
    app_settings = apply_platform_overrides(app_settings, host_platform, current_logger=logger)

    if parsed_args.view_config:
        view_configuration(app_settings, host_platform, current_logger=logger)
        return 0
    if parsed_args.view_state:
        completed_steps_list = view_completed_steps(app_settings, current_logger=logger)
        if completed_steps_list:
            log_pico_setup(f"{symbols.get('info', 'ℹ️')} Completed steps:", "info", logger, app_settings)
            for s_idx, s_item in enumerate(completed_steps_list):
                print(f"  {s_idx + 1}. {s_item}")
        else:
            log_pico_setup(f"{symbols.get('info', 'ℹ️')} No steps marked as completed.", "info", logger, app_settings)
        return 0
    if parsed_args.clear_state:
        if cli_prompt_for_rerun(
            f"Are you sure you want to clear state from {app_settings.state_file_path}?",
            app_settings,
            logger,
        ):
            clear_state_file(app_settings, current_logger=logger)
        else:
            log_pico_setup(f"{symbols.get('info', 'ℹ️')} State clearing cancelled.", "info", logger, app_settings)
        return 0

    return run_bootstrap(app_settings, host_platform, parsed_args)


def main_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
