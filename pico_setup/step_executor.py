# pico_setup/step_executor.py
# -*- coding: utf-8 -*-
"""
Provides functionality to execute setup steps.

A setup step is a tag, a description, an action and an optional predicate.
`execute_step` runs a single action with completion bookkeeping;
`run_setup_steps` walks a declarative list of steps in order and stops at
the first failure.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from pico_common.command_utils import log_pico_setup
from pico_setup.config_models import AppSettings
from pico_setup.state_manager import is_step_completed, mark_step_completed

module_logger = logging.getLogger(__name__)

StepFunction = Callable[[AppSettings, Optional[logging.Logger]], Any]
StepPredicate = Callable[[AppSettings, Optional[logging.Logger]], bool]
RerunPrompt = Callable[[str, AppSettings, Optional[logging.Logger]], bool]


@dataclass(frozen=True)
class SetupStep:
    tag: str
    description: str
    action: StepFunction
    # Evaluated right before the step runs; False skips it without recording.
    predicate: Optional[StepPredicate] = None
    # Runs even when already marked as completed.
    always_run: bool = False


@dataclass
class StepRunResult:
    completed_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.failed_step is None


def never_rerun(
    prompt: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    return False


def always_rerun(
    prompt: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    return True


def execute_step(
    step_tag: str,
    step_description: str,
    step_function: StepFunction,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger],
    prompt_user_for_rerun: RerunPrompt,
    cli_flag: Optional[str] = None,
    always_run: bool = False,
) -> bool:
    """
    Execute a single setup step.

    Checks if the step is already completed. If so, it asks the rerun
    callback whether to run it again. If the step needs to be run, it
    executes the provided step function and marks the step as completed on
    success.

    Args:
        step_tag: A unique string identifier for the step.
        step_description: A human-readable description of the step.
        step_function: The function to call to execute the step.
                       Expected signature: (app_settings, current_logger) -> Any
                       Should return False to indicate failure. Any other return value (including None)
                       is considered success. An exception is always treated as a failure.
        app_settings: The application settings object.
        current_logger_instance: The logger instance to use.
        prompt_user_for_rerun: Callback deciding whether a completed step runs again.
                               Expected signature: (prompt, app_settings, logger) -> bool
        cli_flag: The command line flag that selected this step, if any.
        always_run: Run the step even if it is marked as completed, without
                    asking. Used for idempotent steps.

    Returns:
        True if the step was successfully executed or if it was skipped.
        False if the step execution failed.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = app_settings.symbols

    if not always_run and is_step_completed(
        step_tag, app_settings=app_settings, current_logger=logger_to_use
    ):
        log_pico_setup(
            f"{symbols.get('info', 'ℹ️')} Step '{step_description}' ({step_tag}) is already marked as completed.",
            "info",
            logger_to_use,
            app_settings,
        )
        prompt = f"Step '{step_description}' ({step_tag}) is completed. Re-run anyway?"
        if not prompt_user_for_rerun(prompt, app_settings, logger_to_use):
            log_pico_setup(
                f"{symbols.get('info', 'ℹ️')} Skipping re-run of step: {step_tag}",
                "info",
                logger_to_use,
                app_settings,
            )
            return True
        log_pico_setup(
            f"{symbols.get('info', 'ℹ️')} Re-running step: {step_tag}",
            "info",
            logger_to_use,
            app_settings,
        )

    log_pico_setup(
        f"--- {symbols.get('step', '➡️')} Executing: {step_description} ({step_tag}) ---",
        "info",
        logger_to_use,
        app_settings,
    )
    if cli_flag:
        log_pico_setup(
            f"   {symbols.get('info', 'ℹ️')} Triggered by: CLI flag: {cli_flag}",
            "info",
            logger_to_use,
            app_settings,
        )
    try:
        step_result = step_function(app_settings, logger_to_use)
    except Exception as e:
        log_pico_setup(
            f"{symbols.get('error', '❌')} FAILED: {step_description} ({step_tag})",
            "error",
            logger_to_use,
            app_settings,
        )
        log_pico_setup(
            f"   Error details: {str(e)}",
            "error",
            logger_to_use,
            app_settings,
            exc_info=True,
        )
        return False

    if step_result is False:
        log_pico_setup(
            f"{symbols.get('error', '❌')} Step function returned False: {step_description} ({step_tag})",
            "error",
            logger_to_use,
            app_settings,
        )
        return False

    mark_step_completed(
        step_tag,
        app_settings=app_settings,
        current_logger=logger_to_use,
    )
    log_pico_setup(
        f"--- {symbols.get('success', '✅')} Successfully completed: {step_description} ({step_tag}) ---",
        "success",
        logger_to_use,
        app_settings,
    )
    return True


def run_setup_steps(
    steps: Sequence[SetupStep],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    prompt_user_for_rerun: RerunPrompt = never_rerun,
    cli_flags: Optional[dict] = None,
) -> StepRunResult:
    """
    Run steps in order, halting at the first failure.

    Steps whose predicate returns False are skipped and not recorded, so a
    later run re-evaluates them. Nothing done by earlier steps is rolled back
    when a step fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    result = StepRunResult()

    for step in steps:
        if step.predicate is not None and not step.predicate(
            app_settings, logger_to_use
        ):
            log_pico_setup(
                f"{symbols.get('info', 'ℹ️')} Skipping '{step.description}' ({step.tag}): not applicable.",
                "info",
                logger_to_use,
                app_settings,
            )
            result.skipped_steps.append(step.tag)
            continue

        succeeded = execute_step(
            step.tag,
            step.description,
            step.action,
            app_settings,
            logger_to_use,
            prompt_user_for_rerun,
            cli_flag=(cli_flags or {}).get(step.tag),
            always_run=step.always_run,
        )
        if not succeeded:
            result.failed_step = step.tag
            log_pico_setup(
                f"{symbols.get('critical', '🔥')} Halting: step '{step.description}' ({step.tag}) failed.",
                "critical",
                logger_to_use,
                app_settings,
            )
            break
        result.completed_steps.append(step.tag)

    return result
