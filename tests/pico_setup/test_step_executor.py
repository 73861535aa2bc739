from unittest.mock import MagicMock

import pytest

from pico_setup.state_manager import initialize_state_system, mark_step_completed
from pico_setup.step_executor import (
    SetupStep,
    always_rerun,
    execute_step,
    never_rerun,
    run_setup_steps,
)


@pytest.fixture(autouse=True)
def state(mocker, app_settings, mock_logger):
    mocker.patch("pico_setup.state_manager.get_current_script_hash", return_value="hash")
    initialize_state_system(app_settings, mock_logger)


class TestExecuteStep:
    def test_success_marks_completed(self, app_settings, mock_logger):
        action = MagicMock(return_value=None)

        assert execute_step("A", "step a", action, app_settings, mock_logger, never_rerun)

        action.assert_called_once_with(app_settings, mock_logger)
        assert "A" in app_settings.state_file_path.read_text(encoding="utf-8")

    def test_completed_step_is_not_rerun(self, app_settings, mock_logger):
        mark_step_completed("A", app_settings, mock_logger)
        action = MagicMock()

        assert execute_step("A", "step a", action, app_settings, mock_logger, never_rerun)
        action.assert_not_called()

    def test_completed_step_rerun_when_prompt_agrees(self, app_settings, mock_logger):
        mark_step_completed("A", app_settings, mock_logger)
        action = MagicMock()

        assert execute_step("A", "step a", action, app_settings, mock_logger, always_rerun)
        action.assert_called_once()

    def test_exception_is_failure(self, app_settings, mock_logger):
        action = MagicMock(side_effect=RuntimeError("boom"))

        assert not execute_step("A", "step a", action, app_settings, mock_logger, never_rerun)
        mock_logger.error.assert_any_call("   Error details: boom", exc_info=True)
        assert "A" not in app_settings.state_file_path.read_text(encoding="utf-8").splitlines()

    def test_always_run_ignores_completion(self, app_settings, mock_logger):
        mark_step_completed("A", app_settings, mock_logger)
        action = MagicMock()

        assert execute_step(
            "A", "step a", action, app_settings, mock_logger, never_rerun, always_run=True
        )
        action.assert_called_once()

    def test_false_return_is_failure(self, app_settings, mock_logger):
        action = MagicMock(return_value=False)
        assert not execute_step("A", "step a", action, app_settings, mock_logger, never_rerun)


class TestRunSetupSteps:
    def test_runs_in_order(self, app_settings, mock_logger):
        order = []
        steps = [
            SetupStep("A", "a", lambda s, cl: order.append("A")),
            SetupStep("B", "b", lambda s, cl: order.append("B")),
        ]

        result = run_setup_steps(steps, app_settings, mock_logger)

        assert order == ["A", "B"]
        assert result.success
        assert result.completed_steps == ["A", "B"]

    def test_halts_at_first_failure(self, app_settings, mock_logger):
        third = MagicMock()
        steps = [
            SetupStep("A", "a", MagicMock()),
            SetupStep("B", "b", MagicMock(side_effect=OSError("disk full"))),
            SetupStep("C", "c", third),
        ]

        result = run_setup_steps(steps, app_settings, mock_logger)

        assert not result.success
        assert result.failed_step == "B"
        assert result.completed_steps == ["A"]
        third.assert_not_called()

    def test_predicate_skips_without_recording(self, app_settings, mock_logger):
        action = MagicMock()
        steps = [SetupStep("OPENOCD", "openocd", action, predicate=lambda s, cl: False)]

        result = run_setup_steps(steps, app_settings, mock_logger)

        action.assert_not_called()
        assert result.skipped_steps == ["OPENOCD"]
        assert "OPENOCD" not in app_settings.state_file_path.read_text(encoding="utf-8").splitlines()

    def test_always_run_step_is_not_resumed(self, app_settings, mock_logger):
        mark_step_completed("DEPENDENCIES", app_settings, mock_logger)
        action = MagicMock()
        steps = [SetupStep("DEPENDENCIES", "deps", action, always_run=True)]

        result = run_setup_steps(steps, app_settings, mock_logger)

        action.assert_called_once_with(app_settings, mock_logger)
        assert result.completed_steps == ["DEPENDENCIES"]

    def test_resume_skips_completed_steps(self, app_settings, mock_logger):
        mark_step_completed("A", app_settings, mock_logger)
        first, second = MagicMock(), MagicMock()
        steps = [SetupStep("A", "a", first), SetupStep("B", "b", second)]

        run_setup_steps(steps, app_settings, mock_logger)

        first.assert_not_called()
        second.assert_called_once()
