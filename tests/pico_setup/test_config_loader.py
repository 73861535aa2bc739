import argparse
from pathlib import Path

import pytest

from pico_setup.config_loader import (
    ConfigurationError,
    _deep_update,
    load_app_settings,
    load_yaml_config,
)


def _cli(**overrides):
    defaults = dict(
        output_dir=None,
        shell_profile=None,
        jobs=None,
        sdk_branch=None,
        state_file=None,
        log_prefix=None,
        skip_openocd=False,
        skip_vscode=False,
        skip_uart=False,
        no_picoprobe=False,
        force=False,
    )
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


def test_deep_update_ignores_none():
    source = {"a": 1, "nested": {"x": 1, "y": 2}}
    result = _deep_update(source, {"a": None, "nested": {"y": 3}, "b": 2})
    assert result == {"a": 1, "nested": {"x": 1, "y": 3}, "b": 2}


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = load_app_settings(config_file_path=str(tmp_path / "none.yaml"))

    assert settings.output_dir == tmp_path / "pico"
    assert settings.jobs == 4
    assert settings.sdk_branch == "master"
    assert settings.skip_openocd is False
    assert settings.include_picoprobe is True


@pytest.mark.parametrize("value", ["1", "true", "yes"])
def test_legacy_skip_variables(tmp_path, monkeypatch, value):
    monkeypatch.setenv("SKIP_OPENOCD", value)
    settings = load_app_settings(config_file_path=str(tmp_path / "none.yaml"))
    assert settings.skip_openocd is True


def test_empty_skip_variable_is_unset(tmp_path, monkeypatch):
    monkeypatch.setenv("SKIP_VSCODE", "")
    settings = load_app_settings(config_file_path=str(tmp_path / "none.yaml"))
    assert settings.skip_vscode is False


def test_prefixed_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("PICO_SETUP_JOBS", "8")
    settings = load_app_settings(config_file_path=str(tmp_path / "none.yaml"))
    assert settings.jobs == 8


def test_precedence_env_yaml_cli(tmp_path, monkeypatch):
    monkeypatch.setenv("PICO_SETUP_JOBS", "8")
    monkeypatch.setenv("PICO_SETUP_SDK_BRANCH", "develop")
    config_file = tmp_path / "pico_setup.yaml"
    config_file.write_text("jobs: 2\nsdk_branch: yaml-branch\nskip_uart: true\n", encoding="utf-8")

    settings = load_app_settings(cli_args=_cli(jobs=6), config_file_path=str(config_file))

    assert settings.jobs == 6
    assert settings.sdk_branch == "yaml-branch"
    assert settings.skip_uart is True


def test_cli_flags(tmp_path):
    settings = load_app_settings(
        cli_args=_cli(output_dir=tmp_path / "out", skip_vscode=True, no_picoprobe=True),
        config_file_path=str(tmp_path / "none.yaml"),
    )
    assert settings.output_dir == tmp_path / "out"
    assert settings.skip_vscode is True
    assert settings.include_picoprobe is False


def test_unset_cli_flag_keeps_yaml_value(tmp_path):
    config_file = tmp_path / "c.yaml"
    config_file.write_text("skip_openocd: true\n", encoding="utf-8")
    settings = load_app_settings(cli_args=_cli(), config_file_path=str(config_file))
    assert settings.skip_openocd is True


def test_invalid_value_raises(tmp_path):
    with pytest.raises(ConfigurationError):
        load_app_settings(cli_args=_cli(jobs=0), config_file_path=str(tmp_path / "none.yaml"))


def test_invalid_yaml_is_ignored(tmp_path, mock_logger):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("jobs: [unclosed\n", encoding="utf-8")
    assert load_yaml_config(config_file, mock_logger) == {}
    mock_logger.warning.assert_called_once()


def test_non_mapping_yaml_is_ignored(tmp_path, mock_logger):
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- a\n- b\n", encoding="utf-8")
    assert load_yaml_config(config_file, mock_logger) == {}


def test_missing_yaml(mock_logger):
    assert load_yaml_config(Path("/nonexistent/pico_setup.yaml"), mock_logger) == {}
