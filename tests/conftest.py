# tests/conftest.py
import logging
import os
from unittest.mock import MagicMock

import pytest

import pico_common.system_utils as system_utils
from pico_setup.config_models import AppSettings

ENV_VARS_READ_BY_SETTINGS = (
    "SKIP_OPENOCD",
    "SKIP_VSCODE",
    "SKIP_UART",
    "MSYSTEM",
    "CMAKE_GENERATOR",
    "LOGLEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's shell (MSYSTEM, SKIP_*, PICO_SETUP_*) out of the tests."""
    for name in ENV_VARS_READ_BY_SETTINGS:
        monkeypatch.delenv(name, raising=False)

    for name in list(os.environ):
        if name.startswith("PICO_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(system_utils, "CACHED_SCRIPT_HASH", None)


@pytest.fixture
def app_settings(tmp_path):
    """Settings rooted in a temporary directory."""
    return AppSettings(
        output_dir=tmp_path / "pico",
        shell_profile=tmp_path / ".bashrc",
        cpuinfo_path=tmp_path / "cpuinfo",
        log_prefix="test_prefix",
    )


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)
