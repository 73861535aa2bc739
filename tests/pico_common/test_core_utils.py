import logging

import pytest

from pico_common.core_utils import (
    FILE_LOG_FORMAT,
    SymbolFormatter,
    get_log_level_from_env,
    setup_logging,
)


@pytest.fixture(autouse=True)
def detached_root_logger():
    """Give setup_logging a bare root logger and put pytest's handlers back afterwards."""
    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)
    yield root_logger
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


def _record(level):
    return logging.LogRecord("pico", level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    "level, symbol",
    [
        (logging.DEBUG, "D"),
        (logging.INFO, "I"),
        (logging.WARNING, "W"),
        (logging.ERROR, "E"),
        (logging.CRITICAL, "C"),
        (25, ""),
    ],
)
def test_symbol_formatter_uses_level_symbol(level, symbol):
    formatter = SymbolFormatter(
        fmt="%(symbol)s|%(message)s",
        symbols={"debug": "D", "info": "I", "warning": "W", "error": "E", "critical": "C"},
    )
    assert formatter.format(_record(level)) == f"{symbol}|msg"


def test_log_level_from_env(monkeypatch):
    monkeypatch.setenv("LOGLEVEL", "debug")
    assert get_log_level_from_env() == logging.DEBUG


def test_invalid_log_level_from_env_falls_back(monkeypatch, capsys):
    monkeypatch.setenv("LOGLEVEL", "chatty")
    assert get_log_level_from_env(logging.WARNING) == logging.WARNING
    assert "Invalid LOGLEVEL" in capsys.readouterr().err


def test_console_prefix_and_detailed_file_format(tmp_path, detached_root_logger):
    log_file = tmp_path / "logs" / "setup.log"
    setup_logging(log_level=logging.DEBUG, log_file=str(log_file), log_prefix="[PICO]")

    console_handler, file_handler = detached_root_logger.handlers
    assert detached_root_logger.level == logging.DEBUG
    assert console_handler.formatter._fmt.startswith("[PICO] ")
    assert isinstance(console_handler.formatter, SymbolFormatter)
    assert file_handler.formatter._fmt == FILE_LOG_FORMAT

    logging.getLogger("pico_setup.test").info("written to file")
    file_handler.flush()
    content = log_file.read_text(encoding="utf-8")
    assert "written to file" in content
    assert "pico_setup.test" in content
    assert "test_core_utils.test_console_prefix_and_detailed_file_format" in content


def test_reconfiguring_closes_previous_file_handler(tmp_path, detached_root_logger):
    log_file = tmp_path / "setup.log"
    setup_logging(log_file=str(log_file))
    first_file_handler = detached_root_logger.handlers[1]

    setup_logging(log_file=str(log_file), log_prefix="[PICO]")

    assert first_file_handler not in detached_root_logger.handlers
    assert first_file_handler.stream is None
    assert len(detached_root_logger.handlers) == 2


def test_unwritable_log_file_keeps_console(tmp_path, detached_root_logger, capsys):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")

    setup_logging(log_file=str(blocker / "setup.log"))

    assert len(detached_root_logger.handlers) == 1
    assert "Could not create file handler" in capsys.readouterr().err
