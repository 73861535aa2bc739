#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging setup for the installer.

The console gets short lines with a level symbol and the optional prefix;
a log file, when requested, gets the detailed format with module, function
and line number so a failed unattended run can be diagnosed afterwards.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from pico_setup.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

CONSOLE_LOG_FORMAT = "{log_prefix}%(asctime)s - %(levelname)s - %(symbol)s %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Log level -> key in AppSettings.symbols.
LEVEL_SYMBOL_KEYS: Dict[int, str] = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}


class SymbolFormatter(logging.Formatter):
    """Exposes the configured symbol for the record's level as %(symbol)s."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        symbols: Optional[Dict[str, str]] = None,
    ):
        super().__init__(fmt, datefmt)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record: logging.LogRecord) -> str:
        symbol_key = LEVEL_SYMBOL_KEYS.get(record.levelno)
        record.symbol = self.symbols.get(symbol_key, "") if symbol_key else ""
        return super().format(record)


def get_log_level_from_env(default: int = logging.INFO) -> int:
    """Resolve the LOGLEVEL environment variable to a logging level."""
    level_str = os.environ.get("LOGLEVEL", "").strip().upper()
    if not level_str:
        return default
    level = logging.getLevelName(level_str)
    if not isinstance(level, int):
        print(
            f"Warning: Invalid LOGLEVEL string '{level_str}'. Defaulting to {logging.getLevelName(default)}.",
            file=sys.stderr,
        )
        return default
    return level


def _file_handler(log_file: str) -> Optional[logging.Handler]:
    try:
        log_file_path = Path(log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
    except OSError as e:
        print(
            f"Warning: Could not create file handler for log file {log_file}: {e}",
            file=sys.stderr,
        )
        return None
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return file_handler


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Configures the root logger for the installer.

    May be called again once the settings are known (prefix, symbols, log
    file); handlers from the previous call are closed and replaced.

    Parameters:
    log_level: int
        The logging level to configure. Defaults to logging.INFO.
    log_file: Optional[str]
        Path of a log file in the detailed format. Parent directories are
        created. A file that cannot be opened produces a warning on stderr
        and logging continues on the console only.
    log_prefix: Optional[str]
        An optional string to prefix console lines with.
    symbols: Optional[Dict[str, str]]
        Level symbols used by SymbolFormatter.
    """
    actual_prefix = (
        (log_prefix.strip() + " ")
        if log_prefix and log_prefix.strip()
        else ""
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        SymbolFormatter(
            fmt=CONSOLE_LOG_FORMAT.format(log_prefix=actual_prefix),
            datefmt=LOG_DATE_FORMAT,
            symbols=symbols,
        )
    )
    handlers: List[logging.Handler] = [console_handler]
    if log_file:
        file_handler = _file_handler(log_file)
        if file_handler is not None:
            handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}. Log file: {log_file or 'none'}"
    )
