# pico_common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions.
"""
import logging
from pathlib import Path
from typing import Optional, Union

import requests

from pico_setup.config_models import AppSettings

from .command_utils import log_pico_setup

module_logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT_SECONDS = 120
DOWNLOAD_CHUNK_SIZE = 8192


def download_file(
    url: str,
    download_to_path: Union[str, Path],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Download a file from a URL to a local path.

    Redirects are followed (the VS Code aka.ms links redirect to the real
    package). Any HTTP or connection error is logged and re-raised so the
    surrounding step fails.

    Args:
        url: The URL to fetch.
        download_to_path: Destination file path.
        app_settings: Settings providing logging symbols.
        current_logger: Optional logger instance.

    Returns:
        The path of the written file.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    download_path = Path(download_to_path)
    download_path.parent.mkdir(parents=True, exist_ok=True)

    log_pico_setup(
        f"{symbols.get('package', '📦')} Downloading {url} to {download_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        with requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT_SECONDS) as response:
            response.raise_for_status()
            with open(download_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.exceptions.RequestException as req_err:
        log_pico_setup(
            f"{symbols.get('error', '❌')} Download of {url} failed: {req_err}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise

    log_pico_setup(
        f"{symbols.get('success', '✅')} Downloaded {url}",
        "success",
        logger_to_use,
        app_settings,
    )
    return download_path
