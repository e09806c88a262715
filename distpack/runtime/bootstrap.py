# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for distpack.

Runs once per command, after the config is loaded and before any packaging:
  1. Validate the interpreter
  2. Point the package logger at the configured level and log file
  3. Log where the build is running
"""

import logging
from pathlib import Path
from typing import Optional

from distpack import __version__
from distpack.config.schema import GlobalConfig
from distpack.logging.logger import configure_logging, get_logger
from distpack.runtime.environment import check_minimum_python, get_system_info


def bootstrap(
    config: GlobalConfig,
    project_root: Path,
    log_level_override: Optional[str] = None,
) -> logging.Logger:
    """
    Put the process into a known state.

    Args:
        config: The validated global section of distpack.yaml.
        project_root: Directory a relative log_file is resolved against.
        log_level_override: --log-level from the command line, if given.

    Returns:
        The runtime logger.
    """
    check_minimum_python()

    log_file = None
    if config.log_file is not None:
        log_file = Path(config.log_file)
        if not log_file.is_absolute():
            log_file = project_root / log_file

    configure_logging(log_level_override or config.log_level, log_file)
    logger = get_logger("distpack.runtime")

    system_info = get_system_info()
    logger.info(
        "distpack bootstrap complete",
        extra={
            "distpack_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.sys_platform,
            "architecture": system_info.architecture,
        },
    )
    return logger
