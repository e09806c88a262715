# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Interpreter and host checks that run before any packaging step.
"""

import platform
import sys
from typing import NamedTuple

MINIMUM_PYTHON_MAJOR = 3
MINIMUM_PYTHON_MINOR = 11


class SystemInfo(NamedTuple):
    """Snapshot of the host, logged at startup so CI logs show where a build ran."""

    python_version: str
    platform: str
    sys_platform: str
    architecture: str
    hostname: str


def check_minimum_python() -> None:
    """
    Raises:
        RuntimeError: If Python is older than 3.11.
    """
    major, minor = sys.version_info[:2]
    if (major, minor) < (MINIMUM_PYTHON_MAJOR, MINIMUM_PYTHON_MINOR):
        raise RuntimeError(
            f"distpack requires Python >= {MINIMUM_PYTHON_MAJOR}.{MINIMUM_PYTHON_MINOR}, "
            f"but you're running {major}.{minor}. Please upgrade."
        )


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        sys_platform=sys.platform,
        architecture=platform.machine(),
        hostname=platform.node(),
    )
