# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
What the environment asks for: target architecture, host platform, signing
secrets and CI context.

Read once at the start of a run. Everything downstream takes the resulting
PackagingRequest instead of touching os.environ.
"""

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from distpack.release.errors import UnsupportedPlatformError

TARGET_ARCH_ENV = "TARGET_ARCH"
AUTOMATED_BUILD_ENV = "GITHUB_ACTIONS"
CERT_PASSWORD_ENV = "WINDOWS_CERT_PASSWORD"
UPDATES_URL_ENV = "DISTPACK_UPDATES_URL"


class HostPlatform(str, Enum):
    """Platform families we can package for. Values match sys.platform."""

    DARWIN = "darwin"
    WIN32 = "win32"
    LINUX = "linux"

    @classmethod
    def parse(cls, platform_name: str) -> "HostPlatform":
        """
        Map a sys.platform string onto a supported family.

        Raises:
            UnsupportedPlatformError: for anything else (freebsd, cygwin, ...).
        """
        for member in cls:
            if platform_name == member.value:
                return member
        raise UnsupportedPlatformError(platform_name)


class TargetArch(str, Enum):
    X64 = "x64"
    ARM64 = "arm64"
    ARM = "arm"

    @classmethod
    def from_selector(cls, selector: Optional[str]) -> "TargetArch":
        """`arm64` and `arm` select themselves; anything else, including unset, is x64."""
        if selector == cls.ARM64.value:
            return cls.ARM64
        if selector == cls.ARM.value:
            return cls.ARM
        return cls.X64


@dataclass(frozen=True)
class PackagingRequest:
    target_arch: TargetArch
    host_platform: HostPlatform
    is_automated: bool = False
    certificate_password: Optional[str] = None
    updates_url: Optional[str] = None


def _truthy(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in {"1", "true", "yes"}


def build_request(
    environ: Optional[Mapping[str, str]] = None,
    platform_name: Optional[str] = None,
) -> PackagingRequest:
    """
    Build a PackagingRequest from environment variables and the host platform.

    Args:
        environ: Environment mapping; os.environ when omitted.
        platform_name: sys.platform-style name; the running interpreter's when omitted.

    Raises:
        UnsupportedPlatformError: If the host platform is not darwin, win32 or linux.
    """
    env = os.environ if environ is None else environ
    host = HostPlatform.parse(platform_name if platform_name is not None else sys.platform)

    return PackagingRequest(
        target_arch=TargetArch.from_selector(env.get(TARGET_ARCH_ENV)),
        host_platform=host,
        is_automated=_truthy(env.get(AUTOMATED_BUILD_ENV)),
        certificate_password=env.get(CERT_PASSWORD_ENV) or None,
        updates_url=env.get(UPDATES_URL_ENV) or None,
    )
