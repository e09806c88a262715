# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
AppImage via electron-builder.

electron-builder is pointed at the already packaged bundle (--prepackaged)
and told the target architecture with one of its arch switches. It names the
AppImage itself, so the result is found with the configured glob.
"""

import logging
from pathlib import Path

from distpack.logging.logger import get_logger
from distpack.release.dist_info import DistributionInfo
from distpack.release.interfaces import CommandRunner, InstallerBuilder
from distpack.release.locator import resolve_one
from distpack.release.models import ArtifactKind
from distpack.release.request import TargetArch

_logger: logging.Logger = get_logger(__name__)

_ARCH_FLAGS: dict[TargetArch, str] = {
    TargetArch.ARM64: "--arm64",
    TargetArch.ARM: "--armv7l",
}
_DEFAULT_ARCH_FLAG = "--x64"


def architecture_flag(target_arch: object) -> str:
    """
    electron-builder's switch for an architecture selector.

    Accepts a TargetArch or the raw selector string. arm64 → --arm64,
    arm → --armv7l, anything else (including None) → --x64.
    """
    for arch, flag in _ARCH_FLAGS.items():
        if target_arch is arch or target_arch == arch.value:
            return flag
    return _DEFAULT_ARCH_FLAG


class ElectronBuilderAppImage(InstallerBuilder):
    name = "appimage"
    kind = ArtifactKind.APPIMAGE

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def build(self, info: DistributionInfo) -> Path:
        tools = info.linux
        _logger.info(
            "Packaging AppImage",
            extra={"target_arch": info.arch.value, "config": str(tools.builder_config)},
        )

        self._runner.run(
            "electron-builder",
            [
                str(tools.electron_builder),
                "build",
                "--prepackaged",
                str(info.dist_path),
                architecture_flag(info.arch),
                "--config",
                str(tools.builder_config),
            ],
            cwd=info.project_root,
        )

        return resolve_one(tools.appimage_pattern)
