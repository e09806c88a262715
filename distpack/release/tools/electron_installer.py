# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
.deb and .rpm packages via electron-installer-debian / electron-installer-redhat.

Both CLIs take the bundle (--src), an output directory (--dest) and a
distro-specific architecture name (--arch). Their output file names embed
the version and distro revision, so the single result is found by extension.
Leftovers of the same format from an earlier run are removed first so the
lookup stays unambiguous.
"""

import glob
import logging
from abc import abstractmethod
from pathlib import Path

from distpack.logging.logger import get_logger
from distpack.release.dist_info import DistributionInfo
from distpack.release.interfaces import CommandRunner, InstallerBuilder
from distpack.release.locator import resolve_one
from distpack.release.models import ArtifactKind
from distpack.release.request import TargetArch
from distpack.utils.filesystem import ensure_directory

_logger: logging.Logger = get_logger(__name__)

DEBIAN_ARCHES: dict[TargetArch, str] = {
    TargetArch.X64: "amd64",
    TargetArch.ARM64: "arm64",
    TargetArch.ARM: "armhf",
}

REDHAT_ARCHES: dict[TargetArch, str] = {
    TargetArch.X64: "x86_64",
    TargetArch.ARM64: "aarch64",
    TargetArch.ARM: "armv7hl",
}


class _ElectronInstaller(InstallerBuilder):
    tool: str
    extension: str
    arch_names: dict[TargetArch, str]

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    @abstractmethod
    def _executable(self, info: DistributionInfo) -> Path:
        ...

    def build(self, info: DistributionInfo) -> Path:
        dest = ensure_directory(info.linux.installers_dir)
        pattern = str(dest / f"*{self.extension}")

        for stale in glob.glob(pattern):
            _logger.info("Removing previous installer", extra={"path": stale})
            Path(stale).unlink()

        arch = self.arch_names[info.arch]
        _logger.info(f"Packaging {self.name} installer", extra={"arch": arch, "dest": str(dest)})

        self._runner.run(
            self.tool,
            [
                str(self._executable(info)),
                "--src",
                str(info.dist_path),
                "--dest",
                str(dest),
                "--arch",
                arch,
            ],
            cwd=info.project_root,
        )

        return resolve_one(pattern)


class DebianInstaller(_ElectronInstaller):
    name = "debian"
    kind = ArtifactKind.DEB
    tool = "electron-installer-debian"
    extension = ".deb"
    arch_names = DEBIAN_ARCHES

    def _executable(self, info: DistributionInfo) -> Path:
        return info.linux.debian_installer


class RedhatInstaller(_ElectronInstaller):
    name = "redhat"
    kind = ArtifactKind.RPM
    tool = "electron-installer-redhat"
    extension = ".rpm"
    arch_names = REDHAT_ARCHES

    def _executable(self, info: DistributionInfo) -> Path:
        return info.linux.redhat_installer
