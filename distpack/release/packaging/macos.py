# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
macOS packaging: zip the signed and notarized .app for distribution.

The .app is produced (and notarized) by the build step. All we do is archive
it to a deterministic path, replacing whatever a previous run left there.
"""

import logging

from distpack.logging.logger import get_logger
from distpack.release.dist_info import DistributionInfo
from distpack.release.interfaces import Archiver, Packager
from distpack.release.models import ArtifactKind, InstallerArtifact
from distpack.utils.filesystem import remove_path

_logger: logging.Logger = get_logger(__name__)


class MacOSPackager(Packager):
    platform_name = "darwin"
    checksums_artifacts = False

    def __init__(self, info: DistributionInfo, archiver: Archiver) -> None:
        self._info = info
        self._archiver = archiver

    def package(self) -> list[InstallerArtifact]:
        dest = self._info.macos.zip_path
        if remove_path(dest):
            _logger.info("Removed previous archive", extra={"path": str(dest)})

        dest.parent.mkdir(parents=True, exist_ok=True)

        _logger.info(
            "Packaging for macOS",
            extra={"source": str(self._info.app_bundle_path), "dest": str(dest)},
        )
        self._archiver.archive(self._info.app_bundle_path, dest)

        return [InstallerArtifact.confirm(dest, ArtifactKind.ZIP)]
