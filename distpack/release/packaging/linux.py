# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Linux packaging: AppImage, then .deb, then .rpm.

The three builders have no data dependency on each other, but they share
the bundle and the output directory and the underlying tools are not safe to
run side by side, so they run one after another. The chain is all-or-nothing:
the first failure stops it and nothing after it runs.
"""

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from distpack.logging.logger import get_logger
from distpack.release.dist_info import DistributionInfo
from distpack.release.interfaces import InstallerBuilder, Packager
from distpack.release.models import InstallerArtifact

_logger: logging.Logger = get_logger(__name__)

# setuid root, rwxr-xr-x. Chromium refuses to start its sandbox otherwise.
SANDBOX_HELPER_MODE = 0o4755


def fix_sandbox_helper_mode(helper_path: Path) -> bool:
    """
    chmod the sandbox helper to SANDBOX_HELPER_MODE if the bundle has one.

    Returns False when there's no helper; some bundle layouts omit it.
    """
    if not helper_path.exists():
        return False
    _logger.info("Updating file mode for sandbox helper", extra={"path": str(helper_path)})
    os.chmod(helper_path, SANDBOX_HELPER_MODE)
    return True


class LinuxPackager(Packager):
    platform_name = "linux"
    checksums_artifacts = True

    def __init__(self, info: DistributionInfo, builders: Sequence[InstallerBuilder]) -> None:
        self._info = info
        self._builders = list(builders)

    def package(self) -> list[InstallerArtifact]:
        fix_sandbox_helper_mode(self._info.linux.sandbox_helper)

        artifacts: list[InstallerArtifact] = []
        for builder in self._builders:
            path = builder.build(self._info)
            artifacts.append(InstallerArtifact.confirm(path, builder.kind))
            _logger.info(
                "Installer created",
                extra={"builder": builder.name, "path": str(path)},
            )

        return artifacts
