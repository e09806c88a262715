# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Top-level packaging flow.

    select packager for the host platform
      → preflight (configuration checks, nothing started yet)
      → package
      → checksum the artifacts (Linux only)
      → write bundle-size.json

Exactly one packager runs. Platform dispatch is a mapping from HostPlatform
to a factory, so the set of platforms is closed and each one can be swapped
for a stand-in.

Checksum generation is waited on before the run is reported as successful;
a run never ends while checksums.txt is still being written.

bundle-size.json is written once packaging has started, whether or not the
packaging or checksum step succeeds. Configuration failures in preflight
stop the run before that point.
"""

import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Optional

from distpack.logging.logger import get_logger
from distpack.release.checksums.integrity import MANIFEST_FILENAME, generate_checksums
from distpack.release.dist_info import DistributionInfo
from distpack.release.errors import UnsupportedPlatformError
from distpack.release.interfaces import CommandRunner, Packager, describe
from distpack.release.models import ChecksumRecord, PackagingResult
from distpack.release.packaging.linux import LinuxPackager
from distpack.release.packaging.macos import MacOSPackager
from distpack.release.packaging.windows import WindowsPackager
from distpack.release.request import HostPlatform, PackagingRequest
from distpack.release.tools.archive import DittoArchiver
from distpack.release.tools.electron_builder import ElectronBuilderAppImage
from distpack.release.tools.electron_installer import DebianInstaller, RedhatInstaller
from distpack.release.tools.process import SubprocessRunner
from distpack.release.tools.squirrel import NodeWinstallerBuilder
from distpack.utils.filesystem import atomic_write

_logger: logging.Logger = get_logger(__name__)

BUNDLE_SIZE_FILENAME = "bundle-size.json"

PackagerFactory = Callable[[DistributionInfo, PackagingRequest], Packager]


def default_factories(
    runner: Optional[CommandRunner] = None,
) -> dict[HostPlatform, PackagerFactory]:
    """Factories wired to the real tools, all sharing one command runner."""
    run = runner or SubprocessRunner()

    def _macos(info: DistributionInfo, request: PackagingRequest) -> Packager:
        return MacOSPackager(info, DittoArchiver(run, info.macos.archiver))

    def _windows(info: DistributionInfo, request: PackagingRequest) -> Packager:
        builder = NodeWinstallerBuilder(run, info.project_root, info.windows.node_executable)
        return WindowsPackager(info, request, builder)

    def _linux(info: DistributionInfo, request: PackagingRequest) -> Packager:
        return LinuxPackager(
            info,
            [ElectronBuilderAppImage(run), DebianInstaller(run), RedhatInstaller(run)],
        )

    return {
        HostPlatform.DARWIN: _macos,
        HostPlatform.WIN32: _windows,
        HostPlatform.LINUX: _linux,
    }


def select_packager(
    info: DistributionInfo,
    request: PackagingRequest,
    factories: Mapping[HostPlatform, PackagerFactory],
) -> Packager:
    """
    Build the one packager for request.host_platform.

    Raises:
        UnsupportedPlatformError: If no factory is registered for the platform.
    """
    factory = factories.get(request.host_platform)
    if factory is None:
        raise UnsupportedPlatformError(request.host_platform.value)
    return factory(info, request)


def collect_bundle_sizes(info: DistributionInfo) -> dict[str, Optional[int]]:
    sizes: dict[str, Optional[int]] = {}
    for label, path in info.bundle_size_files.items():
        if path.is_file():
            sizes[label] = path.stat().st_size
        else:
            _logger.warning("Bundle file missing from size report", extra={"label": label, "path": str(path)})
            sizes[label] = None
    return sizes


def write_bundle_size_report(info: DistributionInfo) -> Path:
    """Write dist_root/bundle-size.json: label → size in bytes (null if the file is missing)."""
    report_path = info.dist_root / BUNDLE_SIZE_FILENAME
    _logger.info("Writing bundle size info", extra={"path": str(report_path)})
    atomic_write(report_path, json.dumps(collect_bundle_sizes(info), indent=2, sort_keys=True) + "\n")
    return report_path


def run_packaging(
    info: DistributionInfo,
    request: PackagingRequest,
    factories: Optional[Mapping[HostPlatform, PackagerFactory]] = None,
    checksum_workers: Optional[int] = None,
) -> PackagingResult:
    """
    Package for the host platform and checksum the result where required.

    Args:
        info: Resolved distribution metadata.
        request: Environment-derived request.
        factories: Platform → packager factory; the real tools when omitted.
        checksum_workers: Thread pool size for hashing.

    Raises:
        ConfigurationError: Before anything is started (unknown platform,
            missing installer resources, ...).
        PackagingError, OSError: When a packaging or checksum step fails.
    """
    packager = select_packager(info, request, factories or default_factories())
    packager.preflight()

    _logger.info(
        "Packaging started",
        extra={
            "platform": packager.platform_name,
            "version": info.version,
            "target_arch": info.arch.value,
            "channel": info.channel,
        },
    )

    records: list[ChecksumRecord] = []
    manifest_path: Optional[Path] = None
    try:
        artifacts = packager.package()
        _logger.info("Installers created", extra={"installers": describe(artifacts)})

        if packager.checksums_artifacts:
            records = generate_checksums(
                [artifact.path for artifact in artifacts],
                info.dist_root,
                max_workers=checksum_workers,
            )
            manifest_path = info.dist_root / MANIFEST_FILENAME
    except BaseException:
        # The packaging error propagates; a report failure here is only logged.
        try:
            write_bundle_size_report(info)
        except OSError as report_err:
            _logger.error(
                "Could not write bundle size info",
                extra={"error": str(report_err)},
            )
        raise

    bundle_size_path = write_bundle_size_report(info)

    return PackagingResult(
        platform=packager.platform_name,
        artifacts=artifacts,
        checksums=records,
        manifest_path=manifest_path,
        bundle_size_path=bundle_size_path,
    )
