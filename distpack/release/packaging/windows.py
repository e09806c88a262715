# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Windows packaging through Squirrel.Windows (electron-winstaller).

Produces, in dist_root:
  - <standalone_name>                  setup executable
  - <installer_name>                   MSI
  - <identifier>-<version>-<arch>-full.nupkg
  - <identifier>-<version>-<arch>-delta.nupkg   (delta channels only)

Squirrel doesn't let us choose the NuGet package names, but we want them to
carry the architecture like the setup exe and MSI do, so they are renamed
after the fact.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from distpack.logging.logger import get_logger
from distpack.release.dist_info import DistributionInfo
from distpack.release.errors import MissingResourceError
from distpack.release.interfaces import Packager, WindowsInstallerBuilder
from distpack.release.models import ArtifactKind, InstallerArtifact
from distpack.release.request import PackagingRequest
from distpack.release.tools.squirrel import SquirrelInstallerOptions

_logger: logging.Logger = get_logger(__name__)

STAGGERED_RELEASE_BYPASS = ("bypassStaggeredRelease", "1")
SIGNING_DIGEST = "sha256"

_NUGET_KINDS: dict[str, ArtifactKind] = {
    "full": ArtifactKind.NUPKG_FULL,
    "delta": ArtifactKind.NUPKG_DELTA,
}


def remote_releases_url(updates_url: str) -> str:
    """
    The feed Squirrel diffs against when building delta packages.

    Forces bypassStaggeredRelease=1 so a partially (or completely) disabled
    release never hides the previous version from the delta builder. Other
    query parameters are kept.
    """
    key, value = STAGGERED_RELEASE_BYPASS
    parts = urlsplit(updates_url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != key]
    query.append((key, value))
    return urlunsplit(parts._replace(query=urlencode(query)))


def signing_params(certificate_path: Path, password: Optional[str], timestamp_url: str) -> str:
    """signtool arguments as electron-winstaller's signWithParams string."""
    return (
        f"/f {certificate_path} /p {password or ''} "
        f"/tr {timestamp_url} /td {SIGNING_DIGEST} /fd {SIGNING_DIGEST}"
    )


def nuget_kinds(should_make_delta: bool) -> list[str]:
    return ["full", "delta"] if should_make_delta else ["full"]


def rename_nuget_packages(info: DistributionInfo) -> list[InstallerArtifact]:
    """
    Move <prefix>-<kind>.nupkg to <prefix>-<arch>-<kind>.nupkg.

    Only the full package is touched when deltas are off.

    Raises:
        FileNotFoundError: If a package Squirrel should have written is absent.
        OSError: If the rename itself fails.
    """
    renamed: list[InstallerArtifact] = []
    for kind in nuget_kinds(info.should_make_delta):
        source = info.dist_root / f"{info.nuget_prefix}-{kind}.nupkg"
        target = info.dist_root / f"{info.nuget_prefix}-{info.arch.value}-{kind}.nupkg"

        _logger.info("Renaming NuGet package", extra={"from": str(source), "to": str(target)})
        if not source.is_file():
            raise FileNotFoundError(f"NuGet package to rename not found: {source}")
        source.replace(target)

        renamed.append(InstallerArtifact(path=target, kind=_NUGET_KINDS[kind]))
    return renamed


class WindowsPackager(Packager):
    platform_name = "win32"
    checksums_artifacts = False

    def __init__(
        self,
        info: DistributionInfo,
        request: PackagingRequest,
        builder: WindowsInstallerBuilder,
    ) -> None:
        self._info = info
        self._request = request
        self._builder = builder

    def preflight(self) -> None:
        """
        Raises:
            MissingResourceError: If the setup icon or splash screen is missing.
        """
        resources = self._info.windows
        if not resources.setup_icon.is_file():
            raise MissingResourceError("setup icon", resources.setup_icon)
        if not resources.splash_screen.is_file():
            raise MissingResourceError("setup splash screen gif", resources.splash_screen)

    def build_options(self) -> SquirrelInstallerOptions:
        info = self._info
        resources = info.windows

        remote_releases = None
        if info.should_make_delta:
            remote_releases = remote_releases_url(info.updates_url)

        sign_with = None
        if self._request.is_automated and info.is_publishable:
            sign_with = signing_params(
                resources.certificate_path,
                self._request.certificate_password,
                resources.timestamp_url,
            )

        return SquirrelInstallerOptions(
            name=info.identifier_name,
            app_directory=info.dist_path,
            output_directory=info.dist_root,
            authors=info.company_name,
            icon_url=resources.icon_url,
            setup_icon=resources.setup_icon,
            loading_gif=resources.splash_screen,
            exe=f"{info.identifier_name}.exe",
            title=info.product_name,
            setup_exe=resources.standalone_name,
            setup_msi=resources.installer_name,
            remote_releases=remote_releases,
            sign_with_params=sign_with,
        )

    def package(self) -> list[InstallerArtifact]:
        self.preflight()
        options = self.build_options()

        _logger.info(
            "Packaging for Windows",
            extra={
                "delta": options.remote_releases is not None,
                "signed": options.sign_with_params is not None,
                "output_dir": str(options.output_directory),
            },
        )
        self._builder.create_installer(options)
        _logger.info("Installers created", extra={"output_dir": str(self._info.dist_root)})

        return rename_nuget_packages(self._info)
