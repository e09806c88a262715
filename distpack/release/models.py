# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Value types passed between packagers, the checksum engine and the orchestrator.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class ArtifactKind(str, Enum):
    """What an installer file is. Informational only; nothing branches on it."""

    ZIP = "zip"
    SETUP_EXE = "setup-exe"
    MSI = "msi"
    NUPKG_FULL = "nupkg-full"
    NUPKG_DELTA = "nupkg-delta"
    APPIMAGE = "appimage"
    DEB = "deb"
    RPM = "rpm"


@dataclass(frozen=True)
class InstallerArtifact:
    """
    A finished installer on disk.

    Only created once a packager has confirmed the file exists, either
    because a tool reported the path or because a glob resolved to it.
    """

    path: Path
    kind: ArtifactKind

    @classmethod
    def confirm(cls, path: Path, kind: ArtifactKind) -> "InstallerArtifact":
        """Build an artifact, failing if the file isn't there."""
        if not path.is_file():
            raise FileNotFoundError(f"Expected {kind.value} installer at {path}")
        return cls(path=path, kind=kind)


@dataclass(frozen=True)
class ChecksumRecord:
    """One artifact's digest as written to its sidecar and to the manifest."""

    path: Path
    digest: str
    algorithm: str = "sha256"

    @property
    def filename(self) -> str:
        return self.path.name

    def manifest_line(self) -> str:
        return f"{self.digest} - {self.filename}"


@dataclass(frozen=True)
class PackagingResult:
    """Outcome of a successful packaging run."""

    platform: str
    artifacts: list[InstallerArtifact]
    checksums: list[ChecksumRecord] = field(default_factory=list)
    manifest_path: Optional[Path] = None
    bundle_size_path: Optional[Path] = None
