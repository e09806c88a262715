# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Abstract base classes for every pluggable piece of a packaging run.

External tools (archiver, Squirrel, electron-builder, the Debian and Redhat
installers) sit behind these contracts, as do the platform packagers
themselves. Production code gets the subprocess-backed implementations from
distpack.release.tools; tests hand in stand-ins.

Contracts:
    CommandRunner.run          returns on exit code 0, else ToolInvocationError
    Archiver.archive           writes destination or raises
    WindowsInstallerBuilder    writes Setup.exe/MSI/nupkgs or raises
    InstallerBuilder.build     returns exactly one existing file or raises
    Packager.package           returns confirmed InstallerArtifacts or raises
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from distpack.release.models import ArtifactKind, InstallerArtifact

if TYPE_CHECKING:
    from distpack.release.dist_info import DistributionInfo
    from distpack.release.tools.squirrel import SquirrelInstallerOptions


class CommandRunner(ABC):
    """Runs an external program to completion. No timeout; a hang is a hang."""

    @abstractmethod
    def run(
        self,
        tool: str,
        command: Sequence[str],
        cwd: Optional[Path] = None,
        input_text: Optional[str] = None,
    ) -> None:
        """
        Run command and wait for it.

        Args:
            tool: Short human name for logs and errors, e.g. "ditto".
            command: Program and arguments.
            cwd: Working directory, inherited when None.
            input_text: Sent to the program's stdin, then stdin is closed.

        Raises:
            ToolInvocationError: If the program can't be started or exits non-zero.
        """
        ...


class Archiver(ABC):
    @abstractmethod
    def archive(self, source: Path, destination: Path) -> None:
        """Zip source into destination, keeping source's own directory entry."""
        ...


class WindowsInstallerBuilder(ABC):
    @abstractmethod
    def create_installer(self, options: "SquirrelInstallerOptions") -> None:
        """Produce Setup.exe, the MSI and the NuGet packages in options.output_directory."""
        ...


class InstallerBuilder(ABC):
    """One Linux installer format. Produces exactly one file."""

    name: str
    kind: ArtifactKind

    @abstractmethod
    def build(self, info: "DistributionInfo") -> Path:
        """Build the installer and return the path of the single file produced."""
        ...


class Packager(ABC):
    """
    Platform packaging strategy.

    checksums_artifacts says whether the orchestrator writes sidecars and
    checksums.txt for what package() returns.
    """

    platform_name: str
    checksums_artifacts: bool = False

    def preflight(self) -> None:
        """Check configuration before any tool runs. Raises ConfigurationError."""

    @abstractmethod
    def package(self) -> list[InstallerArtifact]:
        ...


def describe(artifacts: Sequence[InstallerArtifact]) -> list[str]:
    """Paths as strings, for log context."""
    return [str(a.path) for a in artifacts]
