# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Error taxonomy for the packaging run.

Every failure is fatal to the run. The CLI maps the two top-level families
to exit codes: ConfigurationError means nothing was started, any other
PackagingError (or an OSError from a rename, chmod or checksum read) means
a packaging step failed part-way.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Optional


class PackagingError(Exception):
    """Base for all packaging failures."""


class ConfigurationError(PackagingError):
    """Reported before any external tool runs."""


class UnsupportedPlatformError(ConfigurationError):
    """The host OS is not one we know how to package for."""

    def __init__(self, platform_name: str) -> None:
        super().__init__(f"I don't know how to package for {platform_name}")
        self.platform_name = platform_name


class MissingResourceError(ConfigurationError):
    """A file the installer builder needs (icon, splash screen) is absent."""

    def __init__(self, description: str, path: Path) -> None:
        super().__init__(f"expected {description} not found at location: {path}")
        self.description = description
        self.path = path


class ToolInvocationError(PackagingError):
    """An external packaging tool failed to start or exited non-zero."""

    def __init__(
        self,
        tool: str,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
        detail: str = "",
    ) -> None:
        if returncode is not None:
            message = f"{tool} exited with code {returncode}"
        else:
            message = f"{tool} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.tool = tool
        self.command = list(command)
        self.returncode = returncode
        self.detail = detail


class ArtifactResolutionError(PackagingError):
    """A glob for a builder's output did not match exactly one file."""

    def __init__(self, message: str, pattern: str, matches: Sequence[Path] = ()) -> None:
        super().__init__(message)
        self.pattern = pattern
        self.matches = list(matches)


class ArtifactNotFoundError(ArtifactResolutionError):
    """Zero files matched."""

    def __init__(self, pattern: str) -> None:
        super().__init__(f"No file matches '{pattern}'", pattern)


class AmbiguousArtifactError(ArtifactResolutionError):
    """More than one file matched; the caller must not pick one."""

    def __init__(self, pattern: str, matches: Sequence[Path]) -> None:
        names = ", ".join(str(m) for m in matches)
        super().__init__(
            f"Expected one file matching '{pattern}' but instead found '{names}'",
            pattern,
            matches,
        )


class EmptyArtifactError(PackagingError):
    """An installer exists but has zero bytes, so its checksum means nothing."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Installer artifact is empty: {path}")
        self.path = path
