# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Find the one file an installer builder produced.

Builders pick their own output names (embedding version, architecture and
sometimes a build number), so callers describe the output with a glob. The
glob must match exactly one file: zero means the builder didn't produce
anything, more than one means stale output is lying around and we refuse to
guess which is current.
"""

import glob
import logging
from pathlib import Path

from distpack.logging.logger import get_logger
from distpack.release.errors import AmbiguousArtifactError, ArtifactNotFoundError

_logger: logging.Logger = get_logger(__name__)


def resolve_one(pattern: str) -> Path:
    """
    Expand pattern and return its single match.

    Raises:
        ArtifactNotFoundError: No file matches.
        AmbiguousArtifactError: More than one file matches.
    """
    matches = sorted(Path(p) for p in glob.glob(pattern) if Path(p).is_file())

    if not matches:
        raise ArtifactNotFoundError(pattern)
    if len(matches) > 1:
        raise AmbiguousArtifactError(pattern, matches)

    _logger.debug("Resolved artifact", extra={"pattern": pattern, "path": str(matches[0])})
    return matches[0]
