# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers used by the packaging steps.

Manifests and reports are written atomically: content goes to a temp file in
the target's directory and is then moved over the target with os.replace,
which is atomic on the same filesystem (POSIX and Windows alike). A reader
sees either the previous file or the complete new one, never a truncated
manifest.
"""

import os
import shutil
import tempfile
from pathlib import Path

_TEMP_PREFIX = ".distpack_tmp_"


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write text to target_path atomically.

    Newlines are written verbatim (no platform translation) so a manifest
    produced on Windows hashes the same as one produced on Linux.

    Raises:
        OSError: If the write or the final replace fails. The temp file is
                 removed in that case.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        dir=str(target_path.parent),
        prefix=_TEMP_PREFIX,
        suffix=".tmp",
    )
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, target_path)
    except BaseException:
        if temp_path.exists():
            temp_path.unlink()
        raise


def remove_path(path: Path) -> bool:
    """
    Remove a file, symlink or directory tree if present.

    Returns True if something was removed. A missing path is not an error,
    which is what makes repeated packaging runs idempotent.
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if it doesn't exist. Returns the path for chaining."""
    path.mkdir(parents=True, exist_ok=True)
    return path
