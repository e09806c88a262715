# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Hashing primitives.

Installers run to hundreds of megabytes, so files are always hashed in
fixed-size chunks. Nothing here knows about packaging; the checksum engine
in distpack.release.checksums builds on top of these.
"""

import hashlib
from pathlib import Path
from typing import BinaryIO

HASH_ALGORITHM = "sha256"
HASH_BUFFER_SIZE = 65536  # 64 KiB
SHA256_HEX_LENGTH = 64


def sha256_stream(stream: BinaryIO, buffer_size: int = HASH_BUFFER_SIZE) -> str:
    """Hash an already-open binary stream until EOF and return the hex digest."""
    hasher = hashlib.new(HASH_ALGORITHM)
    for chunk in iter(lambda: stream.read(buffer_size), b""):
        hasher.update(chunk)
    return hasher.hexdigest()


def compute_sha256(file_path: Path) -> str:
    """
    Compute the SHA256 hex digest of a file.

    Args:
        file_path: Path to the file to hash.

    Returns:
        Lowercase hex string of the SHA256 digest.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: If the file can't be opened or a read fails mid-stream.
    """
    with open(file_path, "rb") as f:
        return sha256_stream(f)


def is_sha256_hex(value: str) -> bool:
    """True if value looks like a lowercase SHA256 hex digest."""
    return len(value) == SHA256_HEX_LENGTH and all(c in "0123456789abcdef" for c in value)
