# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Installer checksum generation and verification.

Every artifact gets two records of its SHA256:
  - a sidecar `<artifact>.sha256` next to it, holding only the hex digest
  - a line in `checksums.txt` in the output root

checksums.txt format:

    Checksums: 
    <sha256hex> - <filename>
    <sha256hex> - <filename>

Lines follow the order the artifacts were produced in (AppImage, Debian,
Redhat on Linux), not alphabetical order. The header carries a trailing space.

Hashing is independent per file and runs on a thread pool. The manifest is
written once, atomically, after every digest is known; if any artifact is
missing, empty or unreadable the run fails before checksums.txt is touched.
"""

import logging
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from distpack.logging.logger import get_logger
from distpack.release.errors import EmptyArtifactError
from distpack.release.models import ChecksumRecord
from distpack.utils.filesystem import atomic_write
from distpack.utils.hashing import HASH_ALGORITHM, compute_sha256, is_sha256_hex

_logger: logging.Logger = get_logger(__name__)

MANIFEST_FILENAME = "checksums.txt"
MANIFEST_HEADER = "Checksums: "
SIDECAR_SUFFIX = ".sha256"
_LINE_SEPARATOR = " - "


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of checking a checksums.txt against the files next to it."""

    is_valid: bool
    checked_count: int
    mismatches: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def compute_digest(path: Path) -> str:
    """
    Stream a file through SHA256.

    Raises:
        FileNotFoundError: If the artifact does not exist.
        EmptyArtifactError: If the artifact has zero bytes.
        OSError: If the file can't be opened or a read fails mid-stream.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Installer artifact not found: {path}")
    if path.stat().st_size == 0:
        raise EmptyArtifactError(path)
    return compute_sha256(path)


def sidecar_path(path: Path) -> Path:
    return path.with_name(path.name + SIDECAR_SUFFIX)


def write_sidecar(path: Path, digest: str) -> Path:
    """Write the bare digest (no newline) to `<path>.sha256`."""
    target = sidecar_path(path)
    atomic_write(target, digest)
    _logger.debug("Sidecar written", extra={"path": str(target)})
    return target


def render_manifest(records: Sequence[ChecksumRecord]) -> str:
    lines = [MANIFEST_HEADER] + [record.manifest_line() for record in records]
    return "\n".join(lines) + "\n"


def write_manifest(root: Path, records: Sequence[ChecksumRecord]) -> Path:
    """
    Write checksums.txt into root in a single atomic write.

    Args:
        root: Output root directory.
        records: Checksums in the order they should be listed.

    Returns:
        Path to the written manifest.
    """
    manifest_path = root / MANIFEST_FILENAME
    atomic_write(manifest_path, render_manifest(records))
    _logger.info(
        "Checksum manifest written",
        extra={"path": str(manifest_path), "entries": len(records)},
    )
    return manifest_path


def _hash_artifact(path: Path) -> ChecksumRecord:
    digest = compute_digest(path)
    _logger.debug(
        "Computed checksum",
        extra={"file": path.name, "sha256": digest[:16] + "..."},
    )
    return ChecksumRecord(path=path, digest=digest, algorithm=HASH_ALGORITHM)


def generate_checksums(
    paths: Sequence[Path],
    root: Path,
    max_workers: Optional[int] = None,
) -> list[ChecksumRecord]:
    """
    Checksum every artifact, write the sidecars, then write the manifest.

    Args:
        paths: Installer files, in the order they should appear in the manifest.
        root: Output root receiving checksums.txt.
        max_workers: Thread pool size; defaults to min(len(paths), cpu count).

    Returns:
        One ChecksumRecord per input path, input order preserved.

    Raises:
        FileNotFoundError, EmptyArtifactError, OSError: The first failure
        encountered; no manifest is written in that case.
    """
    if not paths:
        records: list[ChecksumRecord] = []
    else:
        workers = max_workers or min(len(paths), os.cpu_count() or 1)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="distpack-sha") as pool:
            # map() yields in submission order and re-raises the first worker error.
            records = list(pool.map(_hash_artifact, paths))

    for record in records:
        write_sidecar(record.path, record.digest)

    write_manifest(root, records)

    _logger.info(
        "Checksums generated",
        extra={"file_count": len(records), "root": str(root)},
    )
    return records


def parse_manifest(manifest_path: Path) -> list[tuple[str, str]]:
    """
    Parse checksums.txt into (digest, filename) pairs, in file order.

    Raises:
        FileNotFoundError: If the manifest doesn't exist.
        ValueError: If the header or any line is malformed.
    """
    if not manifest_path.is_file():
        raise FileNotFoundError(f"Checksum manifest not found: {manifest_path}")

    lines = manifest_path.read_text(encoding="utf-8").splitlines()
    if not lines or lines[0] != MANIFEST_HEADER:
        raise ValueError(f"Missing '{MANIFEST_HEADER.strip()}' header in {manifest_path}")

    entries: list[tuple[str, str]] = []
    for line_num, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        digest, sep, filename = line.partition(_LINE_SEPARATOR)
        if not sep or not filename:
            raise ValueError(
                f"Invalid checksum format at line {line_num}: expected "
                f"'<sha256> - <filename>', got: {line!r}"
            )
        if not is_sha256_hex(digest):
            raise ValueError(f"Invalid SHA256 digest at line {line_num}: {digest!r}")
        entries.append((digest, filename))

    return entries


def _locate(root: Path, filename: str) -> Optional[Path]:
    """
    Find a listed installer under root.

    The manifest carries bare file names while .deb and .rpm packages live in
    a subdirectory, so a name not found directly under root is looked up
    recursively by exact name. It must then match exactly one file. Names
    carrying a path component are never resolved, so nothing outside root
    gets hashed.
    """
    if filename in (".", "..") or "/" in filename or "\\" in filename:
        return None
    direct = root / filename
    if direct.is_file():
        return direct
    matches = [p for p in root.rglob("*") if p.is_file() and p.name == filename]
    return matches[0] if len(matches) == 1 else None


def verify_manifest(root: Path) -> VerificationResult:
    """
    Re-hash every file listed in root/checksums.txt.

    Reports all mismatches and missing files, not just the first.
    """
    manifest_path = root / MANIFEST_FILENAME
    try:
        expected = parse_manifest(manifest_path)
    except (FileNotFoundError, ValueError) as err:
        return VerificationResult(is_valid=False, checked_count=0, errors=[str(err)])

    mismatches: list[str] = []
    missing_files: list[str] = []
    errors: list[str] = []
    checked = 0

    for expected_digest, filename in expected:
        file_path = _locate(root, filename)
        if file_path is None:
            missing_files.append(filename)
            _logger.error("File missing during verification", extra={"file": filename})
            continue

        try:
            actual_digest = compute_sha256(file_path)
        except OSError as err:
            errors.append(f"Could not read {filename}: {err}")
            _logger.error("File unreadable during verification", extra={"file": filename, "error": str(err)})
            continue
        checked += 1
        if actual_digest != expected_digest:
            mismatches.append(filename)
            _logger.error(
                "Checksum mismatch",
                extra={
                    "file": filename,
                    "expected": expected_digest[:16] + "...",
                    "actual": actual_digest[:16] + "...",
                },
            )

    is_valid = not mismatches and not missing_files and not errors
    log_fn = _logger.info if is_valid else _logger.error
    log_fn(
        "Checksum verification finished",
        extra={
            "checked_count": checked,
            "mismatches": len(mismatches),
            "missing": len(missing_files),
            "errors": len(errors),
        },
    )

    return VerificationResult(
        is_valid=is_valid,
        checked_count=checked,
        mismatches=mismatches,
        missing_files=missing_files,
        errors=errors,
    )
