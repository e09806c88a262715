# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
macOS archiver: `ditto -ck --keepParent <src> <dest>`.

ditto preserves resource forks, extended attributes and the code signature
that a plain zip would strip, and --keepParent makes the .app itself the
top-level entry of the archive.
"""

from pathlib import Path

from distpack.release.interfaces import Archiver, CommandRunner


class DittoArchiver(Archiver):
    def __init__(self, runner: CommandRunner, executable: str = "ditto") -> None:
        self._runner = runner
        self._executable = executable

    def archive(self, source: Path, destination: Path) -> None:
        self._runner.run(
            "ditto",
            [self._executable, "-ck", "--keepParent", str(source), str(destination)],
        )
