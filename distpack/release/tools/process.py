# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subprocess-backed CommandRunner.

Tools inherit our stdout and stderr, so their own progress and error output
lands in the CI log as they produce it. We log the command before it runs and
the exit code if it fails.
"""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from distpack.logging.logger import get_logger
from distpack.release.errors import ToolInvocationError
from distpack.release.interfaces import CommandRunner

_logger: logging.Logger = get_logger(__name__)


class SubprocessRunner(CommandRunner):
    def run(
        self,
        tool: str,
        command: Sequence[str],
        cwd: Optional[Path] = None,
        input_text: Optional[str] = None,
    ) -> None:
        args = [str(part) for part in command]
        _logger.info("Running tool", extra={"tool": tool, "command": args, "cwd": str(cwd) if cwd else None})

        try:
            result = subprocess.run(
                args,
                cwd=str(cwd) if cwd is not None else None,
                input=input_text,
                text=input_text is not None,
                check=False,
            )
        except OSError as err:
            _logger.error("Tool could not be started", extra={"tool": tool, "error": str(err)})
            raise ToolInvocationError(tool, args, detail=str(err)) from err

        if result.returncode != 0:
            _logger.error(
                "Tool failed",
                extra={"tool": tool, "returncode": result.returncode},
            )
            raise ToolInvocationError(tool, args, returncode=result.returncode)
