"""
Child process execution for external i18n tools.

ProcessRunner is the unit every pipeline step is built from. It never
raises: spawn errors and non-zero exits are both reported through the
returned StepResult so that many invocations can be awaited together.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from ..utils.core.exceptions import ExternalToolError
from .types import StepResult

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Runs one external tool per call and reports its outcome."""

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd: Path | None = cwd

    async def run(
        self, command: str, args: Sequence[str], cwd: Path | None = None
    ) -> StepResult:
        """
        Run an external command and wait for it to exit.

        Args:
            command: Executable name or path
            args: Command-line arguments
            cwd: Working directory (defaults to the runner's directory)

        Returns:
            Success with captured stdout, or failure with stderr / spawn error
        """
        work_dir = cwd or self.cwd
        command_line = " ".join([command, *args])
        logger.debug(f"Running: {command_line}")

        try:
            process = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=work_dir,
            )
            stdout, stderr = await process.communicate()
        except (OSError, ValueError) as e:
            logger.error(f"Failed to start {command}: {e}")
            if isinstance(e, FileNotFoundError):
                message = f"{command} command not found"
            else:
                message = f"Failed to start {command}: {e}"
            return StepResult.from_error(ExternalToolError(message, command=command))

        output = stdout.decode("utf-8", errors="replace").strip()
        error_output = stderr.decode("utf-8", errors="replace").strip()

        if process.returncode != 0:
            message = error_output or f"{command} exited with code {process.returncode}"
            logger.debug(f"{command} failed with code {process.returncode}: {message}")
            return StepResult.from_error(
                ExternalToolError(message, command=command, context=process.returncode)
            )

        return StepResult.success(command=command, stdout=output, stderr=error_output)
