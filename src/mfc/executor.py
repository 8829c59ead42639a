"""Blocking subprocess execution for the native scheduler tools."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence, Union

from mfc.errors import SubprocessExecutionFailure

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]


@dataclass
class ExecutionResult:
    success: bool
    exit_code: int | None
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """Combined output, stdout first."""
        if self.stderr:
            return f"{self.stdout}{self.stderr}"
        return self.stdout

    def lines(self) -> list[str]:
        return self.stdout.splitlines()


Runner = Callable[..., ExecutionResult]


def execute_command(
    command: Command,
    input: str | None = None,
    merge_stderr: bool = False,
    shell: bool = False,
) -> ExecutionResult:
    """Run a command to completion and capture its output.

    No timeout is applied. Raises SubprocessExecutionFailure when the
    command cannot be started at all.
    """
    logger.info(f"Running: {command if isinstance(command, str) else ' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            input=input,
            shell=shell,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise SubprocessExecutionFailure(f"Failed to run {command!r}: {e}") from e

    return ExecutionResult(
        success=result.returncode == 0,
        exit_code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
