"""Process runtimes that spawn and wait on child processes."""

from __future__ import annotations

import os
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import NamedTuple


class RedirectMode(str, Enum):
    """Where a child's output streams go.

    ``INHERIT`` leaves stdout and stderr attached to the parent's streams.
    ``MERGE`` passes output through with stderr folded into stdout.
    ``CAPTURE`` folds stderr into stdout and collects it in memory.
    """

    INHERIT = "inherit"
    MERGE = "merge"
    CAPTURE = "capture"


class ProcessOutcome(NamedTuple):
    exit_code: int
    output: bytes | None


class ProcessRuntime(ABC):
    """Abstract base class for process runtimes."""

    @abstractmethod
    def execute(
        self,
        argv: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        redirect: RedirectMode = RedirectMode.MERGE,
        timeout_s: float | None = None,
    ) -> ProcessOutcome:
        """Run a process to completion.

        Args:
            argv: Executable path followed by its arguments.
            cwd: Working directory for the process.
            env: Overrides merged over the inherited environment.
            redirect: Output redirection mode.
            timeout_s: Optional timeout in seconds.

        Returns:
            ProcessOutcome with the exit code and captured output, if any.

        Raises:
            subprocess.TimeoutExpired: If the process was killed on timeout.
            OSError: If the process could not be spawned.
        """


class LocalProcessRuntime(ProcessRuntime):
    """Run processes on the local host with ``subprocess``."""

    def execute(
        self,
        argv: Sequence[str],
        *,
        cwd: Path,
        env: Mapping[str, str] | None = None,
        redirect: RedirectMode = RedirectMode.MERGE,
        timeout_s: float | None = None,
    ) -> ProcessOutcome:
        merged_env = os.environ.copy()
        if env:
            merged_env.update(env)

        # run() kills and reaps the child before re-raising TimeoutExpired
        completed = subprocess.run(
            list(argv),
            cwd=str(cwd),
            env=merged_env,
            stdout=subprocess.PIPE if redirect is RedirectMode.CAPTURE else None,
            stderr=None if redirect is RedirectMode.INHERIT else subprocess.STDOUT,
            timeout=timeout_s,
            check=False,
        )
        output = completed.stdout if redirect is RedirectMode.CAPTURE else None
        return ProcessOutcome(exit_code=completed.returncode, output=output)
