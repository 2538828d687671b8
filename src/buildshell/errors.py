"""Error taxonomy for command invocations."""

from __future__ import annotations

import shlex
from collections.abc import Sequence
from enum import Enum
from typing import ClassVar


class ExecErrorKind(str, Enum):
    """Closed set of failure kinds an invocation can end in."""

    EXECUTABLE_NOT_FOUND = "executable_not_found"
    ABNORMAL_EXIT = "abnormal_exit"
    TIMEOUT = "timeout"
    EXECUTION_FAILURE = "execution_failure"


class ExecError(RuntimeError):
    """Raised when a command invocation does not complete cleanly.

    Attributes:
        kind: Failure kind, for exhaustive branching.
        command: The argument vector that was attempted.
    """

    kind: ClassVar[ExecErrorKind]

    def __init__(self, message: str, command: Sequence[str]) -> None:
        self.command = list(command)
        super().__init__(f"{message}: {format_command(self.command)}")


class ExecutableNotFoundError(ExecError):
    """Raised when the command name cannot be resolved to an executable."""

    kind = ExecErrorKind.EXECUTABLE_NOT_FOUND

    def __init__(self, name: str, command: Sequence[str] | None = None) -> None:
        self.name = name
        super().__init__(f"Executable '{name}' not found", command or [name])


class AbnormalExitError(ExecError):
    """Raised when the process exits with a code outside the accepted set."""

    kind = ExecErrorKind.ABNORMAL_EXIT

    def __init__(
        self,
        command: Sequence[str],
        exit_code: int,
        output: bytes | None = None,
    ) -> None:
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"Process exited with code {exit_code}", command)


class ExecTimeoutError(ExecError):
    """Raised when the process outlives its timeout and is killed."""

    kind = ExecErrorKind.TIMEOUT

    def __init__(self, command: Sequence[str], timeout_s: float) -> None:
        self.timeout_s = timeout_s
        super().__init__(f"Process timed out after {timeout_s:g}s", command)


class ExecutionFailureError(ExecError):
    """Raised when the process cannot be spawned or waited on."""

    kind = ExecErrorKind.EXECUTION_FAILURE

    def __init__(self, command: Sequence[str], cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Unable to cleanly execute ({cause})", command)


def format_command(command: Sequence[str]) -> str:
    """Render an argument vector as a copy-pasteable shell line."""

    return shlex.join(command)
