"""Native command invocation for build scripts."""

from buildshell.errors import (
    AbnormalExitError,
    ExecError,
    ExecErrorKind,
    ExecTimeoutError,
    ExecutableNotFoundError,
    ExecutionFailureError,
)
from buildshell.shell.exec import Exec, ExecRequest
from buildshell.shell.result import ExecResult
from buildshell.shell.runtime import LocalProcessRuntime, ProcessOutcome, ProcessRuntime, RedirectMode
from buildshell.shell.which import Resolver, Which

__all__ = [
    "AbnormalExitError",
    "Exec",
    "ExecError",
    "ExecErrorKind",
    "ExecRequest",
    "ExecResult",
    "ExecTimeoutError",
    "ExecutableNotFoundError",
    "ExecutionFailureError",
    "LocalProcessRuntime",
    "ProcessOutcome",
    "ProcessRuntime",
    "RedirectMode",
    "Resolver",
    "Which",
]
