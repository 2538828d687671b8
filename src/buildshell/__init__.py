"""Build scripting helpers for invoking native commands."""

from buildshell.action import Action, ActionState, ActionStateError
from buildshell.context import Context
from buildshell.shell import Exec, ExecError, ExecResult

__all__ = [
    "Action",
    "ActionState",
    "ActionStateError",
    "Context",
    "Exec",
    "ExecError",
    "ExecResult",
]
