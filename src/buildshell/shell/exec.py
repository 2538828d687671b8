"""Action that runs an external command."""

from __future__ import annotations

import os
import subprocess
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Any

from buildshell.action import Action, ActionStateError
from buildshell.context import Context
from buildshell.errors import (
    AbnormalExitError,
    ExecTimeoutError,
    ExecutableNotFoundError,
    ExecutionFailureError,
    format_command,
)
from buildshell.shell.result import ExecResult
from buildshell.shell.runtime import LocalProcessRuntime, ProcessRuntime, RedirectMode
from buildshell.shell.which import Resolver, Which
from buildshell.util.observability import ObservabilityManager


@dataclass(frozen=True)
class ExecRequest:
    """Immutable snapshot of an Exec configuration.

    Attributes:
        command: Logical command name, resolved at run time.
        arguments: Arguments passed after the resolved executable.
        working_dir: Absolute working directory.
        env: Environment overrides merged over the inherited environment.
        redirect: Output redirection mode.
        timeout_s: Timeout in seconds, or None for no limit.
        exit_codes: Exit codes treated as success.
        paths: Extra directories searched for the executable.
    """

    command: str
    arguments: tuple[str, ...]
    working_dir: Path
    env: Mapping[str, str]
    redirect: RedirectMode
    timeout_s: float | None
    exit_codes: frozenset[int]
    paths: tuple[Path, ...]


class Exec(Action[ExecResult]):
    """Run an external command once.

    Example::

        result = (
            Exec(context)
            .command("git", "rev-parse", "HEAD")
            .read_output()
            .timeout(10)
            .run()
        )
    """

    def __init__(
        self,
        context: Context,
        *,
        resolver: Resolver | None = None,
        runtime: ProcessRuntime | None = None,
        observability: ObservabilityManager | None = None,
    ) -> None:
        """Initialize the action from the context defaults.

        Args:
            context: Build context supplying the base directory and defaults.
            resolver: Resolver for the command name. Defaults to ``Which`` over
                the configured search paths, built when the action runs.
            runtime: Process runtime. Defaults to ``LocalProcessRuntime``.
            observability: Optional observability manager.
        """

        super().__init__(context, observability)
        defaults = context.config
        self._resolver = resolver
        self._runtime = runtime or LocalProcessRuntime()
        self._command = ""
        self._arguments: list[str] = []
        self._working_dir = context.base_dir
        self._env: dict[str, str] = dict(defaults.env)
        self._redirect = RedirectMode.CAPTURE if defaults.read_output else RedirectMode.MERGE
        self._timeout_s = defaults.timeout_s
        self._exit_codes = frozenset(defaults.exit_codes)
        self._paths = [context.with_base_dir(path) for path in defaults.paths]

    def command(self, name: str, *arguments: Any) -> Exec:
        """Set the command name and replace all arguments."""

        if not name:
            raise ValueError("Command name must not be empty.")
        self._configure()
        self._command = name
        self._arguments = _to_str_list(arguments)
        return self

    def arg(self, *arguments: Any) -> Exec:
        """Append one or more arguments."""

        self._ensure_mutable()
        self._arguments.extend(_to_str_list(arguments))
        return self

    def args(self, *arguments: Any) -> Exec:
        """Replace existing arguments."""

        self._ensure_mutable()
        self._arguments = _to_str_list(arguments)
        return self

    def working_dir(self, path: str | os.PathLike[str]) -> Exec:
        """Set the working directory; relative paths rebase on the context."""

        self._ensure_mutable()
        self._working_dir = self.context.with_base_dir(path)
        return self

    def env(self, name: str, value: Any) -> Exec:
        """Add or override one environment variable."""

        if not name or "=" in name:
            raise ValueError(f"Invalid environment variable name: {name!r}")
        self._ensure_mutable()
        self._env[name] = str(value)
        return self

    def read_output(self, enabled: bool = True) -> Exec:
        """Capture combined stdout and stderr instead of passing it through."""

        return self.redirect(RedirectMode.CAPTURE if enabled else RedirectMode.MERGE)

    def redirect(self, mode: RedirectMode) -> Exec:
        """Choose where the child's stdout and stderr go."""

        self._ensure_mutable()
        self._redirect = RedirectMode(mode)
        return self

    def timeout(self, value: float | timedelta | None) -> Exec:
        """Bound the wall-clock execution time.

        Args:
            value: Seconds, a timedelta, or None to remove the limit.
        """

        if isinstance(value, timedelta):
            value = value.total_seconds()
        if value is not None and value <= 0:
            raise ValueError("Timeout must be greater than zero.")
        self._ensure_mutable()
        self._timeout_s = float(value) if value is not None else None
        return self

    def exit_value(self, code: int) -> Exec:
        """Accept exactly one exit code as success."""

        return self.exit_values(code)

    def exit_values(self, *codes: int) -> Exec:
        """Replace the set of exit codes treated as success."""

        if not codes:
            raise ValueError("At least one accepted exit code is required.")
        self._ensure_mutable()
        self._exit_codes = frozenset(int(code) for code in codes)
        return self

    def path(self, *paths: str | os.PathLike[str]) -> Exec:
        """Search additional directories for the executable before ``PATH``."""

        self._ensure_mutable()
        self._paths.extend(self.context.with_base_dir(path) for path in paths)
        return self

    def request(self) -> ExecRequest:
        """Finalize the current configuration into an ExecRequest."""

        if not self._command:
            raise ActionStateError("No command configured.")
        return ExecRequest(
            command=self._command,
            arguments=tuple(self._arguments),
            working_dir=self._working_dir,
            env=MappingProxyType(dict(self._env)),
            redirect=self._redirect,
            timeout_s=self._timeout_s,
            exit_codes=self._exit_codes,
            paths=tuple(self._paths),
        )

    def _do_run(self) -> ExecResult:
        request = self.request()
        resolver = self._resolver or Which(request.paths, base_dir=self.context.base_dir)
        executable = resolver.resolve(request.command)
        if executable is None:
            raise ExecutableNotFoundError(request.command, [request.command, *request.arguments])

        argv = [str(executable), *request.arguments]
        if not request.working_dir.is_dir():
            raise ExecutionFailureError(
                argv,
                NotADirectoryError(f"Working directory {request.working_dir} does not exist"),
            )

        self._logger.info("Running command: %s", format_command(argv))
        start = time.monotonic()
        try:
            outcome = self._runtime.execute(
                argv,
                cwd=request.working_dir,
                env=request.env,
                redirect=request.redirect,
                timeout_s=request.timeout_s,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExecTimeoutError(argv, request.timeout_s or exc.timeout) from exc
        except (OSError, subprocess.SubprocessError, ValueError) as exc:
            raise ExecutionFailureError(argv, exc) from exc
        duration = time.monotonic() - start
        self._logger.info(
            "Command finished with exit code %s in %.2fs.",
            outcome.exit_code,
            duration,
        )

        if outcome.exit_code not in request.exit_codes:
            raise AbnormalExitError(argv, outcome.exit_code, outcome.output)

        return ExecResult(
            command=tuple(argv),
            exit_code=outcome.exit_code,
            output=outcome.output,
            duration_s=duration,
        )


def _to_str_list(values: tuple[Any, ...]) -> list[str]:
    return [os.fsdecode(value) if isinstance(value, os.PathLike) else str(value) for value in values]
