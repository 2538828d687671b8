"""Application wiring for CLI-friendly command invocation."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path

from buildshell.config import AppConfig, config_to_dict, load_config, update_base_dir
from buildshell.context import Context
from buildshell.errors import ExecutableNotFoundError
from buildshell.shell.exec import Exec
from buildshell.shell.result import ExecResult
from buildshell.shell.which import Which
from buildshell.util.logging import get_logger

CONFIG_FILE_NAME = "buildshell.yaml"


class AppConfigError(RuntimeError):
    """Raised when configuration or runtime setup fails."""


_LOGGER = get_logger("buildshell.app")


def initialize_config(workspace: Path) -> Path:
    """Create a default configuration file in the workspace.

    Args:
        workspace: Workspace directory where the config should be written.

    Returns:
        Path to the generated configuration file.

    Raises:
        AppConfigError: If the config file already exists.
    """

    workspace = workspace.resolve()
    config_path = workspace / CONFIG_FILE_NAME
    if config_path.exists():
        raise AppConfigError(
            f"Config file already exists at {config_path}. Remove it or choose another "
            "workspace."
        )
    config_path.write_text(
        json.dumps(config_to_dict(AppConfig(base_dir=workspace)), indent=2),
        encoding="utf-8",
    )
    _LOGGER.info("Initialized configuration at %s", config_path)
    return config_path


def build_context(workspace: Path) -> Context:
    """Load configuration for a workspace and build a context from it.

    A config without an explicit location uses the workspace as base dir.
    """

    workspace = workspace.resolve()
    config = load_config(workspace)
    if config.base_dir == Path("."):
        config = update_base_dir(config, workspace)
    return Context.from_config(config)


def run_exec(
    *,
    command: str,
    arguments: Sequence[str],
    workspace: Path,
    working_dir: Path | None = None,
    env: Mapping[str, str] | None = None,
    capture: bool | None = None,
    timeout_s: float | None = None,
    exit_codes: Sequence[int] | None = None,
) -> ExecResult:
    """Run one command with workspace defaults and per-call overrides.

    Args:
        command: Command name or path.
        arguments: Arguments passed to the command.
        workspace: Workspace whose configuration supplies defaults.
        working_dir: Optional working directory, relative to the base dir.
        env: Optional environment overrides.
        capture: Capture output instead of passing it through; None keeps the
            configured default.
        timeout_s: Optional timeout in seconds.
        exit_codes: Optional accepted exit codes.

    Returns:
        ExecResult of the completed command.
    """

    context = build_context(workspace)
    action = Exec(context).command(command, *arguments)
    if working_dir is not None:
        action.working_dir(working_dir)
    for name, value in (env or {}).items():
        action.env(name, value)
    if capture is not None:
        action.read_output(capture)
    if timeout_s is not None:
        action.timeout(timeout_s)
    if exit_codes:
        action.exit_values(*exit_codes)
    return action.run()


def resolve_executable(name: str, workspace: Path) -> Path:
    """Resolve a command name the way ``run_exec`` would.

    Raises:
        ExecutableNotFoundError: If no executable matches.
    """

    context = build_context(workspace)
    resolver = Which(
        [context.with_base_dir(path) for path in context.config.paths],
        base_dir=context.base_dir,
    )
    executable = resolver.resolve(name)
    if executable is None:
        raise ExecutableNotFoundError(name)
    return executable
