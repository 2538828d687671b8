"""CLI entrypoints for buildshell."""

from __future__ import annotations

from pathlib import Path

import typer

from buildshell.app import AppConfigError, initialize_config, resolve_executable, run_exec
from buildshell.config import load_config
from buildshell.errors import AbnormalExitError, ExecError, ExecErrorKind
from buildshell.util.logging import configure_logging

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124

app = typer.Typer(help="Run native commands the way build scripts do.")


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (e.g., DEBUG, INFO, WARNING). Defaults to the workspace config.",
    ),
) -> None:
    """Configure CLI-level options."""

    ctx.obj = {"log_level": log_level}
    if log_level is not None:
        configure_logging(log_level)


@app.command()
def init(workspace: Path = typer.Argument(Path("."))) -> None:
    """Initialize configuration for a workspace."""

    try:
        config_path = initialize_config(workspace)
    except AppConfigError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"Created configuration at {config_path}")


@app.command(
    "exec",
    context_settings={"allow_interspersed_args": False},
)
def exec_command(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Command name or path to run."),
    arguments: list[str] = typer.Argument(None, help="Arguments passed to the command."),
    workspace: Path = typer.Option(
        Path("."),
        "--workspace",
        "-w",
        help="Path to the workspace root.",
    ),
    cwd: Path | None = typer.Option(
        None,
        "--cwd",
        help="Working directory, relative to the workspace base dir.",
    ),
    env: list[str] = typer.Option(
        None,
        "--env",
        "-e",
        help="Environment override as KEY=VALUE; repeatable.",
    ),
    capture: bool | None = typer.Option(
        None,
        "--capture/--no-capture",
        help="Capture combined output and print it after the command exits. "
        "Defaults to the workspace config.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Kill the command after this many seconds.",
    ),
    ok_codes: list[int] = typer.Option(
        None,
        "--ok-code",
        help="Exit code treated as success; repeatable.",
    ),
) -> None:
    """Run a command through the invocation action."""

    try:
        _configure_workspace_logging(ctx, workspace)
        env_map = _parse_env(env or [])
        result = run_exec(
            command=command,
            arguments=list(arguments or []),
            workspace=workspace,
            working_dir=cwd,
            env=env_map,
            capture=capture,
            timeout_s=timeout,
            exit_codes=list(ok_codes) if ok_codes else None,
        )
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    except ExecError as exc:
        if isinstance(exc, AbnormalExitError) and exc.output:
            typer.echo(exc.output.decode("utf-8", "replace"), nl=False)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=_exit_code_for(exc)) from exc

    if result.output is not None:
        typer.echo(result.output_text(), nl=False)


@app.command()
def which(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Command name to resolve."),
    workspace: Path = typer.Option(
        Path("."),
        "--workspace",
        "-w",
        help="Path to the workspace root.",
    ),
) -> None:
    """Print the executable a command name resolves to."""

    try:
        _configure_workspace_logging(ctx, workspace)
        executable = resolve_executable(name, workspace)
    except ExecError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(str(executable))


def _configure_workspace_logging(ctx: typer.Context, workspace: Path) -> None:
    if (ctx.obj or {}).get("log_level") is not None:
        return
    config = load_config(workspace.resolve())
    configure_logging(config.logging.level, config.logging.format)


def _parse_env(entries: list[str]) -> dict[str, str]:
    env: dict[str, str] = {}
    for entry in entries:
        name, sep, value = entry.partition("=")
        if not sep or not name:
            raise ValueError(f"Environment override must be KEY=VALUE, got {entry!r}")
        env[name] = value
    return env


def _exit_code_for(error: ExecError) -> int:
    match error.kind:
        case ExecErrorKind.EXECUTABLE_NOT_FOUND:
            return EXIT_NOT_FOUND
        case ExecErrorKind.TIMEOUT:
            return EXIT_TIMEOUT
        case ExecErrorKind.ABNORMAL_EXIT if (
            isinstance(error, AbnormalExitError) and 0 < error.exit_code < 256
        ):
            return error.exit_code
        case _:
            return 1


if __name__ == "__main__":
    app()
