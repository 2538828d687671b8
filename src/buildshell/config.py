"""Configuration models and loaders for buildshell."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

CONFIG_FILE_NAMES: tuple[str, ...] = ("buildshell.yaml", "buildshell.yml", "pyproject.toml")
DEFAULT_EXIT_CODES: list[int] = [0]


@dataclass(frozen=True)
class AppConfig:
    """Top-level configuration for build scripts.

    Attributes:
        base_dir: Directory that relative paths in build steps resolve against.
        exec: Defaults applied to every command invocation.
        logging: Logging configuration.
    """

    base_dir: Path = Path(".")
    exec: ExecConfig = field(default_factory=lambda: ExecConfig())
    logging: LoggingConfig = field(default_factory=lambda: LoggingConfig())


@dataclass(frozen=True)
class ExecConfig:
    """Defaults for command invocations.

    Attributes:
        timeout_s: Wall-clock limit in seconds, or None for no limit.
        exit_codes: Exit codes treated as success.
        env: Environment overrides applied on top of the inherited environment.
        paths: Extra directories searched for executables before ``PATH``.
        read_output: Whether output is captured instead of passed through.
    """

    timeout_s: float | None = None
    exit_codes: list[int] = field(default_factory=lambda: list(DEFAULT_EXIT_CODES))
    env: dict[str, str] = field(default_factory=dict)
    paths: list[Path] = field(default_factory=list)
    read_output: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for log output."""

    level: str = "INFO"
    format: str | None = None


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from disk.

    Args:
        path: Optional path to a configuration file or workspace directory.

    Returns:
        Parsed AppConfig with defaults applied when no config exists.
    """

    config_path = _resolve_config_path(path)
    if config_path is None:
        return AppConfig()

    if config_path.suffix in {".yaml", ".yml"}:
        raw_data = _load_yaml(config_path)
    elif config_path.suffix == ".toml":
        raw_data = _load_toml(config_path)
    else:
        raise ValueError(f"Unsupported config file type: {config_path}")

    return _parse_app_config(raw_data, base_path=config_path.parent)


def config_to_dict(config: AppConfig) -> dict[str, Any]:
    """Serialize an AppConfig into a JSON-compatible dictionary."""

    return {
        "base_dir": str(config.base_dir),
        "exec": {
            "timeout_s": config.exec.timeout_s,
            "exit_codes": list(config.exec.exit_codes),
            "env": dict(config.exec.env),
            "paths": [str(path) for path in config.exec.paths],
            "read_output": config.exec.read_output,
        },
        "logging": {
            "level": config.logging.level,
            "format": config.logging.format,
        },
    }


def update_base_dir(config: AppConfig, base_dir: Path) -> AppConfig:
    """Return a config copy with an updated base directory."""

    return replace(config, base_dir=base_dir)


def _resolve_config_path(path: Path | None) -> Path | None:
    if path is None:
        candidate_paths = [Path(name) for name in CONFIG_FILE_NAMES]
    elif path.is_dir():
        candidate_paths = [path / name for name in CONFIG_FILE_NAMES]
    else:
        candidate_paths = [path]

    for candidate in candidate_paths:
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    if path.name == "pyproject.toml":
        tool_config = data.get("tool", {}).get("buildshell", {})
        if not isinstance(tool_config, dict):
            raise ValueError("tool.buildshell must be a mapping.")
        return tool_config
    return data


def _load_yaml(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
    if data is not None:
        if not isinstance(data, dict):
            raise ValueError("YAML configuration must be a mapping.")
        return data
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as exc:
        raise RuntimeError(
            "PyYAML is required to parse non-JSON YAML configuration files."
        ) from exc
    parsed = yaml.safe_load(text)
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError("YAML configuration must be a mapping.")
    return parsed


def _parse_app_config(raw_data: dict[str, Any], base_path: Path) -> AppConfig:
    base_dir = Path(raw_data.get("base_dir", "."))
    if not base_dir.is_absolute():
        base_dir = (base_path / base_dir).resolve()

    return AppConfig(
        base_dir=base_dir,
        exec=_parse_exec_config(raw_data.get("exec", {})),
        logging=_parse_logging_config(raw_data.get("logging", {})),
    )


def _parse_exec_config(raw: Any) -> ExecConfig:
    if not isinstance(raw, dict):
        return ExecConfig()
    env = raw.get("env", {})
    if not isinstance(env, dict):
        raise ValueError("exec.env must be a mapping of names to values.")
    return ExecConfig(
        timeout_s=_optional_positive_float(raw.get("timeout_s")),
        exit_codes=_parse_exit_codes(raw.get("exit_codes")),
        env={str(key): str(value) for key, value in env.items()},
        paths=_parse_paths(raw.get("paths")),
        read_output=bool(raw.get("read_output", False)),
    )


def _parse_logging_config(raw: Any) -> LoggingConfig:
    if not isinstance(raw, dict):
        return LoggingConfig()
    fmt = raw.get("format")
    return LoggingConfig(
        level=str(raw.get("level", "INFO")),
        format=str(fmt) if fmt else None,
    )


def _parse_exit_codes(raw: Any) -> list[int]:
    if raw is None:
        return list(DEFAULT_EXIT_CODES)
    if not isinstance(raw, list) or not raw:
        raise ValueError("exec.exit_codes must be a non-empty list of integers.")
    return [int(code) for code in raw]


def _parse_paths(raw: Any) -> list[Path]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError("exec.paths must be a list of directories.")
    return [Path(str(item)) for item in raw]


def _optional_positive_float(value: Any) -> float | None:
    if value is None:
        return None
    number = float(value)
    if number <= 0:
        raise ValueError("exec.timeout_s must be greater than zero.")
    return number
