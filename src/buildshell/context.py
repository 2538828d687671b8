"""Build context shared by actions within one script run."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from buildshell.config import AppConfig, ExecConfig


@dataclass(frozen=True)
class Context:
    """Base directory and defaults for actions.

    Attributes:
        base_dir: Directory commands run in by default and that relative paths
            are rebased against.
        config: Defaults applied to new command invocations.
    """

    base_dir: Path
    config: ExecConfig = field(default_factory=ExecConfig)

    def __post_init__(self) -> None:
        """Normalize the base directory to an absolute path."""

        object.__setattr__(self, "base_dir", Path(self.base_dir).resolve())

    @classmethod
    def from_config(cls, config: AppConfig) -> Context:
        """Build a context from application configuration."""

        return cls(base_dir=config.base_dir, config=config.exec)

    def with_base_dir(self, path: str | os.PathLike[str]) -> Path:
        """Rebase a path on the base directory.

        Args:
            path: Relative or absolute path.

        Returns:
            Normalized absolute path. Absolute inputs keep their location.
        """

        return (self.base_dir / path).resolve()
