"""Executable resolution for command invocations."""

from __future__ import annotations

import os
import shutil
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path


class Resolver(ABC):
    """Maps a logical command name to an executable on disk."""

    @abstractmethod
    def resolve(self, name: str) -> Path | None:
        """Resolve a command name.

        Args:
            name: Bare command name (e.g. "git") or a path to an executable.

        Returns:
            Absolute path to the executable, or None when not found.
        """


class Which(Resolver):
    """PATH-style lookup with extra search directories checked first."""

    def __init__(
        self,
        paths: Iterable[str | os.PathLike[str]] = (),
        *,
        base_dir: Path | None = None,
        search_path: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            paths: Extra directories searched before ``PATH``. Relative entries
                are rebased on ``base_dir``.
            base_dir: Directory that relative names and paths resolve against.
                Defaults to the current working directory.
            search_path: ``os.pathsep`` separated search path used instead of
                the ``PATH`` environment variable.
        """

        self._base_dir = (base_dir or Path.cwd()).resolve()
        self._paths = [self._base_dir / path for path in paths]
        self._search_path = search_path

    @property
    def paths(self) -> list[Path]:
        """Extra directories searched before ``PATH``."""

        return list(self._paths)

    def resolve(self, name: str) -> Path | None:
        if not name:
            return None
        if _has_directory_part(name):
            found = shutil.which(str(self._base_dir / name))
        else:
            found = shutil.which(name, path=self._build_search_path())
        if found is None:
            return None
        return Path(os.path.abspath(found))

    def _build_search_path(self) -> str:
        search_path = self._search_path
        if search_path is None:
            search_path = os.environ.get("PATH", os.defpath)
        entries = [str(path) for path in self._paths]
        if search_path:
            entries.append(search_path)
        return os.pathsep.join(entries)


def _has_directory_part(name: str) -> bool:
    return os.sep in name or (os.altsep is not None and os.altsep in name)
