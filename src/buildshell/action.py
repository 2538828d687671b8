"""Single-use actions executed by build scripts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar

from buildshell.context import Context
from buildshell.errors import ExecError
from buildshell.util.logging import get_logger
from buildshell.util.observability import ObservabilityManager, create_observability_manager

T = TypeVar("T")


class ActionStateError(RuntimeError):
    """Raised when an action is configured or run out of order."""


class ActionState(str, Enum):
    """Lifecycle stages of an action; COMPLETED and FAILED are terminal."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


class Action(ABC, Generic[T]):
    """Base class for a configurable unit of work that runs exactly once.

    Subclasses expose fluent setters that call ``_configure`` (or
    ``_ensure_mutable``) and implement ``_do_run``. ``run`` drives the
    lifecycle: ``UNCONFIGURED -> CONFIGURED -> EXECUTING`` and then
    ``COMPLETED`` or ``FAILED``, both terminal.
    """

    def __init__(
        self,
        context: Context,
        observability: ObservabilityManager | None = None,
    ) -> None:
        self.context = context
        self._observability = observability or create_observability_manager(
            {"base_dir": str(context.base_dir)}
        )
        self._state = ActionState.UNCONFIGURED
        self._logger = get_logger(f"buildshell.{self.name}")

    @property
    def name(self) -> str:
        """Short name used for logging and metrics."""

        return self.__class__.__name__.lower()

    @property
    def state(self) -> ActionState:
        """Current lifecycle stage."""

        return self._state

    def run(self) -> T:
        """Execute the action.

        Returns:
            The value produced by the action.

        Raises:
            ActionStateError: If the action is unconfigured or already ran.
            ExecError: If execution fails.
        """

        if self._state is ActionState.UNCONFIGURED:
            raise ActionStateError(f"{self.name} action run before being configured")
        if self._state is not ActionState.CONFIGURED:
            raise ActionStateError(
                f"{self.name} action already {self._state.value}; create a new action to run again"
            )

        self._state = ActionState.EXECUTING
        metrics = self._observability.metrics
        metrics.increment(f"{self.name}.runs")
        self._observability.log_event("action.started", {"action": self.name})
        try:
            with self._observability.track_duration(self.name):
                result = self._do_run()
        except ExecError as exc:
            self._state = ActionState.FAILED
            metrics.increment(f"{self.name}.failed.{exc.kind.value}")
            self._logger.warning("%s", exc)
            self._observability.log_event(
                "action.failed",
                {"action": self.name, "kind": exc.kind.value, "command": exc.command},
                level="WARNING",
            )
            raise
        except BaseException:
            self._state = ActionState.FAILED
            raise

        self._state = ActionState.COMPLETED
        metrics.increment(f"{self.name}.completed")
        self._observability.log_event("action.completed", {"action": self.name})
        return result

    def _configure(self) -> None:
        self._ensure_mutable()
        self._state = ActionState.CONFIGURED

    def _ensure_mutable(self) -> None:
        if self._state not in (ActionState.UNCONFIGURED, ActionState.CONFIGURED):
            raise ActionStateError(
                f"{self.name} action cannot be reconfigured once {self._state.value}"
            )

    @abstractmethod
    def _do_run(self) -> T:
        """Perform the action's single effect."""
