"""Utility helpers package."""

from buildshell.util.logging import configure_logging, get_logger
from buildshell.util.observability import (
    EventLogger,
    MetricsCollector,
    ObservabilityManager,
    create_observability_manager,
)

__all__ = [
    "EventLogger",
    "MetricsCollector",
    "ObservabilityManager",
    "configure_logging",
    "create_observability_manager",
    "get_logger",
]
