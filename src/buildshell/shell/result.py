"""Result type for command invocations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExecResult:
    """Result of a completed command invocation.

    Attributes:
        command: The argument vector executed, resolved executable first.
        exit_code: Exit code returned by the process.
        output: Combined stdout and stderr bytes when capture was enabled,
            otherwise None.
        duration_s: Wall-clock duration of the execution in seconds.
    """

    command: tuple[str, ...]
    exit_code: int
    output: bytes | None = None
    duration_s: float = 0.0

    def output_text(self, encoding: str = "utf-8", errors: str = "replace") -> str:
        """Return the captured output decoded as text, or "" if none."""

        if self.output is None:
            return ""
        return self.output.decode(encoding, errors)

    def output_lines(self, encoding: str = "utf-8") -> list[str]:
        """Return the captured output split into lines."""

        return self.output_text(encoding).splitlines()
