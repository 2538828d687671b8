from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Any

import pytest

from buildshell.shell.runtime import LocalProcessRuntime, RedirectMode


def _fake_run(calls: dict[str, Any], stdout: bytes | None = b"ok") -> Any:
    def fake_run(*args: Any, **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        calls["args"] = args
        calls["kwargs"] = kwargs
        return subprocess.CompletedProcess(args[0], 3, stdout=stdout, stderr=None)

    return fake_run


def test_local_runtime_captures_combined_output(monkeypatch: Any) -> None:
    calls: dict[str, Any] = {}
    monkeypatch.setattr(subprocess, "run", _fake_run(calls))

    outcome = LocalProcessRuntime().execute(
        ["/bin/echo", "hi"],
        cwd=Path("/tmp"),
        redirect=RedirectMode.CAPTURE,
        timeout_s=5,
    )

    assert outcome.exit_code == 3
    assert outcome.output == b"ok"
    kwargs = calls["kwargs"]
    assert calls["args"][0] == ["/bin/echo", "hi"]
    assert kwargs["cwd"] == "/tmp"
    assert kwargs["timeout"] == 5
    assert kwargs["stdout"] is subprocess.PIPE
    assert kwargs["stderr"] is subprocess.STDOUT
    assert kwargs["check"] is False


@pytest.mark.parametrize(
    ("mode", "expected_stderr"),
    [(RedirectMode.MERGE, subprocess.STDOUT), (RedirectMode.INHERIT, None)],
)
def test_local_runtime_passthrough_modes_do_not_capture(
    monkeypatch: Any, mode: RedirectMode, expected_stderr: Any
) -> None:
    calls: dict[str, Any] = {}
    monkeypatch.setattr(subprocess, "run", _fake_run(calls, stdout=None))

    outcome = LocalProcessRuntime().execute(["/bin/true"], cwd=Path("/tmp"), redirect=mode)

    assert outcome.output is None
    assert calls["kwargs"]["stdout"] is None
    assert calls["kwargs"]["stderr"] is expected_stderr
    assert calls["kwargs"]["timeout"] is None


def test_local_runtime_merges_environment(monkeypatch: Any) -> None:
    calls: dict[str, Any] = {}
    monkeypatch.setattr(subprocess, "run", _fake_run(calls))

    LocalProcessRuntime().execute(["/bin/true"], cwd=Path("/tmp"), env={"EXTRA_ENV": "yes"})

    merged_env = calls["kwargs"]["env"]
    assert merged_env["EXTRA_ENV"] == "yes"
    assert os.environ.items() <= merged_env.items()


def test_local_runtime_env_overrides_inherited_value(monkeypatch: Any) -> None:
    calls: dict[str, Any] = {}
    monkeypatch.setattr(subprocess, "run", _fake_run(calls))
    monkeypatch.setenv("BUILDSHELL_OVERRIDE", "inherited")

    LocalProcessRuntime().execute(
        ["/bin/true"], cwd=Path("/tmp"), env={"BUILDSHELL_OVERRIDE": "configured"}
    )

    assert calls["kwargs"]["env"]["BUILDSHELL_OVERRIDE"] == "configured"
