from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import pytest

from buildshell.context import Context
from buildshell.errors import AbnormalExitError, ExecTimeoutError
from buildshell.shell.exec import Exec

pytestmark = pytest.mark.skipif(os.name == "nt", reason="uses POSIX utilities")


def test_echo_with_capture(tmp_path: Path) -> None:
    result = Exec(Context(tmp_path)).command("echo", "hello").read_output().run()

    assert result.exit_code == 0
    assert result.output == b"hello\n"
    assert Path(result.command[0]).is_absolute()


def test_false_fails_with_abnormal_exit(tmp_path: Path) -> None:
    with pytest.raises(AbnormalExitError) as excinfo:
        Exec(Context(tmp_path)).command("false").run()

    assert excinfo.value.exit_code == 1


def test_sleep_is_killed_on_timeout(tmp_path: Path) -> None:
    start = time.monotonic()

    with pytest.raises(ExecTimeoutError):
        Exec(Context(tmp_path)).command("sleep", "5").timeout(0.1).run()

    assert time.monotonic() - start < 3


def test_captured_sleep_is_killed_on_timeout(tmp_path: Path) -> None:
    start = time.monotonic()

    with pytest.raises(ExecTimeoutError) as excinfo:
        Exec(Context(tmp_path)).command("sleep", "5").read_output().timeout(0.1).run()

    assert time.monotonic() - start < 3
    assert excinfo.value.timeout_s == 0.1


def test_timed_out_child_is_no_longer_running(tmp_path: Path) -> None:
    pid_file = tmp_path / "child.pid"
    script = (
        "import os, sys, time\n"
        "open(sys.argv[1], 'w').write(str(os.getpid()))\n"
        "time.sleep(30)\n"
    )

    with pytest.raises(ExecTimeoutError):
        Exec(Context(tmp_path)).command(sys.executable, "-c", script, pid_file).timeout(3).run()

    pid = int(pid_file.read_text())
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)


def test_capture_preserves_write_order_across_streams(tmp_path: Path) -> None:
    script = (
        "import sys\n"
        "sys.stdout.write('out1 '); sys.stdout.flush()\n"
        "sys.stderr.write('err '); sys.stderr.flush()\n"
        "sys.stdout.write('out2'); sys.stdout.flush()\n"
    )

    result = Exec(Context(tmp_path)).command(sys.executable, "-c", script).read_output().run()

    assert result.output == b"out1 err out2"


def test_passthrough_does_not_capture(tmp_path: Path) -> None:
    result = Exec(Context(tmp_path)).command("echo", "visible").run()

    assert result.exit_code == 0
    assert result.output is None


def test_child_sees_working_dir_and_env(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    script = "import os; print(os.getcwd()); print(os.environ['BUILDSHELL_TEST'])"

    result = (
        Exec(Context(tmp_path))
        .command(sys.executable, "-c", script)
        .working_dir("sub")
        .env("BUILDSHELL_TEST", "value")
        .read_output()
        .run()
    )

    cwd, env_value = result.output_lines()
    assert Path(cwd).resolve() == (tmp_path / "sub").resolve()
    assert env_value == "value"
