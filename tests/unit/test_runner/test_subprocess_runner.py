"""Tests for the subprocess runner."""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

import pytest

from orca_mcp.errors import OUTPUT_LIMIT, ProcessFailureError
from orca_mcp.runner import ProcessResult, SubprocessRunner


@pytest.fixture
def python_runner() -> SubprocessRunner:
    """Runner whose binary is the current Python interpreter."""
    return SubprocessRunner(sys.executable, default_timeout_ms=30_000)


def _is_running(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    # A killed but unreaped process is a zombie and no longer runs.
    stat_file = Path(f"/proc/{pid}/stat")
    if stat_file.exists():
        return stat_file.read_text().rsplit(")", 1)[1].split()[0] != "Z"
    return True


class TestSuccess:
    """Tests for successful runs."""

    def test_captures_output(self, python_runner: SubprocessRunner) -> None:
        """Test stdout and stderr are captured."""
        result = python_runner.run(
            ["-c", "import sys; print('out'); print('err', file=sys.stderr)"]
        )

        assert isinstance(result, ProcessResult)
        assert result.success
        assert result.exit_code == 0
        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"

    @pytest.mark.parametrize(
        "argument",
        [
            "with space.stl",
            "$(touch pwned)",
            "`id`",
            "a; rm -rf /",
            "quote ' and \" mix",
            "glob*?[x]",
            "pipe | tee",
        ],
    )
    def test_arguments_passed_verbatim(
        self, python_runner: SubprocessRunner, argument: str, tmp_path: Path, monkeypatch
    ) -> None:
        """Test metacharacters reach the binary untouched, with no shell step."""
        monkeypatch.chdir(tmp_path)
        result = python_runner.run(["-c", "import sys; sys.stdout.write(sys.argv[1])", argument])

        assert result.stdout == argument
        assert not (tmp_path / "pwned").exists()

    def test_output_truncated(self, python_runner: SubprocessRunner) -> None:
        """Test captured output is capped."""
        result = python_runner.run(["-c", "print('x' * 10000)"])
        assert len(result.stdout) == OUTPUT_LIMIT


class TestFailures:
    """Tests for the three failure modes."""

    def test_non_zero_exit(self, python_runner: SubprocessRunner) -> None:
        """Test a non-zero exit raises with code and stderr."""
        with pytest.raises(ProcessFailureError) as exc_info:
            python_runner.run(["-c", "import sys; sys.stderr.write('bad things'); sys.exit(4)"])

        error = exc_info.value
        assert error.exit_code == 4
        assert error.stderr == "bad things"
        assert "exited with code 4" in str(error)

    def test_stderr_in_error_truncated(self, python_runner: SubprocessRunner) -> None:
        """Test stderr embedded in the error is capped."""
        with pytest.raises(ProcessFailureError) as exc_info:
            python_runner.run(["-c", "import sys; sys.stderr.write('e' * 9000); sys.exit(1)"])
        assert len(exc_info.value.stderr) == OUTPUT_LIMIT

    def test_missing_binary(self, tmp_path: Path) -> None:
        """Test a nonexistent binary fails with no exit code and no output."""
        runner = SubprocessRunner(tmp_path / "does-not-exist")

        with pytest.raises(ProcessFailureError) as exc_info:
            runner.run(["--slice", "x.stl"])

        assert exc_info.value.exit_code is None
        assert exc_info.value.stderr == ""
        assert exc_info.value.details.get("stdout", "") == ""

    def test_timeout_kills_process(self, python_runner: SubprocessRunner) -> None:
        """Test exceeding the timeout terminates the child and reports no exit code."""
        started = time.monotonic()
        with pytest.raises(ProcessFailureError) as exc_info:
            python_runner.run(["-c", "import time; time.sleep(30)"], timeout_ms=300)

        assert time.monotonic() - started < 15
        assert exc_info.value.exit_code is None
        assert exc_info.value.timed_out is True
        assert "timed out after 300 ms" in str(exc_info.value)

    @pytest.mark.skipif(sys.platform == "win32", reason="process groups are POSIX only")
    def test_timeout_kills_grandchildren(
        self, python_runner: SubprocessRunner, tmp_path: Path
    ) -> None:
        """Test a launcher's own children die with it on timeout."""
        pid_file = tmp_path / "grandchild.pid"
        launcher = (
            "import subprocess, sys, time\n"
            "child = subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(60)'])\n"
            f"open({str(pid_file)!r}, 'w').write(str(child.pid))\n"
            "time.sleep(60)\n"
        )

        with pytest.raises(ProcessFailureError) as exc_info:
            python_runner.run(["-c", launcher], timeout_ms=2000)
        assert exc_info.value.timed_out is True

        grandchild = int(pid_file.read_text())
        deadline = time.monotonic() + 5
        while _is_running(grandchild) and time.monotonic() < deadline:
            time.sleep(0.05)
        assert not _is_running(grandchild)

    @pytest.mark.parametrize("timeout_ms", [0, -5])
    def test_rejects_non_positive_timeout(
        self, python_runner: SubprocessRunner, timeout_ms: int
    ) -> None:
        """Test the timeout must be positive."""
        with pytest.raises(ValueError):
            python_runner.run(["-c", "pass"], timeout_ms=timeout_ms)


class TestBinaryAvailable:
    """Tests for binary_available."""

    def test_present_and_missing(self, tmp_path: Path) -> None:
        """Test file presence is reported."""
        assert SubprocessRunner(sys.executable).binary_available()
        assert not SubprocessRunner(tmp_path / "nope").binary_available()
