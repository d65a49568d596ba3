"""Argument-vector execution of the external slicer binary."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from orca_mcp.config.settings import SLICE_TIMEOUT_MS
from orca_mcp.errors import ProcessFailureError, truncate_output

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Immutable result from a completed process.

    Output fields are already truncated to ``OUTPUT_LIMIT`` characters.
    """

    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class SubprocessRunner:
    """Runs one binary with an explicit argument vector and a timeout.

    No shell is involved: each argument reaches the binary verbatim, whatever
    spaces, quotes or metacharacters it contains.

    Example:
        >>> runner = SubprocessRunner("/usr/bin/orca-slicer")
        >>> result = runner.run(["--slice", "/work/cube.stl", "-o", "/work/cube.gcode"])
    """

    def __init__(
        self,
        binary_path: str | Path,
        *,
        default_timeout_ms: int = SLICE_TIMEOUT_MS,
    ) -> None:
        """Initialize the runner.

        Args:
            binary_path: Executable to invoke.
            default_timeout_ms: Timeout used when ``run`` is given none.
        """
        self.binary_path = str(binary_path)
        self.default_timeout_ms = default_timeout_ms

    def binary_available(self) -> bool:
        return os.path.isfile(self.binary_path)

    def run(self, argv: Sequence[str], timeout_ms: int | None = None) -> ProcessResult:
        """Execute the binary and wait for it.

        Args:
            argv: Arguments passed after the binary path.
            timeout_ms: Milliseconds before the process is killed.

        Returns:
            ProcessResult for a zero exit status.

        Raises:
            ProcessFailureError: On non-zero exit, spawn failure or timeout.
        """
        timeout_ms = timeout_ms if timeout_ms is not None else self.default_timeout_ms
        if timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")

        command = [self.binary_path, *(str(arg) for arg in argv)]
        logger.info("Running external process", extra={"binary": self.binary_path, "argv": command[1:]})

        try:
            proc = subprocess.Popen(
                command,
                shell=False,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise ProcessFailureError(
                f"Failed to start {self.binary_path}: {e}",
                exit_code=None,
                stderr="",
            ) from e

        try:
            raw_stdout, raw_stderr = proc.communicate(timeout=timeout_ms / 1000)
        except subprocess.TimeoutExpired:
            _kill_process_group(proc)
            proc.communicate()
            raise ProcessFailureError(
                f"Process timed out after {timeout_ms} ms: {self.binary_path}",
                exit_code=None,
                stderr="",
                timed_out=True,
            ) from None
        except BaseException:
            _kill_process_group(proc)
            proc.wait()
            raise

        stdout = truncate_output(raw_stdout)
        stderr = truncate_output(raw_stderr)

        if proc.returncode != 0:
            raise ProcessFailureError(
                f"Process exited with code {proc.returncode}: {self.binary_path}\n{stderr}".rstrip(),
                exit_code=proc.returncode,
                stderr=stderr,
                stdout=stdout,
            )

        return ProcessResult(exit_code=proc.returncode, stdout=stdout, stderr=stderr)


def _kill_process_group(proc: subprocess.Popen[bytes]) -> None:
    """Kill the child and anything it spawned.

    The child leads its own session, so its pid is also the process group id.
    The group can outlive the child, so it is signalled even after the child exits.
    """
    try:
        if hasattr(os, "killpg"):
            os.killpg(proc.pid, signal.SIGKILL)
        elif proc.poll() is None:
            proc.kill()
    except ProcessLookupError:
        pass
