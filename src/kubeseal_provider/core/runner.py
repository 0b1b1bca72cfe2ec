"""External process execution.

This module provides the process-running capability used to call kubectl
and kubeseal. Callers depend on the ``ProcessRunner`` protocol, so tests can
substitute a fake that never spawns a subprocess.
"""

import os
import signal
import subprocess
import threading
import time
from collections.abc import Sequence
from typing import Protocol

from icecream import ic

from kubeseal_provider.exceptions import ProcessCancelledError, ProcessLaunchError
from kubeseal_provider.models import ProcessResult

# How often a running child is checked for cancellation, in seconds
_POLL_INTERVAL = 0.1
# How long a killed child may take to release its pipes, in seconds
_REAP_TIMEOUT = 2.0


class ProcessRunner(Protocol):
    """Runs an external command and captures its output."""

    def run(
        self,
        command: str,
        args: Sequence[str],
        *,
        stdin: bytes | None = None,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> ProcessResult:
        """Run ``command`` with ``args`` and wait for it to finish.

        Args:
            command: Path or name of the executable.
            args: Arguments passed after the command.
            stdin: Bytes written to the process input stream.
            timeout: Deadline in seconds after which the process is killed.
            cancel: Event that aborts the process when set.

        Returns:
            The captured output and exit code.

        Raises:
            ProcessLaunchError: If the process cannot be started.
            ProcessCancelledError: If the deadline passes or ``cancel`` is set.

        """
        ...


class SubprocessRunner:
    """``ProcessRunner`` backed by :class:`subprocess.Popen`.

    The child is polled while it runs so that a set cancellation event or an
    expired deadline kills it promptly instead of blocking the caller. Each
    child starts its own session, so helpers it spawns (kubeconfig exec
    credential plugins, for example) are killed along with it.
    """

    def __init__(self, poll_interval: float = _POLL_INTERVAL, reap_timeout: float = _REAP_TIMEOUT) -> None:
        self.poll_interval = poll_interval
        self.reap_timeout = reap_timeout

    def __repr__(self) -> str:
        return f"SubprocessRunner(poll_interval={self.poll_interval!r}, reap_timeout={self.reap_timeout!r})"

    def run(
        self,
        command: str,
        args: Sequence[str],
        *,
        stdin: bytes | None = None,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> ProcessResult:
        cmd: list[str] = [command, *args]
        ic(cmd)

        if cancel is not None and cancel.is_set():
            raise ProcessCancelledError(command, "cancelled before start")

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE if stdin is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as err:
            raise ProcessLaunchError(command, err) from err

        deadline = time.monotonic() + timeout if timeout is not None else None
        pending_input = stdin

        while True:
            wait = self.poll_interval
            if deadline is not None:
                wait = min(wait, max(deadline - time.monotonic(), 0))
            try:
                # Input is only written on the first call; retries keep reading output
                stdout, stderr = proc.communicate(input=pending_input, timeout=wait)
                break
            except subprocess.TimeoutExpired:
                pending_input = None
                if cancel is not None and cancel.is_set():
                    self._kill(proc)
                    raise ProcessCancelledError(command, "cancelled") from None
                if deadline is not None and time.monotonic() >= deadline:
                    self._kill(proc)
                    raise ProcessCancelledError(command, f"deadline of {timeout}s exceeded") from None

        result = ProcessResult(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            returncode=proc.returncode,
        )
        ic(result.returncode)
        return result

    def _kill(self, proc: subprocess.Popen) -> None:
        """Kill a child with its process group and reap it.

        A helper that left the group may still hold the output pipes open;
        after ``reap_timeout`` the pipes are closed instead of waiting for it.
        """
        if hasattr(os, "killpg"):
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
        else:
            proc.kill()

        try:
            proc.communicate(timeout=self.reap_timeout)
        except subprocess.TimeoutExpired:
            for stream in (proc.stdin, proc.stdout, proc.stderr):
                if stream is not None:
                    stream.close()
            proc.wait()
