"""Secret sealing through the kubeseal binary.

This module invokes kubeseal once per sealing request, feeding it the
canonical secret on stdin and returning the sealed manifest exactly as
kubeseal printed it.
"""

import threading
from enum import Enum

from icecream import ic

from kubeseal_provider.core.runner import ProcessRunner, SubprocessRunner
from kubeseal_provider.exceptions import (
    ProcessCancelledError,
    ProcessExecutionError,
    ProcessLaunchError,
)

# CLI flag constants for kubeseal
_FORMAT_JSON = ["--format", "json"]


class SealState(str, Enum):
    """Lifecycle of a single kubeseal invocation."""

    IDLE = "idle"
    INVOKING = "invoking"
    SEALED = "sealed"
    LAUNCH_FAILED = "launch-failed"
    EXECUTION_FAILED = "execution-failed"
    CANCELLED = "cancelled"


def build_kubeseal_args(scope: str, context_name: str, namespace: str = "") -> list[str]:
    """Build the kubeseal argument vector.

    Args:
        scope: The sealing scope, passed through verbatim.
        context_name: The kubeconfig context kubeseal should use.
        namespace: Namespace to seal for; omitted when empty.

    Returns:
        Arguments ready to follow the kubeseal binary path.

    """
    args: list[str] = ["--scope", scope, "--context", context_name, *_FORMAT_JSON]
    if namespace:
        args.extend(["--namespace", namespace])
    return args


class SealInvocation:
    """One kubeseal call and the state it ended in.

    An invocation runs at most once. It is never retried: a failure is
    terminal and is raised to the caller as-is.

    Attributes:
        kubeseal: Path to the kubeseal binary.
        args: Arguments passed to kubeseal.
        state: Current ``SealState``.

    """

    def __init__(
        self,
        kubeseal: str,
        args: list[str],
        *,
        runner: ProcessRunner | None = None,
    ) -> None:
        self.kubeseal = kubeseal
        self.args = args
        self.runner: ProcessRunner = runner or SubprocessRunner()
        self.state: SealState = SealState.IDLE

    def __repr__(self) -> str:
        return f"SealInvocation(kubeseal={self.kubeseal!r}, args={self.args!r}, state={self.state.value!r})"

    def run(
        self,
        secret_bytes: bytes,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> str:
        """Seal ``secret_bytes``.

        Args:
            secret_bytes: The canonical secret, written to kubeseal's stdin.
            timeout: Deadline in seconds for the kubeseal call.
            cancel: Event that aborts the call when set.

        Returns:
            kubeseal's standard output, unmodified.

        Raises:
            RuntimeError: If this invocation already ran.
            ProcessLaunchError: If kubeseal cannot be started.
            ProcessExecutionError: If kubeseal exits non-zero; carries its stderr.
            ProcessCancelledError: If the call is cancelled or times out.

        """
        if self.state is not SealState.IDLE:
            raise RuntimeError(f"kubeseal invocation already ran (state: {self.state.value})")

        self.state = SealState.INVOKING
        ic(self.kubeseal, self.args)

        try:
            result = self.runner.run(self.kubeseal, self.args, stdin=secret_bytes, timeout=timeout, cancel=cancel)
        except ProcessLaunchError:
            self.state = SealState.LAUNCH_FAILED
            raise
        except ProcessCancelledError:
            self.state = SealState.CANCELLED
            raise

        if result.returncode != 0:
            self.state = SealState.EXECUTION_FAILED
            raise ProcessExecutionError(self.kubeseal, result.returncode, result.stderr)

        self.state = SealState.SEALED
        return result.stdout


def seal_secret(
    secret_bytes: bytes,
    scope: str,
    namespace: str,
    context_name: str,
    *,
    kubeseal: str = "kubeseal",
    runner: ProcessRunner | None = None,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> str:
    """Seal a canonical secret with kubeseal.

    Args:
        secret_bytes: The canonical secret bytes.
        scope: The sealing scope.
        namespace: Namespace to seal for, or an empty string.
        context_name: The kubeconfig context kubeseal should use.
        kubeseal: Path to the kubeseal binary.
        runner: Process runner to use; a ``SubprocessRunner`` by default.
        timeout: Deadline in seconds for the kubeseal call.
        cancel: Event that aborts the call when set.

    Returns:
        The sealed manifest text.

    """
    invocation = SealInvocation(
        kubeseal,
        build_kubeseal_args(scope, context_name, namespace),
        runner=runner,
    )
    return invocation.run(secret_bytes, timeout=timeout, cancel=cancel)
