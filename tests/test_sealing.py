"""Tests for secrets/sealing.py module."""

import threading

import pytest
from conftest import FakeRunner

from kubeseal_provider.exceptions import ProcessCancelledError, ProcessExecutionError, ProcessLaunchError
from kubeseal_provider.models import ProcessResult
from kubeseal_provider.secrets.sealing import SealInvocation, SealState, build_kubeseal_args, seal_secret

SECRET_BYTES = b'{"apiVersion":"v1","kind":"Secret"}'


class TestBuildKubesealArgs:
    """Tests for the kubeseal argument vector."""

    def test_args_without_namespace(self):
        """Test the argument order without a namespace."""
        assert build_kubeseal_args("strict", "ctx1") == ["--scope", "strict", "--context", "ctx1", "--format", "json"]

    def test_args_with_namespace(self):
        """Test that the namespace is appended last."""
        assert build_kubeseal_args("namespace-wide", "ctx1", "apps") == [
            "--scope",
            "namespace-wide",
            "--context",
            "ctx1",
            "--format",
            "json",
            "--namespace",
            "apps",
        ]


class TestSealSecret:
    """Tests for sealing through kubeseal."""

    def test_seal_success(self):
        """Test that stdout is returned verbatim and stdin carries the secret."""
        manifest = '{\n  "kind": "SealedSecret"\n}\n'
        runner = FakeRunner({"/bin/kubeseal": ProcessResult(stdout=manifest, stderr="warning: x", returncode=0)})

        result = seal_secret(SECRET_BYTES, "strict", "default", "ctx1", kubeseal="/bin/kubeseal", runner=runner)

        assert result == manifest
        call = runner.calls[0]
        assert call["command"] == "/bin/kubeseal"
        assert call["stdin"] == SECRET_BYTES
        assert call["args"][-2:] == ["--namespace", "default"]

    def test_seal_output_not_validated(self):
        """Test that non-JSON output is returned untouched."""
        runner = FakeRunner({"kubeseal": ProcessResult(stdout="not json at all", stderr="", returncode=0)})

        assert seal_secret(SECRET_BYTES, "strict", "", "ctx1", runner=runner) == "not json at all"

    def test_seal_passes_deadline_and_cancel(self):
        """Test that timeout and cancel reach the runner."""
        runner = FakeRunner({"kubeseal": ProcessResult(stdout="ok", stderr="", returncode=0)})
        cancel = threading.Event()

        seal_secret(SECRET_BYTES, "strict", "", "ctx1", runner=runner, timeout=3.0, cancel=cancel)

        assert runner.calls[0]["timeout"] == 3.0
        assert runner.calls[0]["cancel"] is cancel

    def test_seal_execution_failure(self):
        """Test that a non-zero exit carries the exit code and stderr."""
        runner = FakeRunner({"kubeseal": ProcessResult(stdout="", stderr="bad scope", returncode=1)})

        with pytest.raises(ProcessExecutionError) as exc_info:
            seal_secret(SECRET_BYTES, "bogus", "", "ctx1", runner=runner)

        assert exc_info.value.exit_code == 1
        assert exc_info.value.stderr == "bad scope"
        assert "bad scope" in str(exc_info.value)
        assert "exit code 1" in str(exc_info.value)

    def test_seal_stderr_kept_verbatim(self):
        """Test that multi-line stderr is not summarized."""
        stderr = "error: cannot fetch certificate\n  caused by: connection refused\n"
        runner = FakeRunner({"kubeseal": ProcessResult(stdout="", stderr=stderr, returncode=2)})

        with pytest.raises(ProcessExecutionError) as exc_info:
            seal_secret(SECRET_BYTES, "strict", "", "ctx1", runner=runner)

        assert exc_info.value.stderr == stderr
        assert stderr in str(exc_info.value)


class TestSealInvocation:
    """Tests for invocation state tracking."""

    def _invocation(self, result):
        return SealInvocation("kubeseal", build_kubeseal_args("strict", "ctx1"), runner=FakeRunner({"kubeseal": result}))

    def test_starts_idle(self):
        """Test that a new invocation is idle."""
        invocation = self._invocation(ProcessResult(stdout="ok", stderr="", returncode=0))
        assert invocation.state is SealState.IDLE

    def test_sealed_state(self):
        """Test that success ends in SEALED."""
        invocation = self._invocation(ProcessResult(stdout="ok", stderr="", returncode=0))
        invocation.run(SECRET_BYTES)
        assert invocation.state is SealState.SEALED

    def test_execution_failed_state(self):
        """Test that a non-zero exit ends in EXECUTION_FAILED."""
        invocation = self._invocation(ProcessResult(stdout="", stderr="nope", returncode=1))

        with pytest.raises(ProcessExecutionError):
            invocation.run(SECRET_BYTES)

        assert invocation.state is SealState.EXECUTION_FAILED

    def test_launch_failed_state(self):
        """Test that a launch failure ends in LAUNCH_FAILED and keeps the cause."""
        cause = FileNotFoundError(2, "No such file or directory")
        invocation = self._invocation(ProcessLaunchError("kubeseal", cause))

        with pytest.raises(ProcessLaunchError) as exc_info:
            invocation.run(SECRET_BYTES)

        assert exc_info.value.cause is cause
        assert invocation.state is SealState.LAUNCH_FAILED

    def test_cancelled_state(self):
        """Test that cancellation ends in CANCELLED."""
        invocation = self._invocation(ProcessCancelledError("kubeseal", "cancelled"))

        with pytest.raises(ProcessCancelledError):
            invocation.run(SECRET_BYTES)

        assert invocation.state is SealState.CANCELLED

    def test_runs_only_once(self):
        """Test that an invocation cannot be retried."""
        invocation = self._invocation(ProcessResult(stdout="", stderr="nope", returncode=1))

        with pytest.raises(ProcessExecutionError):
            invocation.run(SECRET_BYTES)
        with pytest.raises(RuntimeError):
            invocation.run(SECRET_BYTES)

        assert len(invocation.runner.calls) == 1
