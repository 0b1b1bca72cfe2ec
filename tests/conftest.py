"""Shared test fixtures for kubeseal-provider tests."""

import json
from collections.abc import Sequence
from unittest.mock import patch

import pytest

from kubeseal_provider.core.provider import ProviderConfig
from kubeseal_provider.models import ProcessResult, SecretSpec


class FakeRunner:
    """ProcessRunner that replays canned results instead of spawning processes.

    Results are looked up by the executable name. A result may be an
    exception instance, which is raised instead of returned.
    """

    def __init__(self, results: dict[str, ProcessResult | BaseException] | None = None) -> None:
        self.results = dict(results or {})
        self.calls: list[dict] = []

    def run(self, command: str, args: Sequence[str], *, stdin=None, timeout=None, cancel=None) -> ProcessResult:
        self.calls.append({"command": command, "args": list(args), "stdin": stdin, "timeout": timeout, "cancel": cancel})
        result = self.results[command]
        if isinstance(result, BaseException):
            raise result
        return result

    def calls_to(self, command: str) -> list[dict]:
        return [call for call in self.calls if call["command"] == command]


def kubeconfig_json(clusters: list[tuple[str, str]], contexts: list[tuple[str, str]], current: str = "") -> str:
    """Render a kubectl ``config view -o json`` document."""
    return json.dumps(
        {
            "kind": "Config",
            "apiVersion": "v1",
            "clusters": [{"name": name, "cluster": {"server": server}} for name, server in clusters],
            "contexts": [{"name": name, "context": {"cluster": cluster, "user": "admin"}} for name, cluster in contexts],
            "current-context": current,
            "users": [{"name": "admin", "user": {"token": "redacted"}}],
        }
    )


@pytest.fixture
def scenario_config_json():
    """Single cluster c1 at https://1.2.3.4 used by context ctx1."""
    return kubeconfig_json(clusters=[("c1", "https://1.2.3.4")], contexts=[("ctx1", "c1")], current="ctx1")


@pytest.fixture
def fake_runner(scenario_config_json):
    """Runner where kubectl prints the scenario kubeconfig and kubeseal succeeds."""
    return FakeRunner(
        {
            "kubectl": ProcessResult(stdout=scenario_config_json, stderr="", returncode=0),
            "kubeseal": ProcessResult(stdout='{"kind": "SealedSecret"}\n', stderr="", returncode=0),
        }
    )


@pytest.fixture
def provider_config():
    """ProviderConfig pointing at bare tool names."""
    return ProviderConfig(server_address="https://1.2.3.4", kubeseal="kubeseal", kubectl="kubectl")


@pytest.fixture
def sample_spec():
    """A fully declared secret."""
    return SecretSpec(
        name="db-credentials",
        namespace="default",
        labels={"app": "db", "tier": "backend"},
        annotations={"owner": "platform"},
        data={"username": b"admin", "password": b"s3cr3t"},
    )


@pytest.fixture
def mock_which():
    """Mock shutil.which so kubectl and kubeseal are found on PATH."""
    with patch("kubeseal_provider.core.provider.shutil.which") as mock:
        mock.side_effect = lambda name: f"/usr/local/bin/{name}"
        yield mock


@pytest.fixture
def sample_spec_yaml():
    """Sample secret declaration file content."""
    return """name: db-credentials
namespace: default
labels:
  app: db
annotations:
  owner: platform
data:
  username: admin
  password: s3cr3t
"""
