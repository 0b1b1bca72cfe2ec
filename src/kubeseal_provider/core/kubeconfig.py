"""Kubeconfig loading and validation.

This module reads the merged kubeconfig through ``kubectl config view`` and
turns the JSON document into a ``Configuration``. The document is validated
once, up front; any structural mismatch raises ``MalformedConfigError``
with the exact field path instead of surfacing later during a lookup.
"""

import json
import threading
from collections.abc import Mapping
from typing import Any

from icecream import ic

from kubeseal_provider.core.runner import ProcessRunner, SubprocessRunner
from kubeseal_provider.exceptions import MalformedConfigError, ProcessExecutionError
from kubeseal_provider.models import ClusterEntry, Configuration, ContextEntry

_CONFIG_VIEW_ARGS = ["config", "view", "-o", "json"]
_GET_CONTEXTS_ARGS = ["config", "get-contexts", "-o=name"]


def _shape(value: Any) -> str:
    """Describe a decoded JSON value by its JSON type name."""
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case str():
            return "string"
        case list() | tuple():
            return "array"
        case Mapping():
            return "object"
        case _:
            return type(value).__name__


def _require(parent: Mapping[str, Any], key: str, path: str, expected: type, expected_name: str) -> Any:
    """Fetch ``parent[key]`` and check its type.

    Args:
        parent: The mapping to read from.
        key: The key to read.
        path: Field path of ``key`` for error messages.
        expected: The Python type the value must have.
        expected_name: JSON name of that type for error messages.

    Returns:
        The value stored under ``key``.

    Raises:
        MalformedConfigError: If the key is missing or has the wrong type.

    """
    if key not in parent:
        raise MalformedConfigError(path, "missing", expected_name)
    value = parent[key]
    if not isinstance(value, expected):
        raise MalformedConfigError(path, _shape(value), expected_name)
    return value


def _entries(document: Mapping[str, Any], key: str) -> list[tuple[str, Mapping[str, Any]]]:
    """Return the items of a top-level list with their field paths.

    An absent or ``null`` list is treated as empty, which is what kubectl
    prints for a kubeconfig without clusters or contexts.
    """
    raw = document.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise MalformedConfigError(key, _shape(raw), "array")

    entries = []
    for index, item in enumerate(raw):
        path = f"{key}[{index}]"
        if not isinstance(item, Mapping):
            raise MalformedConfigError(path, _shape(item), "object")
        entries.append((path, item))
    return entries


def _parse_cluster(path: str, item: Mapping[str, Any]) -> ClusterEntry:
    name = _require(item, "name", f"{path}.name", str, "string")
    cluster = _require(item, "cluster", f"{path}.cluster", Mapping, "object")
    server = _require(cluster, "server", f"{path}.cluster.server", str, "string")
    return ClusterEntry(name=name, server=server)


def _parse_context(path: str, item: Mapping[str, Any]) -> ContextEntry:
    name = _require(item, "name", f"{path}.name", str, "string")
    context = _require(item, "context", f"{path}.context", Mapping, "object")
    cluster = _require(context, "cluster", f"{path}.context.cluster", str, "string")
    namespace = context.get("namespace")
    if namespace is None:
        namespace = ""
    elif not isinstance(namespace, str):
        raise MalformedConfigError(f"{path}.context.namespace", _shape(namespace), "string")
    return ContextEntry(name=name, cluster=cluster, namespace=namespace)


def parse_kubeconfig(document: str | bytes | Mapping[str, Any]) -> Configuration:
    """Parse a kubeconfig JSON document into a ``Configuration``.

    Only the clusters, contexts and current-context are read; users,
    preferences and extensions are ignored. A context referencing a cluster
    that does not exist is not an error here; that is checked only when the
    context is selected during resolution.

    Args:
        document: JSON text, or an already decoded mapping.

    Returns:
        The validated configuration, entries kept in declaration order.

    Raises:
        MalformedConfigError: If the document is not valid JSON or any
            field has an unexpected shape.

    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as err:
            raise MalformedConfigError("$", f"invalid JSON ({err})", "object") from err

    if not isinstance(document, Mapping):
        raise MalformedConfigError("$", _shape(document), "object")

    current_context = document.get("current-context") or ""
    if not isinstance(current_context, str):
        raise MalformedConfigError("current-context", _shape(current_context), "string")

    return Configuration(
        clusters=tuple(_parse_cluster(path, item) for path, item in _entries(document, "clusters")),
        contexts=tuple(_parse_context(path, item) for path, item in _entries(document, "contexts")),
        current_context=current_context,
    )


def _run_kubectl(
    kubectl: str,
    args: list[str],
    *,
    runner: ProcessRunner | None,
    timeout: float | None,
    cancel: threading.Event | None,
) -> str:
    """Run kubectl and return its output, failing on a non-zero exit."""
    runner = runner or SubprocessRunner()
    result = runner.run(kubectl, args, timeout=timeout, cancel=cancel)
    if result.returncode != 0:
        raise ProcessExecutionError(kubectl, result.returncode, result.stderr)
    return result.stdout


def load_kubeconfig(
    kubectl: str = "kubectl",
    *,
    runner: ProcessRunner | None = None,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> Configuration:
    """Load the merged kubeconfig of the host.

    Args:
        kubectl: Path to the kubectl binary.
        runner: Process runner to use; a ``SubprocessRunner`` by default.
        timeout: Deadline in seconds for the kubectl call.
        cancel: Event that aborts the kubectl call when set.

    Returns:
        A freshly parsed configuration snapshot.

    Raises:
        ProcessLaunchError: If kubectl cannot be started.
        ProcessExecutionError: If kubectl exits non-zero; carries its stderr.
        ProcessCancelledError: If the call is cancelled or times out.
        MalformedConfigError: If the output is not a valid kubeconfig.

    """
    output = _run_kubectl(kubectl, _CONFIG_VIEW_ARGS, runner=runner, timeout=timeout, cancel=cancel)
    config = parse_kubeconfig(output)
    ic(len(config.clusters), len(config.contexts))
    return config


def list_context_names(
    kubectl: str = "kubectl",
    *,
    runner: ProcessRunner | None = None,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> list[str]:
    """List the context names known to kubectl.

    Returns:
        Context names in the order kubectl prints them, blank lines dropped.

    """
    output = _run_kubectl(kubectl, _GET_CONTEXTS_ARGS, runner=runner, timeout=timeout, cancel=cancel)
    return [line.strip() for line in output.splitlines() if line.strip()]
