"""Data models for kubeseal-provider.

This module provides type-safe data structures for the package: the
parsed kubeconfig, the resolved context, the secret declaration and
the sealed result.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

from kubeseal_provider.exceptions import SecretSpecError

DEFAULT_SECRET_TYPE = "Opaque"


class SealingScope(str, Enum):
    """Scopes understood by ``kubeseal --scope``.

    Inherits from str to allow direct use in command-line arguments.
    """

    STRICT = "strict"
    NAMESPACE_WIDE = "namespace-wide"
    CLUSTER_WIDE = "cluster-wide"


class ProcessResult(NamedTuple):
    """Captured output of a finished external process.

    Attributes:
        stdout: The decoded standard output.
        stderr: The decoded standard error.
        returncode: The process exit code.

    """

    stdout: str
    stderr: str
    returncode: int


@dataclass(frozen=True, slots=True)
class ClusterEntry:
    """A named cluster and the apiServer endpoint it points at."""

    name: str
    server: str


@dataclass(frozen=True, slots=True)
class ContextEntry:
    """A named context referencing a cluster and an optional namespace."""

    name: str
    cluster: str
    namespace: str = ""


@dataclass(frozen=True, slots=True)
class Configuration:
    """A parsed, merged kubeconfig snapshot.

    Names need not be unique; lookups treat the first entry in
    declaration order as authoritative.

    Attributes:
        clusters: Cluster entries in declaration order.
        contexts: Context entries in declaration order.
        current_context: The document's ``current-context`` value, if any.

    """

    clusters: tuple[ClusterEntry, ...] = ()
    contexts: tuple[ContextEntry, ...] = ()
    current_context: str = ""

    @property
    def context_names(self) -> list[str]:
        """Context names in declaration order."""
        return [context.name for context in self.contexts]


@dataclass(frozen=True, slots=True)
class ResolvedContext:
    """A context/cluster pair matched during resolution.

    Attributes:
        context_name: The kubeconfig context to pass to kubeseal.
        cluster_name: The cluster the context references.
        server_endpoint: The cluster's apiServer endpoint.
        namespace: The context's default namespace, or an empty string.

    """

    context_name: str
    cluster_name: str
    server_endpoint: str
    namespace: str = ""


def _frozen_mapping(value: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(value or {}))


def _frozen_data(value: Mapping[str, bytes | str] | None) -> Mapping[str, bytes] | None:
    if value is None:
        return None

    data: dict[str, bytes] = {}
    for key, item in value.items():
        if isinstance(item, str):
            data[key] = item.encode("utf-8")
        elif isinstance(item, (bytes, bytearray, memoryview)):
            data[key] = bytes(item)
        else:
            raise SecretSpecError(f"data value for `{key}` must be str or bytes, got {type(item).__name__}")
    return MappingProxyType(data)


@dataclass(frozen=True, slots=True)
class SecretSpec:
    """A declared secret, immutable for the lifetime of one build.

    Mappings are copied into read-only views on construction, so changing
    any field means declaring a new spec. ``str`` data values are stored
    as their UTF-8 bytes.

    Attributes:
        name: The secret name (required).
        namespace: Target namespace, empty for none.
        secret_type: The Kubernetes secret type.
        labels: Metadata labels.
        annotations: Metadata annotations.
        data: Secret payload, key to raw bytes.

    """

    name: str
    data: Mapping[str, bytes] | None = field(default_factory=dict)
    namespace: str = ""
    secret_type: str = DEFAULT_SECRET_TYPE
    labels: Mapping[str, str] = field(default_factory=dict)
    annotations: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _frozen_data(self.data))
        object.__setattr__(self, "labels", _frozen_mapping(self.labels))
        object.__setattr__(self, "annotations", _frozen_mapping(self.annotations))
        object.__setattr__(self, "namespace", self.namespace or "")
        object.__setattr__(self, "secret_type", self.secret_type or DEFAULT_SECRET_TYPE)

    def __repr__(self) -> str:
        """Return a representation that does not leak secret values."""
        keys = sorted(self.data) if self.data is not None else None
        return (
            f"SecretSpec(name={self.name!r}, namespace={self.namespace!r}, "
            f"secret_type={self.secret_type!r}, data_keys={keys!r})"
        )


@dataclass(frozen=True, slots=True)
class SealedResult:
    """The outcome of one sealing pipeline run.

    Attributes:
        manifest: The sealed manifest text exactly as kubeseal printed it.
        content_hash: SHA-256 of the canonical secret, 64 lowercase hex chars.

    """

    manifest: str
    content_hash: str
