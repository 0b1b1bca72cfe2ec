"""Sealed secret provider facade.

This module provides ``SealedSecretProvider``, the main entry point that
runs the whole pipeline for a declared secret: load the kubeconfig,
resolve the context for the configured server, build the secret, seal it
and hash it. Tool paths and the server address travel in an immutable
``ProviderConfig`` so that independent pipeline runs need no coordination.
"""

import shutil
import threading
from dataclasses import dataclass
from pathlib import Path

from icecream import ic

from kubeseal_provider.core.kubeconfig import load_kubeconfig
from kubeseal_provider.core.resolver import resolve_by_context_name, resolve_by_endpoint
from kubeseal_provider.core.runner import ProcessRunner, SubprocessRunner
from kubeseal_provider.exceptions import BinaryNotFoundError
from kubeseal_provider.models import Configuration, ResolvedContext, SealedResult, SecretSpec
from kubeseal_provider.secrets.builder import build_secret, serialize_secret
from kubeseal_provider.secrets.hashing import content_hash, secret_content_hash
from kubeseal_provider.secrets.sealing import seal_secret


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Immutable settings shared by every pipeline run.

    Attributes:
        server_address: apiServer endpoint the secrets are sealed for.
        kubeseal: Path to the kubeseal binary.
        kubectl: Path to the kubectl binary.
        timeout: Deadline in seconds for each external call, or None.

    """

    server_address: str
    kubeseal: str
    kubectl: str
    timeout: float | None = None


def _locate_binary(name: str, path: str | None) -> str:
    """Return the binary path to use, defaulting to the one on PATH.

    Raises:
        BinaryNotFoundError: If no path was given and the binary is not on
            PATH, or the given path does not exist.

    """
    if path is None:
        path = shutil.which(name)
        if path is None:
            raise BinaryNotFoundError(f"{name} binary not found. Please install {name} or ensure it's in your PATH.")
    if not Path(path).exists():
        raise BinaryNotFoundError(f"{name} command doesn't exist at {path}")
    return path


def configure_provider(
    server_address: str,
    *,
    kubeseal: str | None = None,
    kubectl: str | None = None,
    timeout: float | None = None,
) -> ProviderConfig:
    """Build a ``ProviderConfig`` after checking both binaries exist.

    Args:
        server_address: apiServer endpoint the secrets are sealed for.
        kubeseal: Path to kubeseal; looked up on PATH when omitted.
        kubectl: Path to kubectl; looked up on PATH when omitted.
        timeout: Deadline in seconds for each external call.

    Returns:
        The validated configuration.

    Raises:
        BinaryNotFoundError: If either binary cannot be found.

    """
    config = ProviderConfig(
        server_address=server_address,
        kubeseal=_locate_binary("kubeseal", kubeseal),
        kubectl=_locate_binary("kubectl", kubectl),
        timeout=timeout,
    )
    ic(config)
    return config


class SealedSecretProvider:
    """Runs sealing pipelines for one ``ProviderConfig``.

    Nothing is cached between calls: each operation reloads the kubeconfig
    and resolves the context again, so the provider can be shared by
    concurrent pipeline runs.

    Attributes:
        config: The provider configuration.
        runner: Process runner used for kubectl and kubeseal.

    """

    def __init__(self, config: ProviderConfig, runner: ProcessRunner | None = None) -> None:
        self.config = config
        self.runner: ProcessRunner = runner or SubprocessRunner()

    def __repr__(self) -> str:
        return f"SealedSecretProvider(server_address={self.config.server_address!r})"

    def load_config(self, cancel: threading.Event | None = None) -> Configuration:
        """Load a fresh kubeconfig snapshot through kubectl."""
        return load_kubeconfig(
            self.config.kubectl,
            runner=self.runner,
            timeout=self.config.timeout,
            cancel=cancel,
        )

    def resolve_context(self, cancel: threading.Event | None = None) -> ResolvedContext:
        """Resolve the context serving the configured server address.

        Raises:
            NoClusterError: If no cluster uses the server address.
            NoContextError: If no context references the matched cluster.

        """
        return resolve_by_endpoint(self.load_config(cancel), self.config.server_address)

    def endpoint_for_context(self, name: str, cancel: threading.Event | None = None) -> ResolvedContext:
        """Look up the cluster and endpoint behind a named context.

        Raises:
            NoContextError: If no context has that name.
            MissingClusterError: If the context references an unknown cluster.

        """
        return resolve_by_context_name(self.load_config(cancel), name)

    def create(self, spec: SecretSpec, scope: str, cancel: threading.Event | None = None) -> SealedResult:
        """Seal a declared secret and compute its content hash.

        Args:
            spec: The declared secret.
            scope: The kubeseal scope.
            cancel: Event that aborts the external calls when set.

        Returns:
            The sealed manifest and the content hash identifying it.

        Raises:
            KubesealProviderError: Any failure aborts the run; no partial
                result is returned.

        """
        context = self.resolve_context(cancel)
        secret_bytes = serialize_secret(build_secret(spec))

        manifest = seal_secret(
            secret_bytes,
            scope,
            spec.namespace,
            context.context_name,
            kubeseal=self.config.kubeseal,
            runner=self.runner,
            timeout=self.config.timeout,
            cancel=cancel,
        )

        result = SealedResult(manifest=manifest, content_hash=content_hash(secret_bytes))
        ic(result.content_hash)
        return result

    @staticmethod
    def read(spec: SecretSpec) -> str:
        """Recompute the content hash of a declared secret without sealing it."""
        return secret_content_hash(spec)

    def requires_replacement(self, spec: SecretSpec, recorded_hash: str) -> bool:
        """Tell whether a declaration differs from the one that was sealed.

        Every declared input is replace-only, so any difference means the
        sealed secret must be created again rather than updated in place.
        """
        return self.read(spec) != recorded_hash

    @staticmethod
    def delete(recorded_hash: str) -> None:
        """Forget a sealed secret.

        The sealed manifest lives with the caller, so there is nothing to
        remove on this side.
        """
        ic(recorded_hash)
