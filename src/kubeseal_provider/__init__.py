"""kubeseal-provider: seal Kubernetes secrets for a given apiServer endpoint.

This package resolves which kubeconfig context reaches a target apiServer,
builds a canonical Secret manifest from a declaration, seals it with the
kubeseal binary and computes a content hash that identifies the secret.

Example usage:
    from kubeseal_provider import SealedSecretProvider, SecretSpec, configure_provider

    config = configure_provider("https://1.2.3.4")
    provider = SealedSecretProvider(config)
    result = provider.create(SecretSpec(name="db", data={"password": b"s3cr3t"}), scope="strict")
    print(result.content_hash)
"""

__version__ = "0.1.0"

from kubeseal_provider.cli import cli
from kubeseal_provider.core.provider import ProviderConfig, SealedSecretProvider, configure_provider
from kubeseal_provider.exceptions import (
    BinaryNotFoundError,
    KubesealProviderError,
    MalformedConfigError,
    MissingClusterError,
    NoClusterError,
    NoContextError,
    ProcessCancelledError,
    ProcessExecutionError,
    ProcessLaunchError,
    ResolutionError,
    SecretParsingError,
    SecretSpecError,
    SerializationError,
    ToolError,
)
from kubeseal_provider.models import (
    ClusterEntry,
    Configuration,
    ContextEntry,
    ResolvedContext,
    SealedResult,
    SealingScope,
    SecretSpec,
)

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Provider
    "ProviderConfig",
    "SealedSecretProvider",
    "configure_provider",
    # Models
    "ClusterEntry",
    "Configuration",
    "ContextEntry",
    "ResolvedContext",
    "SealedResult",
    "SealingScope",
    "SecretSpec",
    # Exceptions
    "KubesealProviderError",
    "ResolutionError",
    "NoClusterError",
    "NoContextError",
    "MissingClusterError",
    "MalformedConfigError",
    "ToolError",
    "ProcessLaunchError",
    "ProcessExecutionError",
    "ProcessCancelledError",
    "SerializationError",
    "SecretSpecError",
    "SecretParsingError",
    "BinaryNotFoundError",
]
