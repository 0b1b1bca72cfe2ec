"""Core infrastructure subpackage.

This package contains kubeconfig loading, context resolution, process
execution and the provider facade that ties the sealing pipeline together.
"""

from kubeseal_provider.core.kubeconfig import list_context_names, load_kubeconfig, parse_kubeconfig
from kubeseal_provider.core.provider import ProviderConfig, SealedSecretProvider, configure_provider
from kubeseal_provider.core.resolver import (
    resolve_by_context_name,
    resolve_by_endpoint,
    resolve_endpoint_by_context_name,
)
from kubeseal_provider.core.runner import ProcessRunner, SubprocessRunner

__all__ = [
    # kubeconfig
    "parse_kubeconfig",
    "load_kubeconfig",
    "list_context_names",
    # resolver
    "resolve_by_endpoint",
    "resolve_by_context_name",
    "resolve_endpoint_by_context_name",
    # runner
    "ProcessRunner",
    "SubprocessRunner",
    # provider
    "ProviderConfig",
    "SealedSecretProvider",
    "configure_provider",
]
