"""Kubeconfig context resolution.

This module matches an apiServer endpoint to the context that should be
used to reach it, and looks up the endpoint behind a named context. All
lookups are pure functions of a ``Configuration`` snapshot; under duplicate
names the first entry in declaration order wins in both directions.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

from icecream import ic

from kubeseal_provider.exceptions import MissingClusterError, NoClusterError, NoContextError
from kubeseal_provider.models import ClusterEntry, Configuration, ContextEntry, ResolvedContext

_T = TypeVar("_T")


def _first(items: Iterable[_T], predicate: Callable[[_T], bool]) -> _T | None:
    """Return the first item matching ``predicate``, or None."""
    return next((item for item in items if predicate(item)), None)


def _find_cluster_by_server(config: Configuration, endpoint: str) -> ClusterEntry | None:
    return _first(config.clusters, lambda cluster: cluster.server == endpoint)


def _find_cluster_by_name(config: Configuration, name: str) -> ClusterEntry | None:
    return _first(config.clusters, lambda cluster: cluster.name == name)


def _find_context_by_cluster(config: Configuration, cluster_name: str) -> ContextEntry | None:
    return _first(config.contexts, lambda context: context.cluster == cluster_name)


def _find_context_by_name(config: Configuration, name: str) -> ContextEntry | None:
    return _first(config.contexts, lambda context: context.name == name)


def resolve_by_endpoint(config: Configuration, endpoint: str) -> ResolvedContext:
    """Find the context that reaches the cluster serving ``endpoint``.

    The endpoint must equal a cluster's server exactly: the comparison is
    case-sensitive and a trailing slash is significant.

    Args:
        config: The kubeconfig snapshot to search.
        endpoint: The apiServer URL, e.g. ``https://1.2.3.4``.

    Returns:
        The first context using the first cluster with that server.

    Raises:
        NoClusterError: If no cluster uses the endpoint.
        NoContextError: If no context references the matched cluster.

    """
    cluster = _find_cluster_by_server(config, endpoint)
    if cluster is None:
        raise NoClusterError(endpoint)

    context = _find_context_by_cluster(config, cluster.name)
    if context is None:
        raise NoContextError(cluster.name)

    resolved = ResolvedContext(
        context_name=context.name,
        cluster_name=cluster.name,
        server_endpoint=cluster.server,
        namespace=context.namespace,
    )
    ic(resolved)
    return resolved


def resolve_by_context_name(config: Configuration, name: str) -> ResolvedContext:
    """Look up a context by name together with the cluster it references.

    Args:
        config: The kubeconfig snapshot to search.
        name: The context name.

    Returns:
        The resolved context/cluster pair.

    Raises:
        NoContextError: If no context has that name.
        MissingClusterError: If the context references an unknown cluster.

    """
    context = _find_context_by_name(config, name)
    if context is None:
        raise NoContextError(name)

    cluster = _find_cluster_by_name(config, context.cluster)
    if cluster is None:
        raise MissingClusterError(context.cluster, name)

    return ResolvedContext(
        context_name=context.name,
        cluster_name=cluster.name,
        server_endpoint=cluster.server,
        namespace=context.namespace,
    )


def resolve_endpoint_by_context_name(config: Configuration, name: str) -> str:
    """Return the apiServer endpoint behind the context called ``name``.

    Raises:
        NoContextError: If no context has that name.
        MissingClusterError: If the context references an unknown cluster.

    """
    return resolve_by_context_name(config, name).server_endpoint
