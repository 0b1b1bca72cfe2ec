#!/usr/bin/env python
"""Command-line interface for kubeseal-provider.

This module provides the CLI entry point: resolving the kubeconfig context
for an apiServer endpoint, looking up the endpoint behind a context, and
sealing or hashing declared secrets.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from icecream import ic

from kubeseal_provider import __version__, console
from kubeseal_provider.core.kubeconfig import load_kubeconfig
from kubeseal_provider.core.provider import SealedSecretProvider, configure_provider
from kubeseal_provider.core.resolver import resolve_by_context_name, resolve_by_endpoint
from kubeseal_provider.exceptions import KubesealProviderError
from kubeseal_provider.models import DEFAULT_SECRET_TYPE, SealingScope, SecretSpec
from kubeseal_provider.secrets.hashing import secret_content_hash
from kubeseal_provider.secrets.parsing import load_secret_spec, write_manifest
from kubeseal_provider.secrets.prompts import collect_secret_entries, select_context, split_entry, validate_k8s_name


def _validate_name(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    """Reject names that are not valid Kubernetes resource names; empty means unset."""
    if not value:
        return value
    result = validate_k8s_name(value)
    if result is not True:
        raise click.BadParameter(result, ctx=ctx, param=param)
    return value


def _parse_pairs(entries: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated ``key=value`` options into a mapping."""
    return dict(split_entry(entry) for entry in entries)


def _read_files(entries: tuple[str, ...]) -> dict[str, bytes]:
    """Read ``key=path`` options into a mapping of key to file contents."""
    data: dict[str, bytes] = {}
    for key, path in _parse_pairs(entries).items():
        file_path = Path(path)
        if not file_path.is_file():
            raise click.BadParameter(f"File not found: {path}", param_hint="--from-file")
        data[key] = file_path.read_bytes()
    return data


def build_spec(
    *,
    file: str | None,
    name: str | None,
    namespace: str,
    secret_type: str,
    labels: tuple[str, ...],
    annotations: tuple[str, ...],
    literals: tuple[str, ...],
    from_files: tuple[str, ...],
    interactive: bool,
) -> SecretSpec:
    """Assemble a ``SecretSpec`` from command-line options.

    Either a declaration file is given, or the secret is declared with
    ``--name`` and the data options; the two cannot be mixed.

    Raises:
        click.UsageError: If the options conflict or the name is missing.

    """
    if file:
        if name or literals or from_files or interactive or labels or annotations:
            raise click.UsageError("--file cannot be combined with other secret declaration options")
        try:
            return load_secret_spec(file)
        except KubesealProviderError as e:
            raise click.ClickException(str(e)) from None

    if not name:
        raise click.UsageError("Either --file or --name is required")

    data: dict[str, bytes] = {key: value.encode("utf-8") for key, value in _parse_pairs(literals).items()}
    data.update(_read_files(from_files))
    if interactive:
        data.update(collect_secret_entries())
    if not data:
        console.warning(f"Secret {console.highlight(name)} has no data entries; pass --literal, --from-file or -i")

    return SecretSpec(
        name=name,
        namespace=namespace,
        secret_type=secret_type,
        labels=_parse_pairs(labels),
        annotations=_parse_pairs(annotations),
        data=data,
    )


def secret_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the secret declaration options to a command."""
    options = [
        click.option("--file", "-f", "file", type=click.Path(dir_okay=False), help="YAML secret declaration"),
        click.option("--name", "-n", callback=_validate_name, help="secret name"),
        click.option("--namespace", default="", callback=_validate_name, help="secret namespace"),
        click.option("--type", "secret_type", default=DEFAULT_SECRET_TYPE, show_default=True, help="secret type"),
        click.option("--label", "labels", multiple=True, metavar="KEY=VALUE", help="metadata label"),
        click.option("--annotation", "annotations", multiple=True, metavar="KEY=VALUE", help="metadata annotation"),
        click.option("--literal", "literals", multiple=True, metavar="KEY=VALUE", help="data entry"),
        click.option("--from-file", "from_files", multiple=True, metavar="KEY=PATH", help="data entry from a file"),
        click.option("--interactive", "-i", is_flag=True, help="prompt for data entries"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _kubectl_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option("--kubectl", envvar="KUBECTL_PATH", default="kubectl", help="path to kubectl")(func)


def _timeout_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option("--timeout", type=float, default=None, help="deadline in seconds for each external call")(
        func
    )


@click.group(
    help="Seal Kubernetes secrets for the cluster behind an apiServer endpoint",
    invoke_without_command=True,
)
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.pass_context
def cli(ctx: click.Context, version: bool, debug: bool) -> None:
    """Process global options.

    Args:
        ctx: The click context.
        version: Print version and exit.
        debug: Enable debug output.

    """
    if debug:
        ic.enable()
    else:
        ic.disable()

    if version:
        click.echo(__version__)
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(help="Show the kubeconfig context used for an apiServer endpoint")
@click.option("--server", "-s", required=True, envvar="KUBESEAL_SERVER_ADDRESS", help="apiServer endpoint")
@_kubectl_option
@_timeout_option
def resolve(server: str, kubectl: str, timeout: float | None) -> None:
    """Resolve and print the context serving ``server``."""
    try:
        with console.spinner("Reading kubeconfig..."):
            config = load_kubeconfig(kubectl, timeout=timeout)
        resolved = resolve_by_endpoint(config, server)
    except KubesealProviderError as e:
        raise click.ClickException(str(e)) from e

    console.success(f"Found context {console.highlight(resolved.context_name)}")
    click.echo(resolved.context_name)


@cli.command(help="Show the apiServer endpoint behind a kubeconfig context")
@click.option("--context", "-c", "context_name", help="context name")
@click.option("--select", is_flag=True, default=False, help="prompt for context select")
@_kubectl_option
@_timeout_option
def endpoint(context_name: str | None, select: bool, kubectl: str, timeout: float | None) -> None:
    """Print the endpoint of the named, selected or current context."""
    try:
        with console.spinner("Reading kubeconfig..."):
            config = load_kubeconfig(kubectl, timeout=timeout)
        if select:
            context_name = select_context(config.context_names, current=config.current_context)
        elif not context_name:
            if not config.current_context:
                raise click.UsageError("No current context set; pass --context or --select")
            context_name = config.current_context
        resolved = resolve_by_context_name(config, context_name)
    except KubesealProviderError as e:
        raise click.ClickException(str(e)) from e

    console.action(f"Context {console.highlight(resolved.context_name)} uses cluster {resolved.cluster_name}")
    click.echo(resolved.server_endpoint)


@cli.command(name="hash", help="Print the content hash of a declared secret")
@secret_options
def hash_command(**options: Any) -> None:
    """Print the content hash without sealing anything."""
    spec = build_spec(**options)
    try:
        click.echo(secret_content_hash(spec))
    except KubesealProviderError as e:
        raise click.ClickException(str(e)) from e


@cli.command(help="Seal a declared secret with kubeseal")
@click.option("--server", "-s", required=True, envvar="KUBESEAL_SERVER_ADDRESS", help="apiServer endpoint")
@click.option(
    "--scope",
    required=True,
    type=click.Choice([scope.value for scope in SealingScope]),
    help="kubeseal scope",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="write the sealed manifest to a file")
@click.option("--kubeseal", envvar="KUBESEAL_PATH", default=None, help="path to kubeseal")
@click.option("--kubectl", envvar="KUBECTL_PATH", default=None, help="path to kubectl")
@_timeout_option
@secret_options
def seal(
    server: str,
    scope: str,
    output: str | None,
    kubeseal: str | None,
    kubectl: str | None,
    timeout: float | None,
    **options: Any,
) -> None:
    """Seal a secret for the cluster at ``server``."""
    spec = build_spec(**options)
    ic(spec)

    try:
        config = configure_provider(server, kubeseal=kubeseal, kubectl=kubectl, timeout=timeout)
        provider = SealedSecretProvider(config)
        console.step(f"Using kubectl at {config.kubectl}")
        console.step(f"Using kubeseal at {config.kubeseal}")
        with console.spinner("Sealing secret with kubeseal..."):
            result = provider.create(spec, scope)
    except KubesealProviderError as e:
        raise click.ClickException(str(e)) from e

    if output:
        try:
            write_manifest(output, result.manifest)
        except OSError as e:
            console.error(f"Secret {console.highlight(spec.name)} was sealed but the manifest was not saved")
            raise click.ClickException(f"failed to write sealed manifest to {output}: {e}") from e
    else:
        click.echo(result.manifest, nl=not result.manifest.endswith("\n"))

    console.summary_panel(
        "Sealed Secret Created",
        {
            "Name": spec.name,
            "Namespace": spec.namespace or "-",
            "Type": spec.secret_type,
            "Scope": scope,
            "SHA256": result.content_hash,
            "Output": output or "stdout",
        },
    )


if __name__ == "__main__":
    cli()
