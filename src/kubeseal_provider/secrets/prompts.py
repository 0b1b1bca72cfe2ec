"""Interactive user prompts.

This module provides functions for collecting secret entries and picking
a kubeconfig context via interactive prompts.
"""

import re
from pathlib import Path

import click
import questionary
from questionary import Style

from kubeseal_provider import console

# Prompt colors follow the console theme: cyan for focus, green for answers
PROMPT_STYLE = Style(
    [
        ("qmark", "fg:ansicyan bold"),
        ("question", "bold"),
        ("answer", "fg:ansigreen bold"),
        ("pointer", "fg:ansicyan bold"),
        ("highlighted", "fg:ansicyan bold"),
        ("selected", "fg:ansigreen"),
        ("instruction", "fg:ansibrightblack italic"),
        ("disabled", "fg:ansibrightblack italic"),
    ]
)
POINTER = "> "
QMARK = "? "

# Kubernetes DNS subdomain name validation (RFC 1123)
_DNS_SUBDOMAIN_MAX_LENGTH = 253
_DNS_SUBDOMAIN_PATTERN = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"


def validate_k8s_name(name: str) -> bool | str:
    """Validate a Kubernetes resource name (DNS subdomain).

    Args:
        name: The name to validate.

    Returns:
        True if valid, or an error message string if invalid.

    """
    if not name:
        return "Name cannot be empty"
    if len(name) > _DNS_SUBDOMAIN_MAX_LENGTH:
        return f"Name must be {_DNS_SUBDOMAIN_MAX_LENGTH} characters or less"
    if not re.match(_DNS_SUBDOMAIN_PATTERN, name):
        return "Name must consist of lowercase alphanumeric characters, '-' or '.', and must start and end with an alphanumeric character"
    return True


def split_entry(entry: str) -> tuple[str, str]:
    """Split a ``key=value`` entry on its first ``=``.

    Raises:
        click.BadParameter: If the entry has no ``=`` or an empty key.

    """
    key, sep, value = entry.partition("=")
    if not sep or not key.strip():
        raise click.BadParameter(f"'{entry}' must be in key=value format")
    return key.strip(), value


def select_context(contexts: list[str], current: str = "") -> str:
    """Prompt the user to pick one of the kubeconfig contexts.

    Args:
        contexts: Context names to choose from.
        current: Context preselected in the list, if present.

    Returns:
        The selected context name.

    Raises:
        click.ClickException: If there are no contexts.
        click.Abort: If the user cancels the selection.

    """
    if not contexts:
        raise click.ClickException("No contexts found in kubeconfig")

    context: str | None = questionary.select(
        "Select context to work with",
        choices=contexts,
        default=current if current in contexts else None,
        style=PROMPT_STYLE,
        pointer=POINTER,
        qmark=QMARK,
    ).ask()
    if context is None:
        console.warning("Context selection cancelled.")
        raise click.Abort()
    return context


def _prompt_literal_entry() -> tuple[str, bytes]:
    """Prompt for a single literal key=value entry."""
    entry = questionary.text(
        "Enter key=value",
        validate=lambda x: True if "=" in x else "Must be in key=value format",
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()
    key, value = split_entry(entry)
    console.success(f"Added literal: {console.highlight(key)}")
    return key, value.encode("utf-8")


def _prompt_bulk_literals() -> dict[str, bytes]:
    """Prompt for bulk literal entries (one per line).

    Returns:
        Mapping of the entered keys to their values.

    """
    bulk_input = questionary.text(
        "Enter key=value pairs (one per line, Esc+Enter to finish)",
        multiline=True,
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()

    entries: dict[str, bytes] = {}
    skipped = 0
    for line in bulk_input.splitlines():
        line = line.strip()
        if not line:
            continue
        if "=" not in line:
            skipped += 1
            continue
        key, value = split_entry(line)
        entries[key] = value.encode("utf-8")

    if skipped:
        console.warning(f"Skipped {skipped} line(s) missing '=' separator")
    if entries:
        console.success(f"Added {console.highlight(str(len(entries)))} literal(s)")
    return entries


def _prompt_file_entry() -> tuple[str, bytes]:
    """Prompt for a file whose contents become one entry.

    The key defaults to the file name, as with ``kubectl --from-file``.

    Raises:
        click.ClickException: If the selected file does not exist.

    """
    entry = questionary.path(
        "Select file",
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()

    path = Path(entry)
    if not path.is_file():
        raise click.ClickException(f"File not found: {entry}")

    key = questionary.text(
        "Key for the file contents",
        default=path.name,
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()

    console.success(f"Added file: {console.highlight(entry)}")
    return key, path.read_bytes()


def collect_secret_entries() -> dict[str, bytes]:
    """Interactively collect secret data entries from the user.

    Returns:
        Mapping of every entered key to its raw value. A later entry with
        the same key replaces the earlier one.

    """
    entries: dict[str, bytes] = {}

    while True:
        if entries:
            console.info(f"Current entries: {console.highlight(str(len(entries)))}")

        entry_type = questionary.select(
            "Add secret entry",
            choices=[
                {"name": "📝 Literal (key=value)", "value": "literal"},
                {"name": "📝 Bulk literals (one per line)", "value": "bulk"},
                {"name": "📁 From file", "value": "file"},
                {"name": "✓ Done adding entries", "value": "done", "disabled": not entries},
            ],
            style=PROMPT_STYLE,
            pointer=POINTER,
            qmark=QMARK,
        ).unsafe_ask()

        if entry_type == "done":
            break
        if entry_type == "literal":
            key, value = _prompt_literal_entry()
            entries[key] = value
        elif entry_type == "bulk":
            entries.update(_prompt_bulk_literals())
        else:
            key, value = _prompt_file_entry()
            entries[key] = value

    return entries
