"""Secret declaration file parsing.

This module reads secret declarations from YAML files and writes sealed
manifests back to disk.
"""

from pathlib import Path
from typing import Any

import yaml

from kubeseal_provider.exceptions import SecretParsingError
from kubeseal_provider.models import DEFAULT_SECRET_TYPE, SecretSpec
from kubeseal_provider.secrets.prompts import validate_k8s_name

_KNOWN_KEYS = {"name", "namespace", "type", "labels", "annotations", "data"}


def _read_document(spec_path: str) -> dict[str, Any]:
    """Read the single YAML mapping stored in ``spec_path``.

    Raises:
        SecretParsingError: If the file does not exist, is empty, contains
            multiple documents, malformed YAML, or is not a YAML mapping.

    """
    try:
        with open(spec_path) as stream:
            docs = [doc for doc in yaml.safe_load_all(stream) if doc is not None]
    except FileNotFoundError as err:
        raise SecretParsingError(f"Secret file '{spec_path}' does not exist") from err
    except yaml.YAMLError as err:
        raise SecretParsingError(f"Secret file '{spec_path}' contains malformed YAML: {err}") from err

    if len(docs) > 1:
        raise SecretParsingError(
            f"File '{spec_path}' contains multiple YAML documents. Only single document files are supported."
        )
    if not docs:
        raise SecretParsingError(f"Secret file '{spec_path}' is empty")
    if not isinstance(docs[0], dict):
        raise SecretParsingError(f"File '{spec_path}' does not contain a valid YAML mapping.")
    return docs[0]


def _string_map(document: dict[str, Any], key: str, spec_path: str) -> dict[str, str]:
    """Return ``document[key]`` as a str-to-str mapping.

    Values must be plain strings; YAML would otherwise silently turn
    ``true`` or ``0755`` into something other than what was written.
    """
    raw = document.get(key) or {}
    if not isinstance(raw, dict):
        raise SecretParsingError(f"'{key}' in '{spec_path}' must be a mapping")

    result: dict[str, str] = {}
    for item_key, value in raw.items():
        if not isinstance(value, str):
            raise SecretParsingError(
                f"'{key}.{item_key}' in '{spec_path}' must be a string, got {type(value).__name__}; quote the value"
            )
        result[str(item_key)] = value
    return result


def load_secret_spec(spec_path: str) -> SecretSpec:
    """Load a secret declaration from a YAML file.

    The file holds the declared fields directly::

        name: db-credentials
        namespace: default
        labels:
          app: db
        data:
          password: s3cr3t

    Data values are the plain secret values; they are base64-encoded when
    the secret is built.

    Args:
        spec_path: Path to the declaration file.

    Returns:
        The declared secret.

    Raises:
        SecretParsingError: If the file cannot be read or is not a valid
            declaration.

    """
    document = _read_document(spec_path)

    unknown = sorted(set(document) - _KNOWN_KEYS)
    if unknown:
        raise SecretParsingError(f"Unknown field(s) in '{spec_path}': {', '.join(map(str, unknown))}")

    name = document.get("name")
    if not isinstance(name, str) or not name:
        raise SecretParsingError(f"Secret file '{spec_path}' must declare a non-empty 'name'")
    if "data" not in document:
        raise SecretParsingError(f"Secret file '{spec_path}' must declare 'data'")

    namespace = str(document.get("namespace") or "")
    for field_name, value in (("name", name), ("namespace", namespace)):
        reason = validate_k8s_name(value) if value else True
        if reason is not True:
            raise SecretParsingError(f"Invalid {field_name} '{value}' in '{spec_path}': {reason}")

    return SecretSpec(
        name=name,
        namespace=namespace,
        secret_type=str(document.get("type") or DEFAULT_SECRET_TYPE),
        labels=_string_map(document, "labels", spec_path),
        annotations=_string_map(document, "annotations", spec_path),
        data=_string_map(document, "data", spec_path),
    )


def write_manifest(output_path: str, manifest: str) -> None:
    """Write a sealed manifest to ``output_path``, replacing any existing file."""
    Path(output_path).write_text(manifest)
