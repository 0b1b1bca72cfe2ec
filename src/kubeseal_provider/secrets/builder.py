"""Secret manifest construction.

This module turns a ``SecretSpec`` into the Kubernetes Secret manifest that
is handed to kubeseal, and encodes it canonically so that the same logical
secret always produces the same bytes.
"""

import base64
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from kubeseal_provider.exceptions import SecretSpecError, SerializationError
from kubeseal_provider.models import DEFAULT_SECRET_TYPE, SecretSpec

SECRET_API_VERSION = "v1"
SECRET_KIND = "Secret"


@dataclass(frozen=True, slots=True)
class CanonicalSecret:
    """A built Secret manifest with its data already base64-encoded.

    Attributes:
        name: The secret name.
        namespace: The namespace, empty when undeclared.
        secret_type: The Kubernetes secret type.
        labels: Metadata labels, copied verbatim.
        annotations: Metadata annotations, copied verbatim.
        data: Key to base64-encoded value.

    """

    name: str
    namespace: str = ""
    secret_type: str = DEFAULT_SECRET_TYPE
    labels: Mapping[str, str] = field(default_factory=dict)
    annotations: Mapping[str, str] = field(default_factory=dict)
    data: Mapping[str, str] = field(default_factory=dict)
    api_version: str = SECRET_API_VERSION
    kind: str = SECRET_KIND

    def to_manifest(self) -> dict[str, Any]:
        """Return the manifest as plain dicts.

        Empty namespace, labels and annotations are left out of the
        metadata, the same way the API server omits empty fields.
        """
        metadata: dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        if self.labels:
            metadata["labels"] = dict(self.labels)
        if self.annotations:
            metadata["annotations"] = dict(self.annotations)

        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": metadata,
            "type": self.secret_type,
            "data": dict(self.data),
        }


def build_secret(spec: SecretSpec) -> CanonicalSecret:
    """Build the Secret manifest for a declaration.

    Args:
        spec: The declared secret.

    Returns:
        The built secret, data values base64-encoded.

    Raises:
        SecretSpecError: If the name is empty or no data mapping was given.

    """
    if not spec.name:
        raise SecretSpecError("secret name must not be empty")
    if spec.data is None:
        raise SecretSpecError(f"secret `{spec.name}` has no data mapping")

    encoded = {key: base64.b64encode(value).decode("ascii") for key, value in spec.data.items()}

    return CanonicalSecret(
        name=spec.name,
        namespace=spec.namespace,
        secret_type=spec.secret_type or DEFAULT_SECRET_TYPE,
        labels=MappingProxyType(dict(spec.labels)),
        annotations=MappingProxyType(dict(spec.annotations)),
        data=MappingProxyType(encoded),
    )


def serialize_secret(secret: CanonicalSecret) -> bytes:
    """Encode a built secret as canonical JSON.

    Keys are sorted at every level and separators carry no whitespace, so
    the output depends only on the secret's content and never on the order
    in which the caller filled its mappings.

    Raises:
        SerializationError: If the manifest cannot be encoded.

    """
    try:
        text = json.dumps(secret.to_manifest(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        return text.encode("utf-8")
    except (TypeError, ValueError) as err:
        raise SerializationError(err) from err
