"""Content hashing for change detection.

The hash of a secret's canonical serialization is its identity: it stays
the same for logically identical declarations and changes whenever any
declared field changes.
"""

import hashlib

from icecream import ic

from kubeseal_provider.models import SecretSpec
from kubeseal_provider.secrets.builder import build_secret, serialize_secret


def content_hash(data: bytes) -> str:
    """Return the SHA-256 digest of ``data`` as 64 lowercase hex characters."""
    return hashlib.sha256(data).hexdigest()


def secret_content_hash(spec: SecretSpec) -> str:
    """Build, serialize and hash a declared secret."""
    digest = content_hash(serialize_secret(build_secret(spec)))
    ic(spec.name, digest)
    return digest
