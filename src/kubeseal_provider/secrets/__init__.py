"""Secrets subpackage.

This package contains modules for building, hashing and sealing secrets,
reading secret declarations and prompting for secret entries.
"""

from kubeseal_provider.secrets.builder import CanonicalSecret, build_secret, serialize_secret
from kubeseal_provider.secrets.hashing import content_hash, secret_content_hash
from kubeseal_provider.secrets.parsing import load_secret_spec, write_manifest
from kubeseal_provider.secrets.prompts import collect_secret_entries, select_context, validate_k8s_name
from kubeseal_provider.secrets.sealing import SealInvocation, SealState, build_kubeseal_args, seal_secret

__all__ = [
    # builder
    "CanonicalSecret",
    "build_secret",
    "serialize_secret",
    # hashing
    "content_hash",
    "secret_content_hash",
    # parsing
    "load_secret_spec",
    "write_manifest",
    # prompts
    "collect_secret_entries",
    "select_context",
    "validate_k8s_name",
    # sealing
    "SealInvocation",
    "SealState",
    "build_kubeseal_args",
    "seal_secret",
]
