"""Builders for proofs submitted to the agent proxy."""

from attps.builders.signature_proof import (
    SignatureComponents,
    SignatureProofBuilder,
    build_signature_proof,
    decode_signature_proof,
    hash_message,
    normalize_recovery_id,
)

__all__ = [
    "SignatureComponents",
    "SignatureProofBuilder",
    "build_signature_proof",
    "decode_signature_proof",
    "hash_message",
    "normalize_recovery_id",
]
