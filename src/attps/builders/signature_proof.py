"""Signature Proof Builder - multi-signer proofs for message verification.

A signature proof is the ABI encoding of three parallel arrays

    (bytes32[] r, bytes32[] s, uint256[] v)

holding one ECDSA signature per signer over the Keccak-256 digest of the
message. Entry k of each array belongs to the k-th key given to the
builder; nothing is sorted or deduplicated. The proxy contract checks the
signatures against the agent's registered signer set and threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Union

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_account import Account
from web3 import Web3

from attps.constants import BYTES32_LENGTH, SIGNATURE_PROOF_TYPES, VALID_RECOVERY_IDS
from attps.errors import FormatError, SigningError
from attps.utils.codec import parse_hex_blob

KeyMaterial = Union[str, bytes]


@dataclass(frozen=True)
class SignatureComponents:
    """One signer's share of a proof: r and s (32 bytes each) and v in {0, 1}."""

    r: bytes
    s: bytes
    v: int


def normalize_recovery_id(raw_v: int) -> int:
    """Map a raw recovery id (27 or 28) to the 0/1 form the verifier expects.

    Raises:
        SigningError: For any other value
    """
    if raw_v not in VALID_RECOVERY_IDS:
        raise SigningError(f"Unexpected recovery id {raw_v} (expected 27 or 28)")
    return 0 if raw_v == 27 else 1


def hash_message(message: Union[str, bytes]) -> bytes:
    """Keccak-256 of the message's raw bytes (UTF-8 for text, no prefix)."""
    data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    return bytes(Web3.keccak(data))


class SignatureProofBuilder:
    """Builds signature proofs from an ordered list of private keys.

    The builder is pure: it performs no I/O and keeps no key material
    after ``build`` returns.

    Example:
        >>> proof = SignatureProofBuilder.build("hello world", [key_1, key_2])
        >>> len(decode_signature_proof(proof))
        2
    """

    @staticmethod
    def sign_digest(digest: bytes, private_key: KeyMaterial, index: int = 0) -> SignatureComponents:
        """Sign a 32-byte digest and return normalized components."""
        try:
            account = Account.from_key(private_key)
        except Exception:
            # Never chain the original error: it may echo the key
            raise SigningError(
                "Invalid private key format (key not shown for security)",
                signer_index=index,
            ) from None

        try:
            signed = account.unsafe_sign_hash(digest)
        except Exception as e:
            raise SigningError(f"Failed to sign digest: {type(e).__name__}", signer_index=index) from None

        return SignatureComponents(
            r=signed.r.to_bytes(BYTES32_LENGTH, "big"),
            s=signed.s.to_bytes(BYTES32_LENGTH, "big"),
            v=normalize_recovery_id(signed.v),
        )

    @staticmethod
    def encode(components: Sequence[SignatureComponents]) -> str:
        """ABI-encode components as ``0x``-prefixed lowercase hex."""
        encoded = encode(
            list(SIGNATURE_PROOF_TYPES),
            [
                [c.r for c in components],
                [c.s for c in components],
                [c.v for c in components],
            ],
        )
        return "0x" + encoded.hex()

    @classmethod
    def build(cls, message: Union[str, bytes], private_keys: Sequence[KeyMaterial]) -> str:
        """Sign ``message`` with every key, in order, and encode the proof.

        Args:
            message: Message to authorize (text is hashed as UTF-8)
            private_keys: Signer keys in the order the proof should list them

        Returns:
            Signature proof (``0x``-prefixed lowercase hex)

        Raises:
            SigningError: If no keys are given or any key is malformed.
                No partial proof is returned.
        """
        if isinstance(private_keys, (str, bytes)) or not private_keys:
            raise SigningError("At least one private key is required")

        digest = hash_message(message)
        components = [
            cls.sign_digest(digest, key, index) for index, key in enumerate(private_keys)
        ]
        return cls.encode(components)


def decode_signature_proof(proof: Union[str, bytes]) -> List[SignatureComponents]:
    """Decode a signature proof back into per-signer components.

    Raises:
        FormatError: If the blob is not a well-formed proof
    """
    raw = parse_hex_blob(proof, "signature_proof")
    try:
        rs, ss, vs = decode(list(SIGNATURE_PROOF_TYPES), raw)
    except (DecodingError, ValueError) as e:
        raise FormatError("signature_proof", proof, reason=f"not an ABI encoded proof: {e}") from e

    if not len(rs) == len(ss) == len(vs):
        raise FormatError("signature_proof", proof, reason="r/s/v arrays differ in length")
    return [SignatureComponents(r=bytes(r), s=bytes(s), v=int(v)) for r, s, v in zip(rs, ss, vs)]


def build_signature_proof(message: Union[str, bytes], private_keys: Sequence[KeyMaterial]) -> str:
    """Shortcut for ``SignatureProofBuilder.build``."""
    return SignatureProofBuilder.build(message, private_keys)
