"""
Tests for the multi-signer signature proof builder.

Tests cover:
- Message hashing
- Recovery id normalization
- Proof encoding, ordering and determinism
- Key validation (no partial proofs, no key material in errors)
"""

import pytest
from eth_account import Account

from attps.builders import (
    SignatureComponents,
    SignatureProofBuilder,
    build_signature_proof,
    decode_signature_proof,
    hash_message,
    normalize_recovery_id,
)
from attps.errors import FormatError, SigningError

from tests.conftest import KEY_1, KEY_2, KEY_3

HELLO_WORLD_HASH = bytes.fromhex(
    "47173285a8d7341e5e972fc677286384f802f8ef42a5ec5f03bbfa254cb01fad"
)


class TestHashMessage:

    def test_keccak_of_utf8(self) -> None:
        assert hash_message("hello world") == HELLO_WORLD_HASH

    def test_bytes_and_text_agree(self) -> None:
        assert hash_message(b"hello world") == hash_message("hello world")


class TestNormalizeRecoveryId:

    def test_maps_27_and_28(self) -> None:
        assert normalize_recovery_id(27) == 0
        assert normalize_recovery_id(28) == 1

    @pytest.mark.parametrize("raw_v", [0, 1, 26, 29, 37])
    def test_rejects_other_values(self, raw_v: int) -> None:
        with pytest.raises(SigningError):
            normalize_recovery_id(raw_v)


class TestSignatureProofBuilder:

    def test_two_signers(self) -> None:
        proof = SignatureProofBuilder.build("hello world", [KEY_1, KEY_2])

        components = decode_signature_proof(proof)

        assert len(components) == 2
        for c in components:
            assert len(c.r) == 32
            assert len(c.s) == 32
            assert c.v in (0, 1)

    def test_proof_is_prefixed_lowercase_hex(self) -> None:
        proof = build_signature_proof("hello world", [KEY_1, KEY_2])

        assert proof.startswith("0x")
        assert proof == proof.lower()
        # 3 offsets + 3 arrays of (length word + 2 entries)
        assert len(bytes.fromhex(proof[2:])) == 3 * 32 + 3 * (32 + 2 * 32)

    def test_deterministic(self) -> None:
        first = SignatureProofBuilder.build("hello world", [KEY_1, KEY_2])
        second = SignatureProofBuilder.build("hello world", [KEY_1, KEY_2])

        assert first == second

    def test_components_follow_key_order(self) -> None:
        forward = decode_signature_proof(SignatureProofBuilder.build("msg", [KEY_1, KEY_2, KEY_3]))
        backward = decode_signature_proof(SignatureProofBuilder.build("msg", [KEY_3, KEY_2, KEY_1]))

        assert forward == list(reversed(backward))

    def test_duplicate_keys_are_kept(self) -> None:
        components = decode_signature_proof(SignatureProofBuilder.build("msg", [KEY_1, KEY_1]))

        assert len(components) == 2
        assert components[0] == components[1]

    def test_matches_direct_signature(self) -> None:
        signed = Account.from_key(KEY_1).unsafe_sign_hash(HELLO_WORLD_HASH)

        (component,) = decode_signature_proof(SignatureProofBuilder.build("hello world", [KEY_1]))

        assert int.from_bytes(component.r, "big") == signed.r
        assert int.from_bytes(component.s, "big") == signed.s
        assert component.v == signed.v - 27

    def test_empty_key_list(self) -> None:
        with pytest.raises(SigningError):
            SignatureProofBuilder.build("hello world", [])

    def test_bare_string_is_not_a_key_list(self) -> None:
        with pytest.raises(SigningError):
            SignatureProofBuilder.build("hello world", KEY_1)

    def test_invalid_key_does_not_leak(self) -> None:
        bad_key = "0x1234"

        with pytest.raises(SigningError) as exc_info:
            SignatureProofBuilder.build("hello world", [KEY_1, bad_key])

        assert exc_info.value.signer_index == 1
        assert bad_key not in str(exc_info.value)
        assert exc_info.value.__cause__ is None

    def test_encode_empty_components(self) -> None:
        proof = SignatureProofBuilder.encode([])

        assert decode_signature_proof(proof) == []

    def test_encode_single_component(self) -> None:
        component = SignatureComponents(r=b"\x01" * 32, s=b"\x02" * 32, v=1)

        assert decode_signature_proof(SignatureProofBuilder.encode([component])) == [component]


class TestDecodeSignatureProof:

    def test_rejects_garbage(self) -> None:
        with pytest.raises(FormatError):
            decode_signature_proof("0xdeadbeef")

    def test_rejects_non_hex(self) -> None:
        with pytest.raises(FormatError):
            decode_signature_proof("0xzz")
