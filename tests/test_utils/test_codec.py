"""Tests for hex parsing and validation helpers."""

import pytest
from web3 import Web3

from attps.errors import FormatError
from attps.utils.codec import (
    encode_address,
    encode_hex,
    parse_address,
    parse_addresses,
    parse_digest,
    parse_hex_blob,
    strip_hex_prefix,
    to_checksum_address,
    validate_uint,
    validate_uint8,
)

ADDR_HEX = "f5f190a711d1c14ebd481f37c1c0f25b79c1a14b"
ADDR_CHECKSUM = Web3.to_checksum_address(f"0x{ADDR_HEX}")


class TestParseAddress:

    @pytest.mark.parametrize(
        "value",
        [f"0x{ADDR_HEX}", ADDR_HEX, f"0X{ADDR_HEX}", ADDR_HEX.upper(), ADDR_CHECKSUM],
    )
    def test_accepts_prefix_and_any_case(self, value: str) -> None:
        assert parse_address(value) == bytes.fromhex(ADDR_HEX)

    def test_accepts_raw_bytes(self) -> None:
        assert parse_address(b"\x01" * 20) == b"\x01" * 20

    @pytest.mark.parametrize(
        "value, reason",
        [
            ("0x1234", "expected 20 bytes, got 2"),
            (f"0x{ADDR_HEX}00", "expected 20 bytes, got 21"),
            ("0x" + "zz" * 20, "contains non-hex characters"),
            ("0x" + "a" * 39, "odd number of hex digits"),
            ("0x" + "a" * 39 + "\n", "contains non-hex characters"),
            ("abc\n", "contains non-hex characters"),
            (12345, "must be a hex string"),
        ],
    )
    def test_rejects_malformed(self, value, reason: str) -> None:
        with pytest.raises(FormatError) as exc_info:
            parse_address(value, "agent")

        assert exc_info.value.field == "agent"
        assert exc_info.value.reason == reason
        assert exc_info.value.code == "INVALID_FORMAT"

    def test_empty_string_is_wrong_length(self) -> None:
        with pytest.raises(FormatError):
            parse_address("")


class TestParseDigest:

    def test_valid_digest(self) -> None:
        digest = parse_digest("0x" + "ab" * 32)
        assert digest == b"\xab" * 32

    def test_wrong_length(self) -> None:
        with pytest.raises(FormatError) as exc_info:
            parse_digest("0x" + "ab" * 31, "settings_digest")
        assert "settings_digest" in str(exc_info.value)


class TestParseHexBlob:

    def test_empty_input(self) -> None:
        assert parse_hex_blob("") == b""
        assert parse_hex_blob("0x") == b""

    def test_arbitrary_length(self) -> None:
        assert parse_hex_blob("0xdeadbeef01") == bytes.fromhex("deadbeef01")

    def test_rejects_non_hex(self) -> None:
        with pytest.raises(FormatError):
            parse_hex_blob("0xnothex")

    @pytest.mark.parametrize("value", ["abc\n", "0xabcd\n", "ab\ncd"])
    def test_rejects_embedded_newline(self, value: str) -> None:
        with pytest.raises(FormatError):
            parse_hex_blob(value)


class TestParseAddresses:

    def test_keeps_order_and_duplicates(self) -> None:
        a = "0x" + "01" * 20
        b = "0x" + "02" * 20
        assert parse_addresses([b, a, b]) == [b"\x02" * 20, b"\x01" * 20, b"\x02" * 20]

    def test_reports_index_of_bad_entry(self) -> None:
        with pytest.raises(FormatError) as exc_info:
            parse_addresses(["0x" + "01" * 20, "0x12"], "signers")
        assert exc_info.value.field == "signers[1]"

    def test_rejects_bare_string(self) -> None:
        with pytest.raises(FormatError):
            parse_addresses("0x" + "01" * 20)


class TestValidateUint:

    def test_bounds(self) -> None:
        assert validate_uint(0, "start") == 0
        assert validate_uint8(255, "priority") == 255

    @pytest.mark.parametrize("value", [-1, 256, True, "1", 1.0])
    def test_rejects_out_of_range_or_wrong_type(self, value) -> None:
        with pytest.raises(FormatError):
            validate_uint8(value, "priority")


class TestEncoding:

    def test_strip_hex_prefix(self) -> None:
        assert strip_hex_prefix("0xab") == "ab"
        assert strip_hex_prefix("0Xab") == "ab"
        assert strip_hex_prefix("ab") == "ab"

    def test_encode_address_is_lowercase(self) -> None:
        assert encode_address(parse_address(ADDR_CHECKSUM)) == f"0x{ADDR_HEX}"

    def test_encode_hex(self) -> None:
        assert encode_hex(b"\xab\xcd") == "abcd"
        assert encode_hex(b"\xab\xcd", prefix=True) == "0xabcd"

    def test_checksum_address(self) -> None:
        assert to_checksum_address(ADDR_HEX) == ADDR_CHECKSUM
