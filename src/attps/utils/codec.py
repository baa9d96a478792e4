"""
Hex codec for externally supplied identifiers.

Parses and validates hex strings into fixed-width binary values:
- 20-byte account addresses
- 32-byte digests (message hashes, setting digests)
- arbitrary-length byte blobs

Every parser raises FormatError without touching the network, so a
malformed argument never costs an RPC round trip. An optional leading
``0x``/``0X`` is accepted on input; canonical output is lowercase.
"""

from __future__ import annotations

import re
from typing import Any, List, Sequence, Union

from eth_typing import Address, ChecksumAddress, Hash32
from eth_utils import to_checksum_address as _eth_to_checksum

from attps.constants import ADDRESS_LENGTH, BYTES32_LENGTH, MAX_UINT8, MAX_UINT256
from attps.errors import FormatError

_HEX_BODY = re.compile(r"[0-9a-fA-F]*")

BytesLike = Union[str, bytes, bytearray]


def strip_hex_prefix(value: str) -> str:
    """Remove one leading ``0x``/``0X`` if present."""
    if value[:2] in ("0x", "0X"):
        return value[2:]
    return value


def _decode_hex(value: Any, field: str) -> bytes:
    if not isinstance(value, str):
        raise FormatError(field, value, reason="must be a hex string")

    body = strip_hex_prefix(value)
    if not _HEX_BODY.fullmatch(body):
        raise FormatError(field, value, reason="contains non-hex characters")
    if len(body) % 2:
        raise FormatError(field, value, reason="odd number of hex digits")
    return bytes.fromhex(body)


def _fixed_width(value: Any, width: int, field: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        raw = _decode_hex(value, field)
    if len(raw) != width:
        raise FormatError(field, value, reason=f"expected {width} bytes, got {len(raw)}")
    return raw


def parse_address(value: BytesLike, field: str = "address") -> Address:
    """
    Parse a 20-byte account address.

    Args:
        value: ``0x``-prefixed or bare 40-digit hex string (any case), or
            20 raw bytes
        field: Field name for error messages

    Returns:
        Address bytes

    Raises:
        FormatError: If the value is not hex or not exactly 20 bytes
    """
    return Address(_fixed_width(value, ADDRESS_LENGTH, field))


def parse_digest(value: BytesLike, field: str = "digest") -> Hash32:
    """
    Parse a 32-byte digest.

    Args:
        value: ``0x``-prefixed or bare 64-digit hex string, or 32 raw bytes
        field: Field name for error messages

    Returns:
        Digest bytes

    Raises:
        FormatError: If the value is not hex or not exactly 32 bytes
    """
    return Hash32(_fixed_width(value, BYTES32_LENGTH, field))


def parse_hex_blob(value: BytesLike, field: str = "data") -> bytes:
    """
    Parse an arbitrary-length hex blob. Empty input yields ``b""``.

    Raises:
        FormatError: If the value contains non-hex characters
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return _decode_hex(value, field)


def parse_addresses(values: Sequence[BytesLike], field: str = "addresses") -> List[Address]:
    """Parse a sequence of addresses, keeping order and duplicates."""
    if isinstance(values, (str, bytes, bytearray)):
        raise FormatError(field, values, reason="must be a sequence of addresses")
    return [parse_address(v, f"{field}[{i}]") for i, v in enumerate(values)]


def validate_uint(value: Any, field: str, max_value: int = MAX_UINT256) -> int:
    """
    Check that ``value`` is an integer in ``[0, max_value]``.

    Raises:
        FormatError: If the value is not an int, is negative or too large
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise FormatError(field, value, reason="must be an integer")
    if value < 0:
        raise FormatError(field, value, reason="must be non-negative")
    if value > max_value:
        raise FormatError(field, value, reason=f"exceeds maximum ({max_value})")
    return value


def validate_uint8(value: Any, field: str) -> int:
    return validate_uint(value, field, MAX_UINT8)


def encode_address(address: bytes) -> str:
    """Render an address in canonical lowercase ``0x`` form."""
    return "0x" + bytes(address).hex()


def encode_hex(value: bytes, prefix: bool = False) -> str:
    """Render bytes as lowercase hex, unprefixed unless asked."""
    body = bytes(value).hex()
    return f"0x{body}" if prefix else body


def to_checksum_address(value: BytesLike, field: str = "address") -> ChecksumAddress:
    """Parse an address and return its EIP-55 checksummed form."""
    return _eth_to_checksum(parse_address(value, field))
