"""
Agent registry and verification records.

These mirror the Solidity structs accepted and returned by the agent
manager and proxy contracts. All records are immutable and validate
their fields on construction, raising FormatError before any network
call is made.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Sequence, Tuple, Union

from eth_typing import Address, Hash32
from web3 import Web3

from attps.errors import FormatError
from attps.utils.codec import (
    encode_address,
    encode_hex,
    parse_address,
    parse_addresses,
    parse_digest,
    parse_hex_blob,
    to_checksum_address,
    validate_uint,
    validate_uint8,
)

BytesLike = Union[str, bytes, bytearray]


def _require_str(value: Any, field_name: str) -> None:
    if not isinstance(value, str):
        raise FormatError(field_name, value, reason="must be a string")


@dataclass(frozen=True)
class AgentHeader:
    """
    Message envelope metadata attached to agent settings.

    Attributes:
        version: Protocol version string (e.g., "1.0")
        message_id: Message identifier (UUID string)
        source_agent_id: Sending agent identifier
        source_agent_name: Human-readable sending agent name
        target_agent_id: Receiving agent identifier
        timestamp: Unix timestamp (uint256)
        message_type: Message type code (uint8)
        priority: Priority (uint8)
        ttl: Time to live in seconds (uint256)
    """

    version: str
    message_id: str
    source_agent_id: str
    source_agent_name: str
    target_agent_id: str
    timestamp: int
    message_type: int
    priority: int
    ttl: int

    def __post_init__(self) -> None:
        for name in ("version", "message_id", "source_agent_id", "source_agent_name", "target_agent_id"):
            _require_str(getattr(self, name), name)
        validate_uint(self.timestamp, "timestamp")
        validate_uint8(self.message_type, "message_type")
        validate_uint8(self.priority, "priority")
        validate_uint(self.ttl, "ttl")

    def as_abi(self) -> tuple:
        return (
            self.version,
            self.message_id,
            self.source_agent_id,
            self.source_agent_name,
            self.target_agent_id,
            self.timestamp,
            self.message_type,
            self.priority,
            self.ttl,
        )

    @classmethod
    def from_abi(cls, raw: Sequence[Any]) -> "AgentHeader":
        return cls(
            version=raw[0],
            message_id=raw[1],
            source_agent_id=raw[2],
            source_agent_name=raw[3],
            target_agent_id=raw[4],
            timestamp=int(raw[5]),
            message_type=int(raw[6]),
            priority=int(raw[7]),
            ttl=int(raw[8]),
        )


@dataclass(frozen=True)
class AgentSettings:
    """
    Signer set and converter configuration for an agent.

    Signer order is kept as given and duplicates are not rejected; the
    manager contract decides whether a settings proposal is acceptable.
    """

    signers: Tuple[Address, ...]
    threshold: int
    converter_address: Address
    header: AgentHeader

    def __post_init__(self) -> None:
        object.__setattr__(self, "signers", tuple(parse_addresses(self.signers, "signers")))
        object.__setattr__(
            self, "converter_address", parse_address(self.converter_address, "converter_address")
        )
        validate_uint8(self.threshold, "threshold")
        if not isinstance(self.header, AgentHeader):
            raise FormatError("header", self.header, reason="must be an AgentHeader")

    @classmethod
    def build(
        cls,
        signers: Sequence[BytesLike],
        threshold: int,
        converter_address: BytesLike,
        *,
        version: str,
        message_id: str,
        source_agent_id: str,
        source_agent_name: str,
        target_agent_id: str,
        timestamp: int,
        message_type: int,
        priority: int,
        ttl: int,
    ) -> "AgentSettings":
        """Build settings from hex strings and plain header fields."""
        header = AgentHeader(
            version=version,
            message_id=message_id,
            source_agent_id=source_agent_id,
            source_agent_name=source_agent_name,
            target_agent_id=target_agent_id,
            timestamp=timestamp,
            message_type=message_type,
            priority=priority,
            ttl=ttl,
        )
        return cls(
            signers=tuple(parse_addresses(signers, "signers")),
            threshold=threshold,
            converter_address=parse_address(converter_address, "converter_address"),
            header=header,
        )

    def as_abi(self) -> tuple:
        return (
            [to_checksum_address(s) for s in self.signers],
            self.threshold,
            to_checksum_address(self.converter_address),
            self.header.as_abi(),
        )

    @classmethod
    def from_abi(cls, raw: Sequence[Any]) -> "AgentSettings":
        return cls(
            signers=tuple(parse_address(s, "signers") for s in raw[0]),
            threshold=int(raw[1]),
            converter_address=parse_address(raw[2], "converter_address"),
            header=AgentHeader.from_abi(raw[3]),
        )


@dataclass(frozen=True)
class AgentConfig:
    """
    One registered settings version of an agent.

    Attributes:
        config_digest: Identifier of this settings version (bytes32)
        config_block_number: Block at which the settings were recorded
        is_active: Whether this settings version is currently active
        settings: The agent settings themselves
    """

    config_digest: Hash32
    config_block_number: int
    is_active: bool
    settings: AgentSettings

    @property
    def config_digest_hex(self) -> str:
        return encode_hex(self.config_digest, prefix=True)

    @classmethod
    def from_abi(cls, raw: Sequence[Any]) -> "AgentConfig":
        return cls(
            config_digest=parse_digest(bytes(raw[0]), "config_digest"),
            config_block_number=int(raw[1]),
            is_active=bool(raw[2]),
            settings=AgentSettings.from_abi(raw[3]),
        )

    def to_dict(self) -> Dict[str, Any]:
        header = self.settings.header
        return {
            "configDigest": self.config_digest_hex,
            "configBlockNumber": self.config_block_number,
            "isActive": self.is_active,
            "settings": {
                "signers": [encode_address(s) for s in self.settings.signers],
                "threshold": self.settings.threshold,
                "converterAddress": encode_address(self.settings.converter_address),
                "agentHeader": {
                    "version": header.version,
                    "messageId": header.message_id,
                    "sourceAgentId": header.source_agent_id,
                    "sourceAgentName": header.source_agent_name,
                    "targetAgentId": header.target_agent_id,
                    "timestamp": header.timestamp,
                    "messageType": header.message_type,
                    "priority": header.priority,
                    "ttl": header.ttl,
                },
            },
        }


@dataclass(frozen=True)
class Proofs:
    """Proof blobs carried by a message payload. Unused proofs stay empty."""

    signature_proof: bytes
    zk_proof: bytes = b""
    merkle_proof: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "signature_proof", parse_hex_blob(self.signature_proof, "signature_proof"))
        object.__setattr__(self, "zk_proof", parse_hex_blob(self.zk_proof, "zk_proof"))
        object.__setattr__(self, "merkle_proof", parse_hex_blob(self.merkle_proof, "merkle_proof"))

    def as_abi(self) -> tuple:
        return (self.zk_proof, self.merkle_proof, self.signature_proof)


@dataclass(frozen=True)
class PayloadMetadata:
    content_type: str = ""
    encoding: str = ""
    compression: str = ""

    def __post_init__(self) -> None:
        for name in ("content_type", "encoding", "compression"):
            _require_str(getattr(self, name), name)

    def as_abi(self) -> tuple:
        return (self.content_type, self.encoding, self.compression)


@dataclass(frozen=True)
class MessagePayload:
    """
    Message submitted to the proxy for verification.

    Attributes:
        data: Raw message bytes
        data_hash: Keccak-256 digest of ``data`` (bytes32)
        proofs: Signature, zk and merkle proofs
        metadata: Content type, encoding and compression labels
    """

    data: bytes
    data_hash: Hash32
    proofs: Proofs
    metadata: PayloadMetadata = field(default_factory=PayloadMetadata)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", parse_hex_blob(self.data, "data"))
        object.__setattr__(self, "data_hash", parse_digest(self.data_hash, "data_hash"))
        if not isinstance(self.proofs, Proofs):
            raise FormatError("proofs", self.proofs, reason="must be a Proofs record")
        if not isinstance(self.metadata, PayloadMetadata):
            raise FormatError("metadata", self.metadata, reason="must be a PayloadMetadata record")

    @classmethod
    def build(
        cls,
        data: BytesLike,
        data_hash: BytesLike,
        signature_proof: BytesLike,
        zk_proof: BytesLike = b"",
        merkle_proof: BytesLike = b"",
        content_type: str = "",
        encoding: str = "",
        compression: str = "",
    ) -> "MessagePayload":
        """Build a payload from hex strings (``0x`` prefix optional)."""
        return cls(
            data=parse_hex_blob(data, "data"),
            data_hash=parse_digest(data_hash, "data_hash"),
            proofs=Proofs(
                signature_proof=parse_hex_blob(signature_proof, "signature_proof"),
                zk_proof=parse_hex_blob(zk_proof, "zk_proof"),
                merkle_proof=parse_hex_blob(merkle_proof, "merkle_proof"),
            ),
            metadata=PayloadMetadata(content_type, encoding, compression),
        )

    @classmethod
    def for_message(
        cls,
        message: Union[str, bytes],
        signature_proof: BytesLike,
        metadata: PayloadMetadata = PayloadMetadata(),
    ) -> "MessagePayload":
        """Wrap a message with its keccak digest and a signature proof."""
        data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
        return cls(
            data=data,
            data_hash=Hash32(bytes(Web3.keccak(data))),
            proofs=Proofs(signature_proof=parse_hex_blob(signature_proof, "signature_proof")),
            metadata=metadata,
        )

    def as_abi(self) -> tuple:
        return (self.data, self.data_hash, self.proofs.as_abi(), self.metadata.as_abi())
