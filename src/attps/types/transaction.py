"""Transaction receipt returned by confirmed write calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping


def _hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if value is None:
        return ""
    text = str(value)
    return text if text.startswith("0x") else f"0x{text}"


@dataclass(frozen=True)
class TransactionReceipt:
    """
    Confirmation record of a mined transaction.

    Attributes:
        transaction_hash: 0x-prefixed transaction hash
        block_number: Block the transaction was included in
        block_hash: 0x-prefixed block hash
        gas_used: Gas consumed by the transaction
        effective_gas_price: Price paid per gas unit (wei)
        status: 1 if execution succeeded, 0 if it reverted
        logs: Raw log entries emitted by the transaction
    """

    transaction_hash: str
    block_number: int
    block_hash: str
    gas_used: int
    effective_gas_price: int
    status: int
    logs: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True when the transaction executed without reverting."""
        return self.status == 1

    @classmethod
    def from_web3(cls, receipt: Mapping[str, Any]) -> "TransactionReceipt":
        """Build from the AttributeDict returned by web3."""
        return cls(
            transaction_hash=_hex(receipt["transactionHash"]),
            block_number=receipt["blockNumber"],
            block_hash=_hex(receipt["blockHash"]),
            gas_used=receipt["gasUsed"],
            effective_gas_price=receipt.get("effectiveGasPrice", 0),
            status=receipt.get("status", 1),
            logs=[dict(log) for log in receipt.get("logs", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "transactionHash": self.transaction_hash,
            "blockNumber": self.block_number,
            "blockHash": self.block_hash,
            "gasUsed": self.gas_used,
            "effectiveGasPrice": self.effective_gas_price,
            "status": self.status,
            "logs": self.logs,
        }
