"""Typed records exchanged with the agent contracts."""

from attps.types.agent import (
    AgentConfig,
    AgentHeader,
    AgentSettings,
    MessagePayload,
    PayloadMetadata,
    Proofs,
)
from attps.types.transaction import TransactionReceipt

__all__ = [
    "AgentHeader",
    "AgentSettings",
    "AgentConfig",
    "Proofs",
    "PayloadMetadata",
    "MessagePayload",
    "TransactionReceipt",
]
