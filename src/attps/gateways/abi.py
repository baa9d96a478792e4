"""
Hand-written ABI fragments for the agent contracts.

Each gateway declares only the methods it calls. Struct layouts follow
the on-chain definitions of AgentHeader, AgentSettings, AgentConfig and
MessagePayload.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

Param = Dict[str, Any]


def param(name: str, type_: str, components: Sequence[Param] = ()) -> Param:
    entry: Param = {"name": name, "type": type_}
    if components:
        entry["components"] = list(components)
    return entry


def view(name: str, inputs: Sequence[Param] = (), outputs: Sequence[Param] = ()) -> Param:
    return {
        "inputs": list(inputs),
        "name": name,
        "outputs": list(outputs),
        "stateMutability": "view",
        "type": "function",
    }


def nonpayable(name: str, inputs: Sequence[Param] = ()) -> Param:
    return {
        "inputs": list(inputs),
        "name": name,
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    }


def ret(type_: str, components: Sequence[Param] = ()) -> Tuple[Param]:
    return (param("", type_, components),)


AGENT_HEADER_COMPONENTS: List[Param] = [
    param("version", "string"),
    param("messageId", "string"),
    param("sourceAgentId", "string"),
    param("sourceAgentName", "string"),
    param("targetAgentId", "string"),
    param("timestamp", "uint256"),
    param("messageType", "uint8"),
    param("priority", "uint8"),
    param("ttl", "uint256"),
]

AGENT_SETTINGS_COMPONENTS: List[Param] = [
    param("signers", "address[]"),
    param("threshold", "uint8"),
    param("converterAddress", "address"),
    param("agentHeader", "tuple", AGENT_HEADER_COMPONENTS),
]

AGENT_CONFIG_COMPONENTS: List[Param] = [
    param("configDigest", "bytes32"),
    param("configBlockNumber", "uint256"),
    param("isActive", "bool"),
    param("settings", "tuple", AGENT_SETTINGS_COMPONENTS),
]

PROOFS_COMPONENTS: List[Param] = [
    param("zkProof", "bytes"),
    param("merkleProof", "bytes"),
    param("signatureProof", "bytes"),
]

METADATA_COMPONENTS: List[Param] = [
    param("contentType", "string"),
    param("encoding", "string"),
    param("compression", "string"),
]

MESSAGE_PAYLOAD_COMPONENTS: List[Param] = [
    param("data", "bytes"),
    param("dataHash", "bytes32"),
    param("proofs", "tuple", PROOFS_COMPONENTS),
    param("metadata", "tuple", METADATA_COMPONENTS),
]

OWNABLE_ABI: List[Param] = [
    view("owner", outputs=ret("address")),
    view("typeAndVersion", outputs=ret("string")),
    nonpayable("acceptOwnership"),
    nonpayable("transferOwnership", [param("to", "address")]),
]
