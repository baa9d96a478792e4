"""
Agent proxy gateway.

The proxy is the entry point of the agent system: it creates and
registers agents and verifies signed messages against an agent's
registered settings.
"""

from __future__ import annotations

from typing import Union

from attps.gateways.abi import (
    AGENT_SETTINGS_COMPONENTS,
    MESSAGE_PAYLOAD_COMPONENTS,
    OWNABLE_ABI,
    nonpayable,
    param,
    ret,
    view,
)
from attps.gateways.base import ContractGateway
from attps.errors import FormatError
from attps.types.agent import AgentSettings, MessagePayload
from attps.types.transaction import TransactionReceipt
from attps.utils.codec import parse_digest

AGENT_PROXY_ABI = [
    *OWNABLE_ABI,
    view("agentFactory", outputs=ret("address")),
    view("agentManager", outputs=ret("address")),
    nonpayable("setAgentFactory", [param("factory", "address")]),
    nonpayable("setAgentManager", [param("manager", "address")]),
    nonpayable(
        "createAndRegisterAgent",
        [param("agentSettings", "tuple", AGENT_SETTINGS_COMPONENTS)],
    ),
    nonpayable(
        "verify",
        [
            param("agent", "address"),
            param("settingsDigest", "bytes32"),
            param("payload", "tuple", MESSAGE_PAYLOAD_COMPONENTS),
        ],
    ),
]


class ProxyGateway(ContractGateway):
    """
    Access to the agent proxy contract.

    Example:
        >>> proxy = await ProxyGateway.create(GatewayConfig.from_env())
        >>> proof = SignatureProofBuilder.build("hello world", [key_1, key_2])
        >>> receipt = await proxy.verify(
        ...     agent, settings_digest, MessagePayload.for_message("hello world", proof)
        ... )
    """

    ABI = AGENT_PROXY_ABI
    NAME = "AgentProxy"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def get_agent_factory(self) -> str:
        return self._address(await self._call("agentFactory", error="Failed to get agent factory"))

    async def get_agent_manager(self) -> str:
        return self._address(await self._call("agentManager", error="Failed to get agent manager"))

    async def get_owner(self) -> str:
        return self._address(await self._call("owner", error="Failed to get owner"))

    async def get_type_and_version(self) -> str:
        return await self._call("typeAndVersion", error="Failed to get type and version")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def accept_ownership(self) -> TransactionReceipt:
        return await self._transact("acceptOwnership")

    async def transfer_ownership(self, new_owner: str) -> TransactionReceipt:
        return await self._transact("transferOwnership", self._address_arg(new_owner, "new_owner"))

    async def set_agent_factory(self, factory: str) -> TransactionReceipt:
        return await self._transact("setAgentFactory", self._address_arg(factory, "factory"))

    async def set_agent_manager(self, manager: str) -> TransactionReceipt:
        return await self._transact("setAgentManager", self._address_arg(manager, "manager"))

    async def create_and_register_agent(self, settings: AgentSettings) -> TransactionReceipt:
        """Deploy a new agent with ``settings`` and register it with the manager."""
        if not isinstance(settings, AgentSettings):
            raise FormatError("settings", settings, reason="must be an AgentSettings record")
        return await self._transact("createAndRegisterAgent", settings.as_abi())

    async def verify(
        self,
        agent: str,
        settings_digest: Union[str, bytes],
        payload: MessagePayload,
    ) -> TransactionReceipt:
        """
        Submit a message for verification against an agent's settings.

        Args:
            agent: Agent address
            settings_digest: Digest of the agent settings version to check against
            payload: Message, its digest and proofs (see SignatureProofBuilder)

        Returns:
            Receipt of the verification transaction

        Raises:
            FormatError: If the agent or digest is malformed (before any I/O)
            SubmissionError: If any submission stage fails
        """
        agent_address = self._address_arg(agent, "agent")
        digest = parse_digest(settings_digest, "settings_digest")
        if not isinstance(payload, MessagePayload):
            raise FormatError("payload", payload, reason="must be a MessagePayload record")
        return await self._transact("verify", agent_address, digest, payload.as_abi())
