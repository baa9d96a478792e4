"""
Agent manager gateway.

The manager holds agent registrations, their signer settings and the
setting-change proposals awaiting acceptance.
"""

from __future__ import annotations

from typing import List, Union

from attps.gateways.abi import (
    AGENT_CONFIG_COMPONENTS,
    AGENT_SETTINGS_COMPONENTS,
    OWNABLE_ABI,
    nonpayable,
    param,
    ret,
    view,
)
from attps.gateways.base import ContractGateway
from attps.errors import FormatError
from attps.types.agent import AgentConfig, AgentSettings
from attps.types.transaction import TransactionReceipt
from attps.utils.codec import parse_digest, parse_hex_blob

_AGENT = param("agent", "address")
_DIGEST = param("settingDigest", "bytes32")
_START = param("idxStart", "uint256")
_END = param("idxEnd", "uint256")

AGENT_MANAGER_ABI = [
    *OWNABLE_ABI,
    view("agentProxy", outputs=ret("address")),
    view("agentVersion", outputs=ret("string")),
    view("allowedAgent", [_AGENT], ret("bool")),
    view("allowedSigner", [_AGENT, _DIGEST, param("signer", "address")], ret("bool")),
    view("getAgentConfig", [_AGENT, _DIGEST], ret("tuple", AGENT_CONFIG_COMPONENTS)),
    view("getAgentConfigs", [_AGENT], ret("tuple[]", AGENT_CONFIG_COMPONENTS)),
    view("getAgentConfigsCount", [_AGENT], ret("uint256")),
    view("getAgentConfigsInRange", [_AGENT, _START, _END], ret("tuple[]", AGENT_CONFIG_COMPONENTS)),
    view("getAllAllowedAgents", outputs=ret("address[]")),
    view("getAllRegisteringAgents", outputs=ret("address[]")),
    view("getAllowedAgentsCount", outputs=ret("uint256")),
    view("getAllowedAgentsInRange", [_START, _END], ret("address[]")),
    view("getRegisteringAgentsCount", outputs=ret("uint256")),
    view("getRegisteringAgentsInRange", [_START, _END], ret("address[]")),
    view("isValidMessageId", [param("messageId", "string")], ret("bool")),
    view("isValidSourceAgentId", [param("sourceAgentId", "string")], ret("bool")),
    view("signerThreshold", [_AGENT, _DIGEST], ret("uint8")),
    view("validateDataConversion", [_AGENT, param("data", "bytes")], ret("bytes")),
    nonpayable("acceptAgent", [_AGENT]),
    nonpayable("rejectAgent", [_AGENT]),
    nonpayable("acceptAgentSettingProposal", [_AGENT]),
    nonpayable("rejectAgentSettingProposal", [_AGENT]),
    nonpayable(
        "changeAgentSettingProposal",
        [_AGENT, param("agentSettings", "tuple", AGENT_SETTINGS_COMPONENTS)],
    ),
    nonpayable(
        "registerAgent",
        [_AGENT, param("agentSettings", "tuple", AGENT_SETTINGS_COMPONENTS)],
    ),
    nonpayable("removeAgent", [_AGENT]),
    nonpayable("setAgentProxy", [param("proxy", "address")]),
]


def _require_settings(settings: AgentSettings) -> AgentSettings:
    if not isinstance(settings, AgentSettings):
        raise FormatError("settings", settings, reason="must be an AgentSettings record")
    return settings


class ManagerGateway(ContractGateway):
    """Access to the agent manager contract."""

    ABI = AGENT_MANAGER_ABI
    NAME = "AgentManager"

    # ------------------------------------------------------------------
    # Contract info
    # ------------------------------------------------------------------
    async def agent_proxy(self) -> str:
        return self._address(await self._call("agentProxy", error="Failed to get agent proxy"))

    async def get_owner(self) -> str:
        return self._address(await self._call("owner", error="Failed to get owner"))

    async def get_type_and_version(self) -> str:
        return await self._call("typeAndVersion", error="Failed to get type and version")

    async def agent_version(self) -> str:
        return await self._call("agentVersion", error="Failed to get agent version")

    # ------------------------------------------------------------------
    # Membership and settings
    # ------------------------------------------------------------------
    async def allowed_agent(self, agent: str) -> bool:
        agent_address = self._address_arg(agent, "agent")
        return await self._call("allowedAgent", agent_address, error="Failed to check if agent is allowed")

    async def allowed_signer(
        self, agent: str, setting_digest: Union[str, bytes], signer: str
    ) -> bool:
        agent_address = self._address_arg(agent, "agent")
        digest = parse_digest(setting_digest, "setting_digest")
        signer_address = self._address_arg(signer, "signer")
        return await self._call(
            "allowedSigner",
            agent_address,
            digest,
            signer_address,
            error="Failed to check if signer is allowed",
        )

    async def get_agent_config(self, agent: str, setting_digest: Union[str, bytes]) -> AgentConfig:
        agent_address = self._address_arg(agent, "agent")
        digest = parse_digest(setting_digest, "setting_digest")
        raw = await self._call("getAgentConfig", agent_address, digest, error="Failed to get agent config")
        return AgentConfig.from_abi(raw)

    async def get_agent_configs(self, agent: str) -> List[AgentConfig]:
        agent_address = self._address_arg(agent, "agent")
        raw = await self._call("getAgentConfigs", agent_address, error="Failed to get agent configs")
        return [AgentConfig.from_abi(r) for r in raw]

    async def get_agent_configs_count(self, agent: str) -> int:
        agent_address = self._address_arg(agent, "agent")
        return await self._call(
            "getAgentConfigsCount", agent_address, error="Failed to get agent configs count"
        )

    async def get_agent_configs_in_range(self, agent: str, start: int, end: int) -> List[AgentConfig]:
        agent_address = self._address_arg(agent, "agent")
        start, end = self._range_args(start, end)
        raw = await self._call(
            "getAgentConfigsInRange",
            agent_address,
            start,
            end,
            error="Failed to get agent configs in range",
        )
        return [AgentConfig.from_abi(r) for r in raw]

    async def get_setting_digests(self, agent: str) -> List[bytes]:
        """Config digests of every settings version of ``agent``, in contract order."""
        return [config.config_digest for config in await self.get_agent_configs(agent)]

    async def signer_threshold(self, agent: str, setting_digest: Union[str, bytes]) -> int:
        agent_address = self._address_arg(agent, "agent")
        digest = parse_digest(setting_digest, "setting_digest")
        return await self._call(
            "signerThreshold", agent_address, digest, error="Failed to get signer threshold"
        )

    async def validate_data_conversion(self, agent: str, data: Union[str, bytes]) -> bytes:
        """Ask the agent's converter to convert ``data``; returns the converted bytes."""
        agent_address = self._address_arg(agent, "agent")
        data_bytes = parse_hex_blob(data, "data")
        converted = await self._call(
            "validateDataConversion",
            agent_address,
            data_bytes,
            error="Failed to validate data conversion",
        )
        return bytes(converted)

    # ------------------------------------------------------------------
    # Agent lists
    # ------------------------------------------------------------------
    async def get_all_allowed_agents(self) -> List[str]:
        return self._addresses(
            await self._call("getAllAllowedAgents", error="Failed to get all allowed agents")
        )

    async def get_all_registering_agents(self) -> List[str]:
        return self._addresses(
            await self._call("getAllRegisteringAgents", error="Failed to get all registering agents")
        )

    async def get_allowed_agents_count(self) -> int:
        return await self._call("getAllowedAgentsCount", error="Failed to get allowed agents count")

    async def get_allowed_agents_in_range(self, start: int, end: int) -> List[str]:
        start, end = self._range_args(start, end)
        raw = await self._call(
            "getAllowedAgentsInRange", start, end, error="Failed to get allowed agents in range"
        )
        return self._addresses(raw)

    async def get_registering_agents_count(self) -> int:
        return await self._call(
            "getRegisteringAgentsCount", error="Failed to get registering agents count"
        )

    async def get_registering_agents_in_range(self, start: int, end: int) -> List[str]:
        start, end = self._range_args(start, end)
        raw = await self._call(
            "getRegisteringAgentsInRange",
            start,
            end,
            error="Failed to get registering agents in range",
        )
        return self._addresses(raw)

    # ------------------------------------------------------------------
    # Message checks
    # ------------------------------------------------------------------
    async def is_valid_message_id(self, message_id: str) -> bool:
        return await self._call("isValidMessageId", message_id, error="Failed to validate message ID")

    async def is_valid_source_agent_id(self, source_agent_id: str) -> bool:
        return await self._call(
            "isValidSourceAgentId", source_agent_id, error="Failed to validate source agent ID"
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def accept_agent(self, agent: str) -> TransactionReceipt:
        return await self._transact("acceptAgent", self._address_arg(agent, "agent"))

    async def reject_agent(self, agent: str) -> TransactionReceipt:
        return await self._transact("rejectAgent", self._address_arg(agent, "agent"))

    async def accept_agent_setting_proposal(self, agent: str) -> TransactionReceipt:
        return await self._transact("acceptAgentSettingProposal", self._address_arg(agent, "agent"))

    async def reject_agent_setting_proposal(self, agent: str) -> TransactionReceipt:
        return await self._transact("rejectAgentSettingProposal", self._address_arg(agent, "agent"))

    async def accept_ownership(self) -> TransactionReceipt:
        return await self._transact("acceptOwnership")

    async def transfer_ownership(self, new_owner: str) -> TransactionReceipt:
        return await self._transact("transferOwnership", self._address_arg(new_owner, "new_owner"))

    async def change_agent_setting_proposal(
        self, agent: str, settings: AgentSettings
    ) -> TransactionReceipt:
        """Propose new settings for ``agent``; takes effect once accepted."""
        agent_address = self._address_arg(agent, "agent")
        settings = _require_settings(settings)
        return await self._transact("changeAgentSettingProposal", agent_address, settings.as_abi())

    async def register_agent(self, agent: str, settings: AgentSettings) -> TransactionReceipt:
        agent_address = self._address_arg(agent, "agent")
        settings = _require_settings(settings)
        return await self._transact("registerAgent", agent_address, settings.as_abi())

    async def remove_agent(self, agent: str) -> TransactionReceipt:
        return await self._transact("removeAgent", self._address_arg(agent, "agent"))

    async def set_agent_proxy(self, proxy: str) -> TransactionReceipt:
        return await self._transact("setAgentProxy", self._address_arg(proxy, "proxy"))
