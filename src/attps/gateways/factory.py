"""Agent factory gateway: registry of created agents."""

from __future__ import annotations

from typing import List

from attps.gateways.abi import param, ret, view
from attps.gateways.base import ContractGateway

AGENT_FACTORY_ABI = [
    view("agentManager", outputs=ret("address")),
    view("agentProxy", outputs=ret("address")),
    view("getAgentsCount", outputs=ret("uint256")),
    view(
        "getAgentsInRange",
        [param("agentIdxStart", "uint256"), param("agentIdxEnd", "uint256")],
        ret("address[]"),
    ),
    view("getAllAgents", outputs=ret("address[]")),
    view("hasAgent", [param("agent", "address")], ret("bool")),
    view("typeAndVersion", outputs=ret("string")),
]


class FactoryGateway(ContractGateway):
    """Read-only access to the agent factory.

    Example:
        >>> factory = await FactoryGateway.create(config.with_contract(factory_address))
        >>> await factory.get_agents_count()
        3
    """

    ABI = AGENT_FACTORY_ABI
    NAME = "AgentFactory"

    async def get_agent_manager(self) -> str:
        return self._address(await self._call("agentManager", error="Failed to get agent manager"))

    async def get_agent_proxy(self) -> str:
        return self._address(await self._call("agentProxy", error="Failed to get agent proxy"))

    async def get_agents_count(self) -> int:
        return await self._call("getAgentsCount", error="Failed to get agents count")

    async def get_agents_in_range(self, start: int, end: int) -> List[str]:
        start, end = self._range_args(start, end)
        raw = await self._call("getAgentsInRange", start, end, error="Failed to get agents in range")
        return self._addresses(raw)

    async def get_all_agents(self) -> List[str]:
        return self._addresses(await self._call("getAllAgents", error="Failed to get all agents"))

    async def has_agent(self, agent: str) -> bool:
        agent_address = self._address_arg(agent, "agent")
        return await self._call("hasAgent", agent_address, error="Failed to check if agent exists")

    async def type_and_version(self) -> str:
        return await self._call("typeAndVersion", error="Failed to get type and version")
