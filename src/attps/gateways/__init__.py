"""Gateways to the agent factory, manager and proxy contracts."""

from attps.gateways.base import ContractGateway
from attps.gateways.factory import AGENT_FACTORY_ABI, FactoryGateway
from attps.gateways.manager import AGENT_MANAGER_ABI, ManagerGateway
from attps.gateways.proxy import AGENT_PROXY_ABI, ProxyGateway

__all__ = [
    "ContractGateway",
    "FactoryGateway",
    "ManagerGateway",
    "ProxyGateway",
    "AGENT_FACTORY_ABI",
    "AGENT_MANAGER_ABI",
    "AGENT_PROXY_ABI",
]
