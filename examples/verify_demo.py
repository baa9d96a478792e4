#!/usr/bin/env python3
"""
ATTPs Walkthrough
Reads the proxy, manager and factory contracts, registers an agent and
submits a two-signer message for verification.

Every step logs its result or its error and the walkthrough moves on,
except resolving the factory and manager addresses, which later steps need.

Usage:
    python examples/verify_demo.py

Environment Variables:
    ATTPS_RPC_URL: JSON-RPC endpoint
    ATTPS_CONTRACT_ADDRESS: Agent proxy contract address
    ATTPS_PRIVATE_KEY: Wallet key used to send transactions
    SIGNER_PRIVATE_KEY_1, SIGNER_PRIVATE_KEY_2: Keys of the agent's signers
"""

import asyncio
import os
import sys
from typing import Any, Awaitable

from dotenv import load_dotenv

from attps import (
    AgentSettings,
    ATTPSError,
    FactoryGateway,
    GatewayConfig,
    ManagerGateway,
    MessagePayload,
    PayloadMetadata,
    ProxyGateway,
    SignatureProofBuilder,
    configure_logging,
    get_logger,
)

# Load .env file
load_dotenv()

logger = get_logger("demo")

AGENT = "0xf5F190a711d1c14eBD481f37C1C0F25B79c1a14b"
SETTINGS_DIGEST = "0x0100e5428f61995ca2f61d96b24d90b48de58b818cc91dbb88c1bf74e83df3cb"
SIGNER = "0x9538e13c0e111c5b0525f1592079aa1586B4e9Cc"
MESSAGE_ID = "1ceb55b2-c82a-45a1-997b-ed185f8b41d6"


async def report(label: str, step: Awaitable[Any]) -> Any:
    """Await a step and log its outcome; errors are logged, not raised."""
    try:
        result = await step
    except ATTPSError as e:
        logger.error("%s failed: %s", label, e)
        return None
    logger.info("%s: %s", label, result)
    return result


async def read_walkthrough(proxy: ProxyGateway, manager: ManagerGateway, factory: FactoryGateway) -> None:
    await report("OWNER", proxy.get_owner())
    await report("TYPE_AND_VERSION", proxy.get_type_and_version())

    await report("MANAGER_OWNER", manager.get_owner())
    await report("MANAGER_TYPE_AND_VERSION", manager.get_type_and_version())
    await report("ALLOWED_AGENT", manager.allowed_agent(AGENT))
    await report("ALLOWED_SIGNER", manager.allowed_signer(AGENT, SETTINGS_DIGEST, SIGNER))
    await report("AGENT_CONFIG", manager.get_agent_config(AGENT, SETTINGS_DIGEST))
    digests = await report("SETTING_DIGESTS", manager.get_setting_digests(AGENT))
    if digests:
        logger.info("SETTING_DIGESTS (hex): %s", ["0x" + d.hex() for d in digests])
    await report("AGENT_CONFIGS_COUNT", manager.get_agent_configs_count(AGENT))
    await report("AGENT_CONFIGS_IN_RANGE", manager.get_agent_configs_in_range(AGENT, 0, 0))
    await report("ALL_ALLOWED_AGENTS", manager.get_all_allowed_agents())
    await report("ALL_REGISTERING_AGENTS", manager.get_all_registering_agents())
    await report("ALLOWED_AGENTS_COUNT", manager.get_allowed_agents_count())
    await report("ALLOWED_AGENTS_IN_RANGE", manager.get_allowed_agents_in_range(0, 1))
    await report("REGISTERING_AGENTS_COUNT", manager.get_registering_agents_count())
    await report("REGISTERING_AGENTS_IN_RANGE", manager.get_registering_agents_in_range(0, 0))
    await report("IS_VALID_MESSAGE_ID", manager.is_valid_message_id(MESSAGE_ID))
    await report("IS_VALID_SOURCE_AGENT_ID", manager.is_valid_source_agent_id(MESSAGE_ID))
    await report("SIGNER_THRESHOLD", manager.signer_threshold(AGENT, SETTINGS_DIGEST))
    await report("CONVERTED_DATA", manager.validate_data_conversion(AGENT, "0x12345455"))
    await report("AGENT_PROXY", manager.agent_proxy())

    await report("FACTORY_AGENT_MANAGER", factory.get_agent_manager())
    await report("FACTORY_AGENT_PROXY", factory.get_agent_proxy())
    await report("AGENTS_COUNT", factory.get_agents_count())
    await report("AGENTS_IN_RANGE", factory.get_agents_in_range(0, 0))
    await report("ALL_AGENTS", factory.get_all_agents())
    await report("HAS_AGENT", factory.has_agent(AGENT))
    await report("FACTORY_TYPE_AND_VERSION", factory.type_and_version())


async def write_walkthrough(proxy: ProxyGateway) -> None:
    # Replace with your own signer set and header
    settings = AgentSettings.build(
        ["0x9538e13c0e111c5b0525f1592079aa1586b4e9cc", "0x83390ef6B20a29ccbF0955567556AF519E86a958"],
        2,
        "0x0000000000000000000000000000000000000000",
        version="1.0",
        message_id="48b024e9-203f-4603-83bc-b925887cdde7",
        source_agent_id="48b024e9-203f-4603-83bc-b925887cdde7",
        source_agent_name="SourceAgent",
        target_agent_id="48b024e9-203f-4603-83bc-b925887cdde7",
        timestamp=1700000000,
        message_type=0,
        priority=1,
        ttl=3600,
    )
    await report("CREATE_AND_REGISTER_AGENT", proxy.create_and_register_agent(settings))

    signer_keys = [os.getenv("SIGNER_PRIVATE_KEY_1", ""), os.getenv("SIGNER_PRIVATE_KEY_2", "")]
    if not all(signer_keys):
        logger.error("SIGNER_PRIVATE_KEY_1 and SIGNER_PRIVATE_KEY_2 must be set to run verify")
        return

    message = "hello world"
    try:
        proof = SignatureProofBuilder.build(message, signer_keys)
    except ATTPSError as e:
        logger.error("Failed to build signature proof: %s", e)
        return

    payload = MessagePayload.for_message(
        message,
        proof,
        PayloadMetadata(content_type="0x", encoding="0x", compression="0x"),
    )
    await report("VERIFY", proxy.verify(AGENT, SETTINGS_DIGEST, payload))


async def main() -> int:
    configure_logging(os.getenv("ATTPS_LOG_LEVEL", "INFO"))

    try:
        config = GatewayConfig.from_env()
    except ATTPSError as e:
        logger.error("%s", e)
        return 1

    proxy = await ProxyGateway.create(config)

    factory_address = await report("AGENT_FACTORY", proxy.get_agent_factory())
    manager_address = await report("AGENT_MANAGER", proxy.get_agent_manager())
    if factory_address is None or manager_address is None:
        return 1

    manager = await ManagerGateway.create(config.with_contract(manager_address))
    factory = await FactoryGateway.create(config.with_contract(factory_address))

    await read_walkthrough(proxy, manager, factory)
    await write_walkthrough(proxy)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
