"""Tests for the agent manager gateway."""

from unittest.mock import AsyncMock, patch

import pytest
from web3 import Web3

from attps.errors import EstimationError, FormatError, RemoteReadError
from attps.gateways import ManagerGateway
from attps.types import AgentConfig, AgentSettings, TransactionReceipt
from attps.utils.retry import RetryingReadExecutor

from tests.conftest import (
    AGENT,
    SETTINGS_DIGEST,
    SIGNER_1,
    SIGNER_2,
    ZERO_ADDRESS,
    agent_config_tuple,
    make_gateway,
)

DIGEST = bytes.fromhex(SETTINGS_DIGEST[2:])
OTHER_DIGEST = b"\x02" * 32


@pytest.fixture()
def manager(contract, account, w3):
    return make_gateway(ManagerGateway, contract, account, w3)


@pytest.fixture()
def settings():
    return AgentSettings.build(
        [SIGNER_1, SIGNER_2],
        2,
        ZERO_ADDRESS,
        version="1.0",
        message_id="4b0aa564-0871-42da-bc6a-6c09a5d0173a",
        source_agent_id="4b0aa564-0871-42da-bc6a-6c09a5d0173a",
        source_agent_name="SourceAgent",
        target_agent_id="4b0aa564-0871-42da-bc6a-6c09a5d0173a",
        timestamp=1700000000,
        message_type=0,
        priority=1,
        ttl=3600,
    )


class TestReads:

    @pytest.mark.asyncio
    async def test_get_owner_lowercase(self, manager, contract) -> None:
        contract.functions.returns("owner", Web3.to_checksum_address(SIGNER_1))

        assert await manager.get_owner() == SIGNER_1

    @pytest.mark.asyncio
    async def test_get_owner_retries_then_fails(self, contract, account, w3) -> None:
        manager = make_gateway(ManagerGateway, contract, account, w3, reader=RetryingReadExecutor())
        contract.functions.returns("owner", ConnectionError("down"))

        with patch("attps.utils.retry.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(RemoteReadError) as exc_info:
                await manager.get_owner()

        assert exc_info.value.message == "Failed to get owner"
        assert contract.functions.script("owner").call_count == 3
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_get_agent_configs(self, manager, contract) -> None:
        contract.functions.returns(
            "getAgentConfigs", [agent_config_tuple(DIGEST), agent_config_tuple(OTHER_DIGEST, active=False)]
        )

        configs = await manager.get_agent_configs(AGENT)

        assert [type(c) for c in configs] == [AgentConfig, AgentConfig]
        assert configs[0].is_active and not configs[1].is_active
        assert contract.functions.script("getAgentConfigs").invocations == [(AGENT,)]

    @pytest.mark.asyncio
    async def test_get_setting_digests_in_contract_order(self, manager, contract) -> None:
        contract.functions.returns(
            "getAgentConfigs",
            [agent_config_tuple(DIGEST), agent_config_tuple(OTHER_DIGEST), agent_config_tuple(DIGEST)],
        )

        assert await manager.get_setting_digests(AGENT) == [DIGEST, OTHER_DIGEST, DIGEST]

    @pytest.mark.asyncio
    async def test_get_agent_config(self, manager, contract) -> None:
        contract.functions.returns("getAgentConfig", agent_config_tuple(DIGEST))

        config = await manager.get_agent_config(AGENT, SETTINGS_DIGEST)

        assert config.config_digest == DIGEST
        assert contract.functions.script("getAgentConfig").invocations == [(AGENT, DIGEST)]

    @pytest.mark.asyncio
    async def test_allowed_signer_validates_before_io(self, manager, contract) -> None:
        with pytest.raises(FormatError):
            await manager.allowed_signer(AGENT, "0x1234", SIGNER_1)

        assert contract.functions.script("allowedSigner").invocations == []

    @pytest.mark.asyncio
    async def test_allowed_signer(self, manager, contract) -> None:
        contract.functions.returns("allowedSigner", True)

        assert await manager.allowed_signer(AGENT, SETTINGS_DIGEST, SIGNER_1) is True
        assert contract.functions.script("allowedSigner").invocations == [
            (AGENT, DIGEST, Web3.to_checksum_address(SIGNER_1))
        ]

    @pytest.mark.asyncio
    async def test_signer_threshold(self, manager, contract) -> None:
        contract.functions.returns("signerThreshold", 2)

        assert await manager.signer_threshold(AGENT, DIGEST) == 2

    @pytest.mark.asyncio
    async def test_validate_data_conversion(self, manager, contract) -> None:
        contract.functions.returns("validateDataConversion", b"\x01\x02")

        assert await manager.validate_data_conversion(AGENT, "0xabcd") == b"\x01\x02"
        assert contract.functions.script("validateDataConversion").invocations == [(AGENT, b"\xab\xcd")]

    @pytest.mark.asyncio
    async def test_validate_data_conversion_rejects_non_hex(self, manager) -> None:
        with pytest.raises(FormatError):
            await manager.validate_data_conversion(AGENT, "0xqq")

    @pytest.mark.asyncio
    async def test_agent_lists(self, manager, contract) -> None:
        contract.functions.returns("getAllAllowedAgents", [Web3.to_checksum_address(SIGNER_1)])
        contract.functions.returns("getRegisteringAgentsInRange", [Web3.to_checksum_address(SIGNER_2)])
        contract.functions.returns("getAllowedAgentsCount", 1)

        assert await manager.get_all_allowed_agents() == [SIGNER_1]
        assert await manager.get_registering_agents_in_range(0, 1) == [SIGNER_2]
        assert await manager.get_allowed_agents_count() == 1

    @pytest.mark.asyncio
    async def test_message_checks(self, manager, contract) -> None:
        contract.functions.returns("isValidMessageId", True)
        contract.functions.returns("isValidSourceAgentId", False)

        assert await manager.is_valid_message_id("4b0aa564-0871-42da-bc6a-6c09a5d0173a") is True
        assert await manager.is_valid_source_agent_id("unknown") is False


class TestWrites:

    @pytest.mark.asyncio
    async def test_accept_agent(self, manager, contract, w3) -> None:
        receipt = await manager.accept_agent(AGENT.lower())

        assert isinstance(receipt, TransactionReceipt)
        assert contract.functions.script("acceptAgent").invocations == [(AGENT,)]
        w3.eth.send_raw_transaction.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_agent_passes_struct(self, manager, contract, settings) -> None:
        await manager.register_agent(AGENT, settings)

        (args,) = contract.functions.script("registerAgent").invocations
        assert args == (AGENT, settings.as_abi())

    @pytest.mark.asyncio
    async def test_register_agent_rejects_non_settings(self, manager, contract, w3) -> None:
        with pytest.raises(FormatError):
            await manager.register_agent(AGENT, {"signers": []})

        w3.eth.send_raw_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_write_estimation_failure_names_method(self, manager, contract, w3) -> None:
        contract.functions.script("removeAgent").estimate_error = ValueError("execution reverted: not owner")

        with pytest.raises(EstimationError) as exc_info:
            await manager.remove_agent(AGENT)

        assert exc_info.value.method == "AgentManager.removeAgent"
        w3.eth.send_raw_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_address_never_submits(self, manager, contract, w3) -> None:
        with pytest.raises(FormatError):
            await manager.reject_agent("not-an-address")

        assert contract.functions.script("rejectAgent").invocations == []
        w3.eth.get_transaction_count.assert_not_awaited()
