"""
Shared fixtures and contract stubs.

The stubs mimic the parts of web3's async contract API the SDK touches:
``contract.functions.<name>(*args)`` returning an object with async
``call``, ``estimate_gas`` and ``build_transaction``.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account import Account
from web3 import Web3

from attps.protocol.submission import TransactionSubmissionPipeline
from attps.utils.retry import RetryConfig, RetryingReadExecutor


# =============================================================================
# Test Constants
# =============================================================================

# Private keys for tests (DO NOT USE IN PRODUCTION)
KEY_1 = "0x" + "11" * 32
KEY_2 = "0x" + "22" * 32
KEY_3 = "0x" + "33" * 32

CHAIN_ID = 1337
CONTRACT_ADDRESS = Web3.to_checksum_address("0x5fbdb2315678afecb367f032d93f642f64180aa3")
AGENT = Web3.to_checksum_address("0xf5f190a711d1c14ebd481f37c1c0f25b79c1a14b")
SIGNER_1 = "0x9538e13c0e111c5b0525f1592079aa1586b4e9cc"
SIGNER_2 = "0x83390ef6b20a29ccbf0955567556af519e86a958"
ZERO_ADDRESS = "0x" + "00" * 20
SETTINGS_DIGEST = "0x0100e5428f61995ca2f61d96b24d90b48de58b818cc91dbb88c1bf74e83df3cb"

TX_HASH = b"\xab" * 32
BLOCK_HASH = b"\xcd" * 32

RECEIPT = {
    "transactionHash": TX_HASH,
    "blockNumber": 42,
    "blockHash": BLOCK_HASH,
    "gasUsed": 90_000,
    "effectiveGasPrice": 1_000_000_000,
    "status": 1,
    "logs": [],
}

HEADER_TUPLE = (
    "1.0",
    "4b0aa564-0871-42da-bc6a-6c09a5d0173a",
    "4b0aa564-0871-42da-bc6a-6c09a5d0173a",
    "SourceAgent",
    "4b0aa564-0871-42da-bc6a-6c09a5d0173a",
    1700000000,
    0,
    1,
    3600,
)


def agent_config_tuple(digest: bytes, block: int = 7476906, active: bool = True) -> tuple:
    """Raw getAgentConfig output as web3 returns it."""
    return (
        digest,
        block,
        active,
        (
            [Web3.to_checksum_address(SIGNER_1), Web3.to_checksum_address(SIGNER_2)],
            2,
            ZERO_ADDRESS,
            HEADER_TUPLE,
        ),
    )


# =============================================================================
# Contract stubs
# =============================================================================


class ScriptedFunction:
    """Scripted behaviour and call log for one contract function."""

    def __init__(self) -> None:
        self.outcomes: List[Any] = [None]
        self.invocations: List[tuple] = []
        self.call_count = 0
        self.gas = 100_000
        self.estimate_error: Optional[BaseException] = None
        self.estimate_params: List[Dict[str, Any]] = []
        self.built: List[Dict[str, Any]] = []

    def next_outcome(self) -> Any:
        index = min(self.call_count, len(self.outcomes) - 1)
        self.call_count += 1
        return self.outcomes[index]


class StubCall:
    def __init__(self, name: str, args: tuple, script: ScriptedFunction) -> None:
        self.fn_name = name
        self.args = args
        self._script = script

    async def call(self) -> Any:
        outcome = self._script.next_outcome()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def estimate_gas(self, params: Dict[str, Any]) -> int:
        self._script.estimate_params.append(params)
        if self._script.estimate_error is not None:
            raise self._script.estimate_error
        return self._script.gas

    async def build_transaction(self, meta: Dict[str, Any]) -> Dict[str, Any]:
        self._script.built.append(meta)
        return {
            "to": CONTRACT_ADDRESS,
            "data": "0x",
            "value": 0,
            "maxFeePerGas": 2_000_000_000,
            "maxPriorityFeePerGas": 1_000_000_000,
            **meta,
        }


class StubFunctions:
    def __init__(self) -> None:
        self.scripts: Dict[str, ScriptedFunction] = {}

    def script(self, name: str) -> ScriptedFunction:
        return self.scripts.setdefault(name, ScriptedFunction())

    def returns(self, name: str, *outcomes: Any) -> ScriptedFunction:
        script = self.script(name)
        script.outcomes = list(outcomes)
        return script

    def __getattr__(self, name: str):
        if name.startswith("__"):
            raise AttributeError(name)
        script = self.script(name)

        def factory(*args: Any) -> StubCall:
            script.invocations.append(args)
            return StubCall(name, args, script)

        return factory


class StubContract:
    def __init__(self, address: str = CONTRACT_ADDRESS) -> None:
        self.address = address
        self.functions = StubFunctions()


def make_w3(receipt: Any = RECEIPT) -> MagicMock:
    w3 = MagicMock()
    w3.eth.get_transaction_count = AsyncMock(return_value=7)
    w3.eth.send_raw_transaction = AsyncMock(return_value=TX_HASH)
    w3.eth.wait_for_transaction_receipt = AsyncMock(return_value=receipt)
    return w3


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture()
def account():
    return Account.from_key(KEY_1)


@pytest.fixture()
def w3():
    return make_w3()


@pytest.fixture()
def contract():
    return StubContract()


@pytest.fixture()
def pipeline(w3, account):
    return TransactionSubmissionPipeline(w3, account, CHAIN_ID, call_timeout=None)


@pytest.fixture()
def no_retry_reader():
    return RetryingReadExecutor(RetryConfig.disabled())


def make_gateway(cls, contract, account, w3, reader=None):
    """Build a gateway around stubs, bypassing ``create``."""
    return cls(
        contract,
        account,
        w3,
        CHAIN_ID,
        reader=reader or RetryingReadExecutor(RetryConfig.disabled()),
        pipeline=TransactionSubmissionPipeline(w3, account, CHAIN_ID, call_timeout=None),
    )
