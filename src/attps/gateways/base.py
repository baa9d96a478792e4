"""
Base class for contract gateways.

A gateway binds a provider, a signing account and one contract address.
Read-only methods go through a RetryingReadExecutor; state-changing
methods go through a TransactionSubmissionPipeline. Nothing else is
kept between calls.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3
from web3.contract import AsyncContract

from attps.config import GatewayConfig
from attps.errors import ConfigurationError, RemoteReadError
from attps.protocol.submission import TransactionSubmissionPipeline
from attps.types.transaction import TransactionReceipt
from attps.utils.codec import encode_address, parse_address, to_checksum_address, validate_uint
from attps.utils.logging import get_logger
from attps.utils.retry import RetryingReadExecutor

_logger = get_logger(__name__)


class ContractGateway:
    """
    Provider + signer + contract address triple with typed call helpers.

    Subclasses set ``ABI`` and ``NAME`` and expose the contract's methods.
    Use ``await Gateway.create(config)`` in application code; the plain
    constructor takes ready-made collaborators (useful in tests).
    """

    ABI: ClassVar[List[Dict[str, Any]]] = []
    NAME: ClassVar[str] = "Contract"

    def __init__(
        self,
        contract: AsyncContract,
        account: LocalAccount,
        w3: AsyncWeb3,
        chain_id: int,
        *,
        reader: Optional[RetryingReadExecutor] = None,
        pipeline: Optional[TransactionSubmissionPipeline] = None,
    ) -> None:
        self._contract = contract
        self._account = account
        self._w3 = w3
        self._chain_id = chain_id
        self._reader = reader or RetryingReadExecutor()
        self._pipeline = pipeline or TransactionSubmissionPipeline(w3, account, chain_id)

    @classmethod
    async def create(
        cls,
        config: GatewayConfig,
        w3: Optional[AsyncWeb3] = None,
    ):
        """
        Connect to the provider, resolve the chain ID and bind the contract.

        Args:
            config: Gateway configuration
            w3: Optional pre-built AsyncWeb3 (defaults to an HTTP provider
                for ``config.rpc_url``)

        Raises:
            ConfigurationError: If the private key is malformed
            RemoteReadError: If the chain ID cannot be fetched
        """
        try:
            account = Account.from_key(config.private_key.get_secret_value())
        except Exception:
            raise ConfigurationError("Invalid private key format (key not shown for security)") from None

        w3 = w3 or AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(
                config.rpc_url,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=config.request_timeout)},
            )
        )
        reader = RetryingReadExecutor(config.read_policy)

        async def fetch_chain_id() -> int:
            try:
                return await w3.eth.chain_id
            except Exception as e:
                raise RemoteReadError("Failed to get chain ID", method="eth_chainId", cause=e) from e

        chain_id = await reader.execute(fetch_chain_id, "eth_chainId")

        contract = w3.eth.contract(address=config.contract_address, abi=cls.ABI)
        pipeline = TransactionSubmissionPipeline(
            w3,
            account,
            chain_id,
            call_timeout=config.call_timeout,
            receipt_timeout=config.receipt_timeout,
            gas_buffer=config.gas_buffer,
            max_gas=config.max_gas,
        )
        _logger.info(
            "Gateway connected",
            extra={
                "gateway": cls.NAME,
                "contract": config.contract_address,
                "chain_id": chain_id,
                "signer": account.address,
            },
        )
        return cls(contract, account, w3, chain_id, reader=reader, pipeline=pipeline)

    @property
    def address(self) -> str:
        """Signer address."""
        return self._account.address

    @property
    def contract_address(self) -> str:
        return self._contract.address

    @property
    def chain_id(self) -> int:
        return self._chain_id

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def _call(self, method: str, *args: Any, error: str) -> Any:
        """Run a view function through the read executor."""

        async def op() -> Any:
            try:
                return await getattr(self._contract.functions, method)(*args).call()
            except Exception as e:
                raise RemoteReadError(error, method=method, cause=e) from e

        return await self._reader.execute(op, f"{self.NAME}.{method}")

    async def _transact(self, method: str, *args: Any) -> TransactionReceipt:
        """Submit a state-changing function through the pipeline."""
        return await self._pipeline.submit(
            lambda: getattr(self._contract.functions, method)(*args),
            method=f"{self.NAME}.{method}",
        )

    @staticmethod
    def _address_arg(value: Any, field: str) -> str:
        return to_checksum_address(value, field)

    @staticmethod
    def _range_args(start: Any, end: Any) -> tuple:
        return validate_uint(start, "start"), validate_uint(end, "end")

    @staticmethod
    def _addresses(raw: Any) -> List[str]:
        return [encode_address(parse_address(a, "addresses")) for a in raw]

    @staticmethod
    def _address(raw: Any) -> str:
        return encode_address(parse_address(raw, "address"))
