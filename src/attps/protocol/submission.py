"""
Transaction submission pipeline for state-changing contract calls.

Every write goes through four stages, none of which is retried:

1. build    - assemble the contract function with its typed arguments
2. estimate - ask the node for the gas the call would consume
3. send     - sign with the bound account and broadcast
4. confirm  - wait for inclusion and return the receipt

A write succeeds only when stage 4 yields a receipt. Failures surface as
a SubmissionError subclass naming the stage; ``may_have_broadcast`` tells
callers whether the network might have seen the transaction.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.exceptions import TimeExhausted

from attps.constants import (
    CALL_TIMEOUT_SECONDS,
    GAS_ESTIMATION_BUFFER,
    RECEIPT_TIMEOUT_SECONDS,
)
from attps.errors import (
    BuildError,
    ConfirmationError,
    DeadlineExceededError,
    EstimationError,
    FormatError,
    MissingReceiptError,
    SendError,
)
from attps.types.transaction import TransactionReceipt
from attps.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


class TransactionSubmissionPipeline:
    """
    Submits contract writes at most once: build, estimate, send, confirm.

    Args:
        w3: Async web3 instance bound to the provider
        account: Signing account
        chain_id: Chain ID the account signs for
        call_timeout: Deadline in seconds for estimate and broadcast RPCs
        receipt_timeout: Deadline in seconds for the confirmation wait
        gas_buffer: Multiplier applied to the gas estimate
        max_gas: Optional cap on the gas limit
        tx_overrides: Extra transaction fields (fees, nonce) merged last

    Example:
        >>> pipeline = TransactionSubmissionPipeline(w3, account, chain_id)
        >>> receipt = await pipeline.submit(
        ...     lambda: contract.functions.acceptAgent(agent), method="acceptAgent"
        ... )
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        account: LocalAccount,
        chain_id: int,
        *,
        call_timeout: Optional[float] = CALL_TIMEOUT_SECONDS,
        receipt_timeout: float = RECEIPT_TIMEOUT_SECONDS,
        gas_buffer: float = GAS_ESTIMATION_BUFFER,
        max_gas: Optional[int] = None,
        tx_overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._w3 = w3
        self._account = account
        self._chain_id = chain_id
        self._call_timeout = call_timeout
        self._receipt_timeout = receipt_timeout
        self._gas_buffer = gas_buffer
        self._max_gas = max_gas
        self._tx_overrides = dict(tx_overrides or {})

    @property
    def sender(self) -> str:
        return self._account.address

    async def submit(self, build: Callable[[], Any], *, method: str) -> TransactionReceipt:
        """
        Run a write through all four stages.

        Args:
            build: Zero-argument callable returning the contract function
                (e.g. ``lambda: contract.functions.removeAgent(agent)``)
            method: Contract method name, used in logs and errors

        Returns:
            Receipt of the mined transaction

        Raises:
            BuildError: The call could not be assembled
            EstimationError: Gas estimation failed; nothing was broadcast
            SendError: Signing or broadcasting failed
            ConfirmationError: Waiting for the receipt failed
            MissingReceiptError: The wait ended without a receipt
            DeadlineExceededError: A stage outlived its deadline
        """
        func = self._build(build, method)
        gas = await self._estimate(func, method)
        tx_hash = await self._send(func, gas, method)
        return await self._confirm(tx_hash, method)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------
    def _build(self, build: Callable[[], Any], method: str) -> Any:
        try:
            return build()
        except FormatError:
            raise
        except Exception as e:
            _logger.error("Failed to build call", extra={"method": method, "error": str(e)})
            raise BuildError(method, cause=e) from e

    async def _estimate(self, func: Any, method: str) -> int:
        try:
            base = await self._with_deadline(
                func.estimate_gas({"from": self._account.address}), "estimate", method
            )
        except DeadlineExceededError:
            raise
        except Exception as e:
            _logger.error("Gas estimation failed", extra={"method": method, "error": str(e)})
            raise EstimationError(method, cause=e) from e

        gas = int(base * self._gas_buffer)
        if self._max_gas is not None:
            gas = min(gas, self._max_gas)
        _logger.debug("Gas estimated", extra={"method": method, "estimate": base, "gas": gas})
        return gas

    async def _send(self, func: Any, gas: int, method: str) -> str:
        # Everything before send_raw_transaction happens locally or is read-only
        try:
            nonce = await self._with_deadline(
                self._w3.eth.get_transaction_count(self._account.address, "pending"),
                "send",
                method,
            )
            tx = await self._with_deadline(
                func.build_transaction(self._tx_meta(nonce, gas)), "send", method
            )
            signed = self._account.sign_transaction(tx)
        except DeadlineExceededError:
            raise
        except Exception as e:
            _logger.error("Failed to prepare transaction", extra={"method": method, "error": str(e)})
            raise SendError(method, cause=e, may_have_broadcast=False) from e

        try:
            raw_hash = await self._with_deadline(
                self._w3.eth.send_raw_transaction(signed.raw_transaction), "send", method
            )
        except DeadlineExceededError as e:
            e.details["may_have_broadcast"] = True
            raise
        except Exception as e:
            _logger.error("Failed to send transaction", extra={"method": method, "error": str(e)})
            raise SendError(method, cause=e, may_have_broadcast=True) from e

        tx_hash = Web3.to_hex(raw_hash)
        _logger.info("Transaction sent", extra={"method": method, "tx_hash": tx_hash, "gas": gas})
        return tx_hash

    async def _confirm(self, tx_hash: str, method: str) -> TransactionReceipt:
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout
            )
        except (TimeExhausted, asyncio.TimeoutError):
            _logger.error(
                "Timed out waiting for receipt",
                extra={"method": method, "tx_hash": tx_hash, "timeout": self._receipt_timeout},
            )
            raise DeadlineExceededError(
                "confirm", self._receipt_timeout, method=method, tx_hash=tx_hash
            ) from None
        except Exception as e:
            _logger.error(
                "Transaction failed", extra={"method": method, "tx_hash": tx_hash, "error": str(e)}
            )
            raise ConfirmationError(method, cause=e, may_have_broadcast=True, tx_hash=tx_hash) from e

        if not receipt:
            _logger.error("Transaction returned no receipt", extra={"method": method, "tx_hash": tx_hash})
            raise MissingReceiptError(method, may_have_broadcast=True, tx_hash=tx_hash)

        try:
            result = TransactionReceipt.from_web3(receipt)
        except (KeyError, TypeError, ValueError) as e:
            _logger.error(
                "Malformed receipt", extra={"method": method, "tx_hash": tx_hash, "error": repr(e)}
            )
            raise ConfirmationError(method, cause=e, may_have_broadcast=True, tx_hash=tx_hash) from e

        if result.succeeded:
            _logger.info(
                "Transaction confirmed",
                extra={"method": method, "tx_hash": tx_hash, "block": result.block_number},
            )
        else:
            _logger.warning(
                "Transaction mined but reverted",
                extra={"method": method, "tx_hash": tx_hash, "block": result.block_number},
            )
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _tx_meta(self, nonce: int, gas: int) -> Dict[str, Any]:
        meta: Dict[str, Any] = {
            "from": self._account.address,
            "nonce": nonce,
            "chainId": self._chain_id,
            "gas": gas,
        }
        return {**meta, **self._tx_overrides}

    async def _with_deadline(self, awaitable: Awaitable[T], stage: str, method: str) -> T:
        if self._call_timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self._call_timeout)
        except asyncio.TimeoutError:
            _logger.error(
                "Stage timed out",
                extra={"method": method, "stage": stage, "timeout": self._call_timeout},
            )
            raise DeadlineExceededError(stage, self._call_timeout, method=method) from None
