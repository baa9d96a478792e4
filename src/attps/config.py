"""
Gateway configuration.

A GatewayConfig bundles everything needed to talk to one contract: the
RPC endpoint, the contract address and the signing key, plus timeouts
and the read retry policy. Values are passed explicitly to gateway
constructors; ``from_env`` is a convenience for scripts.

Example:
    ```python
    config = GatewayConfig.from_env()          # reads ATTPS_* variables
    proxy = await ProxyGateway.create(config)
    manager = await ManagerGateway.create(
        config.with_contract(await proxy.get_agent_manager())
    )
    ```
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_serializer,
    field_validator,
)

from attps.constants import (
    CALL_TIMEOUT_SECONDS,
    ENV_CONTRACT_ADDRESS,
    ENV_PREFIX,
    ENV_PRIVATE_KEY,
    ENV_RPC_URL,
    GAS_ESTIMATION_BUFFER,
    PROVIDER_TIMEOUT_SECONDS,
    RECEIPT_TIMEOUT_SECONDS,
)
from attps.errors import ConfigurationError, FormatError
from attps.utils.codec import to_checksum_address
from attps.utils.retry import RetryConfig

__all__ = ["GatewayConfig"]

_RPC_SCHEMES = ("http://", "https://")


class GatewayConfig(BaseModel):
    """
    Connection and signing settings for one contract gateway.

    SECURITY: ``private_key`` is a SecretStr and is never rendered in
    ``repr``, logs or ``model_dump_json``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    rpc_url: str = Field(
        ...,
        description="HTTP(S) JSON-RPC endpoint of the chain",
    )
    contract_address: str = Field(
        ...,
        description="Address of the target contract (checksummed on load)",
    )
    private_key: SecretStr = Field(
        ...,
        description="Signing key. SECURITY: Store in environment variable",
    )
    request_timeout: int = Field(
        default=PROVIDER_TIMEOUT_SECONDS,
        ge=1,
        description="HTTP provider timeout in seconds",
    )
    call_timeout: Optional[float] = Field(
        default=CALL_TIMEOUT_SECONDS,
        gt=0,
        description="Deadline in seconds per read attempt and per pre-confirmation write stage",
    )
    receipt_timeout: float = Field(
        default=RECEIPT_TIMEOUT_SECONDS,
        gt=0,
        description="Deadline in seconds for a transaction receipt",
    )
    gas_buffer: float = Field(
        default=GAS_ESTIMATION_BUFFER,
        ge=1.0,
        description="Multiplier applied to gas estimates",
    )
    max_gas: Optional[int] = Field(
        default=None,
        ge=21_000,
        description="Optional cap on the gas limit of writes",
    )
    retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Retry policy for read-only calls",
    )

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, value: str) -> str:
        if not value or not value.startswith(_RPC_SCHEMES):
            raise ValueError("rpc_url must be an http(s) URL")
        return value

    @field_validator("contract_address")
    @classmethod
    def _check_contract_address(cls, value: str) -> str:
        try:
            return to_checksum_address(value, "contract_address")
        except FormatError as e:
            raise ValueError(e.message) from None

    @field_serializer("retry")
    def _dump_retry(self, retry: RetryConfig) -> Dict[str, Any]:
        # Exception classes are rendered by name
        return {
            "max_attempts": retry.max_attempts,
            "base_delay_ms": retry.base_delay_ms,
            "max_delay_ms": retry.max_delay_ms,
            "jitter": retry.jitter,
            "exponential_base": retry.exponential_base,
            "retryable_errors": [e.__name__ for e in retry.retryable_errors],
            "non_retryable_errors": [e.__name__ for e in retry.non_retryable_errors],
            "attempt_timeout": retry.attempt_timeout,
        }

    @property
    def read_policy(self) -> RetryConfig:
        """Retry policy with the per-attempt deadline applied."""
        if self.retry.attempt_timeout is not None or self.call_timeout is None:
            return self.retry
        return RetryConfig(
            max_attempts=self.retry.max_attempts,
            base_delay_ms=self.retry.base_delay_ms,
            max_delay_ms=self.retry.max_delay_ms,
            jitter=self.retry.jitter,
            exponential_base=self.retry.exponential_base,
            retryable_errors=self.retry.retryable_errors,
            non_retryable_errors=self.retry.non_retryable_errors,
            attempt_timeout=self.call_timeout,
        )

    def with_contract(self, contract_address: str) -> "GatewayConfig":
        """Same provider and signer, different contract."""
        address = to_checksum_address(contract_address, "contract_address")
        return self.model_copy(update={"contract_address": address})

    @classmethod
    def from_env(
        cls,
        contract_address: Optional[str] = None,
        *,
        env_file: Optional[Union[str, os.PathLike]] = None,
        prefix: str = ENV_PREFIX,
        **overrides,
    ) -> "GatewayConfig":
        """
        Load configuration from environment variables (and ``.env``).

        Reads ``{prefix}RPC_URL``, ``{prefix}CONTRACT_ADDRESS`` and
        ``{prefix}PRIVATE_KEY``. An explicit ``contract_address`` wins
        over the environment.

        Raises:
            ConfigurationError: If a variable is missing or invalid. The
                message names the variable, never its value.
        """
        load_dotenv(env_file)

        def require(name: str) -> str:
            key = prefix + name
            value = os.getenv(key, "").strip()
            if not value:
                raise ConfigurationError(f"{key} is not set", key=key)
            return value

        rpc_url = require(ENV_RPC_URL)
        address = contract_address or require(ENV_CONTRACT_ADDRESS)
        private_key = require(ENV_PRIVATE_KEY)

        try:
            return cls(
                rpc_url=rpc_url,
                contract_address=address,
                private_key=SecretStr(private_key),
                **overrides,
            )
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
            raise ConfigurationError(f"Invalid gateway configuration: {fields}") from None
