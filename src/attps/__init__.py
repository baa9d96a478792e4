"""
ATTPs Python SDK - signed agent messages on the ATTPs agent contracts.

Quick Start:
    >>> import asyncio
    >>> from attps import (
    ...     GatewayConfig, MessagePayload, ProxyGateway, SignatureProofBuilder
    ... )
    >>>
    >>> async def main():
    ...     proxy = await ProxyGateway.create(GatewayConfig.from_env())
    ...     proof = SignatureProofBuilder.build("hello world", [key_1, key_2])
    ...     receipt = await proxy.verify(
    ...         agent, settings_digest, MessagePayload.for_message("hello world", proof)
    ...     )
    ...     print(receipt.transaction_hash)
    ...
    >>> asyncio.run(main())

Modules:
- `builders`: SignatureProofBuilder and proof decoding
- `gateways`: FactoryGateway, ManagerGateway, ProxyGateway
- `protocol`: TransactionSubmissionPipeline for writes
- `types`: Agent settings, payload and receipt records
- `errors`: Exception hierarchy
- `utils`: Hex codec, retry strategy and logging helpers
"""

from attps.version import __version__, __version_info__

from attps.builders import (
    SignatureComponents,
    SignatureProofBuilder,
    build_signature_proof,
    decode_signature_proof,
    hash_message,
    normalize_recovery_id,
)
from attps.config import GatewayConfig
from attps.errors import (
    ATTPSError,
    BuildError,
    ConfigurationError,
    ConfirmationError,
    DeadlineExceededError,
    EstimationError,
    FormatError,
    MissingReceiptError,
    RemoteReadError,
    SendError,
    SigningError,
    SubmissionError,
)
from attps.gateways import ContractGateway, FactoryGateway, ManagerGateway, ProxyGateway
from attps.protocol import TransactionSubmissionPipeline
from attps.types import (
    AgentConfig,
    AgentHeader,
    AgentSettings,
    MessagePayload,
    PayloadMetadata,
    Proofs,
    TransactionReceipt,
)
from attps.utils import (
    RetryConfig,
    RetryingReadExecutor,
    configure_logging,
    extract_setting_digests,
    get_logger,
    parse_address,
    parse_digest,
    parse_hex_blob,
)

__all__ = [
    "__version__",
    "__version_info__",
    # Config
    "GatewayConfig",
    # Gateways
    "ContractGateway",
    "FactoryGateway",
    "ManagerGateway",
    "ProxyGateway",
    # Proofs
    "SignatureComponents",
    "SignatureProofBuilder",
    "build_signature_proof",
    "decode_signature_proof",
    "hash_message",
    "normalize_recovery_id",
    # Pipelines
    "RetryConfig",
    "RetryingReadExecutor",
    "TransactionSubmissionPipeline",
    # Types
    "AgentHeader",
    "AgentSettings",
    "AgentConfig",
    "Proofs",
    "PayloadMetadata",
    "MessagePayload",
    "TransactionReceipt",
    # Codec
    "parse_address",
    "parse_digest",
    "parse_hex_blob",
    "extract_setting_digests",
    # Logging
    "get_logger",
    "configure_logging",
    # Errors
    "ATTPSError",
    "ConfigurationError",
    "FormatError",
    "SigningError",
    "RemoteReadError",
    "DeadlineExceededError",
    "SubmissionError",
    "BuildError",
    "EstimationError",
    "SendError",
    "ConfirmationError",
    "MissingReceiptError",
]
