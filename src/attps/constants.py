"""Constants for the ATTPs SDK.

This module defines all constant values used across the SDK,
including identifier widths, integer bounds, retry policy defaults
and network timeouts.
"""

# Ethereum Constants
ADDRESS_LENGTH = 20
ADDRESS_HEX_LENGTH = 40
BYTES32_LENGTH = 32
BYTES32_HEX_LENGTH = 64

# Integer bounds for ABI value types
MAX_UINT8 = 2**8 - 1
MAX_UINT256 = 2**256 - 1

# Signature recovery ids produced by eth-account (EIP-155 free "legacy" v)
RECOVERY_ID_OFFSET = 27
VALID_RECOVERY_IDS = (27, 28)

# ABI layout of a signature proof: bytes32[] r, bytes32[] s, uint256[] v
SIGNATURE_PROOF_TYPES = ("bytes32[]", "bytes32[]", "uint256[]")

# Read retry policy (100ms, 200ms, ... between at most 3 attempts)
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY_MS = 100
DEFAULT_BACKOFF_MULTIPLIER = 2.0
DEFAULT_MAX_DELAY_MS = 30_000

# Network Constants
PROVIDER_TIMEOUT_SECONDS = 30
CALL_TIMEOUT_SECONDS = 30.0
RECEIPT_TIMEOUT_SECONDS = 300.0

# Gas: raw estimate is used as the limit unless a buffer is configured
GAS_ESTIMATION_BUFFER = 1.0

# Environment variable names (prefix is configurable)
ENV_PREFIX = "ATTPS_"
ENV_RPC_URL = "RPC_URL"
ENV_CONTRACT_ADDRESS = "CONTRACT_ADDRESS"
ENV_PRIVATE_KEY = "PRIVATE_KEY"

__all__ = [
    "ADDRESS_LENGTH",
    "ADDRESS_HEX_LENGTH",
    "BYTES32_LENGTH",
    "BYTES32_HEX_LENGTH",
    "MAX_UINT8",
    "MAX_UINT256",
    "RECOVERY_ID_OFFSET",
    "VALID_RECOVERY_IDS",
    "SIGNATURE_PROOF_TYPES",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_BASE_DELAY_MS",
    "DEFAULT_BACKOFF_MULTIPLIER",
    "DEFAULT_MAX_DELAY_MS",
    "PROVIDER_TIMEOUT_SECONDS",
    "CALL_TIMEOUT_SECONDS",
    "RECEIPT_TIMEOUT_SECONDS",
    "GAS_ESTIMATION_BUFFER",
    "ENV_PREFIX",
    "ENV_RPC_URL",
    "ENV_CONTRACT_ADDRESS",
    "ENV_PRIVATE_KEY",
]
