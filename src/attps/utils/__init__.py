"""
ATTPs SDK Utilities.

This module provides the hex codec, retry strategy, logging helpers and
the legacy config-digest extractor.
"""

from attps.utils.codec import (
    encode_address,
    encode_hex,
    parse_address,
    parse_addresses,
    parse_digest,
    parse_hex_blob,
    strip_hex_prefix,
    to_checksum_address,
    validate_uint,
    validate_uint8,
)
from attps.utils.config_digest import extract_setting_digests
from attps.utils.logging import (
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)
from attps.utils.retry import (
    RetryConfig,
    RetryingReadExecutor,
    calculate_delay,
    retry_async,
    with_retry,
)

__all__ = [
    # Codec
    "parse_address",
    "parse_addresses",
    "parse_digest",
    "parse_hex_blob",
    "strip_hex_prefix",
    "encode_address",
    "encode_hex",
    "to_checksum_address",
    "validate_uint",
    "validate_uint8",
    # Legacy dumps
    "extract_setting_digests",
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    # Retry
    "RetryConfig",
    "RetryingReadExecutor",
    "calculate_delay",
    "retry_async",
    "with_retry",
]
