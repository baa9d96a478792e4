"""
Digest extraction from debug-formatted agent config dumps.

Older tooling printed agent configuration records as debug text, e.g.
``AgentConfig { config_digest: [1, 0, 229, ...], ... }``. This helper
recovers the 32-byte digests from such text. New code should read typed
records with ``ManagerGateway.get_setting_digests`` instead.
"""

from __future__ import annotations

import re
from typing import List

from attps.constants import BYTES32_LENGTH

_CONFIG_DIGEST = re.compile(r"config_digest: \[([^\]]+)\]")


def _parse_byte(token: str):
    token = token.strip()
    # str.isdigit also accepts non-ASCII digits such as "²"
    if not (token.isascii() and token.isdigit()):
        return None
    value = int(token)
    return value if value <= 0xFF else None


def extract_setting_digests(dump: str) -> List[bytes]:
    """
    Find every ``config_digest: [n0, ..., n31]`` block in ``dump``.

    Tokens that are not byte values are dropped; a block that does not
    leave exactly 32 bytes is skipped. Duplicates are kept in order.

    Args:
        dump: Debug rendering of one or more agent config records

    Returns:
        List of 32-byte digests
    """
    digests: List[bytes] = []
    for match in _CONFIG_DIGEST.finditer(dump):
        values = [_parse_byte(t) for t in match.group(1).split(",")]
        values = [v for v in values if v is not None]
        if len(values) == BYTES32_LENGTH:
            digests.append(bytes(values))
    return digests
