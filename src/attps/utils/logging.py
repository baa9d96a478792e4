"""
Structured logging for the ATTPs SDK.

All SDK loggers live under the ``attps`` namespace so applications can
tune them with a single ``logging.getLogger("attps")`` call. Context is
attached with ``extra={...}``; secrets must never be passed in.

Example:
    >>> from attps.utils.logging import configure_logging, get_logger
    >>> configure_logging("DEBUG")
    >>> _logger = get_logger(__name__)
    >>> _logger.info("Gateway ready", extra={"chain_id": 1})
"""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "attps"

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_root = logging.getLogger(ROOT_LOGGER_NAME)
_root.addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger in the ``attps`` namespace.

    Args:
        name: Module name (usually ``__name__``). Names outside the
            namespace are nested under it.

    Returns:
        Logger instance
    """
    if not name or name == ROOT_LOGGER_NAME:
        return _root
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Attach a stream handler to the SDK root logger.

    Calling it again replaces the previously configured handler instead
    of stacking duplicates.

    Args:
        level: Log level name or number
        fmt: Format string for the handler
        handler: Optional custom handler (defaults to stderr)

    Returns:
        The SDK root logger
    """
    for existing in list(_root.handlers):
        if getattr(existing, "_attps_configured", False):
            _root.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler._attps_configured = True  # type: ignore[attr-defined]
    _root.addHandler(handler)
    set_level(level)
    return _root


def set_level(level: Union[int, str]) -> None:
    """Set the SDK root log level."""
    if isinstance(level, str):
        level = level.upper()
    _root.setLevel(level)


def disable_logging() -> None:
    """Silence all SDK logging."""
    _root.disabled = True


def enable_debug() -> None:
    """Re-enable SDK logging at DEBUG level."""
    _root.disabled = False
    set_level(logging.DEBUG)
