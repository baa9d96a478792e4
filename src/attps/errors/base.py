"""
Root exception of the ATTPs SDK.

Every SDK error carries a machine-readable ``code`` and a ``details``
mapping. Gateway and pipeline errors put the contract ``method`` and the
pipeline ``stage`` into ``details``; both are surfaced in ``str()`` and
``to_dict()`` so a log line names where a call failed.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


def _rebuild(cls: type, message: str, state: Dict[str, Any]) -> "ATTPSError":
    error = cls.__new__(cls)
    Exception.__init__(error, message)
    error.__dict__.update(state)
    return error


class ATTPSError(Exception):
    """
    Base exception for all ATTPs SDK errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "REMOTE_READ_ERROR").
        tx_hash: Transaction hash, once a write has been broadcast.
        details: Extra context. Values are plain strings, numbers or
            booleans; causes are stored as text.

    Example:
        >>> raise ATTPSError(
        ...     "Gas estimation failed",
        ...     code="ESTIMATION_FAILED",
        ...     details={"stage": "estimate", "method": "AgentProxy.verify"},
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "ATTPS_ERROR",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.tx_hash = tx_hash
        self.details = details or {}

    @property
    def stage_name(self) -> Optional[str]:
        """Pipeline stage or deadline stage that failed, if any."""
        return self.details.get("stage")

    @property
    def method_name(self) -> Optional[str]:
        """Contract method the error belongs to, if any."""
        return self.details.get("method")

    def __str__(self) -> str:
        label = self.code if self.stage_name is None else f"{self.code}@{self.stage_name}"
        text = f"[{label}] {self.message}"
        if self.tx_hash:
            text += f" (tx: {self.tx_hash})"
        return text

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"tx_hash={self.tx_hash!r}, "
            f"details={self.details!r})"
        )

    def __reduce__(self):
        # Subclass constructors take different arguments; restore state directly
        return (_rebuild, (self.__class__, self.message, dict(self.__dict__)))

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into a JSON-serializable record for structured logs."""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "stage": self.stage_name,
            "method": self.method_name,
            "tx_hash": self.tx_hash,
            "details": {
                key: value if isinstance(value, (str, int, float, bool, type(None))) else str(value)
                for key, value in self.details.items()
            },
        }
