"""
Exceptions raised by the proof builder, the read executor and the
transaction submission pipeline.

Input errors (FormatError, SigningError) are raised before any network
round trip. Remote errors carry the contract method they belong to, and
submission errors additionally carry the pipeline stage and whether the
transaction may already have reached the network.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from attps.errors.base import ATTPSError


class ConfigurationError(ATTPSError):
    """
    Raised when required configuration is missing or invalid.

    Example:
        >>> raise ConfigurationError("ATTPS_RPC_URL is not set", key="ATTPS_RPC_URL")
    """

    def __init__(
        self,
        message: str,
        *,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if key:
            details["key"] = key
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)
        self.key = key


class FormatError(ATTPSError):
    """
    Raised when an address, digest, hex blob or integer field is malformed.

    Example:
        >>> raise FormatError("agent", "0x12", reason="expected 20 bytes, got 1")
    """

    def __init__(
        self,
        field: str,
        value: Any,
        *,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["field"] = field
        if reason:
            details["reason"] = reason

        message = f"Invalid {field}: {value!r}"
        if reason:
            message += f" ({reason})"

        super().__init__(message, code="INVALID_FORMAT", details=details)
        self.field = field
        self.value = value
        self.reason = reason


class SigningError(ATTPSError):
    """
    Raised when key material is malformed or signing fails.

    The offending key is never included in the message or details.
    """

    def __init__(
        self,
        message: str,
        *,
        signer_index: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if signer_index is not None:
            details["signer_index"] = signer_index
        super().__init__(message, code="SIGNING_ERROR", details=details)
        self.signer_index = signer_index


class RemoteReadError(ATTPSError):
    """
    Raised when a read-only contract query fails.

    Example:
        >>> raise RemoteReadError("Failed to get owner", method="owner")
    """

    def __init__(
        self,
        message: str,
        *,
        method: Optional[str] = None,
        cause: Optional[BaseException] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if method:
            details["method"] = method
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(message, code="REMOTE_READ_ERROR", details=details)
        self.method = method


class DeadlineExceededError(ATTPSError):
    """
    Raised when a network wait outlives its deadline.

    Not retried: the remote side may still be processing the request.
    """

    def __init__(
        self,
        stage: str,
        timeout: float,
        *,
        method: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["stage"] = stage
        details["timeout"] = timeout
        if method:
            details["method"] = method

        target = f"{method} " if method else ""
        super().__init__(
            f"{target}{stage} timed out after {timeout}s",
            code="DEADLINE_EXCEEDED",
            tx_hash=tx_hash,
            details=details,
        )
        self.stage = stage
        self.timeout = timeout
        self.method = method


class SubmissionError(ATTPSError):
    """
    Base exception for state-changing contract calls.

    Attributes:
        stage: Pipeline stage that failed ("build", "estimate", "send", "confirm").
        method: Contract method being submitted.
        may_have_broadcast: False only when the transaction certainly never
            left the client.
    """

    stage = "submit"
    code = "SUBMISSION_ERROR"

    def __init__(
        self,
        method: str,
        *,
        cause: Optional[BaseException] = None,
        may_have_broadcast: bool = False,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        details["stage"] = self.stage
        details["method"] = method
        details["may_have_broadcast"] = may_have_broadcast
        if cause is not None:
            details["cause"] = str(cause)

        message = f"{method}: {self._describe()}"
        if cause is not None:
            message += f": {cause}"

        super().__init__(message, code=self.code, tx_hash=tx_hash, details=details)
        self.method = method
        self.may_have_broadcast = may_have_broadcast

    def _describe(self) -> str:
        return "submission failed"


class BuildError(SubmissionError):
    """Raised when the contract call cannot be assembled from its arguments."""

    stage = "build"
    code = "BUILD_FAILED"

    def _describe(self) -> str:
        return "failed to build call"


class EstimationError(SubmissionError):
    """Raised when gas estimation fails. Nothing was broadcast."""

    stage = "estimate"
    code = "ESTIMATION_FAILED"

    def _describe(self) -> str:
        return "failed to estimate gas"


class SendError(SubmissionError):
    """Raised when signing or broadcasting the transaction fails."""

    stage = "send"
    code = "SEND_FAILED"

    def _describe(self) -> str:
        return "failed to send transaction"


class ConfirmationError(SubmissionError):
    """Raised when waiting for the receipt fails after a successful broadcast."""

    stage = "confirm"
    code = "CONFIRMATION_FAILED"

    def _describe(self) -> str:
        return "transaction failed"


class MissingReceiptError(ConfirmationError):
    """Raised when the provider finished waiting but returned no receipt."""

    code = "MISSING_RECEIPT"

    def _describe(self) -> str:
        return "transaction did not return a receipt"
