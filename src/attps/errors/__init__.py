"""
Exception hierarchy for the ATTPs SDK.

ATTPSError
├── ConfigurationError
├── FormatError
├── SigningError
├── RemoteReadError
├── DeadlineExceededError
└── SubmissionError
    ├── BuildError
    ├── EstimationError
    ├── SendError
    └── ConfirmationError
        └── MissingReceiptError
"""

from attps.errors.base import ATTPSError
from attps.errors.gateway import (
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

__all__ = [
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
