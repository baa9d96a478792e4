"""Write-side protocol helpers."""

from attps.protocol.submission import TransactionSubmissionPipeline

__all__ = ["TransactionSubmissionPipeline"]
