"""Exception hierarchy for chunk compliance scanning.

None of these conditions is fatal to the host process.  Detection failures
are contained to a single chunk, store errors to a single tenant pass, and
configuration errors to config loading.
"""
from __future__ import annotations


class ComplianceError(Exception):
    """Base class for all errors raised by this package."""


class DetectionFailure(ComplianceError):
    """Raised when a detector cannot process one chunk's content.

    Attributes
    ----------
    chunk_id:
        Identifier of the chunk that could not be scanned.
    reason:
        Human-readable explanation of the failure.
    """

    def __init__(self, chunk_id: str, reason: str) -> None:
        self.chunk_id = chunk_id
        self.reason = reason
        super().__init__(f"Detection failed for chunk '{chunk_id}': {reason}")


class StoreError(ComplianceError):
    """Raised when the chunk store cannot be read or written."""


class ConfigurationError(ComplianceError):
    """Raised when compliance configuration cannot be loaded or validated."""
