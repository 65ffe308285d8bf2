"""Per-chunk scan orchestration and compliance result types."""
from __future__ import annotations

from aumos_chunk_compliance.scanning.models import (
    ComplianceReport,
    ComplianceResult,
    ComplianceViolation,
    ViolationStatus,
)
from aumos_chunk_compliance.scanning.orchestrator import SCANNER_VERSION, ScanOrchestrator

__all__ = [
    "SCANNER_VERSION",
    "ComplianceReport",
    "ComplianceResult",
    "ComplianceViolation",
    "ScanOrchestrator",
    "ViolationStatus",
]
