"""Result types produced by chunk scanning and batch processing.

Every type exposes ``to_dict()`` returning a JSON-serialisable dict so
hosts can store results in an API response or an audit log unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from aumos_chunk_compliance.detection.classifier import DataClassification
from aumos_chunk_compliance.detection.pii_detector import PiiMatch
from aumos_chunk_compliance.scanning.flags import (
    RISK_UNKNOWN,
    flag_action,
    flag_description,
    flag_regulation,
    flag_severity,
)


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class ComplianceResult:
    """Compliance verdict for one chunk from one scan.

    Attributes
    ----------
    chunk_id:
        Identifier of the scanned chunk.
    pii_detected:
        ``True`` when at least one PII pattern matched.
    pii_details:
        Masked PII matches ordered by offset.
    compliance_flags:
        Flags raised by the scan, de-duplicated, in detection order.
    data_classification:
        Sensitivity level, categories, regulations and retention.
    risk_level:
        ``"low"``, ``"medium"`` or ``"high"``; ``"unknown"`` when the scan
        failed.
    required_actions:
        Remediation actions implied by the flags.
    scan_timestamp:
        UTC time the scan finished.
    metadata:
        ``scan_duration_ms`` and ``scanner_version``, or ``scan_error`` for
        a failed scan.
    """

    chunk_id: str
    pii_detected: bool = False
    pii_details: tuple[PiiMatch, ...] = ()
    compliance_flags: tuple[str, ...] = ()
    data_classification: DataClassification = field(default_factory=DataClassification)
    risk_level: str = "low"
    required_actions: tuple[str, ...] = ()
    scan_timestamp: datetime = field(default_factory=utc_now)
    metadata: dict[str, object] = field(default_factory=dict)

    @classmethod
    def placeholder(cls, chunk_id: str, error: str) -> "ComplianceResult":
        """Build the result recorded for a chunk whose scan failed."""
        return cls(
            chunk_id=chunk_id,
            risk_level=RISK_UNKNOWN,
            metadata={"scan_error": error},
        )

    @property
    def failed(self) -> bool:
        return "scan_error" in self.metadata

    @property
    def has_violations(self) -> bool:
        return bool(self.compliance_flags)

    def to_dict(self) -> dict[str, object]:
        return {
            "chunk_id": self.chunk_id,
            "pii_detected": self.pii_detected,
            "pii_details": [m.to_dict() for m in self.pii_details],
            "compliance_flags": list(self.compliance_flags),
            "data_classification": self.data_classification.to_dict(),
            "risk_level": self.risk_level,
            "required_actions": list(self.required_actions),
            "scan_timestamp": self.scan_timestamp.isoformat(),
            "metadata": dict(self.metadata),
        }


class ViolationStatus(str, Enum):
    """Review state of a compliance violation."""

    NEW = "new"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


@dataclass
class ComplianceViolation:
    """A single flag of a :class:`ComplianceResult`, viewed as a violation.

    Only ``status`` is expected to change after creation, and only through
    a reviewer action outside this package.
    """

    chunk_id: str
    violation_type: str
    severity: str
    description: str
    regulation: str
    required_action: str
    detected_at: datetime
    status: ViolationStatus = ViolationStatus.NEW

    @classmethod
    def from_flag(cls, chunk_id: str, flag: str, detected_at: datetime) -> "ComplianceViolation":
        return cls(
            chunk_id=chunk_id,
            violation_type=flag,
            severity=flag_severity(flag),
            description=flag_description(flag),
            regulation=flag_regulation(flag),
            required_action=flag_action(flag),
            detected_at=detected_at,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "chunk_id": self.chunk_id,
            "violation_type": self.violation_type,
            "severity": self.severity,
            "description": self.description,
            "regulation": self.regulation,
            "required_action": self.required_action,
            "detected_at": self.detected_at.isoformat(),
            "status": self.status.value,
        }


@dataclass
class ComplianceReport:
    """Aggregate of one tenant pass.

    Attributes
    ----------
    tenant_id:
        Tenant whose chunks were scanned.
    report_date:
        UTC time the report was built.
    total_chunks_scanned:
        Number of chunks in the batch, including failed scans.
    pii_detected_count:
        Number of chunks with at least one PII match.
    compliance_violations:
        One entry per distinct (chunk, flag) pair.
    risk_distribution:
        Histogram of risk tiers.
    data_classification:
        Histogram of sensitivity levels.
    required_actions:
        Distinct actions across the batch, in first-seen order.
    last_scan_date:
        UTC time of the most recent scan in the batch.
    scan_duration:
        Wall-clock seconds spent on the pass.
    metadata:
        ``scan_version``, ``regulations_checked`` and ``failed_chunks``.
    """

    tenant_id: str
    report_date: datetime = field(default_factory=utc_now)
    total_chunks_scanned: int = 0
    pii_detected_count: int = 0
    compliance_violations: list[ComplianceViolation] = field(default_factory=list)
    risk_distribution: dict[str, int] = field(default_factory=dict)
    data_classification: dict[str, int] = field(default_factory=dict)
    required_actions: list[str] = field(default_factory=list)
    last_scan_date: datetime = field(default_factory=utc_now)
    scan_duration: float = 0.0
    metadata: dict[str, object] = field(default_factory=dict)

    @property
    def has_violations(self) -> bool:
        return bool(self.compliance_violations)

    def to_dict(self) -> dict[str, object]:
        return {
            "tenant_id": self.tenant_id,
            "report_date": self.report_date.isoformat(),
            "total_chunks_scanned": self.total_chunks_scanned,
            "pii_detected_count": self.pii_detected_count,
            "compliance_violations": [v.to_dict() for v in self.compliance_violations],
            "risk_distribution": dict(self.risk_distribution),
            "data_classification": dict(self.data_classification),
            "required_actions": list(self.required_actions),
            "last_scan_date": self.last_scan_date.isoformat(),
            "scan_duration": self.scan_duration,
            "metadata": dict(self.metadata),
        }
