"""Operational metrics for the batch processor.

Thread-safety is achieved with a threading.Lock so background cycles and
manual tenant passes can record into the same recorder.
"""
from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from aumos_chunk_compliance.scanning.models import ComplianceResult


@dataclass(frozen=True)
class ProcessorMetrics:
    """Point-in-time snapshot of processor activity.

    Attributes
    ----------
    total_scans_performed:
        Chunks scanned since the processor was created.
    total_pii_detected:
        Scanned chunks containing PII.
    total_violations:
        Flags raised across all scanned chunks.
    average_scan_time:
        Mean seconds per non-empty tenant pass.
    last_scan_time:
        UTC time of the most recent non-empty pass, if any.
    compliance_score:
        Percentage of scanned chunks that scanned cleanly and raised no flag.
    processor_status:
        Lifecycle state of the processor.
    error_rate:
        Failed tenant pass attempts divided by all attempts.
    """

    total_scans_performed: int
    total_pii_detected: int
    total_violations: int
    average_scan_time: float
    last_scan_time: datetime | None
    compliance_score: float
    processor_status: str
    error_rate: float

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["last_scan_time"] = self.last_scan_time.isoformat() if self.last_scan_time else None
        return data


class MetricsRecorder:
    """Accumulates counters for :class:`ProcessorMetrics` snapshots."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._scans = 0
        self._clean_scans = 0
        self._pii = 0
        self._violations = 0
        self._passes = 0
        self._pass_seconds = 0.0
        self._last_scan_time: datetime | None = None
        self._attempts = 0
        self._failed_attempts = 0

    def record_results(self, results: Sequence[ComplianceResult], duration_seconds: float) -> None:
        """Record one non-empty tenant pass."""
        with self._lock:
            self._passes += 1
            self._pass_seconds += duration_seconds
            self._last_scan_time = datetime.now(tz=timezone.utc)
            for result in results:
                self._scans += 1
                if result.pii_detected:
                    self._pii += 1
                self._violations += len(result.compliance_flags)
                if not result.failed and not result.compliance_flags:
                    self._clean_scans += 1

    def record_attempt(self, succeeded: bool) -> None:
        """Record the outcome of one tenant pass attempt."""
        with self._lock:
            self._attempts += 1
            if not succeeded:
                self._failed_attempts += 1

    def snapshot(self, processor_status: str) -> ProcessorMetrics:
        with self._lock:
            return ProcessorMetrics(
                total_scans_performed=self._scans,
                total_pii_detected=self._pii,
                total_violations=self._violations,
                average_scan_time=self._pass_seconds / self._passes if self._passes else 0.0,
                last_scan_time=self._last_scan_time,
                compliance_score=(
                    100.0 * self._clean_scans / self._scans if self._scans else 100.0
                ),
                processor_status=processor_status,
                error_rate=self._failed_attempts / self._attempts if self._attempts else 0.0,
            )
