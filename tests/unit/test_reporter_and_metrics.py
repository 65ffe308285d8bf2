"""Tests for report aggregation and processor metrics."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from aumos_chunk_compliance.detection.classifier import DataClassification, SensitivityLevel
from aumos_chunk_compliance.processing.metrics import MetricsRecorder
from aumos_chunk_compliance.processing.reporter import build_report, empty_report
from aumos_chunk_compliance.scanning.models import ComplianceResult
from aumos_chunk_compliance.scanning.orchestrator import SCANNER_VERSION

_BASE = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def _result(
    chunk_id: str,
    flags: tuple[str, ...] = (),
    risk: str = "low",
    pii: bool = False,
    level: SensitivityLevel = SensitivityLevel.PUBLIC,
    actions: tuple[str, ...] = (),
    offset_minutes: int = 0,
) -> ComplianceResult:
    return ComplianceResult(
        chunk_id=chunk_id,
        pii_detected=pii,
        compliance_flags=flags,
        data_classification=DataClassification(level=level),
        risk_level=risk,
        required_actions=actions,
        scan_timestamp=_BASE + timedelta(minutes=offset_minutes),
    )


@pytest.fixture()
def results() -> list[ComplianceResult]:
    return [
        _result(
            "c1",
            flags=("PII_DETECTED",),
            risk="high",
            pii=True,
            level=SensitivityLevel.INTERNAL,
            actions=("MASK_PII", "REVIEW_RETENTION_POLICY"),
            offset_minutes=1,
        ),
        _result(
            "c2",
            flags=("PHI_DETECTED", "MEDICAL_DATA"),
            risk="high",
            level=SensitivityLevel.RESTRICTED,
            actions=("HIPAA_SAFEGUARDS", "ACCESS_CONTROLS"),
            offset_minutes=3,
        ),
        _result("c3", offset_minutes=2),
        ComplianceResult.placeholder("c4", "content must be text"),
    ]


# ---------------------------------------------------------------------------
# build_report
# ---------------------------------------------------------------------------


class TestBuildReport:
    def test_totals(self, results: list[ComplianceResult]) -> None:
        report = build_report("t1", results, 0.25, ["GDPR", "HIPAA"])
        assert report.tenant_id == "t1"
        assert report.total_chunks_scanned == 4
        assert report.pii_detected_count == 1
        assert report.scan_duration == 0.25

    def test_histograms(self, results: list[ComplianceResult]) -> None:
        report = build_report("t1", results, 0.25, ["GDPR"])
        assert report.risk_distribution == {"high": 2, "low": 1, "unknown": 1}
        assert report.data_classification == {"internal": 1, "restricted": 1, "public": 2}

    def test_one_violation_per_chunk_flag(self, results: list[ComplianceResult]) -> None:
        report = build_report("t1", results, 0.25, ["GDPR"])
        pairs = [(v.chunk_id, v.violation_type) for v in report.compliance_violations]
        assert pairs == [("c1", "PII_DETECTED"), ("c2", "PHI_DETECTED"), ("c2", "MEDICAL_DATA")]

    def test_actions_deduplicated_in_order(self, results: list[ComplianceResult]) -> None:
        extra = _result("c5", flags=("PII_DETECTED",), actions=("MASK_PII",))
        report = build_report("t1", results + [extra], 0.25, ["GDPR"])
        assert report.required_actions == [
            "MASK_PII",
            "REVIEW_RETENTION_POLICY",
            "HIPAA_SAFEGUARDS",
            "ACCESS_CONTROLS",
        ]

    def test_metadata(self, results: list[ComplianceResult]) -> None:
        report = build_report("t1", results, 0.25, ["GDPR", "HIPAA"])
        assert report.metadata == {
            "scan_version": SCANNER_VERSION,
            "regulations_checked": ["GDPR", "HIPAA"],
            "failed_chunks": 1,
        }

    def test_last_scan_date_is_latest(self) -> None:
        batch = [_result("c1", offset_minutes=5), _result("c2", offset_minutes=9), _result("c3")]
        report = build_report("t1", batch, 0.1, [])
        assert report.last_scan_date == _BASE + timedelta(minutes=9)


class TestEmptyReport:
    def test_empty_report(self) -> None:
        report = empty_report("t1", ["GDPR"])
        assert report.total_chunks_scanned == 0
        assert report.scan_duration == 0.0
        assert report.compliance_violations == []
        assert report.metadata["failed_chunks"] == 0


# ---------------------------------------------------------------------------
# MetricsRecorder
# ---------------------------------------------------------------------------


class TestMetricsRecorder:
    def test_initial_snapshot(self) -> None:
        metrics = MetricsRecorder().snapshot("stopped")
        assert metrics.total_scans_performed == 0
        assert metrics.compliance_score == 100.0
        assert metrics.error_rate == 0.0
        assert metrics.last_scan_time is None
        assert metrics.processor_status == "stopped"

    def test_record_results(self, results: list[ComplianceResult]) -> None:
        recorder = MetricsRecorder()
        recorder.record_results(results, 0.5)
        metrics = recorder.snapshot("running")
        assert metrics.total_scans_performed == 4
        assert metrics.total_pii_detected == 1
        assert metrics.total_violations == 3
        assert metrics.compliance_score == pytest.approx(25.0)
        assert metrics.average_scan_time == pytest.approx(0.5)
        assert metrics.last_scan_time is not None

    def test_average_over_passes(self) -> None:
        recorder = MetricsRecorder()
        recorder.record_results([_result("c1")], 1.0)
        recorder.record_results([_result("c2")], 3.0)
        assert recorder.snapshot("running").average_scan_time == pytest.approx(2.0)

    def test_error_rate(self) -> None:
        recorder = MetricsRecorder()
        recorder.record_attempt(succeeded=False)
        recorder.record_attempt(succeeded=True)
        recorder.record_attempt(succeeded=True)
        recorder.record_attempt(succeeded=False)
        assert recorder.snapshot("running").error_rate == pytest.approx(0.5)

    def test_to_dict(self) -> None:
        recorder = MetricsRecorder()
        recorder.record_results([_result("c1")], 0.1)
        data = recorder.snapshot("running").to_dict()
        assert isinstance(data["last_scan_time"], str)
        assert data["processor_status"] == "running"
