"""Tests for the flag tables and the compliance result types."""
from __future__ import annotations

import dataclasses
from datetime import datetime, timezone

import pytest

from aumos_chunk_compliance.detection.classifier import DataClassification, SensitivityLevel
from aumos_chunk_compliance.detection.pii_detector import PiiMatch
from aumos_chunk_compliance.scanning.flags import (
    assess_risk,
    flag_action,
    flag_description,
    flag_regulation,
    flag_severity,
    required_actions,
)
from aumos_chunk_compliance.scanning.models import (
    ComplianceReport,
    ComplianceResult,
    ComplianceViolation,
    ViolationStatus,
)

_WHEN = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Risk tiers
# ---------------------------------------------------------------------------


class TestAssessRisk:
    @pytest.mark.parametrize(
        "flags,expected",
        [
            (["PII_DETECTED"], "high"),
            (["PHI_DETECTED"], "high"),
            (["GDPR_PERSONAL_DATA"], "high"),
            (["FINANCIAL_DATA"], "high"),
            (["SENSITIVE_DATA"], "medium"),
            (["PERSONAL_IDENTIFIERS"], "medium"),
            (["GDPR_SENSITIVE_DATA"], "medium"),
            (["MEDICAL_DATA"], "medium"),
            (["HIPAA_IDENTIFIER"], "medium"),
            (["SOMETHING_ELSE"], "low"),
            ([], "low"),
        ],
    )
    def test_tiers(self, flags: list[str], expected: str) -> None:
        assert assess_risk(flags) == expected

    def test_high_wins_over_medium(self) -> None:
        assert assess_risk(["MEDICAL_DATA", "PHI_DETECTED"]) == "high"


class TestRequiredActions:
    def test_pii_actions_first(self) -> None:
        assert required_actions(True, []) == ["MASK_PII", "REVIEW_RETENTION_POLICY"]

    def test_flag_actions(self) -> None:
        assert required_actions(False, ["PHI_DETECTED"]) == ["HIPAA_SAFEGUARDS", "ACCESS_CONTROLS"]

    def test_combined_in_order(self) -> None:
        actions = required_actions(True, ["PII_DETECTED", "GDPR_PERSONAL_DATA", "FINANCIAL_DATA"])
        assert actions == [
            "MASK_PII",
            "REVIEW_RETENTION_POLICY",
            "ENSURE_CONSENT",
            "DATA_MINIMIZATION",
            "ENCRYPTION_REQUIRED",
            "AUDIT_TRAIL",
        ]

    def test_deduplicated(self) -> None:
        actions = required_actions(False, ["PHI_DETECTED", "PHI_DETECTED"])
        assert actions == ["HIPAA_SAFEGUARDS", "ACCESS_CONTROLS"]

    def test_flags_without_actions(self) -> None:
        assert required_actions(False, ["MEDICAL_DATA"]) == []


class TestFlagDetails:
    @pytest.mark.parametrize(
        "flag,severity,regulation",
        [
            ("PII_DETECTED", "high", "General"),
            ("PHI_DETECTED", "high", "HIPAA"),
            ("FINANCIAL_DATA", "high", "PCI-DSS"),
            ("GDPR_PERSONAL_DATA", "medium", "GDPR"),
            ("GDPR_SENSITIVE_DATA", "low", "GDPR"),
            ("MEDICAL_DATA", "low", "HIPAA"),
            ("HIPAA_IDENTIFIER", "low", "HIPAA"),
        ],
    )
    def test_severity_and_regulation(self, flag: str, severity: str, regulation: str) -> None:
        assert flag_severity(flag) == severity
        assert flag_regulation(flag) == regulation

    def test_unknown_flag_fallbacks(self) -> None:
        assert flag_description("CUSTOM") == "Compliance flag detected: CUSTOM"
        assert flag_action("CUSTOM") == "Review compliance requirements"


# ---------------------------------------------------------------------------
# ComplianceResult
# ---------------------------------------------------------------------------


class TestComplianceResult:
    def test_placeholder(self) -> None:
        result = ComplianceResult.placeholder("c1", "boom")
        assert result.risk_level == "unknown"
        assert result.failed is True
        assert result.metadata == {"scan_error": "boom"}
        assert result.compliance_flags == ()
        assert result.has_violations is False

    def test_frozen(self) -> None:
        result = ComplianceResult(chunk_id="c1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.risk_level = "high"  # type: ignore[misc]

    def test_to_dict(self) -> None:
        match = PiiMatch("email", "j***@example.com", 0, 0.95, "j***@example.com")
        result = ComplianceResult(
            chunk_id="c1",
            pii_detected=True,
            pii_details=(match,),
            compliance_flags=("PII_DETECTED",),
            data_classification=DataClassification(level=SensitivityLevel.INTERNAL),
            risk_level="high",
            required_actions=("MASK_PII",),
            scan_timestamp=_WHEN,
        )
        data = result.to_dict()
        assert data["pii_details"][0]["value"] == "j***@example.com"  # type: ignore[index]
        assert data["compliance_flags"] == ["PII_DETECTED"]
        assert data["data_classification"]["level"] == "internal"  # type: ignore[index]
        assert data["scan_timestamp"] == "2024-03-01T12:00:00+00:00"


# ---------------------------------------------------------------------------
# ComplianceViolation and ComplianceReport
# ---------------------------------------------------------------------------


class TestComplianceViolation:
    def test_from_flag(self) -> None:
        violation = ComplianceViolation.from_flag("c9", "PHI_DETECTED", _WHEN)
        assert violation.chunk_id == "c9"
        assert violation.violation_type == "PHI_DETECTED"
        assert violation.severity == "high"
        assert violation.regulation == "HIPAA"
        assert violation.required_action == "Apply HIPAA safeguards"
        assert violation.status is ViolationStatus.NEW

    def test_to_dict(self) -> None:
        data = ComplianceViolation.from_flag("c9", "FINANCIAL_DATA", _WHEN).to_dict()
        assert data["status"] == "new"
        assert data["detected_at"] == "2024-03-01T12:00:00+00:00"


class TestComplianceReport:
    def test_defaults(self) -> None:
        report = ComplianceReport(tenant_id="t1")
        assert report.total_chunks_scanned == 0
        assert report.has_violations is False

    def test_to_dict(self) -> None:
        report = ComplianceReport(
            tenant_id="t1",
            report_date=_WHEN,
            last_scan_date=_WHEN,
            compliance_violations=[ComplianceViolation.from_flag("c1", "PII_DETECTED", _WHEN)],
        )
        data = report.to_dict()
        assert data["tenant_id"] == "t1"
        assert data["compliance_violations"][0]["violation_type"] == "PII_DETECTED"  # type: ignore[index]
        assert report.has_violations is True
