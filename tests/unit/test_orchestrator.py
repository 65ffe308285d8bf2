"""Tests for ScanOrchestrator."""
from __future__ import annotations

import logging

import pytest

from aumos_chunk_compliance.config import ComplianceConfig
from aumos_chunk_compliance.detection.classifier import SensitivityLevel
from aumos_chunk_compliance.detection.pii_detector import PiiDetector, PiiMatch
from aumos_chunk_compliance.detection.regulations import KeywordGroup, RegulationScanner
from aumos_chunk_compliance.errors import DetectionFailure
from aumos_chunk_compliance.scanning.orchestrator import SCANNER_VERSION, ScanOrchestrator
from aumos_chunk_compliance.store import Chunk


class _ExplodingDetector(PiiDetector):
    def detect(self, text: str) -> list[PiiMatch]:
        raise RuntimeError("regex engine exploded")


def _chunk(content: object, chunk_id: str = "c1", **metadata: object) -> Chunk:
    return Chunk(chunk_id=chunk_id, content=content, tenant_id="t1", metadata=dict(metadata))  # type: ignore[arg-type]


@pytest.fixture()
def orchestrator() -> ScanOrchestrator:
    return ScanOrchestrator()


# ---------------------------------------------------------------------------
# scan_chunk
# ---------------------------------------------------------------------------


class TestScanChunk:
    def test_contact_details(self, orchestrator: ScanOrchestrator) -> None:
        result = orchestrator.scan_chunk(_chunk("Contact john@example.com or call 555-123-4567"))
        assert result.pii_detected is True
        assert [(m.pii_type, m.value) for m in result.pii_details] == [
            ("email", "j***@example.com"),
            ("phone", "***-***-4567"),
        ]
        assert result.compliance_flags == ("PII_DETECTED",)
        assert result.risk_level == "high"
        assert result.required_actions == ("MASK_PII", "REVIEW_RETENTION_POLICY")

    def test_patient_diagnosis(self, orchestrator: ScanOrchestrator) -> None:
        result = orchestrator.scan_chunk(_chunk("Patient diagnosis pending lab review"))
        assert "PHI_DETECTED" in result.compliance_flags
        assert "MEDICAL_DATA" in result.compliance_flags
        assert result.pii_detected is False
        assert result.risk_level == "high"
        assert result.data_classification.level is SensitivityLevel.RESTRICTED
        assert result.data_classification.retention_days >= 2555
        assert result.required_actions == ("HIPAA_SAFEGUARDS", "ACCESS_CONTROLS")

    def test_clean_content(self, orchestrator: ScanOrchestrator) -> None:
        result = orchestrator.scan_chunk(_chunk("Quarterly product roadmap overview"))
        assert result.compliance_flags == ()
        assert result.risk_level == "low"
        assert result.required_actions == ()
        assert result.has_violations is False
        assert result.data_classification.level is SensitivityLevel.PUBLIC

    def test_medium_risk_from_sensitive_keywords(self, orchestrator: ScanOrchestrator) -> None:
        result = orchestrator.scan_chunk(_chunk("Survey of religious affiliation"))
        assert result.compliance_flags == ("GDPR_SENSITIVE_DATA",)
        assert result.risk_level == "medium"

    def test_empty_content(self, orchestrator: ScanOrchestrator) -> None:
        result = orchestrator.scan_chunk(_chunk(""))
        assert result.risk_level == "low"
        assert result.pii_details == ()

    def test_metadata(self, orchestrator: ScanOrchestrator) -> None:
        result = orchestrator.scan_chunk(_chunk("hello"))
        assert result.metadata["scanner_version"] == SCANNER_VERSION
        assert result.metadata["scan_duration_ms"] >= 0  # type: ignore[operator]
        assert result.failed is False

    def test_source_path_raises_level(self, orchestrator: ScanOrchestrator) -> None:
        result = orchestrator.scan_chunk(_chunk("release notes", source_path="/srv/vault/notes.txt"))
        assert result.data_classification.level is SensitivityLevel.RESTRICTED

    def test_flags_deduplicated_across_scanners(self) -> None:
        duplicate = RegulationScanner("DUP", [KeywordGroup("GDPR_PERSONAL_DATA", ("email",))])
        orchestrator = ScanOrchestrator(hipaa=duplicate)
        result = orchestrator.scan_chunk(_chunk("send the email"))
        assert result.compliance_flags == ("GDPR_PERSONAL_DATA",)

    def test_each_scan_returns_new_result(self, orchestrator: ScanOrchestrator) -> None:
        chunk = _chunk("call 555-123-4567")
        first = orchestrator.scan_chunk(chunk)
        second = orchestrator.scan_chunk(chunk)
        assert first is not second
        assert first.pii_details == second.pii_details

    def test_raw_values_never_in_result(self, orchestrator: ScanOrchestrator) -> None:
        result = orchestrator.scan_chunk(_chunk("SSN 123-45-6789 for john@example.com"))
        serialised = str(result.to_dict())
        assert "123-45-6789" not in serialised
        assert "john@example.com" not in serialised

    def test_logs_debug_line(self, orchestrator: ScanOrchestrator, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="aumos_chunk_compliance.scanning.orchestrator"):
            orchestrator.scan_chunk(_chunk("hello", chunk_id="logged"))
        assert any("logged" in record.getMessage() for record in caplog.records)


class TestScanFailures:
    def test_non_text_content(self, orchestrator: ScanOrchestrator) -> None:
        with pytest.raises(DetectionFailure) as exc_info:
            orchestrator.scan_chunk(_chunk(None, chunk_id="bad"))
        assert exc_info.value.chunk_id == "bad"
        assert "NoneType" in exc_info.value.reason

    def test_detector_error_wrapped(self) -> None:
        orchestrator = ScanOrchestrator(pii_detector=_ExplodingDetector())
        with pytest.raises(DetectionFailure) as exc_info:
            orchestrator.scan_chunk(_chunk("anything"))
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "regex engine exploded" in str(exc_info.value)


# ---------------------------------------------------------------------------
# Config switches
# ---------------------------------------------------------------------------


class TestSwitches:
    def test_pii_detection_disabled(self) -> None:
        orchestrator = ScanOrchestrator(ComplianceConfig(pii_detection_enabled=False))
        result = orchestrator.scan_chunk(_chunk("call 555-123-4567"))
        assert result.pii_detected is False
        assert "PII_DETECTED" not in result.compliance_flags

    def test_hipaa_disabled(self) -> None:
        orchestrator = ScanOrchestrator(ComplianceConfig(hipaa_enabled=False))
        result = orchestrator.scan_chunk(_chunk("Patient diagnosis"))
        assert "PHI_DETECTED" not in result.compliance_flags

    def test_gdpr_disabled(self) -> None:
        orchestrator = ScanOrchestrator(ComplianceConfig(gdpr_enabled=False))
        result = orchestrator.scan_chunk(_chunk("home address on file"))
        assert result.compliance_flags == ()

    def test_classification_disabled(self) -> None:
        orchestrator = ScanOrchestrator(
            ComplianceConfig(data_classification_enabled=False, retention_days=90)
        )
        result = orchestrator.scan_chunk(_chunk("Patient diagnosis"))
        assert result.data_classification.level is SensitivityLevel.PUBLIC
        assert result.data_classification.retention_days == 90

    def test_rules_from_config(self) -> None:
        config = ComplianceConfig.model_validate(
            {
                "classification_rules": [
                    {"name": "legal", "keywords": ["contract"], "level": "confidential", "categories": ["legal"]}
                ],
                "retention_priority": [{"category": "legal", "retention_days": 3650}],
            }
        )
        result = ScanOrchestrator(config).scan_chunk(_chunk("Signed contract"))
        assert result.data_classification.level is SensitivityLevel.CONFIDENTIAL
        assert result.data_classification.retention_days == 3650


# ---------------------------------------------------------------------------
# batch_scan_chunks
# ---------------------------------------------------------------------------


class TestBatchScan:
    def test_one_result_per_chunk_in_order(self, orchestrator: ScanOrchestrator) -> None:
        chunks = [_chunk("a@example.com", "c1"), _chunk("plain", "c2"), _chunk("Patient", "c3")]
        results = orchestrator.batch_scan_chunks(chunks)
        assert [r.chunk_id for r in results] == ["c1", "c2", "c3"]

    def test_failed_chunk_gets_placeholder(self, orchestrator: ScanOrchestrator) -> None:
        chunks = [_chunk("a@example.com", "c1"), _chunk(12345, "c2"), _chunk("plain", "c3")]
        results = orchestrator.batch_scan_chunks(chunks)
        assert len(results) == 3
        assert [r.risk_level for r in results] == ["high", "unknown", "low"]
        assert results[1].failed
        assert "c2" in str(results[1].metadata["scan_error"])

    def test_failure_is_logged(self, orchestrator: ScanOrchestrator, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="aumos_chunk_compliance.scanning.orchestrator"):
            orchestrator.batch_scan_chunks([_chunk(None, "broken")])
        assert any("broken" in record.getMessage() for record in caplog.records)

    def test_empty_batch(self, orchestrator: ScanOrchestrator) -> None:
        assert orchestrator.batch_scan_chunks([]) == []
