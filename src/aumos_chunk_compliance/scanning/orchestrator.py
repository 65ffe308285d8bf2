"""Per-chunk compliance scan coordinator.

Runs PII detection, the GDPR and HIPAA keyword scanners, and the data
classifier over one chunk, then derives a risk tier and the required
remediation actions.

Example
-------
>>> orchestrator = ScanOrchestrator()
>>> chunk = Chunk(chunk_id="c1", content="Contact john@example.com", tenant_id="t1")
>>> result = orchestrator.scan_chunk(chunk)
>>> result.compliance_flags, result.risk_level
(('PII_DETECTED',), 'high')
"""
from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from aumos_chunk_compliance.config import ComplianceConfig
from aumos_chunk_compliance.detection.classifier import DataClassification, DataClassifier
from aumos_chunk_compliance.detection.pii_detector import PiiDetector, PiiMatch
from aumos_chunk_compliance.detection.regulations import (
    RegulationScanner,
    gdpr_scanner,
    hipaa_scanner,
)
from aumos_chunk_compliance.errors import DetectionFailure
from aumos_chunk_compliance.scanning.flags import PII_DETECTED, assess_risk, required_actions
from aumos_chunk_compliance.scanning.models import ComplianceResult, utc_now
from aumos_chunk_compliance.store import Chunk

logger = logging.getLogger(__name__)

SCANNER_VERSION = "1.0.0"


class ScanOrchestrator:
    """Coordinates the detectors for single and batch chunk scans.

    Parameters
    ----------
    config:
        Scan switches and classification rules.  Defaults to
        :class:`ComplianceConfig` defaults.
    pii_detector:
        Optional :class:`PiiDetector`; the built-in pattern set is used when
        omitted.
    gdpr:
        Optional GDPR :class:`RegulationScanner`.
    hipaa:
        Optional health-privacy :class:`RegulationScanner`.
    classifier:
        Optional :class:`DataClassifier`; built from the config rules when
        omitted.
    """

    def __init__(
        self,
        config: ComplianceConfig | None = None,
        pii_detector: PiiDetector | None = None,
        gdpr: RegulationScanner | None = None,
        hipaa: RegulationScanner | None = None,
        classifier: DataClassifier | None = None,
    ) -> None:
        self._config = config or ComplianceConfig()
        self._pii_detector = pii_detector or PiiDetector()
        self._gdpr = gdpr or gdpr_scanner()
        self._hipaa = hipaa or hipaa_scanner()
        self._classifier = classifier or DataClassifier(
            rules=self._config.rules(),
            retention_priority=self._config.retention_overrides(),
            default_retention_days=self._config.retention_days,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def scan_chunk(self, chunk: Chunk) -> ComplianceResult:
        """Scan one chunk.

        Parameters
        ----------
        chunk:
            The chunk to scan.

        Returns
        -------
        ComplianceResult
            A new result; earlier results for the same chunk are untouched.

        Raises
        ------
        DetectionFailure:
            When a detector cannot process the chunk content.
        """
        started = time.perf_counter()
        content = chunk.content
        if not isinstance(content, str):
            raise DetectionFailure(
                chunk.chunk_id, f"content must be text, got {type(content).__name__}"
            )

        try:
            matches, flags, classification = self._run_detectors(content, chunk.metadata)
        except DetectionFailure:
            raise
        except Exception as exc:
            raise DetectionFailure(chunk.chunk_id, f"{type(exc).__name__}: {exc}") from exc

        pii_detected = bool(matches)
        duration_ms = (time.perf_counter() - started) * 1000.0
        result = ComplianceResult(
            chunk_id=chunk.chunk_id,
            pii_detected=pii_detected,
            pii_details=tuple(matches),
            compliance_flags=tuple(flags),
            data_classification=classification,
            risk_level=assess_risk(flags),
            required_actions=tuple(required_actions(pii_detected, flags)),
            scan_timestamp=utc_now(),
            metadata={
                "scan_duration_ms": round(duration_ms, 3),
                "scanner_version": SCANNER_VERSION,
            },
        )

        logger.debug(
            "Compliance scan completed chunk_id=%s pii_detected=%s flags=%s risk=%s duration_ms=%.2f",
            chunk.chunk_id,
            result.pii_detected,
            ",".join(result.compliance_flags),
            result.risk_level,
            duration_ms,
        )
        return result

    def batch_scan_chunks(self, chunks: Sequence[Chunk]) -> list[ComplianceResult]:
        """Scan every chunk, isolating per-chunk failures.

        A chunk that fails detection yields a placeholder result with risk
        level ``"unknown"`` and the error under ``metadata["scan_error"]``.

        Returns
        -------
        list[ComplianceResult]
            One result per input chunk, in input order.
        """
        results: list[ComplianceResult] = []
        for chunk in chunks:
            try:
                results.append(self.scan_chunk(chunk))
            except DetectionFailure as exc:
                logger.error("Batch scan failed for chunk %s: %s", chunk.chunk_id, exc.reason)
                results.append(ComplianceResult.placeholder(chunk.chunk_id, str(exc)))
        return results

    @property
    def config(self) -> ComplianceConfig:
        return self._config

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _run_detectors(
        self,
        content: str,
        metadata: dict[str, object] | None,
    ) -> tuple[list[PiiMatch], list[str], DataClassification]:
        flags: list[str] = []

        matches: list[PiiMatch] = []
        if self._config.pii_detection_enabled:
            matches = self._pii_detector.detect(content)
            if matches:
                flags.append(PII_DETECTED)

        if self._config.gdpr_enabled:
            flags.extend(self._gdpr.scan(content))
        if self._config.hipaa_enabled:
            flags.extend(self._hipaa.scan(content))

        if self._config.data_classification_enabled:
            classification = self._classifier.classify(content, metadata)
        else:
            classification = DataClassification(retention_days=self._config.retention_days)

        return matches, list(dict.fromkeys(flags)), classification
