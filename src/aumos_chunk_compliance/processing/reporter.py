"""Builds per-tenant compliance reports from batch scan results."""
from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from aumos_chunk_compliance.scanning.models import (
    ComplianceReport,
    ComplianceResult,
    ComplianceViolation,
    utc_now,
)
from aumos_chunk_compliance.scanning.orchestrator import SCANNER_VERSION


def report_metadata(regulations_checked: Sequence[str], failed_chunks: int = 0) -> dict[str, object]:
    return {
        "scan_version": SCANNER_VERSION,
        "regulations_checked": list(regulations_checked),
        "failed_chunks": failed_chunks,
    }


def empty_report(tenant_id: str, regulations_checked: Sequence[str]) -> ComplianceReport:
    """Report for a tenant with no pending chunks."""
    return ComplianceReport(
        tenant_id=tenant_id,
        scan_duration=0.0,
        metadata=report_metadata(regulations_checked),
    )


def build_report(
    tenant_id: str,
    results: Sequence[ComplianceResult],
    scan_duration: float,
    regulations_checked: Sequence[str],
) -> ComplianceReport:
    """Aggregate a batch of results into a :class:`ComplianceReport`.

    Parameters
    ----------
    tenant_id:
        Tenant the batch belongs to.
    results:
        One result per scanned chunk, placeholders included.
    scan_duration:
        Seconds spent on the pass.
    regulations_checked:
        Regulations whose scanners were enabled.

    Returns
    -------
    ComplianceReport
        Totals, risk and level histograms, one violation per distinct
        (chunk, flag) pair and the distinct required actions.
    """
    risk_distribution: Counter[str] = Counter()
    level_distribution: Counter[str] = Counter()
    violations: dict[tuple[str, str], ComplianceViolation] = {}
    actions: dict[str, None] = {}
    pii_detected_count = 0
    failed_chunks = 0

    for result in results:
        if result.pii_detected:
            pii_detected_count += 1
        if result.failed:
            failed_chunks += 1
        risk_distribution[result.risk_level] += 1
        level_distribution[result.data_classification.level.value] += 1

        for flag in result.compliance_flags:
            key = (result.chunk_id, flag)
            if key not in violations:
                violations[key] = ComplianceViolation.from_flag(
                    result.chunk_id, flag, result.scan_timestamp
                )
        actions.update(dict.fromkeys(result.required_actions))

    last_scan = max((r.scan_timestamp for r in results), default=utc_now())
    return ComplianceReport(
        tenant_id=tenant_id,
        total_chunks_scanned=len(results),
        pii_detected_count=pii_detected_count,
        compliance_violations=list(violations.values()),
        risk_distribution=dict(risk_distribution),
        data_classification=dict(level_distribution),
        required_actions=list(actions),
        last_scan_date=last_scan,
        scan_duration=scan_duration,
        metadata=report_metadata(regulations_checked, failed_chunks),
    )
