"""Compliance flag vocabulary and the lookup tables keyed on it.

Risk tiers, required actions and violation details are all derived from
flags through the ordered tables in this module.
"""
from __future__ import annotations

from collections.abc import Iterable

PII_DETECTED = "PII_DETECTED"
PHI_DETECTED = "PHI_DETECTED"
MEDICAL_DATA = "MEDICAL_DATA"
HIPAA_IDENTIFIER = "HIPAA_IDENTIFIER"
GDPR_PERSONAL_DATA = "GDPR_PERSONAL_DATA"
GDPR_SENSITIVE_DATA = "GDPR_SENSITIVE_DATA"
FINANCIAL_DATA = "FINANCIAL_DATA"
SENSITIVE_DATA = "SENSITIVE_DATA"
PERSONAL_IDENTIFIERS = "PERSONAL_IDENTIFIERS"

RISK_HIGH = "high"
RISK_MEDIUM = "medium"
RISK_LOW = "low"
RISK_UNKNOWN = "unknown"

# Evaluated in order; the first tier with a present flag wins.
RISK_TIERS: tuple[tuple[str, frozenset[str]], ...] = (
    (RISK_HIGH, frozenset({PII_DETECTED, PHI_DETECTED, GDPR_PERSONAL_DATA, FINANCIAL_DATA})),
    (
        RISK_MEDIUM,
        frozenset(
            {SENSITIVE_DATA, PERSONAL_IDENTIFIERS, GDPR_SENSITIVE_DATA, MEDICAL_DATA, HIPAA_IDENTIFIER}
        ),
    ),
)

PII_ACTIONS: tuple[str, ...] = ("MASK_PII", "REVIEW_RETENTION_POLICY")

FLAG_ACTIONS: dict[str, tuple[str, ...]] = {
    GDPR_PERSONAL_DATA: ("ENSURE_CONSENT", "DATA_MINIMIZATION"),
    PHI_DETECTED: ("HIPAA_SAFEGUARDS", "ACCESS_CONTROLS"),
    FINANCIAL_DATA: ("ENCRYPTION_REQUIRED", "AUDIT_TRAIL"),
}

_SEVERITY: dict[str, str] = {
    PII_DETECTED: "high",
    PHI_DETECTED: "high",
    FINANCIAL_DATA: "high",
    GDPR_PERSONAL_DATA: "medium",
    SENSITIVE_DATA: "medium",
}

_DESCRIPTIONS: dict[str, str] = {
    PII_DETECTED: "Personally Identifiable Information detected in content",
    PHI_DETECTED: "Protected Health Information detected",
    GDPR_PERSONAL_DATA: "GDPR-regulated personal data detected",
    GDPR_SENSITIVE_DATA: "GDPR-regulated sensitive data detected",
    FINANCIAL_DATA: "Financial data detected requiring protection",
    MEDICAL_DATA: "Medical information detected",
    HIPAA_IDENTIFIER: "HIPAA-regulated health identifier detected",
}

_SUGGESTED_ACTIONS: dict[str, str] = {
    PII_DETECTED: "Review and mask PII data",
    PHI_DETECTED: "Apply HIPAA safeguards",
    GDPR_PERSONAL_DATA: "Ensure GDPR compliance measures",
    GDPR_SENSITIVE_DATA: "Apply enhanced GDPR protections",
    FINANCIAL_DATA: "Implement PCI-DSS controls",
    MEDICAL_DATA: "Apply healthcare data protections",
    HIPAA_IDENTIFIER: "Secure HIPAA identifiers",
}


def assess_risk(flags: Iterable[str]) -> str:
    """Return the risk tier for a set of flags."""
    present = set(flags)
    for tier, tier_flags in RISK_TIERS:
        if present & tier_flags:
            return tier
    return RISK_LOW


def required_actions(pii_detected: bool, flags: Iterable[str]) -> list[str]:
    """Return the de-duplicated actions implied by a scan outcome."""
    actions: list[str] = list(PII_ACTIONS) if pii_detected else []
    for flag in flags:
        actions.extend(FLAG_ACTIONS.get(flag, ()))
    return list(dict.fromkeys(actions))


def flag_severity(flag: str) -> str:
    return _SEVERITY.get(flag, "low")


def flag_description(flag: str) -> str:
    return _DESCRIPTIONS.get(flag, f"Compliance flag detected: {flag}")


def flag_regulation(flag: str) -> str:
    if "GDPR" in flag:
        return "GDPR"
    if "HIPAA" in flag or "PHI" in flag or "MEDICAL" in flag:
        return "HIPAA"
    if "FINANCIAL" in flag:
        return "PCI-DSS"
    return "General"


def flag_action(flag: str) -> str:
    return _SUGGESTED_ACTIONS.get(flag, "Review compliance requirements")
