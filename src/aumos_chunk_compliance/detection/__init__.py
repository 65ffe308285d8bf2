"""PII detection, regulation keyword scanning, and data classification.

All components in this package are stateless after construction and safe
to share between threads.
"""
from __future__ import annotations

from aumos_chunk_compliance.detection.classifier import (
    ClassificationRule,
    DataClassification,
    DataClassifier,
    RetentionOverride,
    SensitivityLevel,
)
from aumos_chunk_compliance.detection.patterns import BUILTIN_PATTERNS, PatternFamily
from aumos_chunk_compliance.detection.pii_detector import PiiDetector, PiiMatch
from aumos_chunk_compliance.detection.regulations import (
    KeywordGroup,
    RegulationScanner,
    gdpr_scanner,
    hipaa_scanner,
)

__all__ = [
    "BUILTIN_PATTERNS",
    "ClassificationRule",
    "DataClassification",
    "DataClassifier",
    "KeywordGroup",
    "PatternFamily",
    "PiiDetector",
    "PiiMatch",
    "RegulationScanner",
    "RetentionOverride",
    "SensitivityLevel",
    "gdpr_scanner",
    "hipaa_scanner",
]
