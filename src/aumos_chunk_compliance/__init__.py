"""aumos-chunk-compliance — Compliance scanning for multi-tenant document chunks.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import aumos_chunk_compliance as cc
>>> cc.__version__
'0.1.0'
>>> result = cc.ChunkScanner().scan_text("Contact john@example.com or call 555-123-4567")
>>> [m.value for m in result.pii_details]
['j***@example.com', '***-***-4567']
>>> result.risk_level
'high'
"""
from __future__ import annotations

__version__: str = "0.1.0"

from aumos_chunk_compliance.convenience import ChunkScanner

# ---------------------------------------------------------------------------
# Errors and configuration
# ---------------------------------------------------------------------------
from aumos_chunk_compliance.errors import (
    ComplianceError,
    ConfigurationError,
    DetectionFailure,
    StoreError,
)
from aumos_chunk_compliance.config import ComplianceConfig, ConfigLoader

# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------
from aumos_chunk_compliance.detection.pii_detector import PiiDetector, PiiMatch
from aumos_chunk_compliance.detection.regulations import (
    RegulationScanner,
    gdpr_scanner,
    hipaa_scanner,
)
from aumos_chunk_compliance.detection.classifier import (
    ClassificationRule,
    DataClassification,
    DataClassifier,
    SensitivityLevel,
)

# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------
from aumos_chunk_compliance.scanning.models import (
    ComplianceReport,
    ComplianceResult,
    ComplianceViolation,
    ViolationStatus,
)
from aumos_chunk_compliance.scanning.orchestrator import ScanOrchestrator

# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------
from aumos_chunk_compliance.store import Chunk, ChunkStatus, ChunkStore, InMemoryChunkStore
from aumos_chunk_compliance.processing.batch_processor import BatchProcessor, ProcessorState
from aumos_chunk_compliance.processing.metrics import ProcessorMetrics
from aumos_chunk_compliance.processing.tenants import StaticTenantProvider, TenantProvider

# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------
from aumos_chunk_compliance.audit.logger import ComplianceAuditLog

__all__ = [
    "__version__",
    "ChunkScanner",
    # Errors and configuration
    "ComplianceConfig",
    "ComplianceError",
    "ConfigLoader",
    "ConfigurationError",
    "DetectionFailure",
    "StoreError",
    # Detection
    "ClassificationRule",
    "DataClassification",
    "DataClassifier",
    "PiiDetector",
    "PiiMatch",
    "RegulationScanner",
    "SensitivityLevel",
    "gdpr_scanner",
    "hipaa_scanner",
    # Scanning
    "ComplianceReport",
    "ComplianceResult",
    "ComplianceViolation",
    "ScanOrchestrator",
    "ViolationStatus",
    # Processing
    "BatchProcessor",
    "Chunk",
    "ChunkStatus",
    "ChunkStore",
    "InMemoryChunkStore",
    "ProcessorMetrics",
    "ProcessorState",
    "StaticTenantProvider",
    "TenantProvider",
    # Audit
    "ComplianceAuditLog",
]
