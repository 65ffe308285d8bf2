"""Background batch processing, tenant discovery, and processor metrics."""
from __future__ import annotations

from aumos_chunk_compliance.processing.batch_processor import (
    BatchProcessor,
    ProcessorState,
    ReportSink,
)
from aumos_chunk_compliance.processing.metrics import MetricsRecorder, ProcessorMetrics
from aumos_chunk_compliance.processing.reporter import build_report
from aumos_chunk_compliance.processing.tenants import StaticTenantProvider, TenantProvider

__all__ = [
    "BatchProcessor",
    "MetricsRecorder",
    "ProcessorMetrics",
    "ProcessorState",
    "ReportSink",
    "StaticTenantProvider",
    "TenantProvider",
    "build_report",
]
