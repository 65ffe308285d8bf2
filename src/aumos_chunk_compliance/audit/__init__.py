"""JSONL audit log for compliance results and reports."""
from __future__ import annotations

from aumos_chunk_compliance.audit.logger import ComplianceAuditLog

__all__ = ["ComplianceAuditLog"]
