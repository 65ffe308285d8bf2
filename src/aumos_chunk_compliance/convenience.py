"""Convenience API for aumos-chunk-compliance — 3-line quickstart.

Example
-------
::

    from aumos_chunk_compliance import ChunkScanner
    scanner = ChunkScanner()
    print(scanner.scan_text("Call 555-123-4567").risk_level)

"""
from __future__ import annotations

from collections.abc import Mapping

from aumos_chunk_compliance.config import ComplianceConfig
from aumos_chunk_compliance.scanning.models import ComplianceResult
from aumos_chunk_compliance.scanning.orchestrator import ScanOrchestrator
from aumos_chunk_compliance.store import Chunk


class ChunkScanner:
    """Zero-config compliance scanning of ad-hoc text.

    Wraps :class:`ScanOrchestrator` so callers without a chunk store can
    scan plain strings.

    Parameters
    ----------
    config:
        Optional configuration; defaults enable every scanner.
    """

    def __init__(self, config: ComplianceConfig | None = None) -> None:
        self._orchestrator = ScanOrchestrator(config)

    def scan_text(
        self,
        text: str,
        chunk_id: str = "adhoc",
        tenant_id: str = "default",
        metadata: Mapping[str, object] | None = None,
    ) -> ComplianceResult:
        """Scan a string as if it were a single chunk.

        Raises
        ------
        DetectionFailure:
            When the text cannot be processed.
        """
        chunk = Chunk(
            chunk_id=chunk_id,
            content=text,
            tenant_id=tenant_id,
            metadata=dict(metadata or {}),
        )
        return self._orchestrator.scan_chunk(chunk)

    @property
    def orchestrator(self) -> ScanOrchestrator:
        """The underlying ScanOrchestrator instance."""
        return self._orchestrator

    def __repr__(self) -> str:
        return "ChunkScanner(orchestrator=ScanOrchestrator)"
