#!/usr/bin/env python3
"""Example: Background batch processing for several tenants

Loads chunks into an in-memory store, runs the background processor for a
few cycles, and writes every tenant report to a JSONL audit log.

Usage:
    python examples/02_batch_processor.py

Requirements:
    pip install aumos-chunk-compliance
"""
from __future__ import annotations

import logging
import tempfile
import time
from pathlib import Path

import aumos_chunk_compliance as cc


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = cc.InMemoryChunkStore(
        [
            cc.Chunk("a-1", "Contact jane@example.org about the invoice", "acme"),
            cc.Chunk("a-2", "Release notes for version 2.3", "acme"),
            cc.Chunk("g-1", "Patient diagnosis and treatment plan", "globex"),
        ]
    )
    config = cc.ConfigLoader().load_string("scan_interval: 0.5\nbatch_size: 10\n")

    with tempfile.TemporaryDirectory() as tmp:
        audit = cc.ComplianceAuditLog(Path(tmp) / "compliance.jsonl")
        processor = cc.BatchProcessor(
            store,
            cc.StaticTenantProvider(["acme", "globex"]),
            config,
            report_sink=audit.record_report,
        )

        processor.start()
        time.sleep(1.5)
        processor.stop()

        print("\nChunk statuses:")
        for chunk_id, status in sorted(store.statuses().items()):
            print(f"  {chunk_id}: {status}")

        print("\nReports with chunks:")
        for record in audit.reports():
            if record["total_chunks_scanned"]:
                print(
                    f"  {record['tenant_id']}: scanned={record['total_chunks_scanned']} "
                    f"risk={record['risk_distribution']}"
                )

        metrics = processor.get_metrics()
        print(f"\nCompliance score: {metrics.compliance_score:.1f}%  error rate: {metrics.error_rate:.2f}")


if __name__ == "__main__":
    main()
