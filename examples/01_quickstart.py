#!/usr/bin/env python3
"""Example: Quickstart — aumos-chunk-compliance

Minimal working example: scan a few pieces of text and print the
compliance verdict for each.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install aumos-chunk-compliance
"""
from __future__ import annotations

import aumos_chunk_compliance as cc


def main() -> None:
    print(f"aumos-chunk-compliance version: {cc.__version__}")

    scanner = cc.ChunkScanner()
    texts = [
        "Contact john@example.com or call 555-123-4567",
        "Patient diagnosis pending lab results",
        "Quarterly roadmap overview",
    ]

    print("\nScan results:")
    for text in texts:
        result = scanner.scan_text(text)
        print(f"  [{result.risk_level.upper():6}] {text}")
        for match in result.pii_details:
            print(f"    {match.pii_type}: {match.value} (confidence {match.confidence:.2f})")
        if result.compliance_flags:
            print(f"    flags: {', '.join(result.compliance_flags)}")
        if result.required_actions:
            print(f"    actions: {', '.join(result.required_actions)}")
        classification = result.data_classification
        print(f"    level={classification.level.value} retention={classification.retention_days}d")


if __name__ == "__main__":
    main()
