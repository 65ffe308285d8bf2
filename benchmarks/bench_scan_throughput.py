"""Benchmark: chunk scan throughput and per-chunk latency.

Measures how many chunks ScanOrchestrator.scan_chunk() can process per
second over a mixed corpus of clean, PII-bearing and health-related chunks.
"""
from __future__ import annotations

import json
import time
from pathlib import Path

from aumos_chunk_compliance.scanning.orchestrator import ScanOrchestrator
from aumos_chunk_compliance.store import Chunk

_ITERATIONS: int = 2_000

_CORPUS: tuple[str, ...] = (
    "Quarterly roadmap overview for the platform team, covering search and retrieval work.",
    "Contact john@example.com or call 555-123-4567 to confirm the delivery address.",
    "Patient diagnosis pending lab results; physician to review the MRI on Tuesday.",
    "Invoice 2024-118 for bank account transfer, card 4111-1111-1111-1111 on file.",
)


def _make_chunks() -> list[Chunk]:
    return [
        Chunk(chunk_id=f"bench-{i}", content=_CORPUS[i % len(_CORPUS)], tenant_id="bench")
        for i in range(_ITERATIONS)
    ]


def bench_scan_throughput() -> dict[str, object]:
    """Benchmark ScanOrchestrator.scan_chunk() throughput.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p99_latency_ms.
    """
    orchestrator = ScanOrchestrator()
    chunks = _make_chunks()
    latencies: list[float] = []

    start = time.perf_counter()
    for chunk in chunks:
        t0 = time.perf_counter()
        orchestrator.scan_chunk(chunk)
        latencies.append((time.perf_counter() - t0) * 1000)
    total = time.perf_counter() - start

    latencies.sort()
    p99_index = min(len(latencies) - 1, int(len(latencies) * 0.99))
    result: dict[str, object] = {
        "operation": "chunk_scan_throughput",
        "iterations": _ITERATIONS,
        "total_seconds": round(total, 4),
        "ops_per_second": round(_ITERATIONS / total, 1),
        "avg_latency_ms": round(total / _ITERATIONS * 1000, 4),
        "p99_latency_ms": round(latencies[p99_index], 4),
    }
    print(
        f"[bench_scan_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} chunks/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms  p99 {result['p99_latency_ms']:.4f} ms"
    )
    return result


def run_benchmark() -> dict[str, object]:
    """Entry point returning the benchmark result dict."""
    return bench_scan_throughput()


if __name__ == "__main__":
    result = run_benchmark()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "scan_throughput_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
