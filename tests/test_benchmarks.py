"""Structural tests for aumos-chunk-compliance benchmarks.

Verifies that each benchmark function is callable and returns a dict
with the expected required keys.
"""
from __future__ import annotations

_REQUIRED_KEYS = {"operation", "ops_per_second", "avg_latency_ms", "p99_latency_ms"}


def test_bench_scan_throughput_returns_expected_keys() -> None:
    """bench_scan_throughput returns a dict with required keys."""
    from bench_scan_throughput import run_benchmark

    result = run_benchmark()
    assert isinstance(result, dict)
    for key in _REQUIRED_KEYS:
        assert key in result, f"Missing key: {key!r}"


def test_bench_scan_throughput_ops_per_second_positive() -> None:
    """ops_per_second must be a positive float."""
    from bench_scan_throughput import run_benchmark

    result = run_benchmark()
    assert float(result["ops_per_second"]) > 0.0  # type: ignore[arg-type]
    assert float(result["p99_latency_ms"]) >= 0.0  # type: ignore[arg-type]
