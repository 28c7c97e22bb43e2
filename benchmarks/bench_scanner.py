"""Tag scanner benchmark.

Measures p99 latency of the rewrite step (scan or recompose, then assemble)
across template shapes. pybars compile/render is NOT included: only the work
this package adds in front of it.

  1. Plain text, no tags: single literal pass-through
  2. Dense single-tier tags
  3. Dense two-tier tags (two scan passes)
  4. Brace-heavy literal text (guard worst case)

Usage (from project root, with .venv activated):
    python benchmarks/bench_scanner.py
"""

from __future__ import annotations

import time
from typing import Any

from hbs_delimiters.models.delimiter import DelimiterSet
from hbs_delimiters.scanner.cache import get_matcher
from hbs_delimiters.scanner.engine import scan
from hbs_delimiters.scanner.guard import default_guard
from hbs_delimiters.scanner.normalizer import build_source
from hbs_delimiters.scanner.recomposer import assemble, recompose

# p99 budget per template (ms)
P99_BUDGET_MS = 2.0

# ---------------------------------------------------------------------------
# Test inputs (~8 KB each)
# ---------------------------------------------------------------------------

PLAIN = "The quick brown fox jumped over the lazy dog. " * 180
SINGLE_TIER = "<li><% item.name %>: <% item.price %></li>\n" * 180
TWO_TIER = "<p><% title %></p><div><<% body %>></div>\n" * 180
BRACES = "function f() { return {a: 1}; } <% name %>\n" * 180

SINGLE = DelimiterSet.from_list(["<%", "%>"])
DOUBLE = DelimiterSet.from_list(["<%", "%>", "<<%", "%>>"])


def rewrite_single(text: str) -> str:
    matcher = get_matcher(build_source(SINGLE.open, SINGLE.close))
    return assemble(scan(text, matcher), default_guard)


def rewrite_two_tier(text: str) -> str:
    escaped = get_matcher(build_source(DOUBLE.open, DOUBLE.close))
    safe = get_matcher(build_source(DOUBLE.open_safe, DOUBLE.close_safe))  # type: ignore[arg-type]
    return assemble(recompose(text, safe, escaped), default_guard)


# ---------------------------------------------------------------------------
# Benchmark runner
# ---------------------------------------------------------------------------


def measure_p99(fn: Any, *args: Any, n: int = 1_000) -> tuple[float, float, float]:
    """Run fn(*args) n times and return (p50, p99, max) in milliseconds."""
    latencies: list[float] = []
    for _ in range(n):
        start = time.perf_counter()
        fn(*args)
        elapsed = (time.perf_counter() - start) * 1_000
        latencies.append(elapsed)
    latencies.sort()
    p50 = latencies[int(0.50 * n)]
    p99 = latencies[int(0.99 * n)]
    return p50, p99, latencies[-1]


def run_benchmarks() -> bool:
    """Run all benchmarks. Returns True if all pass."""
    WARMUP = 100
    N = 1_000

    print("=" * 70)
    print("hbs-delimiters rewrite benchmark")
    print(f"Warmup: {WARMUP} calls | Measurement: {N} calls each")
    print("=" * 70)

    scenarios = [
        ("Plain text, no tags", rewrite_single, PLAIN),
        ("Dense single-tier tags", rewrite_single, SINGLE_TIER),
        ("Dense two-tier tags", rewrite_two_tier, TWO_TIER),
        ("Brace-heavy literals", rewrite_single, BRACES),
    ]

    all_pass = True

    for name, fn, text in scenarios:
        for _ in range(WARMUP):
            fn(text)

        p50, p99, worst = measure_p99(fn, text, n=N)
        passed = p99 <= P99_BUDGET_MS
        status = "✓ PASS" if passed else "✗ FAIL"
        if not passed:
            all_pass = False
        print(f"  [{status}] {name} ({len(text)} chars)")
        print(f"          p50={p50:.3f}ms  p99={p99:.3f}ms  worst={worst:.3f}ms")

    print("=" * 70)
    if all_pass:
        print(f"RESULT: ALL BENCHMARKS PASSED: p99 < {P99_BUDGET_MS}ms ✓")
    else:
        print(f"RESULT: SOME BENCHMARKS FAILED: p99 exceeded {P99_BUDGET_MS}ms ✗")
    print("=" * 70)

    return all_pass


if __name__ == "__main__":
    import sys

    passed = run_benchmarks()
    sys.exit(0 if passed else 1)
