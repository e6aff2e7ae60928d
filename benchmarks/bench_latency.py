"""Benchmark: profile decode and command table latency (p50/p95/mean).

Measures per-call latency for decoding a synthetic profile and for
building its alias-resolving command table.
"""
from __future__ import annotations

import json
import time
from collections.abc import Callable
from pathlib import Path

from pscompat.codec import decode
from pscompat.query import build_command_table

_WARMUP: int = 5
_ITERATIONS: int = 200


def make_profile_document(module_count: int = 50, commands_per_module: int = 20) -> bytes:
    """Return an encoded profile with ``module_count`` modules.

    Every module exports cmdlets, functions, and an alias chain that
    points into the previous module, so table construction exercises
    cross-module alias resolution.
    """
    modules: dict[str, object] = {}
    for m in range(module_count):
        cmdlets = {
            f"Get-Item{m}x{c}": {
                "OutputType": ["System.Object"],
                "Parameters": {
                    "Path": {
                        "Type": "System.String",
                        "ParameterSets": {"__AllParameterSets": {"Position": 0, "Flags": []}},
                    }
                },
            }
            for c in range(commands_per_module)
        }
        functions = {f"Invoke-Thing{m}x{c}": {"BindingStyle": "Advanced"} for c in range(5)}
        aliases = {f"gi{m}x{c}": f"Get-Item{m}x{c}" for c in range(commands_per_module)}
        if m:
            aliases[f"prev{m}"] = f"gi{m - 1}x0"
        modules[f"Module{m}"] = {"1.0.0": {"Cmdlets": cmdlets, "Functions": functions, "Aliases": aliases}}
    document = {
        "Types": {"Types": ["System.Int32", "System.String"], "TypeAccelerators": {"int": "System.Int32"}},
        "Modules": modules,
    }
    return json.dumps(document).encode("utf-8")


def _measure(operation: str, call: Callable[[], object], iterations: int) -> dict[str, object]:
    for _ in range(_WARMUP):
        call()

    latencies_ms: list[float] = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        call()
        latencies_ms.append((time.perf_counter() - t0) * 1000)

    sorted_lats = sorted(latencies_ms)
    n = len(sorted_lats)
    total = sum(latencies_ms) / 1000

    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1) if total else 0.0,
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(sorted_lats[int(n * 0.50)], 4),
        "p95_ms": round(sorted_lats[min(int(n * 0.95), n - 1)], 4),
    }
    print(
        f"[bench_latency] {result['operation']}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def bench_decode_latency(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark profile decode latency.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    data = make_profile_document()
    return _measure("profile_decode", lambda: decode(data), iterations)


def bench_command_table_latency(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark command table construction over a decoded profile."""
    profile = decode(make_profile_document())
    modules = list(profile.iter_modules())
    return _measure("command_table_build", lambda: build_command_table(modules), iterations)


if __name__ == "__main__":
    results = [bench_decode_latency(), bench_command_table_latency()]
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "latency_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(results, fh, indent=2)
    print(f"Results saved to {output_path}")
