"""Benchmark: Dhall parse throughput with and without the packrat cache.

Measures how many parse operations complete per second using the public
dhall.parse() API.  Backtracking re-parses the same operator expression
for the arrow, merge, toMap and annotation alternatives, so the uncached
run shows how much work the memo table saves.
"""
from __future__ import annotations

import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import dhall

_ITERATIONS: int = 200

_SAMPLE_DHALL = """
-- Service configuration
let Port = Natural

let Service = { name : Text, port : Port, replicas : Natural }

let mkService =
      λ(name : Text) →
      λ(port : Port) →
        { name = name, port = port, replicas = 2 } : Service

let services =
      [ { name = "api", port = 8080, replicas = 3 }
      , { name = "worker", port = 9090, replicas = 1 + 1 * 2 }
      ]

let defaults = ./defaults.dhall sha256:e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855 ? {=}

in  { services = services # [ mkService "cron" 7070 ]
    , banner = ''
        Welcome to ${env:HOSTNAME as Text}
        ''
    , debug = if defaults.debug then True else False
    , tags = toMap { env = "prod" } : List { mapKey : Text, mapValue : Text }
    }
"""


def _bench(operation: str, memoize: bool, iterations: int) -> dict[str, object]:
    start = time.perf_counter()
    for _ in range(iterations):
        dhall.parse(_SAMPLE_DHALL, memoize=memoize)
    total = time.perf_counter() - start

    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_parse_throughput(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark parsing with the packrat cache enabled.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    return _bench("dhall_parse_throughput", memoize=True, iterations=iterations)


def bench_unmemoized_throughput(iterations: int = _ITERATIONS) -> dict[str, object]:
    """Benchmark parsing with the packrat cache disabled.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    return _bench("dhall_parse_unmemoized_throughput", memoize=False, iterations=iterations)


if __name__ == "__main__":
    results = [bench_parse_throughput(), bench_unmemoized_throughput()]
    output_path = Path(__file__).parent / "results" / "throughput.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(results, indent=2))
    print(f"Results saved to {output_path}")
