"""
CLI Bench Command

Time tree construction and proof generation/replay over random leaves.

Usage:
    merkle bench [--sizes 100 1000 10000] [--iterations 5] [--json]
"""

from __future__ import annotations

import json
import logging
import os
import time
from argparse import Namespace
from dataclasses import dataclass, asdict
from typing import Callable

from merkle_core.merkle import MerkleEngine, leaf_tree_index
from merkle_cli.io import engine_for, resolve_hash_algorithm


logger = logging.getLogger(__name__)


EXIT_SUCCESS = 0

DEFAULT_SIZES = [100, 1_000, 10_000]
MULTIPROOF_LEAVES = 10


@dataclass
class BenchResult:
    """Mean wall-clock time per operation, in milliseconds."""
    size: int
    build_ms: float
    prove_ms: float
    process_ms: float
    prove_multi_ms: float
    process_multi_ms: float


def _time_ms(fn: Callable[[], object], iterations: int) -> float:
    start = time.perf_counter()
    for _ in range(iterations):
        fn()
    return (time.perf_counter() - start) * 1000.0 / iterations


def run_bench(engine: MerkleEngine, size: int, iterations: int) -> BenchResult:
    """Benchmark every operation for one tree size."""
    leaves = [os.urandom(32) for _ in range(size)]
    tree = engine.build(leaves)

    middle = size // 2
    tree_index = leaf_tree_index(len(tree), middle)
    proof = engine.prove(tree, tree_index)

    step = max(1, size // MULTIPROOF_LEAVES)
    indices = [leaf_tree_index(len(tree), k) for k in range(0, size, step)][:MULTIPROOF_LEAVES]
    multi_proof = engine.prove_multi(tree, indices)

    return BenchResult(
        size=size,
        build_ms=_time_ms(lambda: engine.build(leaves), iterations),
        prove_ms=_time_ms(lambda: engine.prove(tree, tree_index), iterations),
        process_ms=_time_ms(lambda: engine.process(leaves[middle], proof), iterations),
        prove_multi_ms=_time_ms(lambda: engine.prove_multi(tree, indices), iterations),
        process_multi_ms=_time_ms(lambda: engine.process_multi(multi_proof), iterations),
    )


def bench_cmd(args: Namespace) -> int:
    """Handle bench command."""
    algorithm = resolve_hash_algorithm(args)
    engine = engine_for(algorithm)

    results = []
    for size in args.sizes:
        logger.info(f"Benchmarking {size} leaves ({algorithm}, {args.iterations} iterations)")
        results.append(run_bench(engine, size, args.iterations))

    if args.json:
        print(json.dumps({
            "hash_algorithm": algorithm,
            "iterations": args.iterations,
            "results": [asdict(r) for r in results],
        }, indent=2))
        return EXIT_SUCCESS

    print(f"hash: {algorithm}, iterations: {args.iterations} (mean ms per call)")
    header = f"{'leaves':>10} {'build':>10} {'prove':>10} {'process':>10} {'multi':>10} {'proc-multi':>10}"
    print(header)
    for r in results:
        print(
            f"{r.size:>10} {r.build_ms:>10.3f} {r.prove_ms:>10.3f} {r.process_ms:>10.3f} "
            f"{r.prove_multi_ms:>10.3f} {r.process_multi_ms:>10.3f}"
        )
    return EXIT_SUCCESS
