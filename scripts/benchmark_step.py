#!/usr/bin/env python3
"""
Step throughput benchmark.

Times serial and parallel steps on a randomized grid and tracks process
memory with psutil. The first parallel step includes numba compilation and
is reported separately.
"""

import psutil
import os
import sys
import time
import json
import logging
from typing import Dict

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from golkernel.rules.presets import get_preset, preset_names
from golkernel.simulation import Simulation


def measure_memory_mb() -> float:
    """Get current process memory usage in MB."""
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / 1024 / 1024


def benchmark_backend(backend: str, size: int, steps: int, preset_name: str, seed: int) -> Dict:
    """Time `steps` generations on one backend."""
    preset = get_preset(preset_name)
    sim = Simulation(size, size, rule=preset.rule, vitality=preset.vitality,
                     backend=backend, rng=seed)
    sim.randomize(preset.density)

    memory_before = measure_memory_mb()

    start = time.perf_counter()
    sim.step()
    first_step = time.perf_counter() - start

    start = time.perf_counter()
    for _ in range(steps):
        sim.step()
    elapsed = time.perf_counter() - start

    memory_after = measure_memory_mb()
    per_step = elapsed / steps if steps else 0.0

    logger.info(f"{backend:8s} first step {first_step:.3f}s, {per_step * 1000:.2f} ms/step, "
                f"alive={sim.count_alive_cells()}")

    return {
        'backend': backend,
        'first_step_seconds': first_step,
        'seconds_per_step': per_step,
        'cells_per_second': size * size / per_step if per_step else 0.0,
        'memory_before_mb': memory_before,
        'memory_after_mb': memory_after,
        'final_cells': sim.get_cell_data(),
    }


def run_benchmark(size: int = 128, steps: int = 10, preset_name: str = "Conway's Life",
                  seed: int = 0, include_serial: bool = True) -> Dict:
    """Benchmark both backends and check they ended on the same grid."""
    backends = ['parallel', 'serial'] if include_serial else ['parallel']
    runs = [benchmark_backend(b, size, steps, preset_name, seed) for b in backends]

    identical = None
    if include_serial:
        identical = bool((runs[0]['final_cells'] == runs[1]['final_cells']).all())
        if not identical:
            logger.warning("Serial and parallel backends produced different grids")

    for run in runs:
        del run['final_cells']

    return {
        'timestamp': time.strftime('%Y-%m-%d %H:%M:%S'),
        'size': size,
        'steps': steps,
        'preset': preset_name,
        'runs': runs,
        'identical': identical,
        'peak_memory_mb': measure_memory_mb(),
    }


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Benchmark serial vs parallel steps")
    parser.add_argument("--size", type=int, default=128, help="Grid size (square)")
    parser.add_argument("--steps", type=int, default=10, help="Timed steps per backend")
    parser.add_argument("--preset", choices=preset_names(), default="Conway's Life")
    parser.add_argument("--seed", type=int, default=0, help="Random fill seed")
    parser.add_argument("--parallel-only", action="store_true", help="Skip the serial backend")
    parser.add_argument("--output", type=str, default=None, help="Write results as JSON")

    args = parser.parse_args()

    results = run_benchmark(args.size, args.steps, args.preset, args.seed,
                            include_serial=not args.parallel_only)

    print("=" * 60)
    for run in results['runs']:
        print(f"{run['backend']:8s} {run['seconds_per_step'] * 1000:9.2f} ms/step "
              f"{run['cells_per_second'] / 1e6:8.2f} Mcells/s "
              f"(memory {run['memory_after_mb']:.1f} MB)")
    if results['identical'] is not None:
        print(f"Backends agree: {'✅ YES' if results['identical'] else '❌ NO'}")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(results, f, indent=2)
        logger.info(f"Results saved to: {args.output}")

    if results['identical'] is False:
        sys.exit(1)
