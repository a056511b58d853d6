#!/usr/bin/env python3
"""
Glider Demonstration Script

Seeds a glider on a torus, steps it for a number of generations and checks
that it moved one cell diagonally every four generations with its mass intact.
"""

import sys
import os
import logging

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from golkernel.core.mappings import BoundaryId
from golkernel.simulation import Simulation


def run_glider_demo(grid_size=8, steps=4, start_x=3, start_y=3, backend='parallel'):
    """Run the glider scenario and return metrics."""
    logger.info("=== GLIDER DEMONSTRATION ===")
    logger.info(f"Grid size: {grid_size}x{grid_size} torus, backend: {backend}")
    logger.info(f"Evolution steps: {steps}")

    sim = Simulation(grid_size, grid_size, boundary=BoundaryId.TORUS, backend=backend)
    sim.load_pattern('glider', start_x, start_y)
    initial_live_count = sim.update_alive_cells_count()
    initial_cells = sim.grid.alive_cells()

    live_counts = [initial_live_count]
    for step in range(steps):
        live_count = sim.step()
        live_counts.append(live_count)
        logger.info(f"Step {step + 1}: Live={live_count}")

    shift = steps // 4
    expected = {((x + shift) % grid_size, (y + shift) % grid_size) for x, y in initial_cells}
    final_cells = sim.grid.alive_cells()

    results = {
        "grid_size": grid_size,
        "steps": steps,
        "backend": backend,
        "initial_live_count": initial_live_count,
        "final_live_count": live_counts[-1],
        "live_count_history": live_counts,
        "translated": final_cells == expected if steps % 4 == 0 else None,
    }

    assert all(count == 5 for count in live_counts), f"Glider mass changed: {live_counts}"
    if steps % 4 == 0:
        assert results["translated"], f"Glider cells {sorted(final_cells)} != {sorted(expected)}"

    logger.info(f"Final grid:\n{sim}")
    return results


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Glider translation demonstration")
    parser.add_argument("--grid-size", type=int, default=8, help="Grid size (square)")
    parser.add_argument("--steps", type=int, default=4, help="Evolution steps")
    parser.add_argument("--start-x", type=int, default=3, help="Glider center X")
    parser.add_argument("--start-y", type=int, default=3, help="Glider center Y")
    parser.add_argument("--backend", choices=['parallel', 'serial'], default='parallel')

    args = parser.parse_args()

    try:
        results = run_glider_demo(
            grid_size=args.grid_size,
            steps=args.steps,
            start_x=args.start_x,
            start_y=args.start_y,
            backend=args.backend,
        )
        print(f"\n✅ Glider kept {results['final_live_count']} cells over {results['steps']} steps")
    except AssertionError as e:
        logger.error(f"Demonstration failed: {e}")
        sys.exit(1)
