#!/usr/bin/env python3
"""
Serial/parallel conformance check.

Runs the reference step and the parallel kernel over every boundary,
neighborhood and vitality mode combination and exits non-zero if any
generation differs.
"""

import sys
import os
import logging

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from golkernel.conformance import run_conformance


def main():
    import argparse
    parser = argparse.ArgumentParser(description="Check serial and parallel steps agree")
    parser.add_argument("--width", type=int, default=13, help="Grid width")
    parser.add_argument("--height", type=int, default=11, help="Grid height")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the initial grid")
    parser.add_argument("--generations", type=int, default=3, help="Generations per combination")
    parser.add_argument("--states", type=int, default=5, help="State count of the test rule")
    args = parser.parse_args()

    report = run_conformance(width=args.width, height=args.height, seed=args.seed,
                             generations=args.generations, num_states=args.states)

    print("=" * 60)
    print(f"Combinations:  {report.combinations}")
    print(f"Generations:   {report.generations}")
    print(f"Mismatches:    {len(report.mismatches)}")
    for m in report.mismatches:
        print(f"  {m.boundary.value:16s} {m.neighborhood.value:18s} {m.mode.value:10s} "
              f"gen {m.generation}: {m.differing_cells} cells")
    print(f"Result:        {'✅ PASSED' if report.passed else '❌ FAILED'}")

    return 0 if report.passed else 1


if __name__ == "__main__":
    sys.exit(main())
