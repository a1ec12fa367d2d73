"""
GaussSolver — Entry point.

Print a step-by-step Gauss–Jordan solution for the systems given on the
command line, or for a few demo systems when none are given::

    python main.py "x + y = 10, x - y = 2"
"""

import logging
import os
import sys

from solver import solve_linear_system

DEMO_SYSTEMS = [
    "2x + y - z = 8, -3x - y + 2z = -11, -2x + y + 2z = -3",
    "x + 2y - z = 8, 2x + 4y - 2z = 16, -x - 2y + z = -8",
    "x - y + 2z = 9, 2x - 2y + 4z = 12, 3x - 3y + 6z = -1",
]


def print_trail(result: dict) -> None:
    print(f"\n{'=' * 50}")
    print(f"Solving: {result['equation']}")
    print('=' * 50)
    for step in result["steps"]:
        print(f"  {step['step_number']}. {step['description']}")
        for line in step["expression"].split('\n'):
            print(f"    {line}")
    print()
    for line in result["final_answer"].split('\n'):
        print(f"  => {line}")


def main(argv=None) -> int:
    level = os.environ.get("GAUSSSOLVER_LOG_LEVEL")
    if level:
        logging.basicConfig(level=level.upper())

    systems = (sys.argv[1:] if argv is None else argv) or DEMO_SYSTEMS
    for text in systems:
        try:
            result = solve_linear_system(text)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print_trail(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
