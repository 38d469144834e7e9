#!/usr/bin/env python3
# Copyright 2026 TypeBAML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, tests, and build."""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=typebaml", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run all CI steps, print a summary, and return the process exit code."""
    results: list[tuple[str, bool, float]] = []
    sep = "=" * 60

    for name, cmd in STEPS:
        print(f"\n{chalk.blue(sep)}")
        print(chalk.blue(name))
        print(chalk.blue(sep))
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    print(f"\n{chalk.blue(sep)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(sep))
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    print()

    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _repo_root() -> pathlib.Path:
    return pathlib.Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main())
