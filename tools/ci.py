#!/usr/bin/env python3
# Copyright 2026 pubsubreader Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, and build.

Pass step names (case-insensitive prefixes) to run a subset, e.g.
``tools/ci.py lint tests``.
"""

import argparse
import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=pubsubreader", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]


def main(argv: list[str] | None = None) -> int:
    """Run the selected CI steps and report results."""
    parser = argparse.ArgumentParser(description="Run pubsubreader CI checks.")
    parser.add_argument("steps", nargs="*", help="Steps to run (default: all)")
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first failing step")
    args = parser.parse_args(argv)

    selected = _select_steps(args.steps)
    if not selected:
        print(chalk.red(f"No CI step matches {', '.join(args.steps)}"))
        return 2

    results: list[tuple[str, bool, float]] = []
    for name, cmd in selected:
        sep = chalk.blue("=" * 60)
        print(f"\n{sep}")
        print(chalk.blue(name))
        print(sep)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        elapsed = time.monotonic() - start
        results.append((name, proc.returncode == 0, elapsed))
        if args.fail_fast and proc.returncode != 0:
            break

    _print_summary(results)
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################


def _select_steps(names: list[str]) -> list[tuple[str, list[str]]]:
    if not names:
        return STEPS
    wanted = [name.lower() for name in names]
    return [step for step in STEPS if any(step[0].lower().startswith(prefix) for prefix in wanted)]


def _print_summary(results: list[tuple[str, bool, float]]) -> None:
    sep = "=" * 60
    print(f"\n{chalk.blue(sep)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(sep))
    for name, passed, elapsed in results:
        if passed:
            print(chalk.green(f"  {chalk.green('PASS')}  {name} ({elapsed:.1f}s)"))
        else:
            print(chalk.red(f"  {chalk.red('FAIL')}  {name} ({elapsed:.1f}s)"))
    print()


def _repo_root() -> str:
    return str(pathlib.Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
