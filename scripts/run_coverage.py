#!/usr/bin/env python3
"""Run the test suite under coverage and enforce a minimum percentage.

Tests run first; the threshold is then checked with ``coverage report``
so a failing test and a coverage shortfall get different exit codes.

Usage:
    python scripts/run_coverage.py [--threshold PERCENT] [--html] [--xml]
                                   [--verbose] [--tests PATH]

Exit Codes:
    0 - Tests passed and coverage meets the threshold
    1 - Tests failed
    2 - Coverage below threshold
    3 - pytest-cov is not installed
"""

import argparse
import importlib.util
import subprocess
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent
PACKAGE = "memcache_discovery"
DEFAULT_THRESHOLD = 90


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"Measure test coverage of {PACKAGE}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--threshold", type=float, default=DEFAULT_THRESHOLD,
                        help=f"Minimum total coverage in percent (default: {DEFAULT_THRESHOLD})")
    parser.add_argument("--html", action="store_true", help="Also write htmlcov/")
    parser.add_argument("--xml", action="store_true", help="Also write coverage.xml")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="List missing lines per file")
    parser.add_argument("--tests", default="tests/", help="Tests to run (default: tests/)")
    return parser.parse_args(argv)


def _run(cmd: list) -> int:
    print("$", " ".join(cmd), flush=True)
    return subprocess.run(cmd, cwd=PROJECT_ROOT).returncode


def main(argv=None) -> int:
    args = parse_args(argv)

    if importlib.util.find_spec("pytest_cov") is None:
        print("pytest-cov is not installed; run: pip install -e .[dev]", file=sys.stderr)
        return 3

    reports = []
    if args.html:
        reports.append("--cov-report=html:htmlcov")
    if args.xml:
        reports.append("--cov-report=xml:coverage.xml")
    # The terminal summary comes from `coverage report` below.
    pytest_cmd = [sys.executable, "-m", "pytest", f"--cov={PACKAGE}"]
    pytest_cmd.extend(reports or ["--cov-report="])
    pytest_cmd.append(args.tests)

    if _run(pytest_cmd) != 0:
        print("FAILED: tests did not pass")
        return 1

    report_cmd = [sys.executable, "-m", "coverage", "report", f"--fail-under={args.threshold}"]
    if args.verbose:
        report_cmd.append("--show-missing")
    if _run(report_cmd) != 0:
        print(f"FAILED: coverage below {args.threshold}%")
        return 2

    print(f"OK: coverage at or above {args.threshold}%")
    return 0


if __name__ == "__main__":
    sys.exit(main())
