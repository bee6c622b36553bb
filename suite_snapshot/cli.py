"""CLI entry point for recording test suite snapshots."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from suite_snapshot.config import load_run_configuration
from suite_snapshot.facts import format_fact, record_fact
from suite_snapshot.formatter import build_reports, write_reports
from suite_snapshot.models.result import ResultSet
from suite_snapshot.runner import run_suite


def default_max_workers() -> int:
    """One worker per logical CPU, leaving one free."""
    return max(1, (os.cpu_count() or 1) - 1)


def positive_int(value: str) -> int:
    """argparse type for a strictly positive integer."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def log_results_summary(log: logging.Logger, result_set: ResultSet) -> None:
    """Log test counts per snapshot category."""
    log.info("=" * 80)
    log.info("Snapshot Summary:")
    log.info("=" * 80)
    log.info("✅ passing: %d", result_set.count("passed", dev_failure=False))
    log.info(
        "⚠️ passing except dev: %d", result_set.count("passed", dev_failure=True)
    )
    log.info("❌ failing: %d", result_set.count("failed"))
    log.info("⏭️ skipped: %d", result_set.count("skipped"))


async def run(root: Path, max_workers: int, track_facts: bool) -> int:
    """Run the suite, write the snapshot files and return the exit code."""
    log = logging.getLogger("suite_snapshot")

    config = load_run_configuration(
        root, max_workers=max_workers, track_facts=track_facts
    )

    result_set = await run_suite(config)

    reports = build_reports(result_set, config.root)
    write_reports(reports, config.output_path)
    log_results_summary(log, result_set)

    if config.track_facts:
        value = format_fact(result_set.count("passed"), result_set.count("failed"))
        record_fact(config.facts_tracker, config.fact_name, value)

    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run the test suite and record which tests pass and fail"
    )
    parser.add_argument(
        "--max-workers",
        type=positive_int,
        default=default_max_workers(),
        help="Number of pytest-xdist workers (default: CPU count minus one)",
    )
    parser.add_argument(
        "--track-facts",
        action="store_true",
        help="Record the pass rate with the facts tracker",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            root=Path.cwd(),
            max_workers=args.max_workers,
            track_facts=args.track_facts,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
