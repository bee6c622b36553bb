"""Render a result set into the three snapshot reports."""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from suite_snapshot.models.result import FileResult, ResultSet, TestCaseResult

log = logging.getLogger(__name__)

PASSING_FILENAME = "tests-passing.txt"
PASSING_EXCEPT_DEV_FILENAME = "tests-passing-except-dev.txt"
FAILING_FILENAME = "tests-failing.txt"

TestPredicate = Callable[[FileResult, TestCaseResult], bool]


@dataclass(frozen=True, kw_only=True)
class SnapshotReports:
    """The three rendered reports."""

    passing: str
    passing_except_dev: str
    failing: str


def is_passing(file_result: FileResult, test: TestCaseResult) -> bool:
    return test.status == "passed" and not test.dev_failure


def is_passing_except_dev(file_result: FileResult, test: TestCaseResult) -> bool:
    return test.status == "passed" and test.dev_failure


def is_failing(file_result: FileResult, test: TestCaseResult) -> bool:
    return test.status == "failed"


def display_path(path: str, root: Path) -> str:
    """Path relative to root, always with forward slashes."""
    if os.path.isabs(path):
        path = os.path.relpath(path, root)
    return path.replace("\\", "/")


def format_report(
    result_set: ResultSet, root: Path, predicate: TestPredicate
) -> str:
    """Render the tests matching predicate, one block per test file.

    Each block is the file path followed by one ``* <title>`` line per
    matching test. Files without matching tests are left out; blocks are
    sorted by their full text and separated by a blank line.
    """
    blocks: list[str] = []
    for file_result in result_set.files:
        titles = [
            test.title for test in file_result.tests if predicate(file_result, test)
        ]
        if not titles:
            continue
        lines = [display_path(file_result.path, root)]
        lines.extend(f"* {title}" for title in titles)
        blocks.append("\n".join(lines))

    return "\n\n".join(sorted(blocks))


def build_reports(result_set: ResultSet, root: Path) -> SnapshotReports:
    """Render the passing, passing-except-dev and failing reports."""
    return SnapshotReports(
        passing=format_report(result_set, root, is_passing),
        passing_except_dev=format_report(result_set, root, is_passing_except_dev),
        failing=format_report(result_set, root, is_failing),
    )


def write_reports(reports: SnapshotReports, output_dir: Path) -> None:
    """Write the reports to output_dir, replacing any previous snapshot."""
    output_dir.mkdir(parents=True, exist_ok=True)
    for filename, text in (
        (PASSING_FILENAME, reports.passing),
        (PASSING_EXCEPT_DEV_FILENAME, reports.passing_except_dev),
        (FAILING_FILENAME, reports.failing),
    ):
        path = output_dir / filename
        path.write_text(text + "\n", encoding="utf-8")
        log.info("Wrote %s", path)
