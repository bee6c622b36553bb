"""Collect per-test outcomes in the pytest controller and persist them."""

import logging
from dataclasses import dataclass
from pathlib import Path

import pytest

from suite_snapshot.interceptor import DEV_FAILURE_PROPERTY
from suite_snapshot.models.result import (
    FileResult,
    ResultSet,
    TestCaseResult,
    TestStatus,
)

log = logging.getLogger(__name__)

STATUS_PRIORITY: dict[TestStatus, int] = {"skipped": 0, "passed": 1, "failed": 2}
TEST_PHASES = frozenset({"setup", "call", "teardown"})


class DevFailureCorrelationError(RuntimeError):
    """Raised when a test report arrives without a dev-failure marker."""


@dataclass(kw_only=True)
class _PendingTest:
    title: str
    lineno: int
    status: TestStatus | None = None
    dev_failure: bool = False


def report_status(report: pytest.TestReport) -> TestStatus | None:
    """Map a phase report onto a test status, None if it decides nothing."""
    if report.failed:
        return "failed"
    if report.skipped:
        return "skipped"
    if report.when == "call":
        return "passed"
    return None


def dev_failure_marker(report: pytest.TestReport) -> bool:
    """Read the dev-failure marker attached by the interceptor.

    Reports xdist makes itself for a crashed worker (``when == "???"``) never
    passed through the interceptor and count as no dev failure.
    """
    for name, value in report.user_properties:
        if name == DEV_FAILURE_PROPERTY:
            return bool(value)
    if report.when not in TEST_PHASES:
        return False
    raise DevFailureCorrelationError(
        f"Report for {report.nodeid} ({report.when}) carries no dev-failure "
        "marker; is the interceptor loaded in every worker?"
    )


class ResultCollector:
    """Aggregates phase reports into a ResultSet written at session end."""

    def __init__(self, results_path: Path, rootpath: Path) -> None:
        self.results_path = results_path
        self.rootpath = rootpath
        self._files: dict[str, dict[str, _PendingTest]] = {}

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        dev_failure = dev_failure_marker(report)
        file_part, _, title = report.nodeid.partition("::")
        tests = self._files.setdefault(file_part, {})

        pending = tests.get(report.nodeid)
        if pending is None:
            lineno = report.location[1] if report.location else None
            pending = _PendingTest(
                title=title or file_part,
                lineno=lineno if lineno is not None else -1,
            )
            tests[report.nodeid] = pending

        pending.dev_failure = pending.dev_failure or dev_failure
        status = report_status(report)
        if status is not None and (
            pending.status is None
            or STATUS_PRIORITY[status] > STATUS_PRIORITY[pending.status]
        ):
            pending.status = status

    def result_set(self) -> ResultSet:
        """Build the result set, tests ordered by source position."""
        files: list[FileResult] = []
        for file_part, tests in self._files.items():
            ordered = sorted(tests.values(), key=lambda t: (t.lineno, t.title))
            files.append(
                FileResult(
                    path=str(self.rootpath / file_part),
                    tests=[
                        TestCaseResult(
                            title=test.title,
                            status=test.status or "skipped",
                            dev_failure=test.dev_failure,
                        )
                        for test in ordered
                    ],
                )
            )
        return ResultSet(files=files)

    def pytest_sessionfinish(self, session: pytest.Session, exitstatus: int) -> None:
        result_set = self.result_set()
        self.results_path.write_text(result_set.model_dump_json(), encoding="utf-8")
        log.info(
            "Wrote results for %d file(s) to %s",
            len(result_set.files),
            self.results_path,
        )
