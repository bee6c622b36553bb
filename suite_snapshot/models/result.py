"""Models for the per-test outcomes collected from a pytest session."""

from collections.abc import Sequence
from typing import Literal

from pydantic import Field

from suite_snapshot.models.base import Model

TestStatus = Literal["passed", "failed", "skipped"]


class TestCaseResult(Model):
    """Outcome of a single named test."""

    __test__ = False

    title: str = Field(..., description="Test name relative to its file")
    status: TestStatus = Field(..., description="Aggregated outcome")
    dev_failure: bool = Field(
        default=False,
        description="Whether a suppressed dev-only failure occurred",
    )


class FileResult(Model):
    """Outcomes of all tests collected from one test file."""

    path: str = Field(..., description="Path of the test file")
    tests: Sequence[TestCaseResult] = Field(default_factory=list)


class ResultSet(Model):
    """Aggregate outcome of a test run, one entry per test file."""

    files: Sequence[FileResult] = Field(default_factory=list)

    def count(self, status: TestStatus, dev_failure: bool | None = None) -> int:
        """Count tests with the given status, optionally by dev-failure flag."""
        return sum(
            1
            for file_result in self.files
            for test in file_result.tests
            if test.status == status
            and (dev_failure is None or test.dev_failure == dev_failure)
        )
