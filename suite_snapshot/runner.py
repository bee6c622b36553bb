"""Run the configured pytest suite in a subprocess and read back its results."""

import asyncio
import logging
import os
import sys
import tempfile
import uuid
from pathlib import Path

from suite_snapshot.config import RunConfiguration
from suite_snapshot.models.result import ResultSet

log = logging.getLogger(__name__)

ENGINE_MODE_VARIABLE = "SUITE_SNAPSHOT_ENGINE"
PLUGIN_MODULE = "suite_snapshot.plugin"

# pytest: all passed, some failed, nothing collected
NORMAL_EXIT_CODES = frozenset({0, 1, 5})


class TestRunError(RuntimeError):
    """Raised when pytest could not run the suite to completion."""

    __test__ = False


def results_file_path() -> Path:
    """Return a fresh, uniquely named path for the results file."""
    return Path(tempfile.gettempdir()) / f"suite-snapshot-{uuid.uuid4().hex}.json"


def build_pytest_command(config: RunConfiguration, results_path: Path) -> list[str]:
    """Build the pytest invocation for a snapshot run."""
    command = [
        sys.executable,
        "-m",
        "pytest",
        "-p",
        PLUGIN_MODULE,
        "-n",
        str(config.max_workers),
        "--continue-on-collection-errors",
        "--suite-snapshot-results",
        str(results_path),
    ]
    if config.test_path_pattern:
        command += ["--suite-snapshot-pattern", config.test_path_pattern]
    command += config.pytest_args
    command += config.test_paths
    return command


async def run_suite(config: RunConfiguration) -> ResultSet:
    """Run every matching test in the suite and return the aggregate results.

    Args:
        config: Run configuration

    Returns:
        Results per test file, each test marked with its dev-failure flag

    Raises:
        TestRunError: If pytest exits abnormally or writes no results

    """
    results_path = results_file_path()
    command = build_pytest_command(config, results_path)
    env = {**os.environ, ENGINE_MODE_VARIABLE: config.engine_mode}

    log.info(
        "Running test suite in %s with %d worker(s)", config.root, config.max_workers
    )
    log.debug("Command: %s", " ".join(command))

    process = await asyncio.create_subprocess_exec(*command, cwd=config.root, env=env)
    returncode = await process.wait()

    try:
        if returncode not in NORMAL_EXIT_CODES:
            raise TestRunError(f"pytest exited with code {returncode}")
        if not results_path.exists():
            raise TestRunError(f"pytest did not write results to {results_path}")

        return ResultSet.model_validate_json(results_path.read_text(encoding="utf-8"))
    finally:
        results_path.unlink(missing_ok=True)
