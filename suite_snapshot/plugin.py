"""pytest plugin module injected into the suite with ``-p suite_snapshot.plugin``.

Loaded by module name, so pytest-xdist loads the same plugin in each worker
process.
"""

import os
import re
from pathlib import Path

import pytest

from suite_snapshot.collector import ResultCollector
from suite_snapshot.interceptor import install_interceptor

COLLECTOR_NAME = "suite-snapshot-collector"


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("suite-snapshot")
    group.addoption(
        "--suite-snapshot-results",
        dest="suite_snapshot_results",
        default=None,
        help="Write per-test results as JSON to this path",
    )
    group.addoption(
        "--suite-snapshot-pattern",
        dest="suite_snapshot_pattern",
        default="",
        help="Only run tests whose file path matches this regex",
    )


def pytest_configure(config: pytest.Config) -> None:
    install_interceptor(config.pluginmanager)

    results = config.getoption("suite_snapshot_results")
    # xdist workers only execute; the controller aggregates their reports
    if results and not hasattr(config, "workerinput"):
        config.pluginmanager.register(
            ResultCollector(Path(results), config.rootpath), COLLECTOR_NAME
        )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    pattern = config.getoption("suite_snapshot_pattern")
    if not pattern:
        return

    regex = re.compile(pattern)
    selected: list[pytest.Item] = []
    deselected: list[pytest.Item] = []
    for item in items:
        relative = Path(os.path.relpath(item.path, config.rootpath)).as_posix()
        (selected if regex.search(relative) else deselected).append(item)

    if deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = selected
