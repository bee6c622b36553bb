"""pytest plugin that marks each test report with its dev-only failure flag."""

from collections.abc import Generator
from dataclasses import dataclass, field

import pytest

from suite_snapshot import dev_failures
from suite_snapshot.dev_failures import DevFailureEnvironment

DEV_FAILURE_PROPERTY = "dev_failure"
INTERCEPTOR_NAME = "suite-snapshot-interceptor"


@dataclass
class DevFailureInterceptor:
    """Wraps the per-test lifecycle around the shared dev-failure environment.

    The flag is reset and suppression enabled when a test starts, and
    suppression is lifted once the test (setup, call and teardown) is done.
    Every phase report carries the flag as a user property, so it reaches the
    controller process together with the report it belongs to, xdist included.
    """

    environment: DevFailureEnvironment = field(
        default_factory=lambda: dev_failures.environment
    )

    @pytest.hookimpl(wrapper=True)
    def pytest_runtest_protocol(
        self, item: pytest.Item, nextitem: pytest.Item | None
    ) -> Generator[None, object, object]:
        self.environment.start_test()
        try:
            return (yield)
        finally:
            self.environment.finish_test()

    @pytest.hookimpl(wrapper=True)
    def pytest_runtest_makereport(
        self, item: pytest.Item, call: pytest.CallInfo[None]
    ) -> Generator[None, pytest.TestReport, pytest.TestReport]:
        report = yield
        report.user_properties.append(
            (DEV_FAILURE_PROPERTY, self.environment.flagged)
        )
        return report


def install_interceptor(
    plugin_manager: pytest.PytestPluginManager,
) -> DevFailureInterceptor:
    """Register a DevFailureInterceptor on a plugin manager, once.

    Exposed for tooling that drives pytest itself and wants the same
    dev-failure markers on its reports.
    """
    existing = plugin_manager.get_plugin(INTERCEPTOR_NAME)
    if existing is not None:
        return existing

    interceptor = DevFailureInterceptor()
    plugin_manager.register(interceptor, INTERCEPTOR_NAME)
    return interceptor
