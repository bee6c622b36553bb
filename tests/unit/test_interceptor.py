"""Tests for the dev-failure interceptor plugin."""

from unittest.mock import Mock

import pytest

from suite_snapshot import dev_failures
from suite_snapshot.dev_failures import DevFailureEnvironment
from suite_snapshot.interceptor import (
    DEV_FAILURE_PROPERTY,
    INTERCEPTOR_NAME,
    DevFailureInterceptor,
    install_interceptor,
)


def drive(generator, result):  # type: ignore[no-untyped-def]
    """Run a new-style hook wrapper around an inner result."""
    next(generator)
    try:
        generator.send(result)
    except StopIteration as stop:
        return stop.value
    raise AssertionError("hook wrapper did not finish")


def test_defaults_to_shared_environment() -> None:
    """Without an explicit environment the process-wide one is used."""
    assert DevFailureInterceptor().environment is dev_failures.environment


def test_protocol_suppresses_during_test() -> None:
    """Suppression is on while the test runs and off afterwards."""
    environment = DevFailureEnvironment(flagged=True)
    interceptor = DevFailureInterceptor(environment=environment)
    wrapper = interceptor.pytest_runtest_protocol(item=Mock(), nextitem=None)

    next(wrapper)
    assert environment.suppress is True
    assert environment.flagged is False

    with pytest.raises(StopIteration):
        wrapper.send(True)
    assert environment.suppress is False


def test_protocol_lifts_suppression_on_error() -> None:
    """An exception inside the protocol still lifts suppression."""
    environment = DevFailureEnvironment()
    interceptor = DevFailureInterceptor(environment=environment)
    wrapper = interceptor.pytest_runtest_protocol(item=Mock(), nextitem=None)
    next(wrapper)

    with pytest.raises(RuntimeError):
        wrapper.throw(RuntimeError("boom"))

    assert environment.suppress is False


def test_makereport_attaches_flag() -> None:
    """Each report carries the flag as it stood when the report was made."""
    environment = DevFailureEnvironment()
    interceptor = DevFailureInterceptor(environment=environment)
    environment.start_test()
    environment.report("missing key")
    report = Mock(user_properties=[])

    returned = drive(
        interceptor.pytest_runtest_makereport(item=Mock(), call=Mock()), report
    )

    assert returned is report
    assert report.user_properties == [(DEV_FAILURE_PROPERTY, True)]


def test_install_interceptor_is_idempotent() -> None:
    """Installing twice registers a single interceptor."""
    plugin_manager = pytest.PytestPluginManager()

    first = install_interceptor(plugin_manager)
    second = install_interceptor(plugin_manager)

    assert first is second
    assert plugin_manager.get_plugin(INTERCEPTOR_NAME) is first
