"""Record the suite's pass rate with the external facts tracker."""

import logging
import subprocess
from collections.abc import Sequence

log = logging.getLogger(__name__)


def format_fact(passed: int, failed: int) -> str:
    """Format the pass rate as ``<passed>/<total>``."""
    return f"{passed}/{passed + failed}"


def record_fact(command: Sequence[str], fact_name: str, value: str) -> None:
    """Invoke the facts tracker with the fact name and value.

    The tracker shares this process's stdio. A failure to start it or a
    non-zero exit is logged and otherwise ignored.
    """
    log.info("Recording fact %s=%s", fact_name, value)
    try:
        result = subprocess.run([*command, fact_name, value], check=False)
    except OSError as e:
        log.warning("Could not run facts tracker %s: %s", command[0], e)
        return
    if result.returncode != 0:
        log.warning("Facts tracker exited with code %d", result.returncode)
