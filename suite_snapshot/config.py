"""Run configuration, read from suite-snapshot.yaml and the command line."""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError

from suite_snapshot.models.base import Model

log = logging.getLogger(__name__)

CONFIG_FILENAME = "suite-snapshot.yaml"


class RunConfiguration(Model):
    """Configuration for a single snapshot run."""

    root: Path = Field(..., description="Repository root the suite runs in")
    max_workers: int = Field(default=1, ge=1, description="pytest-xdist workers")
    track_facts: bool = Field(default=False)
    test_paths: Sequence[str] = Field(
        default_factory=list,
        description="Paths handed to pytest (empty means pytest's own discovery)",
    )
    test_path_pattern: str = Field(
        default="",
        description="Regex over test file paths (empty matches everything)",
    )
    engine_mode: str = Field(
        default="next",
        description="Value exported to the suite as SUITE_SNAPSHOT_ENGINE",
    )
    output_dir: Path = Field(
        default=Path("."),
        description=(
            "Directory for the snapshot files, relative to root; defaults to the"
            " repository root rather than the tool's own install directory"
        ),
    )
    fact_name: str = Field(default="passing-tests")
    facts_tracker: Sequence[str] = Field(
        default=("facts-tracker",),
        min_length=1,
        description="Command used to record the pass-rate fact",
    )
    pytest_args: Sequence[str] = Field(default_factory=list)

    @property
    def output_path(self) -> Path:
        """Absolute directory the snapshot files are written to."""
        return self.root / self.output_dir


def load_run_configuration(
    root: Path, *, max_workers: int, track_facts: bool
) -> RunConfiguration:
    """Read suite-snapshot.yaml from root, if any, and overlay CLI values.

    Args:
        root: Repository root
        max_workers: Worker count from the command line
        track_facts: Whether to record the pass-rate fact

    Returns:
        The validated configuration

    Raises:
        ValueError: If the file is not valid YAML or does not match the schema

    """
    config_file = root / CONFIG_FILENAME
    data: dict[str, Any] = {}

    if config_file.exists():
        log.info("Reading configuration from %s", config_file)
        try:
            loaded = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e

        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ValueError(
                    f"Invalid configuration schema in {config_file}: "
                    "expected a mapping"
                )
            data = loaded

    data.update(root=root, max_workers=max_workers, track_facts=track_facts)

    try:
        return RunConfiguration.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration schema in {config_file}: {e}") from e
