"""Tests for run configuration loading."""

from pathlib import Path

import pytest

from suite_snapshot.config import (
    CONFIG_FILENAME,
    RunConfiguration,
    load_run_configuration,
)


class TestLoadRunConfiguration:
    """Tests for load_run_configuration function."""

    def test_defaults_without_config_file(self, tmp_path: Path) -> None:
        """Uses defaults when no suite-snapshot.yaml exists."""
        config = load_run_configuration(tmp_path, max_workers=3, track_facts=False)

        assert config.root == tmp_path
        assert config.max_workers == 3
        assert config.track_facts is False
        assert list(config.test_paths) == []
        assert config.test_path_pattern == ""
        assert config.engine_mode == "next"
        assert config.output_path == tmp_path / "."
        assert list(config.facts_tracker) == ["facts-tracker"]

    def test_reads_config_file(self, tmp_path: Path) -> None:
        """Reads values from suite-snapshot.yaml."""
        (tmp_path / CONFIG_FILENAME).write_text(
            """
test_paths:
  - tests
test_path_pattern: "^tests/unit/"
output_dir: scripts/snapshots
facts_tracker: ["node", "scripts/facts-tracker/index.js"]
fact_name: engine-tests
pytest_args: ["-q"]
"""
        )

        config = load_run_configuration(tmp_path, max_workers=1, track_facts=True)

        assert list(config.test_paths) == ["tests"]
        assert config.test_path_pattern == "^tests/unit/"
        assert config.output_path == tmp_path / "scripts" / "snapshots"
        assert list(config.facts_tracker) == ["node", "scripts/facts-tracker/index.js"]
        assert config.fact_name == "engine-tests"
        assert list(config.pytest_args) == ["-q"]
        assert config.track_facts is True

    def test_command_line_overrides_file(self, tmp_path: Path) -> None:
        """CLI values win over the same keys in the file."""
        (tmp_path / CONFIG_FILENAME).write_text("max_workers: 12\n")

        config = load_run_configuration(tmp_path, max_workers=2, track_facts=False)

        assert config.max_workers == 2

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        """An empty file behaves like a missing one."""
        (tmp_path / CONFIG_FILENAME).write_text("")

        config = load_run_configuration(tmp_path, max_workers=1, track_facts=False)

        assert config.engine_mode == "next"

    def test_raises_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ValueError for malformed YAML."""
        (tmp_path / CONFIG_FILENAME).write_text("invalid: yaml: content: [")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_run_configuration(tmp_path, max_workers=1, track_facts=False)

    def test_raises_for_unknown_key(self, tmp_path: Path) -> None:
        """Raises ValueError for keys outside the schema."""
        (tmp_path / CONFIG_FILENAME).write_text("watch: true\n")

        with pytest.raises(ValueError, match="Invalid configuration schema"):
            load_run_configuration(tmp_path, max_workers=1, track_facts=False)

    def test_raises_for_non_mapping(self, tmp_path: Path) -> None:
        """Raises ValueError when the document is not a mapping."""
        (tmp_path / CONFIG_FILENAME).write_text("- tests\n")

        with pytest.raises(ValueError, match="Invalid configuration schema"):
            load_run_configuration(tmp_path, max_workers=1, track_facts=False)

    def test_raises_for_zero_workers(self, tmp_path: Path) -> None:
        """Raises ValueError when the worker count is below one."""
        with pytest.raises(ValueError, match="Invalid configuration schema"):
            load_run_configuration(tmp_path, max_workers=0, track_facts=False)

    def test_output_dir_documents_repository_root_default(self, tmp_path: Path) -> None:
        """Snapshots land in the repository root, as the field documents."""
        config = load_run_configuration(tmp_path, max_workers=1, track_facts=False)
        description = RunConfiguration.model_fields["output_dir"].description

        assert config.output_path == tmp_path
        assert description is not None
        assert "repository root" in description
