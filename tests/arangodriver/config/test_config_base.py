"""Unit tests for arangodriver.config.config_base module."""

from pathlib import Path

import pytest
from pydantic import Field

from arangodriver.config.config_base import BaseConfig, ConfigError, ConfigValidationError


class SampleConfig(BaseConfig):
    """Minimal config used to exercise the base class."""

    name: str = "sample"
    retries: int = Field(default=1, ge=0)
    options: dict = Field(default_factory=dict)

    def validate_semantics(self) -> list[str]:
        return ["name must not be 'bad'"] if self.name == "bad" else []


class TestConfigValidationError:
    """Tests for ConfigValidationError."""

    def test_message_lists_errors(self) -> None:
        error = ConfigValidationError("Invalid", ["a", "b"])
        assert str(error) == "Invalid: a; b"
        assert error.errors == ["a", "b"]

    def test_message_without_errors(self) -> None:
        assert str(ConfigValidationError("Invalid", [])) == "Invalid"


class TestFromDict:
    """Tests for BaseConfig.from_dict."""

    def test_valid(self) -> None:
        config = SampleConfig.from_dict({"name": "x", "retries": 3})
        assert config.retries == 3
        assert config.config_version == "1.0"

    def test_schema_error(self) -> None:
        with pytest.raises(ConfigValidationError) as excinfo:
            SampleConfig.from_dict({"retries": -1})
        assert excinfo.value.errors[0].startswith("retries:")

    def test_unknown_field(self) -> None:
        with pytest.raises(ConfigValidationError):
            SampleConfig.from_dict({"nmae": "typo"})

    def test_semantic_error(self) -> None:
        with pytest.raises(ConfigValidationError, match="Semantic validation failed"):
            SampleConfig.from_dict({"name": "bad"})


class TestFiles:
    """Tests for reading and writing YAML files."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            SampleConfig.read_file(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.yaml"
        path.write_text("name: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            SampleConfig.read_file(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            SampleConfig.read_file(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert SampleConfig.read_file(path) == {}

    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        SampleConfig(name="saved", retries=2).save_to_file(path)
        loaded = SampleConfig.from_file(path)
        assert loaded.name == "saved"
        assert loaded.retries == 2
        assert loaded.source == str(path)


class TestMerge:
    """Tests for BaseConfig.merge."""

    def test_other_wins_and_dicts_merge(self) -> None:
        base = SampleConfig(name="base", options={"a": 1, "nested": {"x": 1}})
        other = SampleConfig(name="other", options={"nested": {"y": 2}})
        merged = base.merge(other)
        assert merged.name == "other"
        assert merged.options == {"a": 1, "nested": {"x": 1, "y": 2}}
