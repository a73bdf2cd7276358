"""
Base Configuration Classes
==========================

Pydantic-based configuration models with validation and serialization.
Supports hierarchical configuration sources (overrides > environment > file > defaults).
"""

from pathlib import Path
from typing import Any, TypeVar

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger(__name__)

T = TypeVar('T', bound='BaseConfig')


class ConfigError(Exception):
    """Configuration-related errors."""
    pass


class ConfigValidationError(ConfigError):
    """Configuration validation errors."""

    def __init__(self, message: str, errors: list[str]):
        self.errors = errors
        super().__init__(f"{message}: {'; '.join(errors)}" if errors else message)


class BaseConfig(BaseModel):
    """
    Base for configuration models.

    Provides Pydantic validation, serialization, and hierarchical merging.
    Subclasses override validate_semantics() for domain-specific validation.
    """

    config_version: str = Field(default="1.0", description="Configuration schema version")
    source: str | None = Field(default=None, description="Configuration source identifier")

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        use_enum_values=True,
    )

    def validate_semantics(self) -> list[str]:
        """
        Validate semantic consistency beyond schema validation.

        Returns:
            List of validation error messages (empty if valid)
        """
        return []

    def validate_full(self) -> None:
        """
        Perform semantic validation on top of the schema checks done at construction.

        Raises:
            ConfigValidationError: If validation fails
        """
        semantic_errors = self.validate_semantics()
        if semantic_errors:
            raise ConfigValidationError("Semantic validation failed", semantic_errors)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(exclude_none=True, indent=indent)

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        """
        Create configuration from dictionary.

        Args:
            data: Configuration data

        Returns:
            Configuration instance

        Raises:
            ConfigValidationError: If validation fails
        """
        try:
            instance = cls(**data)
        except ValidationError as e:
            raise ConfigValidationError(
                "Failed to create from dict",
                [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            ) from e
        instance.validate_full()
        return instance

    @staticmethod
    def read_file(file_path: str | Path) -> dict[str, Any]:
        """
        Read a YAML (or JSON) configuration file into a mapping.

        Args:
            file_path: Path to the configuration file

        Returns:
            Mapping read from the file (empty for an empty file)

        Raises:
            ConfigError: If the file is missing, unreadable, invalid or not a mapping
        """
        path = Path(file_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path, encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {path} must contain a mapping, got {type(data).__name__}")
        return data

    @classmethod
    def from_file(cls: type[T], file_path: str | Path) -> T:
        """Load configuration from a file, recording the file as its source."""
        data = cls.read_file(file_path)
        data.setdefault("source", str(file_path))
        return cls.from_dict(data)

    def save_to_file(self, file_path: str | Path) -> None:
        """
        Save configuration to a YAML file.

        Raises:
            ConfigError: If file cannot be saved
        """
        path = Path(file_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.model_dump(mode="json", exclude_none=True), f, sort_keys=False)
            logger.info("config_saved", path=str(path))
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def merge(self: T, other: T) -> T:
        """
        Merge with another configuration of the same type.

        Values from 'other' override values from 'self'. Nested dicts
        are deep-merged. Fields excluded from serialization (secrets) are
        carried over as well.
        """
        merged_data = self._deep_merge_dicts(self._merge_data(), other._merge_data())
        return self.__class__.from_dict(merged_data)

    def _merge_data(self) -> dict[str, Any]:
        data = self.to_dict()
        for name, info in type(self).model_fields.items():
            if info.exclude and name in self.model_fields_set:
                data[name] = getattr(self, name)
        return data

    @staticmethod
    def _deep_merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        result = base.copy()

        for key, value in override.items():
            if (key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)):
                result[key] = BaseConfig._deep_merge_dicts(result[key], value)
            else:
                result[key] = value

        return result
