"""Configuration classes for element queries.

This module provides configuration objects for the path compiler, the
matcher and package-wide logging behaviour.
"""

import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_COMPONENT_FIELDS = ["query", "global_"]


class ConfigValueError(ValueError):
    """Raised by a configuration section when one of its fields is invalid."""

    def __init__(self, message: str, field_name: str,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class QueryConfig:
    """Configuration for path compilation and matching."""

    enable_caching: bool = True
    cache_size_limit: int = 256
    enable_metrics: bool = True

    def __post_init__(self) -> None:
        """Validate query configuration."""
        if self.cache_size_limit < 0:
            raise ConfigValueError(
                "cache_size_limit must be >= 0",
                field_name="cache_size_limit",
                suggestions=["Use 0 to disable the compiled path cache"],
            )


@dataclass
class GlobalConfig:
    """Global configuration settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValueError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=list(VALID_LOGGING_LEVELS),
            )


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _validation_error(error: ConfigValueError, section: str) -> ConfigValidationError:
    return ConfigValidationError(
        str(error),
        field_name=f"{section}.{error.field_name}",
        suggestions=error.suggestions,
    )


@dataclass(frozen=True)
class ElementQueryConfig:
    """Immutable configuration for all element query components.

    Thread-safe due to frozen dataclass implementation. Component sections are
    mutable dataclasses, so use :meth:`override` to derive variants instead of
    editing a shared instance in place.
    """

    query: QueryConfig = field(default_factory=QueryConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        for section_name in _COMPONENT_FIELDS:
            try:
                getattr(self, section_name).__post_init__()
            except ConfigValueError as e:
                raise _validation_error(e, section_name) from e

    def override(self, **kwargs: Any) -> "ElementQueryConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Keyword arguments for configuration fields to override,
                using ``component__field`` for nested fields

        Returns:
            New ElementQueryConfig instance with overrides applied

        Example:
            >>> config = ElementQueryConfig()
            >>> new_config = config.override(
            ...     query__cache_size_limit=1024,
            ...     global___logging_level="DEBUG"
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            component, sep, field_name = key.partition("__")
            if sep and component in _COMPONENT_FIELDS:
                nested_overrides.setdefault(component, {})[field_name] = value
            elif sep and key.startswith("global___"):
                nested_overrides.setdefault("global_", {})[key[len("global___"):]] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        for field_name in _COMPONENT_FIELDS:
            current_config = getattr(self, field_name)
            if field_name in nested_overrides:
                try:
                    new_fields[field_name] = replace(
                        current_config, **nested_overrides[field_name]
                    )
                except ConfigValueError as e:
                    raise _validation_error(e, field_name) from e
            else:
                new_fields[field_name] = current_config

        for key, value in nested_overrides.items():
            if key not in _COMPONENT_FIELDS:
                new_fields[key] = value

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""

        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, (list, tuple, set)):
                return [_dataclass_to_dict(item) for item in obj]
            if isinstance(obj, dict):
                return {key: _dataclass_to_dict(value) for key, value in obj.items()}
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElementQueryConfig":
        """Create configuration from dictionary.

        Unknown keys are ignored so that configs written by newer versions
        still load.
        """
        sections = {"query": QueryConfig, "global_": GlobalConfig}
        field_values: Dict[str, Any] = {}
        for field_name, section_class in sections.items():
            if field_name not in data:
                continue
            known = section_class.__dataclass_fields__
            try:
                field_values[field_name] = section_class(**{
                    key: value for key, value in data[field_name].items()
                    if key in known
                })
            except ConfigValueError as e:
                raise _validation_error(e, field_name) from e

        for key in ("name", "description"):
            if key in data:
                field_values[key] = data[key]

        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "ElementQueryConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def performance_optimized(cls) -> "ElementQueryConfig":
        """Create configuration preset for many repeated queries."""
        return cls(
            query=QueryConfig(
                enable_caching=True,
                cache_size_limit=4096,
                enable_metrics=False
            ),
            global_=GlobalConfig(logging_level="ERROR"),
            name="performance_optimized",
            description="Large compiled-path cache, metrics and chatty logging off"
        )

    @classmethod
    def debugging(cls) -> "ElementQueryConfig":
        """Create configuration preset that recompiles and logs every query."""
        return cls(
            query=QueryConfig(
                enable_caching=False,
                cache_size_limit=0,
                enable_metrics=True
            ),
            global_=GlobalConfig(logging_level="DEBUG"),
            name="debugging",
            description="No caching, full metrics and debug logging"
        )
