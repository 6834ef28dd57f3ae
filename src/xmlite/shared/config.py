"""Configuration objects for xmlite parsing.

The configuration is a single immutable dataclass shared by the tokenizer, the
tree builder and the API layer. Being frozen, one instance can be handed to any
number of concurrent parses.
"""

import json
from dataclasses import dataclass, fields, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class EntityPolicy(Enum):
    """Handling of ``&`` sequences that are not predefined entity references."""

    PASS_THROUGH = auto()  # Keep the text literally
    REJECT = auto()        # Fail the parse


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for all parser components.

    Attributes:
        entity_policy: What to do with unrecognized ``&...`` sequences
        max_depth: Maximum element nesting, or None for no limit
        correlation_id: Correlation ID attached to every log record
        name: Optional preset name
        description: Optional human readable description
    """

    entity_policy: EntityPolicy = EntityPolicy.PASS_THROUGH
    max_depth: Optional[int] = None
    correlation_id: Optional[str] = None

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if not isinstance(self.entity_policy, EntityPolicy):
            raise ConfigValidationError(
                f"entity_policy must be an EntityPolicy, got {self.entity_policy!r}",
                field_name="entity_policy",
                suggestions=[f"EntityPolicy.{member.name}" for member in EntityPolicy],
            )
        if self.max_depth is not None and (
            isinstance(self.max_depth, bool)
            or not isinstance(self.max_depth, int)
            or self.max_depth <= 0
        ):
            raise ConfigValidationError(
                "max_depth must be a positive integer or None",
                field_name="max_depth",
                suggestions=["Use None to disable the depth limit"],
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig()
            >>> config.override(max_depth=64).max_depth
            64
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.name if isinstance(value, Enum) else value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Enum fields may be given by member name.
        """
        values = dict(data)
        policy = values.get("entity_policy")
        if isinstance(policy, str):
            try:
                values["entity_policy"] = EntityPolicy[policy]
            except KeyError as e:
                raise ConfigValidationError(
                    f"Unknown entity_policy: {policy}",
                    field_name="entity_policy",
                    suggestions=[member.name for member in EntityPolicy],
                ) from e

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                field_name=unknown[0],
            )
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Create the default, pass-through configuration."""
        return cls(
            name="lenient",
            description="Unknown entity references are kept as literal text",
        )

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Create configuration that rejects anything outside the supported subset."""
        return cls(
            entity_policy=EntityPolicy.REJECT,
            max_depth=1000,
            name="strict",
            description=(
                "Unknown entity references are rejected and nesting is bounded"
            ),
        )
