"""Shared utilities for xmlite.

This module provides the configuration object, the parse error taxonomy and the
correlation-aware logger used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    EntityPolicy,
    ParserConfig,
)
from .errors import (
    DuplicateAttributeError,
    MalformedAttributeError,
    MismatchedTagError,
    NestingTooDeepError,
    NoRootElementError,
    ParseError,
    ParseErrorKind,
    UnclosedTagError,
    UnexpectedContentError,
    UnexpectedEndOfInputError,
    UnterminatedTagError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EntityPolicy",
    "ParserConfig",
    "DuplicateAttributeError",
    "MalformedAttributeError",
    "MismatchedTagError",
    "NestingTooDeepError",
    "NoRootElementError",
    "ParseError",
    "ParseErrorKind",
    "UnclosedTagError",
    "UnexpectedContentError",
    "UnexpectedEndOfInputError",
    "UnterminatedTagError",
    "CorrelationLogger",
    "get_logger",
]
