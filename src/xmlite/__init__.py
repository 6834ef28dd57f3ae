"""xmlite: a small, strict XML 1.0 parser.

Parses well-formed, namespace-unaware XML into an owned element tree and fails
fast with a typed error on the first malformed construct.

Progressive API Disclosure:
- Level 1: Simple functions - parse_document(), parse_fragment(), tokenize()
- Level 2: Configured parser - XMLParser class with ParserConfig
- Level 3: Components - XMLTokenizer and XMLTreeBuilder
"""

__version__ = "0.1.0"
__author__ = "xmlite developers"

# Level 1: Simple functions
# Level 2: Configured parser
from .api import XMLParser, parse, parse_document, parse_fragment, tokenize

# Configuration and errors
from .shared.config import ConfigError, ConfigValidationError, EntityPolicy, ParserConfig
from .shared.errors import (
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

# Level 3: Components
from .tokenization import Token, TokenPosition, TokenType, XMLTokenizer
from .tree import AttributeRef, XMLDeclaration, XMLDocument, XMLElement, XMLTreeBuilder

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_document",
    "parse_fragment",
    "tokenize",

    # Level 2: Configured parser
    "XMLParser",
    "ParserConfig",
    "EntityPolicy",
    "ConfigError",
    "ConfigValidationError",

    # Tree model
    "AttributeRef",
    "XMLDeclaration",
    "XMLDocument",
    "XMLElement",

    # Errors
    "ParseError",
    "ParseErrorKind",
    "DuplicateAttributeError",
    "MalformedAttributeError",
    "MismatchedTagError",
    "NestingTooDeepError",
    "NoRootElementError",
    "UnclosedTagError",
    "UnexpectedContentError",
    "UnexpectedEndOfInputError",
    "UnterminatedTagError",

    # Level 3: Components
    "Token",
    "TokenPosition",
    "TokenType",
    "XMLTokenizer",
    "XMLTreeBuilder",
]
