"""Public parsing entry points."""

from .parser import XMLParser, parse, parse_document, parse_fragment, tokenize

__all__ = [
    "XMLParser",
    "parse",
    "parse_document",
    "parse_fragment",
    "tokenize",
]
