"""Character layer for xmlite.

Turns caller input into text and handles the five predefined entity references
in both directions.
"""

from .entities import (
    PREDEFINED_ENTITIES,
    UnknownEntityError,
    decode_entities,
    escape_attribute,
    escape_text,
)
from .source import BYTE_ORDER_MARK, SourceType, decode_source

__all__ = [
    "BYTE_ORDER_MARK",
    "PREDEFINED_ENTITIES",
    "SourceType",
    "UnknownEntityError",
    "decode_entities",
    "decode_source",
    "escape_attribute",
    "escape_text",
]
