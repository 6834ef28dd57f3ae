"""Tokenization engine for xmlite.

Key Components:
    XMLTokenizer: Pull-based scanner producing tokens on demand
    Token: A single tag, text run, comment or instruction with its position
    TokenType: Enumeration of all token types
    TokenPosition: Line, column and offset of a token
"""

from .tokenizer import (
    Token,
    TokenPosition,
    TokenType,
    XMLTokenizer,
    is_name_char,
    is_name_start_char,
)

__all__ = [
    "Token",
    "TokenPosition",
    "TokenType",
    "XMLTokenizer",
    "is_name_char",
    "is_name_start_char",
]
