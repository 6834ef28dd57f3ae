"""Single-pass XML tokenizer.

This module converts XML text into a lazy stream of structural tokens: open,
self-closing and close tags (with their attributes already parsed), text runs,
comments and processing instructions. Scanning moves strictly left to right with
at most four characters of lookahead and stops at the first well-formedness
violation by raising a :class:`~xmlite.shared.errors.ParseError`.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, Optional

from xmlite.character import UnknownEntityError, decode_entities
from xmlite.shared import (
    DuplicateAttributeError,
    MalformedAttributeError,
    ParserConfig,
    UnexpectedContentError,
    UnexpectedEndOfInputError,
    UnterminatedTagError,
    get_logger,
)

UNICODE_START_OFFSET = 0x80  # Start of Unicode characters
WHITESPACE = " \t\r\n"

_INSTRUCTION_TARGET = re.compile(r"\S+")


class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    OPEN_TAG = auto()          # <name attr="value">
    SELF_CLOSING_TAG = auto()  # <name attr="value"/>
    CLOSE_TAG = auto()         # </name>
    TEXT = auto()              # Character content between tags
    COMMENT = auto()           # <!-- ... -->
    INSTRUCTION = auto()       # <? ... ?>, including the XML declaration
    END_OF_INPUT = auto()      # No more input


@dataclass(frozen=True)
class TokenPosition:
    """Position information for XML tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> Dict[str, int]:
        """Convert position to dictionary representation."""
        return {"line": self.line, "column": self.column, "offset": self.offset}


@dataclass
class Token:
    """A single XML token.

    ``value`` holds the tag name for tags, the decoded text for text runs and
    the raw body for comments and instructions.
    """

    type: TokenType
    value: str
    position: TokenPosition
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_tag(self) -> bool:
        """Check if this token is an open, self-closing or close tag."""
        return self.type in (
            TokenType.OPEN_TAG,
            TokenType.SELF_CLOSING_TAG,
            TokenType.CLOSE_TAG,
        )

    @property
    def target(self) -> Optional[str]:
        """Target name of a processing instruction, e.g. ``xml``."""
        if self.type is not TokenType.INSTRUCTION:
            return None
        match = _INSTRUCTION_TARGET.match(self.value)
        return match.group(0) if match else None


def is_name_start_char(char: str) -> bool:
    """Check if character can start an XML name."""
    return (char.isalpha() or
            char == "_" or
            char == ":" or
            ord(char) >= UNICODE_START_OFFSET)


def is_name_char(char: str) -> bool:
    """Check if character can be part of an XML name."""
    return (is_name_start_char(char) or
            char.isdigit() or
            char in ".-")


class XMLTokenizer:
    """Pull-based XML tokenizer.

    Each instance scans one text exactly once. Call :meth:`next_token`
    repeatedly, or iterate the tokenizer, to pull tokens on demand; only the
    token currently being scanned is held in memory.

    Examples:
        >>> tokenizer = XMLTokenizer('<a k="v">hi</a>')
        >>> [token.type.name for token in tokenizer]
        ['OPEN_TAG', 'TEXT', 'CLOSE_TAG']
    """

    def __init__(
        self,
        text: str,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the tokenizer.

        Args:
            text: XML text to scan
            config: Parser configuration (defaults to ParserConfig())
            correlation_id: Optional correlation ID for tracking requests
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_tokenizer")

        self._text = text
        self._length = len(text)
        self._offset = 0
        self._line = 1
        self._column = 1

        self.tokens_emitted = 0
        self._started = False
        self._finished = False

    @property
    def position(self) -> TokenPosition:
        """Position of the next unread character."""
        return TokenPosition(self._line, self._column, self._offset)

    @property
    def at_end(self) -> bool:
        """Check if all input has been consumed."""
        return self._offset >= self._length

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token.type is TokenType.END_OF_INPUT:
                return
            yield token

    def next_token(self) -> Token:
        """Scan and return the next token.

        Returns:
            The next token; a token of type END_OF_INPUT once the text is exhausted

        Raises:
            ParseError: On the first well-formedness violation
        """
        if not self._started:
            self._started = True
            self.logger.debug(
                "Starting tokenization",
                extra={"char_count": self._length}
            )

        if self.at_end:
            if not self._finished:
                self._finished = True
                self.logger.debug(
                    "Tokenization completed",
                    extra={"token_count": self.tokens_emitted}
                )
            return Token(TokenType.END_OF_INPUT, "", self.position)

        start = self.position
        if self._text.startswith("<", self._offset):
            if self._text.startswith("<?", self._offset):
                token = self._scan_instruction(start)
            elif self._text.startswith("<!--", self._offset):
                token = self._scan_comment(start)
            elif self._text.startswith("</", self._offset):
                token = self._scan_close_tag(start)
            else:
                token = self._scan_start_tag(start)
        else:
            token = self._scan_text(start)

        self.tokens_emitted += 1
        return token

    # Scanning primitives

    def _peek(self, ahead: int = 0) -> str:
        index = self._offset + ahead
        return self._text[index] if index < self._length else ""

    def _advance(self, count: int) -> None:
        end = self._offset + count
        newlines = self._text.count("\n", self._offset, end)
        if newlines:
            self._line += newlines
            self._column = end - self._text.rfind("\n", self._offset, end)
        else:
            self._column += count
        self._offset = end

    def _skip_whitespace(self) -> bool:
        end = self._offset
        while end < self._length and self._text[end] in WHITESPACE:
            end += 1
        skipped = end - self._offset
        if skipped:
            self._advance(skipped)
        return skipped > 0

    def _scan_name(self) -> str:
        if self.at_end or not is_name_start_char(self._text[self._offset]):
            return ""
        end = self._offset + 1
        while end < self._length and is_name_char(self._text[end]):
            end += 1
        name = self._text[self._offset:end]
        self._advance(end - self._offset)
        return name

    # Token scanners

    def _scan_instruction(self, start: TokenPosition) -> Token:
        end = self._text.find("?>", self._offset + 2)
        if end == -1:
            raise UnterminatedTagError(
                "Processing instruction is never closed with '?>'", start
            )
        content = self._text[self._offset + 2:end]
        self._advance(end + 2 - self._offset)
        return Token(TokenType.INSTRUCTION, content, start)

    def _scan_comment(self, start: TokenPosition) -> Token:
        end = self._text.find("-->", self._offset + 4)
        if end == -1:
            raise UnterminatedTagError("Comment is never closed with '-->'", start)
        content = self._text[self._offset + 4:end]
        self._advance(end + 3 - self._offset)
        return Token(TokenType.COMMENT, content, start)

    def _scan_close_tag(self, start: TokenPosition) -> Token:
        self._advance(2)
        name = self._scan_name()
        if not name:
            if self.at_end:
                raise UnexpectedEndOfInputError("Input ended inside a close tag", start)
            raise UnexpectedContentError(
                f"Expected a tag name after '</', found {self._peek()!r}",
                self.position
            )

        self._skip_whitespace()
        if self.at_end:
            raise UnexpectedEndOfInputError(
                f"Input ended before '>' of close tag </{name}>", start
            )
        if self._peek() != ">":
            raise UnexpectedContentError(
                f"Unexpected {self._peek()!r} in close tag </{name}>", self.position
            )
        self._advance(1)
        return Token(TokenType.CLOSE_TAG, name, start)

    def _scan_start_tag(self, start: TokenPosition) -> Token:
        next_char = self._peek(1)
        if not next_char:
            raise UnexpectedEndOfInputError("Input ended after '<'", start)
        if next_char == "!":
            raise UnexpectedContentError(
                "Unsupported markup declaration; DOCTYPE and CDATA sections "
                "are not supported",
                start
            )
        if not is_name_start_char(next_char):
            raise UnexpectedContentError(
                f"Invalid character {next_char!r} after '<'", start
            )

        self._advance(1)
        name = self._scan_name()
        attributes: Dict[str, str] = {}

        while True:
            separated = self._skip_whitespace()
            if self.at_end:
                raise UnterminatedTagError(
                    f"Tag <{name}> is never closed with '>' or '/>'", start
                )

            char = self._peek()
            if char == ">":
                self._advance(1)
                return Token(TokenType.OPEN_TAG, name, start, attributes)
            if char == "/":
                if self._peek(1) == ">":
                    self._advance(2)
                    return Token(TokenType.SELF_CLOSING_TAG, name, start, attributes)
                if not self._peek(1):
                    raise UnterminatedTagError(
                        f"Tag <{name}> is never closed with '>' or '/>'", start
                    )
                raise MalformedAttributeError(
                    f"Unexpected '/' in tag <{name}>", self.position
                )
            if not is_name_start_char(char):
                raise MalformedAttributeError(
                    f"Unexpected character {char!r} in tag <{name}>", self.position
                )
            if not separated:
                raise MalformedAttributeError(
                    f"Attributes of <{name}> must be separated by whitespace",
                    self.position
                )
            self._scan_attribute(name, attributes, start)

    def _scan_attribute(
        self, tag: str, attributes: Dict[str, str], tag_start: TokenPosition
    ) -> None:
        attribute_start = self.position
        attribute = self._scan_name()
        if attribute in attributes:
            raise DuplicateAttributeError(attribute, tag, attribute_start)

        self._skip_whitespace()
        if self.at_end:
            raise UnterminatedTagError(
                f"Tag <{tag}> is never closed with '>' or '/>'", tag_start
            )
        if self._peek() != "=":
            raise MalformedAttributeError(
                f"Attribute '{attribute}' on <{tag}> must be followed by '=' "
                "and a quoted value",
                self.position
            )
        self._advance(1)

        self._skip_whitespace()
        if self.at_end:
            raise UnterminatedTagError(
                f"Tag <{tag}> is never closed with '>' or '/>'", tag_start
            )
        quote = self._peek()
        if quote not in ('"', "'"):
            raise MalformedAttributeError(
                f"Value of attribute '{attribute}' on <{tag}> must be quoted",
                self.position
            )

        value_end = self._text.find(quote, self._offset + 1)
        if value_end == -1:
            raise UnexpectedEndOfInputError(
                f"Input ended inside the value of attribute '{attribute}'",
                self.position
            )
        raw_value = self._text[self._offset + 1:value_end]
        self._advance(1)

        less_than = raw_value.find("<")
        if less_than != -1:
            self._advance(less_than)
            raise MalformedAttributeError(
                f"'<' is not allowed in the value of attribute '{attribute}'",
                self.position
            )

        try:
            value = decode_entities(raw_value, self.config.entity_policy)
        except UnknownEntityError as e:
            self._advance(e.index)
            raise MalformedAttributeError(
                f"{e} in the value of attribute '{attribute}'", self.position
            ) from e

        self._advance(len(raw_value) + 1)
        attributes[attribute] = value

    def _scan_text(self, start: TokenPosition) -> Token:
        end = self._text.find("<", self._offset)
        if end == -1:
            end = self._length
        raw = self._text[self._offset:end]

        try:
            content = decode_entities(raw, self.config.entity_policy)
        except UnknownEntityError as e:
            self._advance(e.index)
            raise UnexpectedContentError(f"{e} in text content", self.position) from e

        self._advance(len(raw))
        return Token(TokenType.TEXT, content, start)
