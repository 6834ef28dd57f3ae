"""Parse error taxonomy for xmlite.

Every structural failure detected while tokenizing or building a tree is raised
as a subclass of :class:`ParseError`. Each subclass maps to exactly one
:class:`ParseErrorKind` so callers can either catch specific classes or switch
on ``error.kind``. Errors carry the position where the problem was detected;
no partial tree is ever attached to them.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from xmlite.tokenization.tokenizer import TokenPosition


class ParseErrorKind(Enum):
    """Kinds of well-formedness failures."""

    UNTERMINATED_TAG = auto()         # <... never reaches > or />
    UNEXPECTED_END_OF_INPUT = auto()  # input ends mid-token
    MALFORMED_ATTRIBUTE = auto()      # attribute is not name="value"
    DUPLICATE_ATTRIBUTE = auto()      # attribute repeated on one tag
    MISMATCHED_TAG = auto()           # close tag does not match open element
    UNCLOSED_TAG = auto()             # input ends with elements still open
    UNEXPECTED_CONTENT = auto()       # stray text, markup or second root
    NO_ROOT_ELEMENT = auto()          # no element at all
    NESTING_TOO_DEEP = auto()         # configured depth limit exceeded


class ParseError(Exception):
    """Base class for all parse failures."""

    kind: ParseErrorKind = ParseErrorKind.UNEXPECTED_CONTENT

    def __init__(
        self,
        message: str,
        position: Optional["TokenPosition"] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return (
            f"{self.message} at line {self.position.line}, "
            f"column {self.position.column}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, position={self.position!r})"


class UnterminatedTagError(ParseError):
    """A ``<...`` construct never reaches its closing delimiter."""

    kind = ParseErrorKind.UNTERMINATED_TAG


class UnexpectedEndOfInputError(ParseError):
    """The input ended in the middle of a token."""

    kind = ParseErrorKind.UNEXPECTED_END_OF_INPUT


class MalformedAttributeError(ParseError):
    """Attribute syntax does not follow the ``name="value"`` shape."""

    kind = ParseErrorKind.MALFORMED_ATTRIBUTE


class DuplicateAttributeError(ParseError):
    """The same attribute name appears twice on one tag."""

    kind = ParseErrorKind.DUPLICATE_ATTRIBUTE

    def __init__(
        self,
        attribute: str,
        tag: str,
        position: Optional["TokenPosition"] = None
    ) -> None:
        super().__init__(f"Duplicate attribute '{attribute}' on <{tag}>", position)
        self.attribute = attribute
        self.tag = tag


class MismatchedTagError(ParseError):
    """A close tag does not match the innermost open element."""

    kind = ParseErrorKind.MISMATCHED_TAG

    def __init__(
        self,
        expected: Optional[str],
        found: str,
        position: Optional["TokenPosition"] = None
    ) -> None:
        if expected is None:
            message = f"Close tag </{found}> has no matching open element"
        else:
            message = f"Expected </{expected}> but found </{found}>"
        super().__init__(message, position)
        self.expected = expected
        self.found = found


class UnclosedTagError(ParseError):
    """The input ended while elements were still open."""

    kind = ParseErrorKind.UNCLOSED_TAG

    def __init__(
        self,
        open_tags: Sequence[str],
        position: Optional["TokenPosition"] = None
    ) -> None:
        self.open_tags: Tuple[str, ...] = tuple(open_tags)
        names = ", ".join(f"<{name}>" for name in self.open_tags)
        super().__init__(f"Unclosed element(s): {names}", position)


class UnexpectedContentError(ParseError):
    """Content that cannot appear where it was found."""

    kind = ParseErrorKind.UNEXPECTED_CONTENT


class NoRootElementError(ParseError):
    """The input contains no element."""

    kind = ParseErrorKind.NO_ROOT_ELEMENT

    def __init__(
        self,
        message: str = "Document has no root element",
        position: Optional["TokenPosition"] = None
    ) -> None:
        super().__init__(message, position)


class NestingTooDeepError(ParseError):
    """Element nesting exceeds the configured ``max_depth``."""

    kind = ParseErrorKind.NESTING_TOO_DEEP

    def __init__(
        self,
        max_depth: int,
        position: Optional["TokenPosition"] = None
    ) -> None:
        super().__init__(f"Element nesting exceeds max_depth={max_depth}", position)
        self.max_depth = max_depth
