"""Tree construction from token streams.

The builder consumes tokens one at a time, keeps an explicit stack of open
elements and attaches each element to its parent when the element is closed.
Any well-formedness violation raises a ParseError; the partially built tree is
discarded with the builder, so callers only ever see complete documents.
"""

from typing import Iterable, List, Optional

from xmlite.shared import (
    MismatchedTagError,
    NestingTooDeepError,
    NoRootElementError,
    ParserConfig,
    UnclosedTagError,
    UnexpectedContentError,
    get_logger,
)
from xmlite.tokenization import Token, TokenPosition, TokenType
from xmlite.tokenization.tokenizer import WHITESPACE

from .element import XMLDeclaration, XMLDocument, XMLElement


class _OpenElement:
    """An element on the builder stack together with its pending text runs."""

    __slots__ = ("element", "text_parts")

    def __init__(self, element: XMLElement) -> None:
        self.element = element
        self.text_parts: List[str] = []

    def finish(self) -> XMLElement:
        if self.text_parts:
            self.element.text = "".join(self.text_parts)
        return self.element


class XMLTreeBuilder:
    """Builds an element tree from a token stream.

    A builder is single use: construct one per parse so concurrent parses never
    share state.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration (defaults to ParserConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_tree_builder")

        # Tree building state
        self._stack: List[_OpenElement] = []
        self._top_level: List[XMLElement] = []
        self._top_level_text: List[str] = []
        self._declaration: Optional[XMLDeclaration] = None
        self._fragment = False
        self._seen_content = False
        self._last_position = TokenPosition(1, 1, 0)

        # Statistics
        self.elements_created = 0
        self.tokens_consumed = 0

    def build_document(self, tokens: Iterable[Token]) -> XMLDocument:
        """Build a document with exactly one root element.

        Args:
            tokens: Token stream, typically an XMLTokenizer

        Returns:
            XMLDocument holding the root element and optional declaration

        Raises:
            ParseError: If the token stream is not a well-formed document
        """
        self._fragment = False
        self._consume(tokens)
        document = XMLDocument(root=self._top_level[0], declaration=self._declaration)

        self.logger.debug(
            "Document tree built",
            extra={
                "root": document.root.name,
                "element_count": self.elements_created,
                "token_count": self.tokens_consumed,
                "has_declaration": self._declaration is not None,
            }
        )
        return document

    def build_fragment(self, tokens: Iterable[Token]) -> XMLElement:
        """Build an unnamed container holding one or more sibling elements.

        Top-level text is kept as the container's text instead of being
        rejected.

        Raises:
            ParseError: If the token stream is not a well-formed fragment
        """
        self._fragment = True
        self._consume(tokens)
        container = XMLElement(name=None, text="".join(self._top_level_text))
        container.children.extend(self._top_level)

        self.logger.debug(
            "Fragment tree built",
            extra={
                "top_level_count": len(self._top_level),
                "element_count": self.elements_created,
                "token_count": self.tokens_consumed,
            }
        )
        return container

    def _consume(self, tokens: Iterable[Token]) -> None:
        if self.tokens_consumed:
            raise RuntimeError("XMLTreeBuilder instances are single use")

        self.logger.debug(
            "Starting tree construction",
            extra={"mode": "fragment" if self._fragment else "document"}
        )
        for token in tokens:
            if token.type is TokenType.END_OF_INPUT:
                break
            self.tokens_consumed += 1
            self._last_position = token.position
            self._process_token(token)

        if self._stack:
            raise UnclosedTagError(
                [entry.element.name or "" for entry in self._stack],
                self._last_position
            )
        if not self._top_level:
            raise NoRootElementError(position=self._last_position)

    def _process_token(self, token: Token) -> None:
        if token.type is TokenType.OPEN_TAG:
            self._handle_open_tag(token)
        elif token.type is TokenType.SELF_CLOSING_TAG:
            self._handle_self_closing_tag(token)
        elif token.type is TokenType.CLOSE_TAG:
            self._handle_close_tag(token)
        elif token.type is TokenType.TEXT:
            self._handle_text(token)
        elif token.type is TokenType.INSTRUCTION:
            self._handle_instruction(token)
        else:
            # Comments carry nothing the tree keeps
            self._seen_content = True

    def _new_element(self, token: Token) -> XMLElement:
        self._seen_content = True
        self.elements_created += 1
        return XMLElement(name=token.value, attributes=dict(token.attributes))

    def _check_second_root(self, token: Token) -> None:
        if not self._fragment and not self._stack and self._top_level:
            raise UnexpectedContentError(
                f"Document has more than one top-level element; found <{token.value}> "
                f"after <{self._top_level[0].name}>",
                token.position
            )

    def _attach(self, element: XMLElement) -> None:
        if self._stack:
            self._stack[-1].element.add_child(element)
        else:
            self._top_level.append(element)

    def _handle_open_tag(self, token: Token) -> None:
        self._check_second_root(token)
        max_depth = self.config.max_depth
        if max_depth is not None and len(self._stack) >= max_depth:
            raise NestingTooDeepError(max_depth, token.position)
        self._stack.append(_OpenElement(self._new_element(token)))

    def _handle_self_closing_tag(self, token: Token) -> None:
        self._check_second_root(token)
        max_depth = self.config.max_depth
        if max_depth is not None and len(self._stack) >= max_depth:
            raise NestingTooDeepError(max_depth, token.position)
        self._attach(self._new_element(token))

    def _handle_close_tag(self, token: Token) -> None:
        if not self._stack:
            raise MismatchedTagError(None, token.value, token.position)

        expected = self._stack[-1].element.name
        if expected != token.value:
            raise MismatchedTagError(expected, token.value, token.position)

        self._attach(self._stack.pop().finish())

    def _handle_text(self, token: Token) -> None:
        if self._stack:
            self._stack[-1].text_parts.append(token.value)
            return

        if self._fragment:
            self._top_level_text.append(token.value)
        elif token.value.strip(WHITESPACE):
            raise UnexpectedContentError(
                "Text is not allowed outside the root element", token.position
            )

    def _handle_instruction(self, token: Token) -> None:
        # Only a declaration before any other markup is kept
        if token.target == "xml" and not self._seen_content:
            self._declaration = XMLDeclaration.from_instruction(token.value[3:].strip())
        self._seen_content = True
