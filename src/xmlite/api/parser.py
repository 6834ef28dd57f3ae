"""Public parsing API for xmlite.

Module-level functions cover one-off parsing; :class:`XMLParser` keeps a
configuration and usage statistics for repeated parsing. Every entry point
accepts ``str`` or UTF-8 ``bytes`` and raises a
:class:`~xmlite.shared.errors.ParseError` subclass on malformed input.
"""

import threading
import time
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, Union

from xmlite.character import SourceType, decode_source
from xmlite.shared import ParseError, ParserConfig, get_logger
from xmlite.tokenization import Token, XMLTokenizer
from xmlite.tree import XMLDocument, XMLElement, XMLTreeBuilder

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion

_T = TypeVar("_T")


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


def _run_parse(
    operation: str,
    input_data: SourceType,
    config: Optional[ParserConfig],
    correlation_id: Optional[str],
    build: Callable[[XMLTreeBuilder, XMLTokenizer], _T],
) -> _T:
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    logger = get_logger(__name__, correlation_id, operation)
    start_time = time.time()

    text = ""
    try:
        text = decode_source(input_data)
        tokenizer = XMLTokenizer(text, config=config, correlation_id=correlation_id)
        builder = XMLTreeBuilder(config=config, correlation_id=correlation_id)
        result = build(builder, tokenizer)
    except ParseError as e:
        logger.warning(
            f"{operation} failed: {e}",
            extra={
                "error_kind": e.kind.name,
                "position": e.position.to_dict() if e.position else None,
                "preview": _preview(text),
            }
        )
        raise

    processing_time = (time.time() - start_time) * MS_PER_SECOND
    logger.info(
        f"{operation} completed",
        extra={
            "content_length": len(text),
            "element_count": builder.elements_created,
            "token_count": builder.tokens_consumed,
            "processing_time_ms": processing_time,
        }
    )
    return result


def parse_document(
    input_data: SourceType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> XMLDocument:
    """Parse a complete XML document.

    The input must contain exactly one root element, optionally preceded by an
    XML declaration. Comments and processing instructions are skipped.

    Args:
        input_data: XML content as string or UTF-8 bytes
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        XMLDocument wrapping the root element

    Raises:
        ParseError: If the input is not well-formed or not valid UTF-8
        TypeError: If the input is neither text nor bytes

    Examples:
        >>> document = parse_document('<?xml?><can><beans kind="fava">Cool Beans</beans></can>')
        >>> document.root.name
        'can'
        >>> document.root.find_child("beans").attr("kind")
        'fava'
    """
    return _run_parse(
        "parse_document",
        input_data,
        config,
        correlation_id,
        lambda builder, tokenizer: builder.build_document(tokenizer),
    )


def parse_fragment(
    input_data: SourceType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> XMLElement:
    """Parse one or more sibling elements.

    Returns an unnamed container element whose children are the top-level
    elements of the fragment and whose text is the top-level text.

    Examples:
        >>> fragment = parse_fragment("<a/>text<b/>")
        >>> [child.name for child in fragment.iter_children()]
        ['a', 'b']
        >>> fragment.text
        'text'
    """
    return _run_parse(
        "parse_fragment",
        input_data,
        config,
        correlation_id,
        lambda builder, tokenizer: builder.build_fragment(tokenizer),
    )


def parse(
    input_data: SourceType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> XMLDocument:
    """Parse a complete XML document; alias of :func:`parse_document`."""
    return parse_document(input_data, config=config, correlation_id=correlation_id)


def tokenize(
    input_data: SourceType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Iterator[Token]:
    """Tokenize XML input without building a tree.

    Tokens are produced lazily and exclude the END_OF_INPUT marker. Scanning stops at
    the first malformed construct, so a well-formed token stream is no
    guarantee of a well-formed document.
    """
    text = decode_source(input_data)
    return iter(XMLTokenizer(text, config=config, correlation_id=correlation_id))


class XMLParser:
    """Reusable XML parser with fixed configuration and usage statistics.

    Each call builds a fresh tokenizer and tree builder, so one parser can be
    shared between threads; only the statistics are shared state.

    Attributes:
        config: Current parser configuration
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> parser = XMLParser(ParserConfig.strict())
        >>> parser.parse_document("<root/>").root.name
        'root'
        >>> parser.statistics["successful_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize parser.

        Args:
            config: Parser configuration (defaults to ParserConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id

        self.logger = get_logger(__name__, self.correlation_id, "xml_parser")

        self._lock = threading.RLock()
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

        self.logger.info(
            "XMLParser initialized",
            extra={"config": self.config.to_dict()}
        )

    def parse_document(self, input_data: SourceType) -> XMLDocument:
        """Parse a complete document with this parser's configuration."""
        return self._timed(parse_document, input_data)

    def parse_fragment(self, input_data: SourceType) -> XMLElement:
        """Parse a fragment with this parser's configuration."""
        return self._timed(parse_fragment, input_data)

    def _timed(
        self,
        function: Callable[..., Union[XMLDocument, XMLElement]],
        input_data: SourceType
    ) -> Any:
        config = self.config
        start_time = time.time()
        succeeded = False
        try:
            result = function(input_data, config=config, correlation_id=self.correlation_id)
            succeeded = True
            return result
        finally:
            processing_time = (time.time() - start_time) * MS_PER_SECOND
            with self._lock:
                self._parse_count += 1
                self._total_processing_time += processing_time
                if succeeded:
                    self._successful_parses += 1

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the parser configuration for subsequent parses.

        Raises:
            TypeError: If ``config`` is not a ParserConfig
        """
        if not isinstance(config, ParserConfig):
            raise TypeError("config must be a ParserConfig instance")
        self.config = config

        self.logger.info(
            "Parser reconfigured",
            extra={"config": config.to_dict()}
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics.

        Returns:
            Dictionary with parse counts, success rate and timing
        """
        with self._lock:
            total = self._parse_count
            successful = self._successful_parses
            total_time = self._total_processing_time

        return {
            "total_parses": total,
            "successful_parses": successful,
            "failed_parses": total - successful,
            "success_rate": successful / total if total > 0 else 0.0,
            "total_processing_time_ms": total_time,
            "average_processing_time_ms": total_time / total if total > 0 else 0.0,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        with self._lock:
            self._parse_count = 0
            self._successful_parses = 0
            self._total_processing_time = 0.0

        self.logger.info("Parser statistics reset")
