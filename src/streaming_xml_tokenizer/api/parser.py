"""Parser API for event-driven XML tokenization.

This module provides the public entry points, from the module-level
``parse_string`` function to the reusable, configurable ``XMLParser`` class.
"""

import time
from typing import Any, Dict, Optional

from streaming_xml_tokenizer.handlers import EventRecorder
from streaming_xml_tokenizer.shared import (
    ParserOptions,
    ScanResult,
    XMLSyntaxError,
    get_logger,
)
from streaming_xml_tokenizer.tokenization import XMLScanner

MS_PER_SECOND = 1000  # Milliseconds per second conversion


def parse_string(
    document: str,
    handler: Any = None,
    parse_attributes: bool = True,
    **options: Any
) -> ScanResult:
    """Scan an XML string and deliver its events to ``handler``.

    Args:
        document: Complete XML text
        handler: Event handler; an ``EventRecorder`` is created when omitted
        parse_attributes: Mirrored onto the handler as ``parse_attributes``
        **options: ``ParserOptions`` fields

    Returns:
        ScanResult whose ``handler`` attribute is the handler that received
        the events

    Examples:
        >>> result = parse_string('<root><item id="1">value</item></root>')
        >>> result.success
        True
        >>> result.handler.kinds
        ['start_tag', 'start_tag', 'text', 'end_tag', 'end_tag']
    """
    parser = XMLParser(handler if handler is not None else EventRecorder(), **options)
    return parser.parse(document, parse_attributes=parse_attributes)


class XMLParser:
    """Configured XML parser that can be reused across documents.

    Every call to ``parse`` scans with fresh state, so a document that left
    tags open never affects the next one.

    Attributes:
        handler: Object receiving the events
        options: Current parser options
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> recorder = EventRecorder()
        >>> parser = XMLParser(recorder, strip_whitespace=False)
        >>> parser.parse("<a> x </a>").success
        True
        >>> recorder.payloads("text")
        [' x ']
    """

    def __init__(
        self,
        handler: Any = None,
        options: Optional[ParserOptions] = None,
        **option_overrides: Any
    ) -> None:
        """Initialize the parser.

        Args:
            handler: Event handler
            options: Parser options (defaults to ``ParserOptions()``)
            **option_overrides: Individual ``ParserOptions`` fields applied on
                top of ``options``
        """
        options = options or ParserOptions()
        if option_overrides:
            options = options.override(**option_overrides)

        self.handler = handler
        self.options = options
        self.correlation_id = options.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_parser")
        self._scanner = XMLScanner(handler, options)

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    def parse(self, document: str, parse_attributes: bool = True) -> ScanResult:
        """Scan ``document``, delivering its events to the handler.

        Args:
            document: Complete XML text; bytes must be decoded by the caller
            parse_attributes: Mirrored onto the handler as ``parse_attributes``

        Returns:
            ScanResult with errors and statistics

        Raises:
            TypeError: If ``document`` is not a string
            XMLSyntaxError: On the first error when ``strict`` is set
        """
        start_time = time.time()
        self._parse_count += 1
        try:
            result = self._scanner.scan(document, parse_attributes=parse_attributes)
        except XMLSyntaxError as e:
            self.logger.error(
                "Strict parse stopped",
                extra={"error_kind": e.kind.name, "position": e.position}
            )
            raise
        except Exception:
            self.logger.exception("Parse failed", extra={"total_parses": self._parse_count})
            raise
        finally:
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND

        if result.success:
            self._successful_parses += 1

        self.logger.info(
            "Parse completed",
            extra={
                "success": result.success,
                "error_count": result.error_count,
                "event_count": result.statistics.total_events,
                "processing_time_ms": result.statistics.processing_time_ms,
                "total_parses": self._parse_count,
            }
        )
        return result

    def reconfigure(
        self,
        options: Optional[ParserOptions] = None,
        handler: Any = None,
        **option_overrides: Any
    ) -> None:
        """Swap options and/or handler for subsequent parses."""
        new_options = options or self.options
        if option_overrides:
            new_options = new_options.override(**option_overrides)
        if handler is not None:
            self.handler = handler

        self.options = new_options
        self.correlation_id = new_options.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_parser")
        self._scanner = XMLScanner(self.handler, new_options)

        self.logger.debug(
            "Parser reconfigured",
            extra={
                "options_updated": options is not None or bool(option_overrides),
                "handler_updated": handler is not None,
            }
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._total_processing_time = 0.0
        self._successful_parses = 0

        self.logger.debug("Parser statistics reset")
