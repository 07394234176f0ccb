"""Single-pass XML scanner.

This module implements the scan loop that walks an in-memory document from
left to right, classifies every ``<...>`` region, tracks open tags on a stack
and delivers events with their source positions to a handler.

All per-call state lives in a ``ScanFrame`` created by ``XMLScanner.scan``,
so a scanner can be reused for any number of documents.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..handlers.base import HandlerCapabilities, mirror_parse_attributes
from ..shared import (
    ErrorKind,
    ParseDiagnostic,
    ParserOptions,
    ScanResult,
    XMLSyntaxError,
    get_logger,
)
from .entities import EntityTable
from .matchers import (
    CONSTRUCT_MATCHERS,
    ConstructKind,
    MatchResult,
    classify,
    find_tag_terminator,
    has_open_quote,
    is_whitespace_from,
    match_tag_region,
)
from .tags import PI_TEXT_KEY, Doctype, Tag, parse_tag

# Reported when a construct's own matcher cannot find its end
CONSTRUCT_ERRORS: Dict[ConstructKind, ErrorKind] = {
    ConstructKind.DECLARATION: ErrorKind.DECL_ERROR,
    ConstructKind.PROCESSING_INSTRUCTION: ErrorKind.PI_ERROR,
    ConstructKind.COMMENT: ErrorKind.COMMENT_ERROR,
    ConstructKind.DOCTYPE: ErrorKind.DTD_ERROR,
    ConstructKind.CDATA: ErrorKind.CDATA_ERROR,
}


@dataclass
class ScanFrame:
    """Mutable state of one scan.

    Offsets are 0-based; ``match_end`` is exclusive.
    """

    document: str
    callbacks: HandlerCapabilities
    result: ScanResult
    pos: int = 0
    match_start: int = 0
    match_end: int = 0
    end_slash: str = ""
    tag_text: str = ""
    self_close: str = ""
    stack: List[str] = field(default_factory=list)
    aborted: bool = False

    def push(self, name: str) -> None:
        self.stack.append(name)
        statistics = self.result.statistics
        statistics.max_stack_depth = max(statistics.max_stack_depth, len(self.stack))

    def pop(self) -> Optional[str]:
        return self.stack.pop() if self.stack else None


class XMLScanner:
    """Event-driven XML tokenizer.

    Args:
        handler: Object with any of the callbacks ``text``, ``start_tag``,
            ``end_tag``, ``comment``, ``cdata``, ``pi``, ``decl``, ``dtd``
        options: Text post-processing and error reporting options
    """

    def __init__(self, handler: Any = None, options: Optional[ParserOptions] = None) -> None:
        self.handler = handler
        self.options = options or ParserOptions()
        self.entities = EntityTable(self.options.extra_entities)
        self.logger = get_logger(__name__, self.options.correlation_id, "xml_scanner")

        self._constructs: Dict[ConstructKind, Callable[[ScanFrame], None]] = {
            ConstructKind.DECLARATION: self._scan_declaration,
            ConstructKind.PROCESSING_INSTRUCTION: self._scan_processing_instruction,
            ConstructKind.COMMENT: self._scan_comment,
            ConstructKind.DOCTYPE: self._scan_doctype,
            ConstructKind.CDATA: self._scan_cdata,
            ConstructKind.TAG: self._scan_tag,
        }

    def scan(self, document: str, parse_attributes: bool = True) -> ScanResult:
        """Scan ``document`` and deliver its events to the handler.

        Args:
            document: Complete XML text
            parse_attributes: Mirrored onto the handler as ``parse_attributes``

        Returns:
            ScanResult with the reported errors and scan statistics

        Raises:
            TypeError: If ``document`` is not a string
            XMLSyntaxError: On the first error when the ``strict`` option is set
        """
        if not isinstance(document, str):
            raise TypeError(
                f"document must be str, not {type(document).__name__}"
            )

        start_time = time.time()
        mirror_parse_attributes(self.handler, parse_attributes)
        frame = ScanFrame(
            document=document,
            callbacks=HandlerCapabilities.from_handler(self.handler),
            result=ScanResult(handler=self.handler),
        )
        frame.result.statistics.characters_processed = len(document)

        logger = self.logger.bind(document_length=len(document))
        logger.debug("Starting scan", extra={"callbacks": frame.callbacks.supported})

        while not frame.aborted:
            if not self._next_region(frame):
                break
            self._constructs[classify(frame.tag_text)](frame)
            if frame.aborted:
                break
            frame.pos = frame.match_end

        result = frame.result
        result.aborted = frame.aborted
        result.statistics.processing_time_ms = (time.time() - start_time) * 1000

        logger.debug(
            "Scan finished",
            extra={
                "success": result.success,
                "aborted": result.aborted,
                "error_count": result.error_count,
                "event_count": result.statistics.total_events,
                "processing_time_ms": result.statistics.processing_time_ms,
            }
        )
        return result

    # Scan loop helpers

    def _next_region(self, frame: ScanFrame) -> bool:
        """Locate the next ``<...>`` region and emit the text before it.

        Returns False when the document is exhausted or cannot be scanned
        any further.
        """
        region = match_tag_region(frame.document, frame.pos)
        if region is None:
            self._check_document_end(frame)
            return False

        leading = region["text"] or ""
        if leading:
            text = self._clean_text(leading)
            if text:
                self._emit(frame, "text", text, region.first_position,
                           region.start + len(leading))

        frame.pos = region.start + len(leading)
        frame.match_start = frame.pos
        frame.match_end = region.end
        frame.end_slash = region["end_slash"] or ""
        frame.tag_text = region["body"] or ""
        frame.self_close = region["self_close"] or ""
        return True

    def _check_document_end(self, frame: ScanFrame) -> None:
        document = frame.document
        if not is_whitespace_from(document, frame.pos):
            remainder = document[frame.pos:]
            offset = len(remainder) - len(remainder.lstrip())
            self._report(frame, ErrorKind.UNPARSABLE_TEXT, frame.pos + offset + 1)
        elif frame.stack:
            self._report(
                frame,
                ErrorKind.INCOMPLETE_DOCUMENT,
                frame.pos + 1,
                open_tags=list(frame.stack),
            )

    # Event and error delivery

    def _emit(self, frame: ScanFrame, event: str, data: Any, start: int, end: int) -> None:
        frame.result.statistics.count_event(event)
        callback = getattr(frame.callbacks, event)
        if callback is not None:
            callback(data, start, end)

    def _report(
        self,
        frame: ScanFrame,
        kind: ErrorKind,
        position: int,
        tag_name: Optional[str] = None,
        **details: Any
    ) -> None:
        message = kind.format(tag_name)
        if tag_name is not None:
            details["tag_name"] = tag_name
        diagnostic = ParseDiagnostic(kind, message, position, details)
        frame.result.errors.append(diagnostic)
        if kind.fatal:
            frame.aborted = True

        self.logger.warning(
            message,
            extra={"error_kind": kind.name, "position": position, "fatal": kind.fatal}
        )
        if self.options.error_handler is not None:
            self.options.error_handler(message, position)
        if self.options.strict:
            raise XMLSyntaxError(diagnostic)

    # Text post-processing

    def _clean_text(self, text: str) -> str:
        if self.options.strip_whitespace:
            text = text.strip()
        if self.options.expand_entities:
            text = self.entities.expand(text)
        return text

    def _expand_value(self, value: str) -> str:
        return self.entities.expand(value)

    def _parse_tag(self, text: str) -> Tag:
        return parse_tag(text, self._expand_value if self.options.expand_entities else None)

    # Construct parsers

    def _relocate(self, frame: ScanFrame, kind: ConstructKind) -> Optional[MatchResult]:
        """Match the construct's exact span from its ``<``."""
        match = CONSTRUCT_MATCHERS[kind](frame.document, frame.match_start)
        if match is None:
            self._report(frame, CONSTRUCT_ERRORS[kind], frame.match_start + 1)
            return None
        frame.match_end = match.end
        return match

    def _scan_declaration(self, frame: ScanFrame) -> None:
        match = self._relocate(frame, ConstructKind.DECLARATION)
        if match is None:
            return

        if match.start != 0:
            self._report(frame, ErrorKind.DECL_NOT_AT_START, match.first_position)

        tag = self._parse_tag(match["body"] or "")
        if tag.get("version") is None:
            self._report(frame, ErrorKind.DECL_ATTR_ERROR, match.first_position)

        self._emit(frame, "decl", tag, match.first_position, match.last_position)

    def _scan_processing_instruction(self, frame: ScanFrame) -> None:
        match = self._relocate(frame, ConstructKind.PROCESSING_INSTRUCTION)
        if match is None:
            return

        body = match["body"] or ""
        tag = self._parse_tag(body)
        instruction = body[len(tag.name):]
        if instruction:
            if tag.attributes is None:
                tag.attributes = {}
            tag.attributes[PI_TEXT_KEY] = instruction

        self._emit(frame, "pi", tag, match.first_position, match.last_position)

    def _scan_comment(self, frame: ScanFrame) -> None:
        match = self._relocate(frame, ConstructKind.COMMENT)
        if match is None:
            return
        text = self._clean_text(match["body"] or "")
        self._emit(frame, "comment", text, match.first_position, match.last_position)

    def _scan_cdata(self, frame: ScanFrame) -> None:
        match = self._relocate(frame, ConstructKind.CDATA)
        if match is None:
            return
        self._emit(frame, "cdata", match["body"] or "", match.first_position, match.last_position)

    def _scan_doctype(self, frame: ScanFrame) -> None:
        match = self._relocate(frame, ConstructKind.DOCTYPE)
        if match is None:
            return

        doctype = Doctype(
            root=match["root"] or "",
            kind=match["kind"],
            public_id=match["public_id"],
            uri=match["uri"],
            internal_subset=match["internal_subset"],
        )
        self._emit(frame, "dtd", doctype, match.first_position, match.last_position)

    def _extend_past_quoted_gt(self, frame: ScanFrame) -> bool:
        """Grow the tag while its text stops inside a quoted value.

        ``<a x="1>2">`` is first matched as ``<a x="1>``; the text up to the
        next ``>`` or ``/>`` is appended until every quote is closed.
        """
        document = frame.document
        while has_open_quote(frame.tag_text):
            terminator = find_tag_terminator(document, frame.match_end)
            if terminator is None:
                self._report(
                    frame,
                    ErrorKind.MALFORMED_XML,
                    frame.match_start + 1,
                    reason="unterminated attribute value",
                )
                return False
            # The old "/>" or ">" is part of the attribute value
            text_end = frame.match_end - 1 - len(frame.self_close)
            frame.tag_text += document[text_end:terminator.start]
            frame.self_close = terminator["self_close"] or ""
            frame.match_end = terminator.end
        return True

    def _scan_tag(self, frame: ScanFrame) -> None:
        if not self._extend_past_quoted_gt(frame):
            return

        tag = self._parse_tag(frame.tag_text)
        start, end = frame.match_start + 1, frame.match_end

        if frame.end_slash:
            if tag.has_attributes:
                self._report(
                    frame, ErrorKind.END_TAG_ATTRIBUTES_INVALID, start, tag_name=tag.name
                )
            expected = frame.pop()
            if expected != tag.name:
                self._report(
                    frame,
                    ErrorKind.UNMATCHED_TAG,
                    start,
                    tag_name=tag.name,
                    expected_tag=expected,
                )
            self._emit(frame, "end_tag", tag, start, end)
            return

        frame.push(tag.name)
        self._emit(frame, "start_tag", tag, start, end)
        if frame.self_close:
            frame.pop()
            self._emit(frame, "end_tag", tag, start, end)
