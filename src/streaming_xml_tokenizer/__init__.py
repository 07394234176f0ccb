"""Streaming XML Tokenizer.

A SAX-style XML tokenizer: scans an in-memory document once and delivers
start tag, end tag, text, comment, CDATA, processing instruction,
declaration and DOCTYPE events to a handler, each with its source position.

Progressive API Disclosure:
- Level 1: Simple function - parse_string()
- Level 2: Configured, reusable parser - XMLParser class
- Level 3: Scanner and handler building blocks - XMLScanner, HandlerCapabilities
"""

__version__ = "0.1.0"
__author__ = "Streaming XML Tokenizer Team"

from .api import XMLParser, parse_string
from .handlers import ContentHandler, Event, EventRecorder
from .shared import (
    ConfigValidationError,
    ErrorKind,
    ParseDiagnostic,
    ParserOptions,
    ScanResult,
    TokenizerError,
    XMLSyntaxError,
)
from .tokenization import Doctype, Tag, XMLScanner

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing function
    "parse_string",

    # Level 2: Configured parser
    "XMLParser",
    "ParserOptions",

    # Level 3: Building blocks
    "XMLScanner",
    "ContentHandler",
    "EventRecorder",
    "Event",

    # Event payloads and results
    "Tag",
    "Doctype",
    "ScanResult",
    "ParseDiagnostic",
    "ErrorKind",

    # Exceptions
    "TokenizerError",
    "XMLSyntaxError",
    "ConfigValidationError",
]
