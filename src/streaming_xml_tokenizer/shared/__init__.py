"""Shared utilities for XML tokenization.

This module provides the configuration object, error kinds, result types and
logging helpers used by the scanner and the parser API.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ErrorHandler,
    ParserOptions,
)
from .errors import (
    ErrorKind,
    TokenizerError,
    XMLSyntaxError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticSeverity,
    ParseDiagnostic,
    ScanResult,
    ScanStatistics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "DiagnosticSeverity",
    "ErrorHandler",
    "ErrorKind",
    "ParseDiagnostic",
    "ParserOptions",
    "ScanResult",
    "ScanStatistics",
    "TokenizerError",
    "XMLSyntaxError",
    "get_logger",
]
