"""Result objects and diagnostic types for XML tokenization.

This module defines the objects returned by a scan: the diagnostics collected
for every reported error, the per-scan statistics and the overall result.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from .errors import ErrorKind


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    ERROR = auto()      # Reported, scanning continued
    FATAL = auto()      # Reported, scanning stopped


@dataclass
class ParseDiagnostic:
    """Single reported error with its source position."""

    kind: ErrorKind
    message: str
    position: int
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if self.position < 1:
            raise ValueError("Diagnostic position must be >= 1")

    @property
    def severity(self) -> DiagnosticSeverity:
        return DiagnosticSeverity.FATAL if self.kind.fatal else DiagnosticSeverity.ERROR

    @property
    def is_fatal(self) -> bool:
        return self.kind.fatal


@dataclass
class ScanStatistics:
    """Counters gathered during a single scan."""

    characters_processed: int = 0
    processing_time_ms: float = 0.0
    max_stack_depth: int = 0
    event_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total_events(self) -> int:
        return sum(self.event_counts.values())

    @property
    def events_per_second(self) -> float:
        """Calculate events delivered per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.total_events * 1000.0) / self.processing_time_ms

    @property
    def characters_per_second(self) -> float:
        """Calculate characters scanned per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    def count_event(self, event_type: str) -> None:
        """Add one event of the given type to the distribution."""
        self.event_counts[event_type] = self.event_counts.get(event_type, 0) + 1


@dataclass
class ScanResult:
    """Outcome of scanning one document.

    Events themselves are delivered to the handler; the result only records
    what went wrong and how much work was done.
    """

    errors: List[ParseDiagnostic] = field(default_factory=list)
    statistics: ScanStatistics = field(default_factory=ScanStatistics)
    aborted: bool = False
    handler: Optional[Any] = None

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def fatal_error(self) -> Optional[ParseDiagnostic]:
        """The diagnostic that stopped the scan, if any."""
        for diagnostic in self.errors:
            if diagnostic.is_fatal:
                return diagnostic
        return None

    def errors_of_kind(self, kind: ErrorKind) -> List[ParseDiagnostic]:
        return [d for d in self.errors if d.kind is kind]
