"""Event handlers.

Key Components:
    HandlerCapabilities: Optional callback slots resolved from any handler object
    ContentHandler: Base class with no-op callbacks
    EventRecorder: Handler that keeps every event in a list
"""

from .base import (
    EVENT_CALLBACKS,
    ContentHandler,
    HandlerCapabilities,
    mirror_parse_attributes,
)
from .recorder import Event, EventRecorder

__all__ = [
    "EVENT_CALLBACKS",
    "ContentHandler",
    "Event",
    "EventRecorder",
    "HandlerCapabilities",
    "mirror_parse_attributes",
]
