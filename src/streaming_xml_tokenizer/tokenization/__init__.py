"""Tokenization engine for event-driven XML scanning.

This module turns an in-memory XML document into a sequence of handler
events in a single left-to-right pass.

Key Components:
    XMLScanner: Scan loop, construct dispatcher and tag-balance tracking
    EntityTable: Predefined, numeric and caller-supplied entity expansion
    ConstructKind: The lexical units recognized between ``<`` and ``>``
    Tag, Doctype: Event payloads delivered to handlers
    parse_tag: Tag name and attribute extraction from raw tag text
"""

from .entities import (
    PREDEFINED_ENTITIES,
    EntityTable,
    expand_entities,
)
from .matchers import (
    ConstructKind,
    MatchResult,
    classify,
)
from .tags import (
    PI_TEXT_KEY,
    Doctype,
    Tag,
    parse_tag,
)
from .scanner import (
    ScanFrame,
    XMLScanner,
)

__all__ = [
    "PI_TEXT_KEY",
    "PREDEFINED_ENTITIES",
    "ConstructKind",
    "Doctype",
    "EntityTable",
    "MatchResult",
    "ScanFrame",
    "Tag",
    "XMLScanner",
    "classify",
    "expand_entities",
    "parse_tag",
]
