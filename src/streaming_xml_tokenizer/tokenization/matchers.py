"""Lexical matchers for XML constructs.

Each matcher describes the textual shape of one construct and is applied
anchored at a given offset of the document. A matcher returns a
``MatchResult`` (the matched span plus its named captures) or ``None``.

The tables at the bottom of the module drive classification and dispatch, so
supporting another construct means adding a pattern and a table row.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, Optional, Pattern, Tuple


class ConstructKind(Enum):
    """Lexical units recognized between ``<`` and ``>``."""

    DECLARATION = auto()
    PROCESSING_INSTRUCTION = auto()
    COMMENT = auto()
    DOCTYPE = auto()
    CDATA = auto()
    TAG = auto()


@dataclass(frozen=True)
class MatchResult:
    """Matched span of the document plus named captures.

    ``start`` and ``end`` are 0-based slice offsets (``end`` exclusive).
    """

    start: int
    end: int
    fields: Dict[str, Optional[str]] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Optional[str]:
        return self.fields.get(name)

    @property
    def first_position(self) -> int:
        """1-based position of the first matched character."""
        return self.start + 1

    @property
    def last_position(self) -> int:
        """1-based position of the last matched character."""
        return self.end


Matcher = Callable[[str, int], Optional[MatchResult]]


def _from_regex(match: Optional["re.Match[str]"]) -> Optional[MatchResult]:
    if match is None:
        return None
    return MatchResult(match.start(), match.end(), match.groupdict())


# Plain text, then "<", optional "/", tag body, optional "/", ">"
TAG_REGION = re.compile(
    r"(?P<text>[^<]*)<(?P<end_slash>/?)(?P<body>[^>]*?)(?P<self_close>/?)>"
)
TAG_TERMINATOR = re.compile(r"(?P<self_close>/?)>")
PROCESSING_INSTRUCTION = re.compile(r"<\?(?P<body>.*?)\?>", re.DOTALL)
COMMENT = re.compile(r"<!--(?P<body>.*?)-->", re.DOTALL)
CDATA = re.compile(r"<!\[CDATA\[(?P<body>.*?)\]\]>", re.DOTALL)
WHITESPACE_ONLY = re.compile(r"\s*\Z")

# Attribute pairs, one pattern per quote style
ATTRIBUTE_DOUBLE_QUOTED = re.compile(r'(?P<key>[\w:-]+)\s*=\s*"(?P<value>.*?)"', re.DOTALL)
ATTRIBUTE_SINGLE_QUOTED = re.compile(r"(?P<key>[\w:-]+)\s*=\s*'(?P<value>.*?)'", re.DOTALL)
ATTRIBUTE_PATTERNS: Tuple[Pattern[str], ...] = (
    ATTRIBUTE_DOUBLE_QUOTED,
    ATTRIBUTE_SINGLE_QUOTED,
)

# Complete quoted values, consumed left to right; an opener left over after
# removing them has no closing quote
QUOTED_VALUE = re.compile(r"""=\s*(?:"[^"]*"|'[^']*')""")
OPEN_QUOTED_VALUE = re.compile(r"""=\s*["']""")

TAG_NAME_END = re.compile(r"\s")


def match_tag_region(document: str, pos: int) -> Optional[MatchResult]:
    """Match leading text and the next ``<...>`` region starting at ``pos``."""
    return _from_regex(TAG_REGION.match(document, pos))


def find_tag_terminator(document: str, pos: int) -> Optional[MatchResult]:
    """Find the next ``>`` or ``/>`` at or after ``pos``."""
    return _from_regex(TAG_TERMINATOR.search(document, pos))


def match_processing_instruction(document: str, pos: int) -> Optional[MatchResult]:
    return _from_regex(PROCESSING_INSTRUCTION.match(document, pos))


def match_comment(document: str, pos: int) -> Optional[MatchResult]:
    return _from_regex(COMMENT.match(document, pos))


def match_cdata(document: str, pos: int) -> Optional[MatchResult]:
    return _from_regex(CDATA.match(document, pos))


def is_whitespace_from(document: str, pos: int) -> bool:
    """True if everything from ``pos`` to the end is whitespace."""
    return WHITESPACE_ONLY.match(document, pos) is not None


def has_open_quote(tag_text: str) -> bool:
    """True if ``tag_text`` stops inside a quoted attribute value."""
    return OPEN_QUOTED_VALUE.search(QUOTED_VALUE.sub("", tag_text)) is not None


# DOCTYPE declarations

_DOCTYPE_ROOT = r"<!DOCTYPE\s+(?P<root>[^\s\[>]+)"
_SYSTEM_ID = r"\s+(?P<kind>SYSTEM)\s+(?P<q1>[\"'])(?P<uri>.*?)(?P=q1)"
_PUBLIC_ID = (
    r"\s+(?P<kind>PUBLIC)\s+(?P<q1>[\"'])(?P<public_id>.*?)(?P=q1)"
    r"\s+(?P<q2>[\"'])(?P<uri>.*?)(?P=q2)"
)
_BEFORE_SUBSET = r"\s*(?=\[)"
_DECLARATION_END = re.compile(r"\s*>")


@dataclass(frozen=True)
class DoctypeShape:
    """One accepted DOCTYPE form.

    ``head`` matches from ``<!DOCTYPE`` up to the ``[`` of the internal
    subset, or through the closing ``>`` when there is no subset.
    """

    name: str
    head: Pattern[str]
    internal_subset: bool


DOCTYPE_SHAPES: Tuple[DoctypeShape, ...] = (
    DoctypeShape(
        "system_with_subset",
        re.compile(_DOCTYPE_ROOT + _SYSTEM_ID + _BEFORE_SUBSET, re.DOTALL),
        True,
    ),
    DoctypeShape(
        "public_with_subset",
        re.compile(_DOCTYPE_ROOT + _PUBLIC_ID + _BEFORE_SUBSET, re.DOTALL),
        True,
    ),
    DoctypeShape(
        "subset_only",
        re.compile(_DOCTYPE_ROOT + _BEFORE_SUBSET, re.DOTALL),
        True,
    ),
    DoctypeShape(
        "system",
        re.compile(_DOCTYPE_ROOT + _SYSTEM_ID + r"\s*>", re.DOTALL),
        False,
    ),
    DoctypeShape(
        "public",
        re.compile(_DOCTYPE_ROOT + _PUBLIC_ID + r"\s*>", re.DOTALL),
        False,
    ),
)


def find_balanced_bracket(document: str, pos: int) -> int:
    """Return the offset just past the ``]`` closing the ``[`` at ``pos``.

    Returns -1 when the brackets never balance.
    """
    depth = 0
    for index in range(pos, len(document)):
        char = document[index]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index + 1
    return -1


def _match_doctype_shape(
    shape: DoctypeShape, document: str, pos: int
) -> Optional[MatchResult]:
    head = shape.head.match(document, pos)
    if head is None:
        return None

    captured = {
        name: value for name, value in head.groupdict().items()
        if not name.startswith("q")
    }
    captured["shape"] = shape.name
    if not shape.internal_subset:
        return MatchResult(head.start(), head.end(), captured)

    subset_end = find_balanced_bracket(document, head.end())
    if subset_end < 0:
        return None
    tail = _DECLARATION_END.match(document, subset_end)
    if tail is None:
        return None
    captured["internal_subset"] = document[head.end():subset_end]
    return MatchResult(head.start(), tail.end(), captured)


def match_doctype(document: str, pos: int) -> Optional[MatchResult]:
    """Try each DOCTYPE shape in order; the first that matches wins."""
    for shape in DOCTYPE_SHAPES:
        result = _match_doctype_shape(shape, document, pos)
        if result is not None:
            return result
    return None


# Classification by the first characters of the tag body, checked in order
CONSTRUCT_PREFIXES: Tuple[Tuple[Pattern[str], ConstructKind], ...] = (
    (re.compile(r"\?xml\s"), ConstructKind.DECLARATION),
    (re.compile(r"\?"), ConstructKind.PROCESSING_INSTRUCTION),
    (re.compile(r"!--"), ConstructKind.COMMENT),
    (re.compile(r"!DOCTYPE"), ConstructKind.DOCTYPE),
    (re.compile(r"!\[CDATA\["), ConstructKind.CDATA),
)

# Matchers that re-locate a construct's exact span from its "<"
CONSTRUCT_MATCHERS: Dict[ConstructKind, Matcher] = {
    ConstructKind.DECLARATION: match_processing_instruction,
    ConstructKind.PROCESSING_INSTRUCTION: match_processing_instruction,
    ConstructKind.COMMENT: match_comment,
    ConstructKind.DOCTYPE: match_doctype,
    ConstructKind.CDATA: match_cdata,
}


def classify(tag_body: str) -> ConstructKind:
    """Decide which construct a raw tag body starts."""
    for prefix, kind in CONSTRUCT_PREFIXES:
        if prefix.match(tag_body):
            return kind
    return ConstructKind.TAG
