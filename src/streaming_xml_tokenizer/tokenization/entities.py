"""Entity table and entity expansion.

The table maps the five predefined XML entities to their replacement text and
describes numeric character references as patterns with one capture group
plus a conversion. Expansion is a single left-to-right pass, so the output of
one replacement is never expanded again (``&amp;lt;`` becomes ``&lt;``).
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Pattern, Tuple

PREDEFINED_ENTITIES: Dict[str, str] = {
    "&lt;": "<",
    "&gt;": ">",
    "&amp;": "&",
    "&quot;": '"',
    "&apos;": "'",
}

MAX_CODE_POINT = 0x10FFFF


def _code_point_to_char(value: int) -> Optional[str]:
    if value > MAX_CODE_POINT or 0xD800 <= value <= 0xDFFF:
        return None
    return chr(value)


def decimal_to_char(digits: str) -> Optional[str]:
    """Convert the digits of ``&#NN;`` to a character, or None if out of range."""
    return _code_point_to_char(int(digits, 10))


def hexadecimal_to_char(digits: str) -> Optional[str]:
    """Convert the digits of ``&#xHH;`` to a character, or None if out of range."""
    return _code_point_to_char(int(digits, 16))


@dataclass(frozen=True)
class NumericEntityRule:
    """Numeric reference shape: a pattern with one capture group and a conversion."""

    pattern: str
    convert: Callable[[str], Optional[str]]


NUMERIC_ENTITY_RULES: Tuple[NumericEntityRule, ...] = (
    NumericEntityRule(r"&#([0-9]+);", decimal_to_char),
    NumericEntityRule(r"&#x([0-9a-fA-F]+);", hexadecimal_to_char),
)


class EntityTable:
    """Literal entities plus numeric rules, compiled into one alternation.

    Args:
        extra_entities: Additional named entities keyed by bare name
            (``"nbsp"``), merged over the predefined ones
    """

    def __init__(self, extra_entities: Optional[Mapping[str, str]] = None) -> None:
        self.literals: Dict[str, str] = dict(PREDEFINED_ENTITIES)
        for name, replacement in (extra_entities or {}).items():
            self.literals[f"&{name};"] = replacement
        self.rules: Tuple[NumericEntityRule, ...] = NUMERIC_ENTITY_RULES

        alternatives: List[str] = [rule.pattern for rule in self.rules]
        # Longest first so a literal is never shadowed by its own prefix
        alternatives.extend(
            re.escape(literal)
            for literal in sorted(self.literals, key=len, reverse=True)
        )
        self._pattern: Pattern[str] = re.compile("|".join(alternatives))

    def __contains__(self, literal: str) -> bool:
        return literal in self.literals

    def _replace(self, match: "re.Match[str]") -> str:
        for index, rule in enumerate(self.rules, start=1):
            digits = match.group(index)
            if digits is not None:
                converted = rule.convert(digits)
                return match.group(0) if converted is None else converted
        return self.literals[match.group(0)]

    def expand(self, text: str) -> str:
        """Replace every known entity reference in ``text``."""
        if "&" not in text:
            return text
        return self._pattern.sub(self._replace, text)


DEFAULT_ENTITY_TABLE = EntityTable()


def expand_entities(text: str, table: Optional[EntityTable] = None) -> str:
    """Expand entity references using ``table`` or the predefined entities."""
    return (table or DEFAULT_ENTITY_TABLE).expand(text)
