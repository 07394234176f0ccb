"""Tag and DOCTYPE data passed to handlers, and the tag text parser."""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .matchers import ATTRIBUTE_PATTERNS, TAG_NAME_END

# Attribute key holding the free text of a processing instruction
PI_TEXT_KEY = "_text"


@dataclass
class Tag:
    """Tag name plus attributes.

    ``attributes`` is None when the tag has none, never an empty dict.
    """

    name: str
    attributes: Optional[Dict[str, str]] = None

    @property
    def has_attributes(self) -> bool:
        return self.attributes is not None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        if self.attributes is None:
            return default
        return self.attributes.get(key, default)


@dataclass
class Doctype:
    """A DOCTYPE declaration.

    Attributes:
        root: Name of the document element
        kind: "SYSTEM", "PUBLIC" or None when only an internal subset is given
        public_id: Public identifier of a PUBLIC declaration
        uri: System identifier
        internal_subset: The bracketed internal subset, brackets included
    """

    root: str
    kind: Optional[str] = None
    public_id: Optional[str] = None
    uri: Optional[str] = None
    internal_subset: Optional[str] = None

    def as_dict(self) -> Dict[str, str]:
        """Underscore-keyed mapping of the fields that are present."""
        keys = (
            ("_root", self.root),
            ("_type", self.kind),
            ("_name", self.public_id),
            ("_uri", self.uri),
            ("_internal", self.internal_subset),
        )
        return {key: value for key, value in keys if value is not None}


def parse_tag(text: str, expand: Optional[Callable[[str], str]] = None) -> Tag:
    """Extract the tag name and attributes from raw tag text.

    Args:
        text: Text between ``<`` (or ``</``) and ``>`` (or ``/>``)
        expand: Applied to every attribute value, e.g. entity expansion

    Returns:
        Tag whose attribute keys are lowercased
    """
    name = TAG_NAME_END.split(text, maxsplit=1)[0]

    attributes: Dict[str, str] = {}
    for pattern in ATTRIBUTE_PATTERNS:
        for match in pattern.finditer(text):
            value = match.group("value")
            attributes[match.group("key").lower()] = expand(value) if expand else value

    return Tag(name=name, attributes=attributes or None)
