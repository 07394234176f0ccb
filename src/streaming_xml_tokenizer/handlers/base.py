"""Handler capability set.

A handler is any object exposing some of the callbacks named in
``EVENT_CALLBACKS``. Callbacks it does not define are skipped. The scanner
resolves the callbacks once per scan into a ``HandlerCapabilities`` record
and checks each slot before invoking it.
"""

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from ..tokenization.tags import Doctype, Tag

TextCallback = Callable[[str, int, int], Any]
TagCallback = Callable[["Tag", int, int], Any]
DoctypeCallback = Callable[["Doctype", int, int], Any]

EVENT_CALLBACKS = (
    "text",
    "start_tag",
    "end_tag",
    "comment",
    "cdata",
    "pi",
    "decl",
    "dtd",
)


@dataclass(frozen=True)
class HandlerCapabilities:
    """Optional callback slots resolved from a handler object.

    Every callback receives the event data followed by the 1-based inclusive
    start and end positions of the construct in the document.
    """

    text: Optional[TextCallback] = None
    start_tag: Optional[TagCallback] = None
    end_tag: Optional[TagCallback] = None
    comment: Optional[TextCallback] = None
    cdata: Optional[TextCallback] = None
    pi: Optional[TagCallback] = None
    decl: Optional[TagCallback] = None
    dtd: Optional[DoctypeCallback] = None

    @classmethod
    def from_handler(cls, handler: Any) -> "HandlerCapabilities":
        """Pick up every callable callback attribute of ``handler``."""
        if handler is None:
            return cls()
        slots = {}
        for slot in fields(cls):
            callback = getattr(handler, slot.name, None)
            if callable(callback):
                slots[slot.name] = callback
        return cls(**slots)

    @property
    def supported(self) -> tuple:
        """Names of the callbacks that will be invoked."""
        return tuple(name for name in EVENT_CALLBACKS if getattr(self, name) is not None)


def mirror_parse_attributes(handler: Any, parse_attributes: bool) -> None:
    """Record the caller's attribute-parsing request on the handler.

    Handlers that refuse attribute assignment (``__slots__``, read-only
    properties) are left alone.
    """
    if handler is None:
        return
    try:
        handler.parse_attributes = parse_attributes
    except AttributeError:
        pass


class ContentHandler:
    """Convenience base class: every callback is a no-op.

    Subclass and override the events of interest. Subclassing is optional;
    any object with some of the callbacks works as a handler.
    """

    parse_attributes: bool = True

    def text(self, text: str, start: int, end: int) -> None:
        pass

    def start_tag(self, tag: "Tag", start: int, end: int) -> None:
        pass

    def end_tag(self, tag: "Tag", start: int, end: int) -> None:
        pass

    def comment(self, text: str, start: int, end: int) -> None:
        pass

    def cdata(self, text: str, start: int, end: int) -> None:
        pass

    def pi(self, tag: "Tag", start: int, end: int) -> None:
        pass

    def decl(self, tag: "Tag", start: int, end: int) -> None:
        pass

    def dtd(self, doctype: "Doctype", start: int, end: int) -> None:
        pass
