"""Handler that records every event it receives."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Union

from .base import EVENT_CALLBACKS

if TYPE_CHECKING:
    from ..tokenization.tags import Doctype, Tag

EventData = Union[str, "Tag", "Doctype"]


@dataclass(frozen=True)
class Event:
    """One delivered event: callback name, payload and source span."""

    kind: str
    data: EventData
    start: int
    end: int


class EventRecorder:
    """Collect events in document order.

    Example:
        >>> from streaming_xml_tokenizer import XMLParser
        >>> recorder = EventRecorder()
        >>> XMLParser(recorder).parse("<a>hi</a>").success
        True
        >>> recorder.kinds
        ['start_tag', 'text', 'end_tag']
    """

    def __init__(self) -> None:
        self.events: List[Event] = []
        self.parse_attributes = True

    def _record(self, kind: str, data: EventData, start: int, end: int) -> None:
        self.events.append(Event(kind, data, start, end))

    def text(self, text: str, start: int, end: int) -> None:
        self._record("text", text, start, end)

    def start_tag(self, tag: "Tag", start: int, end: int) -> None:
        self._record("start_tag", tag, start, end)

    def end_tag(self, tag: "Tag", start: int, end: int) -> None:
        self._record("end_tag", tag, start, end)

    def comment(self, text: str, start: int, end: int) -> None:
        self._record("comment", text, start, end)

    def cdata(self, text: str, start: int, end: int) -> None:
        self._record("cdata", text, start, end)

    def pi(self, tag: "Tag", start: int, end: int) -> None:
        self._record("pi", tag, start, end)

    def decl(self, tag: "Tag", start: int, end: int) -> None:
        self._record("decl", tag, start, end)

    def dtd(self, doctype: "Doctype", start: int, end: int) -> None:
        self._record("dtd", doctype, start, end)

    @property
    def kinds(self) -> List[str]:
        return [event.kind for event in self.events]

    def of_kind(self, kind: str) -> List[Event]:
        if kind not in EVENT_CALLBACKS:
            raise ValueError(f"Unknown event kind: {kind}")
        return [event for event in self.events if event.kind == kind]

    def payloads(self, kind: str) -> List[Any]:
        """Event data for every event of ``kind``."""
        return [event.data for event in self.of_kind(kind)]

    def clear(self) -> None:
        self.events.clear()

    def __len__(self) -> int:
        return len(self.events)
