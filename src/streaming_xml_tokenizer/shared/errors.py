"""Error kinds and exceptions for XML tokenization.

Every problem the scanner detects is one of the ``ErrorKind`` members below.
Fatal kinds stop the scan loop; the others are reported and scanning resumes
after the offending construct.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .result import ParseDiagnostic


class ErrorKind(Enum):
    """Kinds of errors reported while scanning a document."""

    MALFORMED_XML = ("Error Parsing XML", True)
    UNPARSABLE_TEXT = ("Unparsable Text", True)
    DECL_ERROR = ("Error Parsing XMLDecl", True)
    DECL_NOT_AT_START = ("XMLDecl not at start of document", False)
    DECL_ATTR_ERROR = ("Invalid XMLDecl attributes", False)
    PI_ERROR = ("Error Parsing Processing Instruction", True)
    COMMENT_ERROR = ("Error Parsing Comment", True)
    CDATA_ERROR = ("Error Parsing CDATA", True)
    DTD_ERROR = ("Error Parsing DTD", True)
    END_TAG_ATTRIBUTES_INVALID = ("End Tag Attributes Invalid", False)
    UNMATCHED_TAG = ("Unbalanced Tag", False)
    INCOMPLETE_DOCUMENT = ("Incomplete XML Document", True)

    def __init__(self, message: str, fatal: bool) -> None:
        self.message = message
        self.fatal = fatal

    def format(self, tag_name: Optional[str] = None) -> str:
        """Render the user-facing message, naming the end tag when given."""
        if tag_name is None:
            return self.message
        return f"{self.message} (/{tag_name})"


class TokenizerError(Exception):
    """Base exception for all package errors."""


class XMLSyntaxError(TokenizerError):
    """Raised in strict mode on the first error found in a document."""

    def __init__(self, diagnostic: "ParseDiagnostic") -> None:
        super().__init__(f"{diagnostic.message} at position {diagnostic.position}")
        self.diagnostic = diagnostic

    @property
    def kind(self) -> ErrorKind:
        return self.diagnostic.kind

    @property
    def position(self) -> int:
        return self.diagnostic.position
