"""Configuration for XML tokenization.

This module provides the immutable options object that controls how the
scanner post-processes text, which entities it knows and how it reports
errors.
"""

import json
import re
from collections import abc
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from .errors import TokenizerError

ErrorHandler = Callable[[str, int], None]

ENTITY_NAME_PATTERN = re.compile(r"[A-Za-z_][\w.-]*\Z")

# Fields that cannot be represented in JSON
NON_SERIALIZABLE_FIELDS = ("error_handler",)


class ConfigError(TokenizerError, ValueError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.field_name = field_name


@dataclass(frozen=True)
class ParserOptions:
    """Options recognized by the scanner.

    Immutable, so one instance can be shared by any number of parsers.

    Attributes:
        strip_whitespace: Trim leading/trailing whitespace from text and
            comment bodies and drop text events that end up empty
        expand_entities: Expand the predefined entities, numeric character
            references and ``extra_entities`` in text, comments and
            attribute values
        error_handler: Called as ``error_handler(message, position)`` for
            every reported error
        extra_entities: Additional named entities, e.g. ``{"nbsp": "\\xa0"}``
        strict: Raise ``XMLSyntaxError`` on the first reported error
        correlation_id: Attached to every log record emitted for a scan
    """

    strip_whitespace: bool = True
    expand_entities: bool = True
    error_handler: Optional[ErrorHandler] = None
    extra_entities: Mapping[str, str] = field(default_factory=dict, hash=False)
    strict: bool = False
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate option values."""
        if self.error_handler is not None and not callable(self.error_handler):
            raise ConfigValidationError(
                "error_handler must be callable or None", field_name="error_handler"
            )
        if not isinstance(self.extra_entities, abc.Mapping):
            raise ConfigValidationError(
                "extra_entities must be a mapping", field_name="extra_entities"
            )
        for name, replacement in self.extra_entities.items():
            if not isinstance(name, str) or not ENTITY_NAME_PATTERN.match(name):
                raise ConfigValidationError(
                    f"Invalid entity name: {name!r}", field_name="extra_entities"
                )
            if not isinstance(replacement, str):
                raise ConfigValidationError(
                    f"Replacement for entity {name!r} must be a string",
                    field_name="extra_entities",
                )
        # Read-only copy of the caller's mapping
        object.__setattr__(
            self, "extra_entities", MappingProxyType(dict(self.extra_entities))
        )

    def override(self, **changes: Any) -> "ParserOptions":
        """Create a new options object with specific fields replaced.

        Example:
            >>> options = ParserOptions()
            >>> options.override(strict=True).strict
            True
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown option(s): {', '.join(unknown)}", field_name=unknown[0]
            )
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert options to a dictionary, leaving out the error handler."""
        return {
            f.name: dict(getattr(self, f.name))
            if f.name == "extra_entities" else getattr(self, f.name)
            for f in fields(self)
            if f.name not in NON_SERIALIZABLE_FIELDS
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        error_handler: Optional[ErrorHandler] = None
    ) -> "ParserOptions":
        """Create options from a dictionary produced by ``to_dict``.

        Keys that are not option names are rejected.
        """
        known = {f.name for f in fields(cls)} - set(NON_SERIALIZABLE_FIELDS)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown option(s): {', '.join(unknown)}", field_name=unknown[0]
            )
        return cls(error_handler=error_handler, **data)

    @classmethod
    def from_json(
        cls,
        json_str: str,
        error_handler: Optional[ErrorHandler] = None
    ) -> "ParserOptions":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid options JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Options JSON must be an object")
        return cls.from_dict(data, error_handler=error_handler)

    # Preset factory methods
    @classmethod
    def raw(cls) -> "ParserOptions":
        """Deliver text exactly as it appears in the document."""
        return cls(strip_whitespace=False, expand_entities=False)

    @classmethod
    def normalized(cls) -> "ParserOptions":
        """Strip insignificant whitespace and expand entities."""
        return cls()
