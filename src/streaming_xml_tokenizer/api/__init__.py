"""Public parsing API."""

from .parser import XMLParser, parse_string

__all__ = ["XMLParser", "parse_string"]
