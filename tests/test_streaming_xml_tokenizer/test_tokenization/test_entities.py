"""Tests for entity expansion."""

import pytest

from streaming_xml_tokenizer.tokenization.entities import (
    PREDEFINED_ENTITIES,
    EntityTable,
    decimal_to_char,
    expand_entities,
    hexadecimal_to_char,
)


class TestPredefinedEntities:
    """Tests for the five predefined entities."""

    def test_markup_entities(self):
        """Test expansion of the markup-significant characters."""
        assert expand_entities("&lt;&amp;&gt;") == "<&>"

    def test_quote_entities(self):
        """Test expansion of both quote entities."""
        assert expand_entities("&quot;hi&apos;") == "\"hi'"

    def test_table_contents(self):
        """Test the predefined table."""
        assert PREDEFINED_ENTITIES["&amp;"] == "&"
        assert len(PREDEFINED_ENTITIES) == 5

    def test_single_pass(self):
        """Test that replacement output is not expanded again."""
        assert expand_entities("&amp;lt;") == "&lt;"
        assert expand_entities("&amp;#65;") == "&#65;"

    def test_unknown_entities_left_alone(self):
        """Test that unknown references are kept verbatim."""
        assert expand_entities("&nbsp; & &copy;") == "&nbsp; & &copy;"

    def test_text_without_ampersand(self):
        """Test the fast path for plain text."""
        text = "plain text"
        assert expand_entities(text) is text


class TestNumericReferences:
    """Tests for numeric character references."""

    @pytest.mark.parametrize("reference", ["&#65;", "&#065;", "&#x41;", "&#x041;"])
    def test_letter_a(self, reference):
        """Test decimal and hexadecimal forms of 'A'."""
        assert expand_entities(reference) == "A"

    def test_lowercase_hex_digits(self):
        """Test hexadecimal digits in either case."""
        assert expand_entities("&#xe9;&#xE9;") == "\xe9\xe9"

    def test_multibyte_code_point(self):
        """Test references above the single-byte range."""
        assert expand_entities("&#8364;") == "€"
        assert expand_entities("&#x1F600;") == "\U0001F600"

    def test_out_of_range_left_alone(self):
        """Test that invalid code points are not converted."""
        assert expand_entities("&#x110000;") == "&#x110000;"
        assert expand_entities("&#xD800;") == "&#xD800;"

    def test_converters(self):
        """Test the conversion helpers directly."""
        assert decimal_to_char("97") == "a"
        assert hexadecimal_to_char("61") == "a"
        assert decimal_to_char("99999999") is None

    def test_mixed_text(self):
        """Test references embedded in text."""
        assert expand_entities("x &#60; y &amp;&amp; z") == "x < y && z"


class TestEntityTable:
    """Tests for custom entity tables."""

    def test_extra_entities(self):
        """Test caller-supplied entities."""
        table = EntityTable({"nbsp": "\xa0", "company": "ACME Corp."})

        assert table.expand("&company;&nbsp;&amp;") == "ACME Corp.\xa0&"
        assert "&nbsp;" in table
        assert "&copy;" not in table

    def test_extra_entity_can_override(self):
        """Test that extra entities replace predefined ones."""
        table = EntityTable({"amp": "and"})
        assert table.expand("a &amp; b") == "a and b"

    def test_prefix_entities(self):
        """Test that a longer name is not shadowed by a shorter one."""
        table = EntityTable({"a": "1", "ab": "2"})
        assert table.expand("&a;&ab;") == "12"

    def test_default_table_is_used(self):
        """Test that expand_entities accepts an explicit table."""
        table = EntityTable({"x": "y"})
        assert expand_entities("&x;", table) == "y"
        assert expand_entities("&x;") == "&x;"
