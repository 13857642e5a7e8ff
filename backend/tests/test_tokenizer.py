"""
Tests for quote-aware line tokenizing.
"""

from csvanalyzer.services.tokenizer import parse_line, parse_rows


def test_parse_line_respects_quotes():
    """Test that delimiters inside quotes do not split and quotes are dropped."""
    fields = parse_line('"Smith, John",john@example.com , 42', ",", '"')
    assert fields == ["Smith, John", "john@example.com", "42"]


def test_parse_line_without_delimiter():
    """Test that a line is a single trimmed field without a delimiter."""
    assert parse_line("  john@example.com ", None) == ["john@example.com"]


def test_parse_line_keeps_empty_fields():
    """Test that adjacent delimiters produce empty fields."""
    assert parse_line("a;;c;", ";") == ["a", "", "c", ""]


def test_parse_rows_pads_and_cuts():
    """Test that rows are padded or cut to the column count."""
    rows = parse_rows(["a,b", "a,b,c,d", "a,b,c"], ",", None, 3)
    assert rows == [["a", "b", ""], ["a", "b", "c"], ["a", "b", "c"]]
