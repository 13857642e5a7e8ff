"""
Tests for bounded sampling and the binary guard.
"""

import codecs
import io

import pytest

from csvanalyzer.core.errors import SampleError
from csvanalyzer.services.sampling import is_binary_data, read_sample


def test_read_sample_whole_small_file():
    """Test that a small stream is read completely and not marked truncated."""
    sample = read_sample(io.BytesIO(b"a,b\n1,2\n"))
    assert sample.data == b"a,b\n1,2\n"
    assert sample.line_count == 2
    assert sample.truncated is False


def test_read_sample_from_path(write_csv):
    """Test that a file path is opened and sampled."""
    path = write_csv("email\njohn@example.com\n")
    sample = read_sample(path)
    assert sample.data == b"email\njohn@example.com\n"


def test_read_sample_stops_after_line_cap():
    """Test that reading stops after the newline exceeding max_lines."""
    sample = read_sample(io.BytesIO(b"l1\nl2\nl3\nl4\nl5\n"), max_lines=2)
    assert sample.data == b"l1\nl2\nl3\n"
    assert sample.truncated is True


def test_read_sample_stops_at_byte_cap():
    """Test that no more than max_bytes are read, chunk by chunk."""
    sample = read_sample(io.BytesIO(b"abcd\nefgh\nijkl\n"), max_bytes=10, chunk_size=4)
    assert sample.data == b"abcd\nefgh\n"
    assert sample.line_count == 2
    assert sample.truncated is True


def test_read_sample_exactly_at_byte_cap_is_complete():
    """Test that a stream of exactly max_bytes is not marked truncated."""
    sample = read_sample(io.BytesIO(b"ab\ncd"), max_bytes=5)
    assert sample.data == b"ab\ncd"
    assert sample.truncated is False


def test_read_sample_byte_cap_on_chunk_boundary_is_truncated():
    """Test that input left after a full buffer marks the sample truncated."""
    sample = read_sample(io.BytesIO(b"abcd\nefgh\nij"), max_bytes=10, chunk_size=5)
    assert sample.data == b"abcd\nefgh\n"
    assert sample.truncated is True


def test_read_sample_empty_stream_fails():
    """Test that an empty stream raises SampleError."""
    with pytest.raises(SampleError):
        read_sample(io.BytesIO(b""))


def test_read_sample_without_newline_fails():
    """Test that a sample with no newline raises SampleError."""
    with pytest.raises(SampleError):
        read_sample(io.BytesIO(b"just one unterminated line"))


def test_binary_first_line_detected():
    """Test that a first line with many control bytes is binary."""
    assert is_binary_data(b"\x00\x01\x02\x03abcdef\nname\n") is True


def test_text_is_not_binary():
    """Test that ordinary CSV text is not binary."""
    assert is_binary_data(b"name,email\njohn,john@example.com\n") is False


def test_only_first_line_is_inspected():
    """Test that control bytes after the first line are ignored."""
    assert is_binary_data(b"name,email\n\x00\x00\x00\x00\x00\x00\n") is False


def test_utf16_text_is_not_binary():
    """Test that UTF-16 text with a BOM is judged per code unit."""
    le = codecs.BOM_UTF16_LE + "name,email\nx,y\n".encode("utf-16-le")
    be = codecs.BOM_UTF16_BE + "name,email\nx,y\n".encode("utf-16-be")
    assert is_binary_data(le) is False
    assert is_binary_data(be) is False


def test_utf8_bom_is_ignored():
    """Test that a UTF-8 BOM does not count as unprintable."""
    assert is_binary_data(codecs.BOM_UTF8 + b"ab\n") is False
