"""
Tests for charset detection and decoding.
"""

import codecs

import pytest

from csvanalyzer.core.errors import EncodingError
from csvanalyzer.services import charset as charset_module
from csvanalyzer.services.charset import decode_sample, detect_charset, normalize_charset


@pytest.mark.parametrize("bom,label", [
    (codecs.BOM_UTF8, "UTF-8BOM"),
    (codecs.BOM_UTF16_LE, "UTF-16LE"),
    (codecs.BOM_UTF16_BE, "UTF-16BE"),
])
def test_bom_decides_charset(bom, label):
    """Test that a byte-order mark names the charset."""
    assert detect_charset(bom + b"a\x00,\x00") == label


def test_ascii_is_ansi():
    """Test that pure ASCII is labelled ansi."""
    assert detect_charset(b"name,email\n") == "ansi"


def test_small_utf8_sample():
    """Test that a small valid UTF-8 sample is labelled utf8."""
    assert detect_charset("José,jose@example.com\n".encode("utf-8")) == "utf8"


def test_statistical_guess_is_normalized(monkeypatch):
    """Test that the chardet guess is mapped onto the response labels."""
    monkeypatch.setattr(charset_module.chardet, "detect", lambda data: {"encoding": "ISO-8859-1"})
    assert detect_charset("José\n".encode("latin-1")) == "iso88591"


def test_statistical_guess_falls_back_to_cp1252(monkeypatch):
    """Test that an undecided guess falls back to cp1252."""
    monkeypatch.setattr(charset_module.chardet, "detect", lambda data: {"encoding": None})
    assert detect_charset(b"\xe9\xe8\n") == "cp1252"


@pytest.mark.parametrize("name,label", [
    ("UTF-8", "utf8"),
    ("Windows-1252", "cp1252"),
    ("ISO-8859-2", "iso88592"),
    ("SHIFT_JIS", "shiftjis"),
])
def test_normalize_charset(name, label):
    """Test charset name normalization."""
    assert normalize_charset(name) == label


def test_decode_strips_utf8_bom():
    """Test that decoding removes exactly the BOM."""
    assert decode_sample(codecs.BOM_UTF8 + b"a,b\n", "UTF-8BOM") == "a,b\n"


def test_decode_utf16le():
    """Test that UTF-16LE samples decode without their BOM."""
    data = codecs.BOM_UTF16_LE + "a,b\n".encode("utf-16-le")
    assert decode_sample(data, "UTF-16LE") == "a,b\n"


def test_decode_invalid_utf8_fails():
    """Test that invalid bytes in a UTF-8 sample raise EncodingError."""
    with pytest.raises(EncodingError):
        decode_sample(b"a,\xff\n", "utf8")


def test_decode_tolerates_cut_sequence():
    """Test that a multi-byte sequence cut at the sample end is dropped."""
    assert decode_sample(b"a,\xc3", "utf8") == "a,"


def test_decode_cp1252():
    """Test that single-byte charsets decode through their codec."""
    assert decode_sample("é,ü\n".encode("cp1252"), "cp1252") == "é,ü\n"
