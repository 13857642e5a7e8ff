"""
Charset detection and decoding.

Detection order:
1. Byte-order mark (UTF-8, UTF-16LE, UTF-16BE)
2. Pure ASCII -> "ansi" (legacy code page 0 label consumers rely on)
3. Small samples: strict UTF-8 validation
4. Statistical guess via chardet, normalized to a fixed label set

The UTF-8 family is decoded strictly; every other charset is decoded
with replacement characters so a wrong guess never aborts analysis.
"""

import codecs
import logging
import re
from typing import Dict, Optional

import chardet

from ..core.config import settings
from ..core.errors import EncodingError

logger = logging.getLogger("csvanalyzer.charset")

UTF8_BOM_LABEL = "UTF-8BOM"
UTF16LE_LABEL = "UTF-16LE"
UTF16BE_LABEL = "UTF-16BE"
ANSI_LABEL = "ansi"
UTF8_LABEL = "utf8"
FALLBACK_LABEL = "cp1252"

_BOMS = (
    (codecs.BOM_UTF8, UTF8_BOM_LABEL),
    (codecs.BOM_UTF16_LE, UTF16LE_LABEL),
    (codecs.BOM_UTF16_BE, UTF16BE_LABEL),
)

_LABEL_ALIASES: Dict[str, str] = {
    "utf-8": UTF8_LABEL,
    "utf8": UTF8_LABEL,
    "utf-16le": UTF16LE_LABEL,
    "utf-16 le": UTF16LE_LABEL,
    "utf-16be": UTF16BE_LABEL,
    "utf-16 be": UTF16BE_LABEL,
    "iso-8859-1": "iso88591",
    "iso8859-1": "iso88591",
    "latin1": "iso88591",
    "iso-8859-15": "iso885915",
    "iso8859-15": "iso885915",
    "latin9": "iso885915",
    "ascii": ANSI_LABEL,
}

# Labels decoded strictly as UTF-8
_UTF8_LABELS = {UTF8_LABEL, "utf-8", UTF8_BOM_LABEL.lower(), ANSI_LABEL, "ascii"}

_CODECS: Dict[str, str] = {
    "utf-16le": "utf-16-le",
    "utf16le": "utf-16-le",
    "utf-16be": "utf-16-be",
    "utf16be": "utf-16-be",
    # windows-1252 is a superset of latin-1 for printable text
    "iso88591": "cp1252",
    "iso885915": "iso8859_15",
}

_WINDOWS_RE = re.compile(r"^windows-?(\d{3,4})$")
_ISO8859_RE = re.compile(r"^iso-?8859-?(\d{1,2})$")


def detect_charset(data: bytes, guess_size: int = settings.CHARSET_GUESS_SIZE) -> str:
    """Detect the charset label of a raw sample."""
    for bom, label in _BOMS:
        if data.startswith(bom):
            return label

    if data.isascii():
        return ANSI_LABEL

    if len(data) <= guess_size:
        try:
            data.decode("utf-8")
            return UTF8_LABEL
        except UnicodeDecodeError:
            pass

    return _guess_statistically(data)


def _guess_statistically(data: bytes) -> str:
    result = chardet.detect(data)
    logger.debug("chardet.detect -> %s", result)
    encoding = result.get("encoding")
    if not encoding:
        return FALLBACK_LABEL
    return normalize_charset(encoding)


def normalize_charset(name: str) -> str:
    """Normalize an encoding name to the label set used in responses."""
    lowered = name.strip().lower()
    if lowered in _LABEL_ALIASES:
        return _LABEL_ALIASES[lowered]
    match = _WINDOWS_RE.match(lowered)
    if match:
        return f"cp{match.group(1)}"
    return lowered.replace("-", "").replace("_", "")


def strip_bom(data: bytes, charset: str) -> bytes:
    """Remove the BOM belonging to the detected charset, if present."""
    lowered = charset.lower()
    if lowered == UTF8_BOM_LABEL.lower() and data.startswith(codecs.BOM_UTF8):
        return data[len(codecs.BOM_UTF8):]
    if lowered in ("utf-16le", "utf16le") and data.startswith(codecs.BOM_UTF16_LE):
        return data[len(codecs.BOM_UTF16_LE):]
    if lowered in ("utf-16be", "utf16be") and data.startswith(codecs.BOM_UTF16_BE):
        return data[len(codecs.BOM_UTF16_BE):]
    return data


def decode_sample(data: bytes, charset: str) -> str:
    """
    Convert a sample to text using the detected charset.

    Raises:
        EncodingError: the sample is labelled UTF-8/ansi but is not valid UTF-8.
    """
    data = strip_bom(data, charset)
    lowered = charset.lower()

    if lowered in _UTF8_LABELS:
        # final=False keeps a sequence cut off at the sample boundary out of the text
        decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
        try:
            return decoder.decode(data, final=False)
        except UnicodeDecodeError as e:
            raise EncodingError(f"Invalid UTF-8: {e}") from e

    codec = _resolve_codec(lowered)
    return data.decode(codec, errors="replace")


def _resolve_codec(label: str) -> str:
    if label in _CODECS:
        return _CODECS[label]

    candidates = [label]
    match = _ISO8859_RE.match(label)
    if match:
        candidates.append(f"iso8859_{match.group(1)}")
    if label.startswith("windows"):
        candidates.append(f"cp{label[len('windows'):].lstrip('-')}")

    for candidate in candidates:
        codec = _lookup(candidate)
        if codec:
            return codec

    logger.warning("Unknown charset %r, decoding as UTF-8 with replacement", label)
    return "utf-8"


def _lookup(name: str) -> Optional[str]:
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None
