"""
Bounded File Sampling

Reads the head of an uploaded file in fixed-size chunks so analysis never
holds more than a small sample in memory, and rejects binary content
before it can reach the charset decoder.
"""

import codecs
import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Union

from ..core.config import settings
from ..core.errors import SampleError

logger = logging.getLogger("csvanalyzer.sampling")

# First-line bytes inspected by the binary check
BINARY_CHECK_SIZE = 1024
BINARY_UNPRINTABLE_PERCENT = 20


@dataclass
class Sample:
    """Raw bytes read from the head of a file."""
    data: bytes
    line_count: int
    truncated: bool = False  # stopped on a byte/line cap rather than EOF


def read_sample(
    source: Union[str, "os.PathLike[str]", BinaryIO],
    max_bytes: int = settings.MAX_BYTES,
    max_lines: int = settings.MAX_SCAN_LINES,
    chunk_size: int = settings.BUFF_SIZE,
) -> Sample:
    """
    Read at most max_bytes, stopping after the newline that exceeds max_lines.

    Accepts a path or an open binary stream; the stream is read forward
    only and is not closed.

    Raises:
        SampleError: nothing was read or the sample holds no newline.
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return read_sample(f, max_bytes, max_lines, chunk_size)

    buffer = bytearray()
    line_count = 0
    truncated = False
    more = False

    while len(buffer) < max_bytes:
        chunk = source.read(chunk_size)
        if not chunk:
            break

        room = max_bytes - len(buffer)
        if len(chunk) > room:
            chunk = chunk[:room]
            more = True

        cut = None
        pos = chunk.find(b"\n")
        while pos != -1:
            line_count += 1
            if line_count > max_lines:
                cut = pos + 1
                break
            pos = chunk.find(b"\n", pos + 1)

        if cut is not None:
            buffer += chunk[:cut]
            truncated = True
            break
        buffer += chunk
    else:
        # byte cap reached; only a cut when input remains
        truncated = more or bool(source.read(1))

    if not buffer or line_count == 0:
        raise SampleError(f"Sample has {len(buffer)} bytes and {line_count} newlines")

    logger.debug(
        "Sampled %d bytes, %d lines (truncated=%s)", len(buffer), line_count, truncated
    )
    return Sample(data=bytes(buffer), line_count=line_count, truncated=truncated)


def _is_unprintable(value: int) -> bool:
    return value < 0x20 or value == 0xFF or 0x7F <= value <= 0xA0


def is_binary_data(data: bytes) -> bool:
    """
    Check whether the first line of a sample looks like binary content.

    Only the first line (at most 1024 bytes) is inspected, with any BOM
    removed. The sample is binary when at least 20% of it is control
    bytes, 0xFF, or 0x7F-0xA0. UTF-16 text (recognised by its BOM) is
    judged per code unit so its zero high bytes do not count.
    """
    if not data:
        return False

    end = data.find(b"\n")
    if end == -1:
        end = len(data)
    first_line = data[:min(end, BINARY_CHECK_SIZE)]

    if first_line.startswith(codecs.BOM_UTF8):
        units = list(first_line[len(codecs.BOM_UTF8):])
    elif first_line.startswith(codecs.BOM_UTF16_LE):
        units = _utf16_units(first_line[2:], "little")
    elif first_line.startswith(codecs.BOM_UTF16_BE):
        units = _utf16_units(first_line[2:], "big")
    else:
        units = list(first_line)

    if not units:
        return False

    unprintable = sum(1 for u in units if _is_unprintable(u))
    return unprintable * 100 // len(units) >= BINARY_UNPRINTABLE_PERCENT


def _utf16_units(data: bytes, byteorder: str) -> list:
    # A UTF-16BE line ends with "\x00\n", so a trailing odd byte is the high half of that newline.
    usable = len(data) - len(data) % 2
    return [int.from_bytes(data[i:i + 2], byteorder) for i in range(0, usable, 2)]
