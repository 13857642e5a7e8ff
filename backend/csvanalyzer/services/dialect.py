"""
Dialect Sniffer — quote, delimiter, header and column-count detection

Works on decoded sample lines only; no schema is known up front.

- Quote character: the candidate appearing in pairs on enough lines
- Delimiter: read from the characters flanking an email address, with a
  frequency count as fallback
- Header: the first line is data when it holds an email or is empty
- Column count: the single count shared by a large majority of lines
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core.config import settings
from ..core.errors import ColumnCountVariationError, SampleError, TooManyColumnsError
from ..models.types import FIELD_DELIMS, TEXT_SEPS
from .email_detection import contains_valid_email, iter_line_emails

logger = logging.getLogger("csvanalyzer.dialect")


@dataclass
class Dialect:
    """Detected CSV variant. None means the character is not in use."""
    delimiter: Optional[str] = None
    quote_char: Optional[str] = None
    has_header: bool = True


# ═══════════════════════════════════════════════════════════════════════════
# Lines
# ═══════════════════════════════════════════════════════════════════════════


def split_lines(
    text: str,
    max_lines: Optional[int] = None,
    drop_partial_last: bool = False,
) -> List[Tuple[int, str]]:
    """
    Split decoded text into non-empty lines paired with their 1-based
    file line numbers.

    Only "\\n" ends a line (a trailing "\\r" is removed); str.splitlines
    would also split on vertical tab, which is a candidate delimiter.
    Empty lines are skipped but still counted, so the numbers match the
    file. With drop_partial_last, the final unterminated line is
    discarded when a complete line precedes it.
    """
    parts = text.split("\n")
    unterminated = parts.pop()
    if unterminated and not (drop_partial_last and parts):
        parts.append(unterminated)

    lines = []
    for number, part in enumerate(parts, start=1):
        if part.endswith("\r"):
            part = part[:-1]
        if part:
            lines.append((number, part))
    if max_lines is not None:
        lines = lines[:max_lines]
    return lines


def count_delimiters(delimiter: str, line: str, quote_char: Optional[str] = None) -> int:
    """Count delimiter occurrences outside quoted sections."""
    if not delimiter:
        return 0
    if not quote_char:
        return line.count(delimiter)

    count = 0
    inside_quotes = False
    for ch in line:
        if ch == quote_char:
            inside_quotes = not inside_quotes
        elif ch == delimiter and not inside_quotes:
            count += 1
    return count


# ═══════════════════════════════════════════════════════════════════════════
# Quote Character
# ═══════════════════════════════════════════════════════════════════════════


def detect_quote_char(
    lines: Sequence[str],
    candidates: Sequence[str] = TEXT_SEPS,
    min_percent: int = settings.TEXT_SEP_PERCENT,
) -> Optional[str]:
    """
    Detect the quote character.

    A candidate is dropped for good as soon as any line holds an odd
    number of it. The survivor with the highest total wins if it appears
    on at least min_percent of the lines.
    """
    if not lines:
        return None

    totals = {c: 0 for c in candidates}
    lines_present = {c: 0 for c in candidates}
    disqualified = set()

    for line in lines:
        for candidate in candidates:
            if candidate in disqualified:
                continue
            count = line.count(candidate)
            if count % 2:
                disqualified.add(candidate)
                continue
            totals[candidate] += count
            if count:
                lines_present[candidate] += 1

    best = None
    for candidate in candidates:
        if candidate in disqualified or totals[candidate] == 0:
            continue
        if best is None or totals[candidate] > totals[best]:
            best = candidate

    if best is None:
        return None
    if lines_present[best] * 100 // len(lines) >= min_percent:
        return best
    return None


# ═══════════════════════════════════════════════════════════════════════════
# Delimiter
# ═══════════════════════════════════════════════════════════════════════════


def detect_delimiter(
    lines: Sequence[str],
    quote_char: Optional[str] = None,
    candidates: Sequence[str] = FIELD_DELIMS,
    min_percent: int = settings.FIELD_DELIM_PERCENT,
) -> Optional[str]:
    """Detect the field delimiter, email-anchored first, by frequency otherwise."""
    delimiter = detect_delimiter_from_emails(lines, candidates)
    if delimiter is not None:
        logger.debug("Delimiter %r found next to an email address", delimiter)
        return delimiter

    delimiter = detect_delimiter_by_frequency(lines, quote_char, candidates, min_percent)
    logger.debug("Delimiter %r found by frequency", delimiter)
    return delimiter


def detect_delimiter_from_emails(
    lines: Sequence[str],
    candidates: Sequence[str] = FIELD_DELIMS,
) -> Optional[str]:
    """Return the delimiter decided by the first line with a usable email."""
    for line in lines:
        delimiter = email_delimiter(line, candidates)
        if delimiter is not None:
            return delimiter
    return None


def email_delimiter(line: str, candidates: Sequence[str] = FIELD_DELIMS) -> Optional[str]:
    """
    Read the delimiter from the characters on either side of the first
    valid email in a line.

    Both sides agreeing wins; disagreeing sides resolve to the candidate
    earlier in priority order; a single side wins alone.
    """
    match = next(iter_line_emails(line), None)
    if match is None:
        return None

    right = next((c for c in line[match.end:] if c != " "), None)
    left = next((c for c in reversed(line[:match.start]) if c != " "), None)

    found = [c for c in (left, right) if c is not None and c in candidates]
    if not found:
        return None
    return min(found, key=candidates.index)


def detect_delimiter_by_frequency(
    lines: Sequence[str],
    quote_char: Optional[str] = None,
    candidates: Sequence[str] = FIELD_DELIMS,
    min_percent: int = settings.FIELD_DELIM_PERCENT,
) -> Optional[str]:
    """Pick the most frequent candidate among those present on enough lines."""
    if not lines:
        return None

    best = None
    best_total = 0
    for candidate in candidates:
        total = 0
        present = 0
        for line in lines:
            count = count_delimiters(candidate, line, quote_char)
            total += count
            if count:
                present += 1
        if total == 0 or present * 100 // len(lines) < min_percent:
            continue
        if total >= best_total:
            best, best_total = candidate, total
    return best


# ═══════════════════════════════════════════════════════════════════════════
# Header
# ═══════════════════════════════════════════════════════════════════════════


def has_header(lines: Sequence[str], quote_char: Optional[str], delimiter: Optional[str]) -> bool:
    """Decide whether the first line is a header rather than data."""
    if not lines:
        return True

    first_line = lines[0]
    if contains_valid_email(first_line):
        return False

    stripped = "".join(c for c in first_line if c != delimiter and c != quote_char)
    if not stripped.strip():
        return False

    return True


def sniff_dialect(
    lines: Sequence[str],
    field_delim_percent: int = settings.FIELD_DELIM_PERCENT,
    text_sep_percent: int = settings.TEXT_SEP_PERCENT,
) -> Dialect:
    """Run quote, delimiter and header detection in that order."""
    quote_char = detect_quote_char(lines, min_percent=text_sep_percent)
    delimiter = detect_delimiter(lines, quote_char, min_percent=field_delim_percent)
    header = has_header(lines, quote_char, delimiter)
    dialect = Dialect(delimiter=delimiter, quote_char=quote_char, has_header=header)
    logger.debug("Sniffed dialect %s", dialect)
    return dialect


# ═══════════════════════════════════════════════════════════════════════════
# Column Count
# ═══════════════════════════════════════════════════════════════════════════


def validate_columns_count(
    lines: Sequence[str],
    delimiter: Optional[str],
    quote_char: Optional[str],
    min_percent: int = settings.COLUMN_COUNT_PERCENT,
    max_bucket: int = settings.MAX_BUCKET,
    max_columns: int = settings.MAX_COLUMNS,
) -> int:
    """
    Return the dominant column count of the sample.

    Raises:
        SampleError: there are no lines.
        ColumnCountVariationError: more than max_bucket distinct counts, or
            no count covers min_percent of the lines.
        TooManyColumnsError: the dominant count exceeds max_columns.
    """
    if not lines:
        raise SampleError("Sample has no lines")

    if not delimiter:
        return 1

    buckets: Counter = Counter()
    for line in lines:
        buckets[count_delimiters(delimiter, line, quote_char) + 1] += 1
        if len(buckets) > max_bucket:
            raise ColumnCountVariationError(
                f"More than {max_bucket} distinct column counts: {sorted(buckets)}"
            )

    for columns_count, occurrences in buckets.items():
        if occurrences * 100 // len(lines) >= min_percent:
            if columns_count > max_columns:
                raise TooManyColumnsError(columns_count, max_columns)
            return columns_count

    raise ColumnCountVariationError(
        f"No column count reaches {min_percent}% of lines: {dict(buckets)}"
    )
