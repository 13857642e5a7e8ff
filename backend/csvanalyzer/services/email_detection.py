"""
Email address recognition.

Emails anchor most of the dialect heuristics: the characters around an
address reveal the delimiter, an address on the first line means there
is no header, and the column with the most addresses is the import key.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from ..core.errors import EmailColumnNotFoundError

logger = logging.getLogger("csvanalyzer.email_detection")

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

_LOCAL_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789._-+"
_DOMAIN_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789.-"
EMAIL_LOCAL_CHARS = frozenset(_LOCAL_CHARS + _LOCAL_CHARS.upper())
EMAIL_DOMAIN_CHARS = frozenset(_DOMAIN_CHARS + _DOMAIN_CHARS.upper())

EMAIL_HEADER_NAMES = ("email", "e-mail")


@dataclass(frozen=True)
class EmailMatch:
    """An address found inside a line; end is exclusive."""
    start: int
    end: int
    address: str


def is_valid_email(value: str) -> bool:
    """Check a single value against the email grammar."""
    email = value.strip()
    at_pos = email.find("@")
    if at_pos <= 0 or at_pos >= len(email) - 1:
        return False
    if "." not in email[at_pos + 1:]:
        return False
    return EMAIL_RE.fullmatch(email) is not None


def iter_line_emails(line: str) -> Iterator[EmailMatch]:
    """
    Yield valid addresses embedded anywhere in a raw line.

    Each '@' is expanded left through local-part characters and right
    through domain characters; the bounded text is lowercased and kept
    only if it validates.
    """
    at_pos = line.find("@")
    while at_pos != -1:
        start = at_pos
        while start > 0 and line[start - 1] in EMAIL_LOCAL_CHARS:
            start -= 1
        end = at_pos + 1
        while end < len(line) and line[end] in EMAIL_DOMAIN_CHARS:
            end += 1

        address = line[start:end].lower()
        if is_valid_email(address):
            yield EmailMatch(start=start, end=end, address=address)

        at_pos = line.find("@", at_pos + 1)


def contains_valid_email(line: str) -> bool:
    return next(iter_line_emails(line), None) is not None


def locate_email_column(
    rows: Sequence[Sequence[str]],
    header: Optional[Sequence[str]] = None,
) -> int:
    """
    Find the index of the email column.

    A header cell named "email" or "e-mail" wins outright. Otherwise the
    column with strictly the most valid addresses in the data rows wins.

    Raises:
        EmailColumnNotFoundError: no column holds an address, or the
            top count is shared by several columns.
    """
    if header:
        for idx, name in enumerate(header):
            if name.strip().lower() in EMAIL_HEADER_NAMES:
                logger.debug("Email column %d found by header name %r", idx, name)
                return idx

    column_count = max((len(row) for row in rows), default=0)
    if header:
        column_count = max(column_count, len(header))
    counts: List[int] = [0] * column_count

    for row in rows:
        for idx, value in enumerate(row):
            if value and is_valid_email(value):
                counts[idx] += 1

    best = max(counts, default=0)
    if best == 0:
        raise EmailColumnNotFoundError("No column contains a valid email address")

    winners = [idx for idx, count in enumerate(counts) if count == best]
    if len(winners) > 1:
        raise EmailColumnNotFoundError(
            f"Columns {[w + 1 for w in winners]} tie with {best} email addresses each"
        )

    logger.debug("Email column %d found by content (%d addresses)", winners[0], best)
    return winners[0]
