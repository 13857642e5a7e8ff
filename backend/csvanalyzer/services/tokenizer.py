"""Quote-aware line splitting for sampled CSV lines."""

from typing import List, Optional, Sequence


def parse_line(line: str, delimiter: Optional[str], quote_char: Optional[str] = None) -> List[str]:
    """
    Split one line into trimmed fields.

    The quote character toggles quoted mode and is dropped from the
    output; the delimiter only splits outside quotes. Without a
    delimiter the whole line is a single field.
    """
    if not delimiter:
        return [line.strip()]

    fields: List[str] = []
    current: List[str] = []
    inside_quotes = False

    for ch in line:
        if quote_char and ch == quote_char:
            inside_quotes = not inside_quotes
        elif ch == delimiter and not inside_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    fields.append("".join(current).strip())
    return fields


def parse_rows(
    lines: Sequence[str],
    delimiter: Optional[str],
    quote_char: Optional[str],
    columns_count: int,
) -> List[List[str]]:
    """Tokenize lines into rows padded or cut to exactly columns_count fields."""
    rows = []
    for line in lines:
        fields = parse_line(line, delimiter, quote_char)
        if len(fields) < columns_count:
            fields.extend([""] * (columns_count - len(fields)))
        rows.append(fields[:columns_count])
    return rows
