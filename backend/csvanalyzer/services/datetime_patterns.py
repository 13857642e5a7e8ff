"""
Datetime format narrowing.

A column starts with every known date and time pattern as a candidate.
Each datetime-looking value removes the candidates it contradicts, so
the set only ever shrinks while a column is scanned. Whatever survives
the whole column names its format, in priority order.
"""

import re
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from ..models.types import DATE_PATTERNS, RFC3339_PATTERN, TIME_PATTERNS

DATE_SEPARATORS = "/-."
TIME_SEPARATORS = ":"

# Position of the date/time separator in an RFC3339 timestamp (2020-01-01T...)
RFC3339_T_INDEX = 10

RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.\d+)?"
    r"(?:[Zz]|[+-](\d{2}):(\d{2}))"
)


def could_be_datetime(value: str) -> bool:
    """A value may be a datetime if it has digits and a date or time separator."""
    if not value:
        return False
    has_separator = any(c in DATE_SEPARATORS or c in TIME_SEPARATORS for c in value)
    return has_separator and any("0" <= c <= "9" for c in value)


def is_rfc3339(value: str) -> bool:
    """Strict RFC3339 timestamp check (offset required)."""
    if len(value) <= RFC3339_T_INDEX or value[RFC3339_T_INDEX] not in "Tt":
        return False
    match = RFC3339_RE.fullmatch(value)
    if not match:
        return False
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    offset_hours, offset_minutes = match.group(7), match.group(8)
    if offset_hours is not None and (int(offset_hours) > 23 or int(offset_minutes) > 59):
        return False
    try:
        datetime(year, month, day, hour, minute, second)
    except ValueError:
        return False
    return True


def date_pattern_to_strptime(pattern: str, separator: str) -> str:
    fmt = pattern.replace("yyyy", "%Y").replace("mm", "%m").replace("dd", "%d")
    return "".join(separator if c in DATE_SEPARATORS else c for c in fmt)


def time_pattern_to_strptime(pattern: str) -> str:
    fmt = pattern.replace("hh", "%H").replace("nn", "%M").replace("ss", "%S")
    if "am/pm" in pattern:
        fmt = fmt.replace(" am/pm", " %p").replace("%H", "%I")
    return fmt


def _parses(text: str, fmt: str) -> bool:
    try:
        datetime.strptime(text, fmt)
    except ValueError:
        return False
    return True


def try_parse_date(value: str, pattern: str, separator: str, has_time: bool) -> bool:
    parts = value.split()
    date_part = parts[0] if has_time and parts else value
    return _parses(date_part, date_pattern_to_strptime(pattern, separator))


def try_parse_time(value: str, pattern: str) -> bool:
    parts = value.split(None, 1)
    if len(parts) < 2:
        return False
    return _parses(parts[1].strip(), time_pattern_to_strptime(pattern))


class DateTimePatternSet:
    """
    Surviving date and time pattern candidates for one column.

    Candidates are (pattern, separator) pairs kept in priority order.
    Every operation removes candidates; none adds them back.
    """

    def __init__(self):
        self.date_patterns: List[Tuple[str, str]] = [(RFC3339_PATTERN, "-")]
        self.date_patterns.extend((p.pattern, p.separator) for p in DATE_PATTERNS)
        self.time_patterns: List[Tuple[str, str]] = [
            (p.pattern, p.separator) for p in TIME_PATTERNS
        ]

    def _retain_dates(self, keep: Callable[[str, str], bool]) -> None:
        self.date_patterns = [(p, s) for p, s in self.date_patterns if keep(p, s)]

    def _retain_times(self, keep: Callable[[str, str], bool]) -> None:
        self.time_patterns = [(p, s) for p, s in self.time_patterns if keep(p, s)]

    def has_rfc3339(self) -> bool:
        return any(p == RFC3339_PATTERN for p, _ in self.date_patterns)

    def clear(self) -> None:
        self.date_patterns = []
        self.time_patterns = []

    def narrow(self, value: str) -> bool:
        """
        Remove every candidate the value contradicts.

        Returns True when at least one date candidate still matches.
        """
        value = value.strip()
        if not value:
            return bool(self.date_patterns)

        date_sep = next((c for c in value if c in DATE_SEPARATORS), None)
        if date_sep is None:
            self.clear()
            return False

        self._retain_dates(lambda p, s: s == date_sep or p == RFC3339_PATTERN)

        if self.has_rfc3339():
            if is_rfc3339(value):
                self._retain_dates(lambda p, s: p == RFC3339_PATTERN)
                self.time_patterns = []
                return True
            self._retain_dates(lambda p, s: p != RFC3339_PATTERN)

        time_sep = next((c for c in value if c in TIME_SEPARATORS), None)
        self._retain_dates(lambda p, s: try_parse_date(value, p, s, time_sep is not None))

        if time_sep is not None:
            self._retain_times(lambda p, s: s == time_sep and try_parse_time(value, p))
        else:
            self.time_patterns = []

        return bool(self.date_patterns)

    @property
    def best_date_pattern(self) -> Optional[str]:
        return self.date_patterns[0][0] if self.date_patterns else None

    @property
    def best_time_pattern(self) -> Optional[str]:
        return self.time_patterns[0][0] if self.time_patterns else None

    def format_string(self) -> Optional[str]:
        """Combined format of the best surviving candidates, e.g. "yyyy-mm-dd hh:nn"."""
        date = self.best_date_pattern
        if date is None:
            return None
        time = self.best_time_pattern
        return f"{date} {time}" if time else date
