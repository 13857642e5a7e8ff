"""
Shared value types for CSV analysis.

DataType codes are part of the wire format (DataTypes / ErrorDataType)
and of the contact metadata table, so their numeric values are fixed.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple


class DataType(IntEnum):
    """Column data types, numbered as stored in contact metadata."""

    STRING = 0
    INTEGER = 1
    FLOAT = 2
    BOOLEAN = 3
    DATETIME = 4

    @classmethod
    def from_code(cls, code: int) -> "DataType":
        """Map a stored type code to a DataType; unknown codes are strings."""
        try:
            return cls(code)
        except ValueError:
            return cls.STRING


@dataclass(frozen=True)
class ContactProperty:
    """Known contact property name and type, used to name matching columns."""
    name: str
    datatype: DataType


@dataclass
class ColumnProfile:
    """Result of type inference for one column."""
    index: int
    data_type: DataType = DataType.STRING
    datetime_format: Optional[str] = None
    property_name: Optional[str] = None


@dataclass(frozen=True)
class DatePattern:
    pattern: str
    separator: str


@dataclass(frozen=True)
class TimePattern:
    pattern: str
    separator: str


RFC3339_PATTERN = "rfc3339"

# Priority order matters: the first surviving candidate names the format.
DATE_PATTERNS: Tuple[DatePattern, ...] = (
    DatePattern("yyyy-mm-dd", "-"),
    DatePattern("dd-mm-yyyy", "-"),
    DatePattern("dd/mm/yyyy", "/"),
    DatePattern("dd.mm.yyyy", "."),
    DatePattern("yyyy.dd.mm", "."),
    DatePattern("yyyy.mm.dd", "."),
    DatePattern("yyyy/mm/dd", "/"),
    DatePattern("mm/dd/yyyy", "/"),
    DatePattern("mm.dd.yyyy", "."),
    DatePattern("mm-dd-yyyy", "-"),
)

TIME_PATTERNS: Tuple[TimePattern, ...] = (
    TimePattern("hh:nn:ss am/pm", ":"),
    TimePattern("hh:nn:ss", ":"),
    TimePattern("hh:nn am/pm", ":"),
    TimePattern("hh:nn", ":"),
)

# Candidate field delimiters in priority order.
FIELD_DELIMS: Tuple[str, ...] = ("\x0b", ",", ";", "|", " ", "\t")

# Candidate quote characters in priority order.
TEXT_SEPS: Tuple[str, ...] = ('"', "'")
