"""
Column Type Inference — downgrade chain over sampled values

Each value is classified on its own (string, boolean, integer, float,
datetime). A column starts at the type of its first non-empty value and
only ever moves down the chain

    Boolean -> Integer -> Float -> DateTime -> String

when a value of another type shows up. A value ranked above the column
(a number in a date column) walks it all the way to String. Once a
column reaches String the rest of its values are not looked at.
"""

import logging
import re
from typing import Iterable, Optional, Tuple

from ..models.types import DataType
from .datetime_patterns import DateTimePatternSet, could_be_datetime

logger = logging.getLogger("csvanalyzer.type_inference")

_NUMERIC_CHARS = frozenset("0123456789.,-+")
_BOOLEAN_WORDS = ("true", "false")

INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)
FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

DOWNGRADE_CHAIN = (
    DataType.BOOLEAN,
    DataType.INTEGER,
    DataType.FLOAT,
    DataType.DATETIME,
    DataType.STRING,
)
_RANK = {t: i for i, t in enumerate(DOWNGRADE_CHAIN)}


def is_string_value(value: str) -> bool:
    """True when the value holds characters no number or boolean can contain."""
    if value.lower() in _BOOLEAN_WORDS:
        return False
    return any(c not in _NUMERIC_CHARS for c in value)


def parse_boolean(value: str) -> Optional[bool]:
    """
    Recognise a boolean.

    Returns True for the string form (true/false), False for the numeric
    form (0/1), None when the value is not a boolean.
    """
    if value.lower() in _BOOLEAN_WORDS:
        return True
    if value in ("0", "1"):
        return False
    return None


def is_integer(value: str) -> bool:
    if not INTEGER_RE.fullmatch(value):
        return False
    return INT64_MIN <= int(value) <= INT64_MAX


def is_float(value: str) -> bool:
    normalized = value.replace(",", ".")
    if not FLOAT_RE.fullmatch(normalized):
        return False
    try:
        float(normalized)
    except ValueError:
        return False
    return True


def downgrade_types(current: DataType, new: DataType, had_string_bool: bool) -> DataType:
    """
    Combine the column type with the type of a new value.

    Integer and Float meet at Float, and a numeric boolean widens to
    Integer. A string-form boolean never mixes with other types. Any
    other mismatch walks the current type down the chain until it meets
    the new type or reaches String.
    """
    if current == new:
        return current
    if {current, new} == {DataType.INTEGER, DataType.FLOAT}:
        return DataType.FLOAT
    if DataType.BOOLEAN in (current, new):
        if had_string_bool:
            return DataType.STRING
        if DataType.INTEGER in (current, new):
            return DataType.INTEGER

    data_type = current
    while data_type not in (new, DataType.STRING):
        data_type = DOWNGRADE_CHAIN[_RANK[data_type] + 1]
    return data_type


class ColumnTypeDetector:
    """
    Incremental type inference for a single column.

    Keeps the running type, whether a true/false boolean was seen, and
    the column's datetime pattern candidates across all of its values.
    """

    def __init__(self):
        self.data_type: Optional[DataType] = None
        self.had_string_bool = False
        self.patterns = DateTimePatternSet()
        self.observed = 0

    @property
    def finished(self) -> bool:
        return self.data_type == DataType.STRING

    def classify(self, value: str) -> DataType:
        """Classify one trimmed, non-empty value."""
        datetime_shaped = could_be_datetime(value)
        if not datetime_shaped and is_string_value(value):
            return DataType.STRING

        string_form = parse_boolean(value)
        if string_form is not None:
            if string_form:
                self.had_string_bool = True
            return DataType.BOOLEAN

        if is_integer(value):
            return DataType.INTEGER
        if is_float(value):
            return DataType.FLOAT

        if datetime_shaped and self.patterns.narrow(value):
            return DataType.DATETIME
        return DataType.STRING

    def update(self, value: str) -> Optional[DataType]:
        """Feed one value; empty values are ignored. Returns the running type."""
        value = value.strip()
        if not value or self.finished:
            return self.data_type

        self.observed += 1
        value_type = self.classify(value)
        if self.data_type is None:
            self.data_type = value_type
        else:
            self.data_type = downgrade_types(self.data_type, value_type, self.had_string_bool)
        return self.data_type

    def result(self, hint: Optional[DataType] = None) -> Tuple[DataType, Optional[str]]:
        """Final (type, datetime format) for the column."""
        if self.observed == 0:
            return (hint if hint is not None else DataType.STRING), None

        if self.data_type == DataType.DATETIME:
            fmt = self.patterns.format_string()
            if fmt is None:
                return DataType.STRING, None
            return DataType.DATETIME, fmt

        return self.data_type, None


def detect_data_type(
    values: Iterable[str],
    hint: Optional[DataType] = None,
) -> Tuple[DataType, Optional[str]]:
    """Infer the type (and datetime format) of a column from its values."""
    detector = ColumnTypeDetector()
    for value in values:
        detector.update(value)
        if detector.finished:
            break
    return detector.result(hint)
