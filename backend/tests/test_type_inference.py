"""
Tests for per-value classification and the column downgrade chain.
"""

import pytest

from csvanalyzer.models.types import DataType
from csvanalyzer.services.type_inference import (
    ColumnTypeDetector,
    detect_data_type,
    downgrade_types,
    is_float,
    is_integer,
)


@pytest.mark.parametrize("values,expected", [
    (["0", "1", "5"], DataType.INTEGER),
    (["true", "false", "5"], DataType.STRING),
    (["1", "2", "3.5"], DataType.FLOAT),
    (["1.5", "0"], DataType.STRING),
    (["0", "1.5"], DataType.FLOAT),
    (["5", "1"], DataType.INTEGER),
    (["TRUE", "false"], DataType.BOOLEAN),
    (["0", "1", "1"], DataType.BOOLEAN),
    (["-5", "+12"], DataType.INTEGER),
    (["1,5", "2,25"], DataType.FLOAT),
    (["abc", "1"], DataType.STRING),
    (["John", "Jane"], DataType.STRING),
])
def test_column_types(values, expected):
    """Test inferred column types for typical columns."""
    data_type, _ = detect_data_type(values)
    assert data_type == expected


def test_datetime_column():
    """Test that a date column gets DateTime and its format."""
    assert detect_data_type(["2020-01-15", "2020-02-20"]) == (DataType.DATETIME, "yyyy-mm-dd")


def test_datetime_column_with_bad_date():
    """Test that an impossible date turns the column into String."""
    assert detect_data_type(["2020-01-15", "2020-13-45"]) == (DataType.STRING, None)


def test_empty_values_are_skipped():
    """Test that empty values do not influence the type."""
    assert detect_data_type(["", "42", "  ", "7"]) == (DataType.INTEGER, None)


def test_empty_column_adopts_hint():
    """Test that a column without values takes the hint type."""
    assert detect_data_type(["", ""], hint=DataType.FLOAT) == (DataType.FLOAT, None)
    assert detect_data_type(["", ""]) == (DataType.STRING, None)


def test_integer_outside_int64_is_float():
    """Test that integers beyond 64 bits fall through to Float."""
    assert is_integer("9223372036854775807") is True
    assert is_integer("9223372036854775808") is False
    assert detect_data_type(["9223372036854775808"])[0] == DataType.FLOAT


@pytest.mark.parametrize("value,expected", [
    ("3.14", True),
    ("3,14", True),
    ("-.5", True),
    ("1e10", True),
    ("1.2.3", False),
    ("nan", False),
])
def test_is_float(value, expected):
    """Test float recognition."""
    assert is_float(value) is expected


def test_downgrade_walks_from_current_type():
    """Test that a mismatch walks the column type down until it meets the value type."""
    assert downgrade_types(DataType.BOOLEAN, DataType.FLOAT, False) == DataType.FLOAT
    assert downgrade_types(DataType.INTEGER, DataType.DATETIME, False) == DataType.DATETIME
    assert downgrade_types(DataType.FLOAT, DataType.BOOLEAN, False) == DataType.STRING
    assert downgrade_types(DataType.DATETIME, DataType.INTEGER, False) == DataType.STRING
    assert downgrade_types(DataType.STRING, DataType.BOOLEAN, False) == DataType.STRING


def test_integer_and_float_meet_at_float():
    """Test that integers and floats combine to Float in either order."""
    assert downgrade_types(DataType.INTEGER, DataType.FLOAT, False) == DataType.FLOAT
    assert downgrade_types(DataType.FLOAT, DataType.INTEGER, False) == DataType.FLOAT


def test_numeric_boolean_widens_to_integer():
    """Test that 0/1 values combine with integers in either order."""
    assert downgrade_types(DataType.INTEGER, DataType.BOOLEAN, False) == DataType.INTEGER
    assert downgrade_types(DataType.BOOLEAN, DataType.INTEGER, False) == DataType.INTEGER


@pytest.mark.parametrize("later", ["5", "2.5", "1"])
def test_number_after_dates_is_string(later):
    """Test that a number in a date column turns it into String without a format."""
    assert detect_data_type(["2020-01-15", later]) == (DataType.STRING, None)


def test_dates_after_numbers_stay_datetime():
    """Test that dates after integers move the column down to DateTime."""
    assert detect_data_type(["2020", "2020-01-15"]) == (DataType.DATETIME, "yyyy-mm-dd")


def test_string_boolean_never_mixes():
    """Test that a true/false column mixed with another type becomes String."""
    assert downgrade_types(DataType.BOOLEAN, DataType.FLOAT, True) == DataType.STRING


def test_detector_stops_at_string():
    """Test that the detector finishes once the column is String."""
    detector = ColumnTypeDetector()
    detector.update("hello")
    assert detector.finished is True
    detector.update("42")
    assert detector.data_type == DataType.STRING
    assert detector.observed == 1
