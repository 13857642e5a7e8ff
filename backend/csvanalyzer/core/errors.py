"""
Error taxonomy for CSV analysis.

Every failure the pipeline can report maps to exactly one CsvErrorType
code. Stages raise an AnalysisError subclass carrying the context it
knows about (row, column, offending text); the analyzer catches it once
and turns it into an error response.
"""

from enum import IntEnum
from typing import Any, Dict, Optional


class CsvErrorType(IntEnum):
    """Stable error codes exposed in the Error field of a failed analysis."""

    PROCESS = 0
    DATABASE = 1
    SAMPLE = 2
    BINARY = 3
    VARIOUS_FIELDS_COUNT = 4
    TOO_MANY_COLUMNS = 5
    COLUMN_TOO_LONG = 6
    VALUE_TOO_LONG = 7
    DUPLICATE_FIELD = 8
    EMAIL_NOT_FOUND = 9

    @property
    def message_template(self) -> str:
        return _USER_MESSAGES[self]


_USER_MESSAGES: Dict[CsvErrorType, str] = {
    CsvErrorType.PROCESS: "Unhandled exception",
    CsvErrorType.DATABASE: "Database error",
    CsvErrorType.SAMPLE: "Could not get a sample for analyze. Is file empty?",
    CsvErrorType.BINARY: "File is binary file",
    CsvErrorType.VARIOUS_FIELDS_COUNT: (
        "Can not determine the number of columns. Too much variation in column count"
    ),
    CsvErrorType.TOO_MANY_COLUMNS: "Too many columns detected. Maximum {max_columns} columns allowed",
    CsvErrorType.COLUMN_TOO_LONG: 'Column name "{field}" in column {column} is too long',
    CsvErrorType.VALUE_TOO_LONG: 'Value "{field}" in row {row}, column {column} is too long',
    CsvErrorType.DUPLICATE_FIELD: 'Duplicate field name "{field}"',
    CsvErrorType.EMAIL_NOT_FOUND: "Email column not found",
}


class AnalysisError(Exception):
    """Base class for failures that terminate an analysis."""

    error_type: CsvErrorType = CsvErrorType.PROCESS

    def __init__(
        self,
        message: str = "",
        *,
        row: Optional[int] = None,
        column: Optional[int] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message or self.error_type.message_template)
        self.row = row
        self.column = column
        self.field = field

    @property
    def internal_message(self) -> str:
        return f"{type(self).__name__}: {self}"

    def template_args(self) -> Dict[str, Any]:
        return {"row": self.row, "column": self.column, "field": self.field}

    def user_message(self) -> str:
        return self.error_type.message_template.format(**self.template_args())


class ProcessError(AnalysisError):
    """Unexpected failure outside the analysis rules (I/O error, bug)."""

    error_type = CsvErrorType.PROCESS

    @classmethod
    def from_exception(cls, exc: Exception) -> "ProcessError":
        return cls(f"{type(exc).__name__}: {exc}")

    @property
    def internal_message(self) -> str:
        return str(self)


class SampleError(AnalysisError):
    error_type = CsvErrorType.SAMPLE


class BinaryFileError(AnalysisError):
    error_type = CsvErrorType.BINARY


class EncodingError(AnalysisError):
    """Sample bytes are not valid in the detected charset."""

    error_type = CsvErrorType.PROCESS


class ColumnCountVariationError(AnalysisError):
    error_type = CsvErrorType.VARIOUS_FIELDS_COUNT


class TooManyColumnsError(AnalysisError):
    error_type = CsvErrorType.TOO_MANY_COLUMNS

    def __init__(self, columns_count: int, max_columns: int):
        super().__init__(f"{columns_count} columns detected, maximum is {max_columns}")
        self.columns_count = columns_count
        self.max_columns = max_columns

    def template_args(self) -> Dict[str, Any]:
        return {**super().template_args(), "max_columns": self.max_columns}


class ColumnNameTooLongError(AnalysisError):
    error_type = CsvErrorType.COLUMN_TOO_LONG

    def __init__(self, name: str, column: int, max_length: int, row: int = 1):
        super().__init__(
            f"Column name in column {column} has {len(name)} characters, maximum is {max_length}",
            row=row,
            column=column,
            field=name,
        )


class ValueTooLongError(AnalysisError):
    error_type = CsvErrorType.VALUE_TOO_LONG

    def __init__(self, value: str, row: int, column: int, max_length: int):
        super().__init__(
            f"Value in row {row}, column {column} has {len(value)} characters, maximum is {max_length}",
            row=row,
            column=column,
            field=value,
        )


class DuplicateColumnNameError(AnalysisError):
    error_type = CsvErrorType.DUPLICATE_FIELD

    def __init__(self, name: str, column: int, first_column: int, row: int = 1):
        super().__init__(
            f"Column {column} repeats the name of column {first_column}",
            row=row,
            column=column,
            field=name,
        )


class EmailColumnNotFoundError(AnalysisError):
    error_type = CsvErrorType.EMAIL_NOT_FOUND


class DatabaseError(AnalysisError):
    """Contact metadata lookup failed. Callers downgrade it to an empty result."""

    error_type = CsvErrorType.DATABASE


class ConfigurationError(Exception):
    """Raised when configuration loading fails."""
    pass
