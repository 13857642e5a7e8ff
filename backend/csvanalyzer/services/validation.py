"""Length and uniqueness checks on header names and sampled values."""

from typing import Dict, List, Sequence

from ..core.config import settings
from ..core.errors import ColumnNameTooLongError, DuplicateColumnNameError, ValueTooLongError


def is_valid_string_size(value: str, max_length: int = settings.MAX_STRING_SIZE) -> bool:
    return len(value) <= max_length


def default_header_names(columns_count: int) -> List[str]:
    return [f"Field{i}" for i in range(1, columns_count + 1)]


def validate_header_names(
    headers: Sequence[str],
    max_length: int = settings.MAX_STRING_SIZE,
    row: int = 1,
) -> None:
    """
    Check column names for length, then for case-insensitive duplicates.
    Errors report row, the file line holding the names.

    Raises:
        ColumnNameTooLongError: a name is longer than max_length.
        DuplicateColumnNameError: a name repeats an earlier one.
    """
    for idx, name in enumerate(headers):
        if not is_valid_string_size(name, max_length):
            raise ColumnNameTooLongError(name, column=idx + 1, max_length=max_length, row=row)

    seen: Dict[str, int] = {}
    for idx, name in enumerate(headers):
        key = name.lower()
        if key in seen:
            raise DuplicateColumnNameError(name, column=idx + 1, first_column=seen[key] + 1, row=row)
        seen[key] = idx


def validate_field_sizes(
    rows: Sequence[Sequence[str]],
    row_numbers: Sequence[int],
    max_length: int = settings.MAX_STRING_SIZE,
) -> None:
    """
    Check every value of the given rows against max_length.

    row_numbers holds the 1-based file line of each row, so errors point
    at the line as it appears in the file.
    """
    for row_number, row in zip(row_numbers, rows):
        for col_idx, value in enumerate(row):
            if not is_valid_string_size(value, max_length):
                raise ValueTooLongError(
                    value,
                    row=row_number,
                    column=col_idx + 1,
                    max_length=max_length,
                )
