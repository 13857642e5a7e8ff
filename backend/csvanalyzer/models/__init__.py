from .types import (
    ColumnProfile,
    ContactProperty,
    DataType,
    DATE_PATTERNS,
    FIELD_DELIMS,
    TEXT_SEPS,
    TIME_PATTERNS,
)
from .responses import AnalysisResponse, ErrorResponse, SuccessResponse, to_hex

__all__ = [
    "ColumnProfile",
    "ContactProperty",
    "DataType",
    "DATE_PATTERNS",
    "FIELD_DELIMS",
    "TEXT_SEPS",
    "TIME_PATTERNS",
    "AnalysisResponse",
    "ErrorResponse",
    "SuccessResponse",
    "to_hex",
]
