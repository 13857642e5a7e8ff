"""
Analysis response models.

Field names serialize in PascalCase because downstream import tooling
keys off the legacy JSON layout. Separators travel as two-digit
uppercase hex of the character code, or an empty string when absent.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from ..core.errors import AnalysisError, CsvErrorType
from .types import DataType


def to_hex(char: Optional[str]) -> str:
    """Render a separator character as two-digit uppercase hex."""
    if not char:
        return ""
    return f"{ord(char):02X}"


class _PascalModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class SuccessResponse(_PascalModel):
    """Detected format, column mapping and a bounded data preview."""

    skip_header: bool = True
    locale: str
    charset: str
    field_separator: str = ""
    text_delimiter: str = ""
    date_time_format: Optional[str] = None
    header_names: List[str] = Field(default_factory=list)
    field_names: List[str] = Field(default_factory=list)
    data_types: List[int] = Field(default_factory=list)
    data: Optional[List[List[str]]] = None

    @property
    def is_error(self) -> bool:
        return False

    def column_types(self) -> List[DataType]:
        return [DataType(code) for code in self.data_types]


class ErrorResponse(_PascalModel):
    """Failure code, messages and the cursor position at failure."""

    error: int
    error_msg_user: str
    error_msg_internal: str = ""
    error_row: int = 0
    error_column: int = 0
    error_field: str = ""
    error_data_type: int = 0
    error_column_count: int = 0
    skip_header: bool = False
    locale: str
    charset: str
    field_separator: str = ""
    text_delimiter: str = ""
    header_names: Optional[List[str]] = None
    field_names: Optional[List[str]] = None
    data_types: Optional[List[int]] = None

    @property
    def is_error(self) -> bool:
        return True

    @property
    def error_type(self) -> CsvErrorType:
        return CsvErrorType(self.error)

    @classmethod
    def from_error(cls, error: AnalysisError, locale: str, charset: str) -> "ErrorResponse":
        return cls(
            error=int(error.error_type),
            error_msg_user=error.user_message(),
            error_msg_internal=error.internal_message,
            locale=locale,
            charset=charset,
        )


AnalysisResponse = Union[SuccessResponse, ErrorResponse]
