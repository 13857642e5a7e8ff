"""
CSV Analyzer — orchestrates the full analysis of one contact file

Pipeline:
1. Sample the head of the file and reject binary content
2. Detect the charset and decode the sample
3. Sniff quote character, delimiter and header presence
4. Settle the column count and tokenize the sample
5. Validate header names, locate the email column
6. Infer column types, using known contact properties as hints
7. Validate the preview rows and build the response

Each stage raises an AnalysisError subclass on failure. The analyzer
catches it once and reports it together with the cursor (row, column,
data type, column count) reached at that point.
"""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, List, Optional, Union

from ..core.config import Settings, get_settings
from ..core.errors import AnalysisError, BinaryFileError, ProcessError, SampleError
from ..models.responses import AnalysisResponse, ErrorResponse, SuccessResponse, to_hex
from ..models.types import ColumnProfile, ContactProperty, DataType
from .charset import decode_sample, detect_charset
from .dialect import Dialect, sniff_dialect, split_lines, validate_columns_count
from .email_detection import locate_email_column
from .properties import PropertySource, fetch_properties_or_empty, match_property
from .sampling import is_binary_data, read_sample
from .tokenizer import parse_rows
from .type_inference import detect_data_type
from .validation import default_header_names, validate_field_sizes, validate_header_names

logger = logging.getLogger("csvanalyzer.analyzer")

EMAIL_FIELD_NAME = "email"


@dataclass
class AnalysisCursor:
    """Position reached by the analysis, reported when it fails."""
    row: int = 0
    column: int = 0
    field: str = ""
    data_type: DataType = DataType.STRING
    column_count: int = 0


@dataclass
class _AnalysisState:
    charset: str = ""
    dialect: Optional[Dialect] = None
    cursor: AnalysisCursor = field(default_factory=AnalysisCursor)
    header_names: Optional[List[str]] = None
    profiles: List[ColumnProfile] = field(default_factory=list)


class CsvAnalyzer:
    """
    Detects the format of a contact CSV file and profiles its columns.

    Stateless between calls: every analyze() owns its buffers and
    pattern sets, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        property_source: Optional[PropertySource] = None,
    ):
        self.settings = settings or get_settings()
        self.property_source = property_source

    def analyze(
        self,
        source: Union[str, BinaryIO],
        locale: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> AnalysisResponse:
        """Analyze a file path or binary stream. Never raises."""
        locale = locale or self.settings.DEFAULT_LOCALE
        state = _AnalysisState()
        name = getattr(source, "name", source)

        try:
            response = self._run(source, locale, account_id, state)
        except AnalysisError as e:
            logger.info("Analysis of %s failed: %s", name, e.internal_message)
            return self._error_response(e, locale, state)
        except Exception as e:
            logger.exception("Unexpected error analyzing %s", name)
            return self._error_response(ProcessError.from_exception(e), locale, state)

        logger.info(
            "Analyzed %s: charset=%s columns=%d header=%s",
            name, response.charset, len(response.data_types), response.skip_header,
        )
        return response

    def _run(
        self,
        source: Union[str, BinaryIO],
        locale: str,
        account_id: Optional[int],
        state: _AnalysisState,
    ) -> SuccessResponse:
        s = self.settings
        cursor = state.cursor

        sample = read_sample(source, s.MAX_BYTES, s.MAX_SCAN_LINES, s.BUFF_SIZE)
        if is_binary_data(sample.data):
            raise BinaryFileError("First line holds too many unprintable bytes")

        state.charset = detect_charset(sample.data, s.CHARSET_GUESS_SIZE)
        text = decode_sample(sample.data, state.charset)
        numbered = split_lines(text, max_lines=s.MAX_SCAN_LINES + 1, drop_partial_last=sample.truncated)
        if not numbered:
            raise SampleError("Sample holds only empty lines")
        line_numbers = [number for number, _ in numbered]
        lines = [line for _, line in numbered]

        dialect = sniff_dialect(lines, s.FIELD_DELIM_PERCENT, s.TEXT_SEP_PERCENT)
        state.dialect = dialect

        cursor.column_count = validate_columns_count(
            lines,
            dialect.delimiter,
            dialect.quote_char,
            min_percent=s.COLUMN_COUNT_PERCENT,
            max_bucket=s.MAX_BUCKET,
            max_columns=s.MAX_COLUMNS,
        )
        rows = parse_rows(lines, dialect.delimiter, dialect.quote_char, cursor.column_count)

        if dialect.has_header:
            cursor.row = line_numbers[0]
            header_names = rows[0]
            data_rows = rows[1:]
            data_line_numbers = line_numbers[1:]
        else:
            header_names = default_header_names(cursor.column_count)
            data_rows = rows
            data_line_numbers = line_numbers
        validate_header_names(header_names, s.MAX_STRING_SIZE, row=cursor.row or 1)
        state.header_names = header_names

        email_index = locate_email_column(data_rows, header_names if dialect.has_header else None)

        properties = fetch_properties_or_empty(self.property_source, account_id)
        for index in range(cursor.column_count):
            cursor.column = index + 1
            cursor.field = header_names[index]
            profile = self._profile_column(
                index,
                [row[index] for row in data_rows],
                match_property(header_names[index], properties) if dialect.has_header else None,
                is_email=index == email_index,
            )
            cursor.data_type = profile.data_type
            state.profiles.append(profile)

        preview = data_rows[:s.MAX_RETURN_LINES]
        validate_field_sizes(preview, data_line_numbers, s.MAX_STRING_SIZE)

        return SuccessResponse(
            skip_header=dialect.has_header,
            locale=locale,
            charset=state.charset,
            field_separator=to_hex(dialect.delimiter),
            text_delimiter=to_hex(dialect.quote_char),
            date_time_format=_longest_datetime_format(state.profiles),
            header_names=header_names,
            field_names=[p.property_name or "" for p in state.profiles],
            data_types=[int(p.data_type) for p in state.profiles],
            data=preview or None,
        )

    def _profile_column(
        self,
        index: int,
        values: List[str],
        prop: Optional[ContactProperty],
        is_email: bool = False,
    ) -> ColumnProfile:
        hint = prop.datatype if prop else None
        data_type, datetime_format = detect_data_type(values, hint)

        if is_email:
            property_name = EMAIL_FIELD_NAME
        elif prop is not None and prop.datatype == data_type:
            property_name = prop.name
        else:
            property_name = None

        return ColumnProfile(
            index=index,
            data_type=data_type,
            datetime_format=datetime_format,
            property_name=property_name,
        )

    def _error_response(self, error: AnalysisError, locale: str, state: _AnalysisState) -> ErrorResponse:
        response = ErrorResponse.from_error(error, locale, state.charset)
        cursor = state.cursor

        response.error_row = error.row if error.row is not None else cursor.row
        response.error_column = error.column if error.column is not None else cursor.column
        response.error_field = error.field if error.field is not None else cursor.field
        response.error_data_type = int(_error_column_type(error, state))
        response.error_column_count = cursor.column_count

        if state.dialect is not None:
            response.skip_header = state.dialect.has_header
            response.field_separator = to_hex(state.dialect.delimiter)
            response.text_delimiter = to_hex(state.dialect.quote_char)
        if state.header_names is not None:
            response.header_names = state.header_names
        if state.profiles:
            response.field_names = [p.property_name or "" for p in state.profiles]
            response.data_types = [int(p.data_type) for p in state.profiles]
        return response


def _error_column_type(error: AnalysisError, state: _AnalysisState) -> DataType:
    """Type of the column an error points at, else the last profiled one."""
    if error.column is not None and 1 <= error.column <= len(state.profiles):
        return state.profiles[error.column - 1].data_type
    return state.cursor.data_type


def _longest_datetime_format(profiles: List[ColumnProfile]) -> Optional[str]:
    best = None
    for profile in profiles:
        fmt = profile.datetime_format
        if fmt and (best is None or len(fmt) > len(best)):
            best = fmt
    return best


def analyze_file(
    source: Union[str, BinaryIO],
    locale: Optional[str] = None,
    account_id: Optional[int] = None,
    property_source: Optional[PropertySource] = None,
) -> AnalysisResponse:
    """Convenience wrapper around CsvAnalyzer with default settings."""
    return CsvAnalyzer(property_source=property_source).analyze(source, locale, account_id)
