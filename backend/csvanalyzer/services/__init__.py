from .analyzer import AnalysisCursor, CsvAnalyzer, analyze_file
from .charset import decode_sample, detect_charset
from .dialect import Dialect, sniff_dialect, validate_columns_count
from .email_detection import is_valid_email, locate_email_column
from .properties import (
    PostgresPropertySource,
    PropertySource,
    StaticPropertySource,
    fetch_properties_or_empty,
)
from .sampling import Sample, is_binary_data, read_sample
from .type_inference import ColumnTypeDetector, detect_data_type

__all__ = [
    "AnalysisCursor",
    "CsvAnalyzer",
    "analyze_file",
    "decode_sample",
    "detect_charset",
    "Dialect",
    "sniff_dialect",
    "validate_columns_count",
    "is_valid_email",
    "locate_email_column",
    "PostgresPropertySource",
    "PropertySource",
    "StaticPropertySource",
    "fetch_properties_or_empty",
    "Sample",
    "is_binary_data",
    "read_sample",
    "ColumnTypeDetector",
    "detect_data_type",
]
