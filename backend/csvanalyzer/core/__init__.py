from .config import Settings, DbSettings, get_settings, load_db_settings_from_file, settings
from .errors import AnalysisError, ConfigurationError, CsvErrorType, ProcessError

__all__ = [
    "Settings",
    "DbSettings",
    "get_settings",
    "load_db_settings_from_file",
    "settings",
    "AnalysisError",
    "ConfigurationError",
    "CsvErrorType",
    "ProcessError",
]
