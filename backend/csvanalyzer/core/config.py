from configparser import ConfigParser, Error as ConfigParserError
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Application configuration settings."""

    # Application
    APP_NAME: str = "Contact CSV Analyzer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"
    DEFAULT_LOCALE: str = "en_US"

    # Sampling
    MAX_SCAN_LINES: int = 1000
    MAX_BYTES: int = 51200  # 50KB
    BUFF_SIZE: int = 10240  # 10KB read chunk
    CHARSET_GUESS_SIZE: int = 5120  # quick charset guess below this size

    # Dialect detection
    FIELD_DELIM_PERCENT: int = 50
    TEXT_SEP_PERCENT: int = 50
    COLUMN_COUNT_PERCENT: int = 90
    MAX_BUCKET: int = 4

    # Validation / output
    MAX_COLUMNS: int = 200
    MAX_STRING_SIZE: int = 1000
    MAX_RETURN_LINES: int = 10

    # Contact metadata database (libpq variable names)
    PGHOST: Optional[str] = None
    PGPORT: int = 5432
    PGDATABASE: Optional[str] = None
    PGUSER: Optional[str] = None
    PGPASSWORD: Optional[str] = None
    DB_CONNECT_TIMEOUT: float = 5.0
    CONFIG_FILE: str = "/etc/mailjet.conf"

    class Config:
        env_file = ".env"
        case_sensitive = True

    def db_settings(self) -> Optional["DbSettings"]:
        """Database settings from the environment, or None when incomplete."""
        if not (self.PGHOST and self.PGDATABASE and self.PGUSER):
            return None
        return DbSettings(
            host=self.PGHOST,
            port=self.PGPORT,
            database=self.PGDATABASE,
            user=self.PGUSER,
            password=self.PGPASSWORD or "",
        )


class DbSettings(BaseModel):
    """Connection parameters for the global contact metadata database."""

    host: str
    port: int = 5432
    database: str
    user: str
    password: str = ""


def load_db_settings_from_file(path: str) -> DbSettings:
    """
    Load database settings from the [PGGLOBAL] section of an INI file.

    Section names are matched case-insensitively and surrounding quotes
    are stripped from values. PORT is optional and defaults to 5432.
    """
    parser = ConfigParser(strict=False, allow_no_value=True, interpolation=None)
    try:
        with open(path, encoding="utf-8") as f:
            parser.read_file(f)
    except (OSError, ConfigParserError) as e:
        raise ConfigurationError(f"Failed to read config file: {e}") from e

    section = next((s for s in parser.sections() if s.upper() == "PGGLOBAL"), None)
    if section is None:
        raise ConfigurationError("Missing [PGGLOBAL] section in config file")

    values = {
        key.upper(): (value or "").strip().strip('"').strip("'")
        for key, value in parser.items(section)
    }

    def required(key: str) -> str:
        value = values.get(key)
        if not value:
            raise ConfigurationError(f"Missing or empty {key} in [PGGLOBAL] section")
        return value

    try:
        port = int(values.get("PORT", ""))
    except ValueError:
        port = 5432

    return DbSettings(
        host=required("HOSTNAME"),
        port=port,
        database=required("DATABASENAME"),
        user=required("USERNAME"),
        password=required("PASSWORD"),
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
