"""Configuration management for the Hunt match summary extractor."""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

import platformdirs
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_INPUT_PATH = Path(
    r"C:\Program Files (x86)\Steam\steamapps\common\Hunt Showdown"
    r"\user\profiles\default\attributes.xml"
)
DEFAULT_TEMP_FILE = "TEMP.CSV"


class SchemaStrategy(str, Enum):
    """How teams and players are discovered in the attribute dump."""
    AUTO = "auto"
    PATTERN = "pattern"
    FIXED = "fixed"


class LogFormat(str, Enum):
    """Console log renderers."""
    TEXT = "text"
    JSON = "json"
    STRUCTURED = "structured"


class AppSettings(BaseSettings):
    """Extractor settings with dotenv support.

    Every field can be set through an environment variable prefixed with
    ``HUNT_`` (``HUNT_OUTPUT_DIR``, ``HUNT_ZERO_BASED``...) or a ``.env`` file.
    Command-line options override these values.
    """

    model_config = SettingsConfigDict(
        env_prefix='HUNT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    # ===================
    # Input / Output
    # ===================
    INPUT_PATH: Path = Field(
        default=DEFAULT_INPUT_PATH,
        description="Path of the game's 'attributes.xml'"
    )
    OUTPUT_DIR: Optional[Path] = Field(
        default=None,
        description='Snapshot directory. Defaults to <Documents>/Hunt/MatchData'
    )
    TEMP_FILE: str = Field(
        default=DEFAULT_TEMP_FILE,
        description='Filename of the staging CSV inside the output directory'
    )

    # ===================
    # Extraction
    # ===================
    SINGLE: bool = Field(default=False, description='Run once instead of watching the input')
    ZERO_BASED: bool = Field(default=False, description='Zero-based team and player numbers')
    SCHEMA: SchemaStrategy = Field(
        default=SchemaStrategy.AUTO,
        description='Schema discovery strategy: auto, pattern, or fixed'
    )

    # ===================
    # Watching
    # ===================
    DEBOUNCE_S: float = Field(
        default=2.0,
        gt=0,
        description='Seconds of quiet before a burst of file changes triggers a run'
    )

    # ===================
    # Logging
    # ===================
    LOG_LEVEL: str = Field(default='INFO', description='Logging level')
    LOG_FORMAT: LogFormat = Field(default=LogFormat.TEXT, description='Log format: text, json, or structured')
    LOG_FILE: Optional[Path] = Field(default=None, description='Log file path')
    LOG_MAX_SIZE: str = Field(default='10MB', description='Rotate the log file past this size')
    LOG_BACKUP_COUNT: int = Field(default=3, ge=0, description='Rotated log files to keep')

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(valid_levels)}")
        return v_upper

    @field_validator('SCHEMA', 'LOG_FORMAT', mode='before')
    @classmethod
    def normalize_choice(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('TEMP_FILE')
    @classmethod
    def validate_temp_file(cls, v: str) -> str:
        """The staging file must live directly inside the output directory."""
        v = v.strip()
        if not v or Path(v).name != v:
            raise ValueError(f"TEMP_FILE must be a bare filename (got: {v!r})")
        return v


@lru_cache()
def get_settings() -> AppSettings:
    """Get cached application settings.

    Loads settings from:
    1. Environment variables
    2. .env file (if exists)
    3. Default values
    """
    return AppSettings()


def default_output_dir() -> Path:
    """Per-user snapshot directory under the OS documents folder."""
    return Path(platformdirs.user_documents_dir()) / "Hunt" / "MatchData"


def resolve_output_dir(settings: AppSettings) -> Path:
    """Get the effective output directory for ``settings``."""
    if settings.OUTPUT_DIR is not None:
        return settings.OUTPUT_DIR.expanduser()
    return default_output_dir()
