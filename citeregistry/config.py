"""
Configuration module for CiteRegistry.

Centralizes all configuration settings, environment variables, and defaults.
Settings can be overridden via environment variables or .env file.

Usage:
    from citeregistry.config import config

    # Access settings
    capacity = config.MAX_REFERENCES
    width = config.LINE_WIDTH
"""

import os
from pathlib import Path
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load from project root .env file
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)


def _get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.environ.get(key, default)


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    if val in ("false", "0", "no", "off"):
        return False
    return default


def _get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    val = os.environ.get(key, "")
    try:
        return int(val) if val else default
    except ValueError:
        return default


def _get_env_float(key: str, default: float = 0.0) -> float:
    """Get float environment variable."""
    val = os.environ.get(key, "")
    try:
        return float(val) if val else default
    except ValueError:
        return default


DEFAULT_MAX_REFERENCES = 1024
DEFAULT_LINE_WIDTH = 71
DEFAULT_HARD_SPLIT_OFFSET = 69
DEFAULT_DOI_URL_PREFIX = "https://doi.org/"


@dataclass
class Config:
    """
    CiteRegistry configuration settings.

    All settings can be overridden via environment variables.
    """

    # ==========================================================================
    # Registry Settings
    # ==========================================================================

    # Maximum number of references a registry accepts
    MAX_REFERENCES: int = field(default_factory=lambda: _get_env_int(
        "MAX_REFERENCES", DEFAULT_MAX_REFERENCES
    ))

    # Seconds a worker waits for the others during citation aggregation
    # (0 waits forever)
    AGGREGATION_TIMEOUT: float = field(default_factory=lambda: _get_env_float(
        "AGGREGATION_TIMEOUT", 0.0
    ))

    # ==========================================================================
    # Output Settings
    # ==========================================================================

    # Last column used by the journal style reference list
    LINE_WIDTH: int = field(default_factory=lambda: _get_env_int(
        "LINE_WIDTH", DEFAULT_LINE_WIDTH
    ))

    # Where an overlong journal line is cut when wrapping is not enough
    HARD_SPLIT_OFFSET: int = field(default_factory=lambda: _get_env_int(
        "HARD_SPLIT_OFFSET", DEFAULT_HARD_SPLIT_OFFSET
    ))

    # DOIs are stored bare and turned into links with this prefix
    DOI_URL_PREFIX: str = field(default_factory=lambda: _get_env(
        "DOI_URL_PREFIX", DEFAULT_DOI_URL_PREFIX
    ))

    # ==========================================================================
    # Logging Settings
    # ==========================================================================

    # Log level: DEBUG, INFO, WARNING, ERROR
    LOG_LEVEL: str = field(default_factory=lambda: _get_env(
        "LOG_LEVEL", "INFO"
    ))

    # Enable verbose logging
    VERBOSE: bool = field(default_factory=lambda: _get_env_bool(
        "VERBOSE", False
    ))

    # Enable file logging
    ENABLE_FILE_LOGGING: bool = field(default_factory=lambda: _get_env_bool(
        "ENABLE_FILE_LOGGING", False
    ))

    # Log file rotation size (MB)
    LOG_ROTATION_SIZE_MB: int = field(default_factory=lambda: _get_env_int(
        "LOG_ROTATION_SIZE_MB", 10
    ))

    # Number of log files to retain
    LOG_RETENTION_COUNT: int = field(default_factory=lambda: _get_env_int(
        "LOG_RETENTION_COUNT", 5
    ))

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.LOG_LEVEL.upper() not in valid_levels:
            self.LOG_LEVEL = 'INFO'

        # Ensure positive values
        if self.MAX_REFERENCES < 1:
            self.MAX_REFERENCES = DEFAULT_MAX_REFERENCES
        if self.LINE_WIDTH < 10:
            self.LINE_WIDTH = DEFAULT_LINE_WIDTH
        if not 0 < self.HARD_SPLIT_OFFSET < self.LINE_WIDTH:
            self.HARD_SPLIT_OFFSET = self.LINE_WIDTH - 2
        if self.AGGREGATION_TIMEOUT < 0:
            self.AGGREGATION_TIMEOUT = 0.0
        if not self.DOI_URL_PREFIX:
            self.DOI_URL_PREFIX = DEFAULT_DOI_URL_PREFIX

    def to_dict(self) -> dict:
        """Convert config to dictionary for logging/debugging."""
        return {
            'MAX_REFERENCES': self.MAX_REFERENCES,
            'AGGREGATION_TIMEOUT': self.AGGREGATION_TIMEOUT,
            'LINE_WIDTH': self.LINE_WIDTH,
            'HARD_SPLIT_OFFSET': self.HARD_SPLIT_OFFSET,
            'DOI_URL_PREFIX': self.DOI_URL_PREFIX,
            'LOG_LEVEL': self.LOG_LEVEL,
            'ENABLE_FILE_LOGGING': self.ENABLE_FILE_LOGGING,
        }


# Global config instance
config = Config()


# ==========================================================================
# Version Information
# ==========================================================================

VERSION = "1.0.0"


__all__ = ['config', 'Config', 'VERSION']
