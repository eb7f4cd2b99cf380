"""
Logging configuration for CiteRegistry.

Provides centralized logging setup with:
- Console output (always enabled)
- File logging with rotation (configurable)
- Separate error log for critical issues
"""

import sys
from pathlib import Path
from loguru import logger

# Determine log directory
LOG_DIR = Path(__file__).parent.parent / '.data' / 'logs'

# Flag to track if logging is already configured
_logging_configured = False


def setup_logging(
    log_level: str = "INFO",
    enable_file_logging: bool = False,
    rotation_size_mb: int = 10,
    retention_count: int = 5,
    verbose: bool = False,
    log_dir: Path = None,
):
    """
    Configure logging for CiteRegistry.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        enable_file_logging: Whether to write logs to files
        rotation_size_mb: Size in MB before rotating log file
        retention_count: Number of rotated log files to keep
        verbose: Enable verbose/debug output
        log_dir: Directory for log files (defaults to .data/logs)
    """
    global _logging_configured

    if _logging_configured:
        return

    # Remove default handler
    logger.remove()

    effective_level = "DEBUG" if verbose else log_level.upper()

    console_format = (
        "<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
        "<level>{message}</level>"
    )
    logger.add(
        sys.stderr,
        format=console_format,
        level=effective_level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if enable_file_logging:
        directory = Path(log_dir) if log_dir else LOG_DIR
        directory.mkdir(parents=True, exist_ok=True)

        file_format = (
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{name}:{function}:{line} | "
            "{message}"
        )

        logger.add(
            str(directory / "citeregistry.log"),
            format=file_format,
            level="DEBUG",  # Always capture DEBUG to file for troubleshooting
            rotation=f"{rotation_size_mb} MB",
            retention=retention_count,
            compression="zip",
            backtrace=True,
            enqueue=True,  # Thread-safe
        )

        logger.add(
            str(directory / "errors.log"),
            format=file_format,
            level="ERROR",
            rotation=f"{rotation_size_mb} MB",
            retention=retention_count,
            compression="zip",
            backtrace=True,
            enqueue=True,
        )

        logger.info(f"File logging enabled. Log directory: {directory}")

    _logging_configured = True
    logger.debug(f"CiteRegistry logging initialized (level={effective_level})")


def reset_logging():
    """Drop all sinks so setup_logging() can run again."""
    global _logging_configured
    logger.remove()
    _logging_configured = False


def init_from_config(verbose: bool = False):
    """Initialize logging from config settings."""
    from .config import config
    setup_logging(
        log_level=config.LOG_LEVEL,
        enable_file_logging=config.ENABLE_FILE_LOGGING,
        rotation_size_mb=config.LOG_ROTATION_SIZE_MB,
        retention_count=config.LOG_RETENTION_COUNT,
        verbose=verbose or config.VERBOSE,
    )


__all__ = [
    'setup_logging',
    'reset_logging',
    'init_from_config',
]
