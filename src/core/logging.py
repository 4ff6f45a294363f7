"""
Logging configuration for the AI PR Reviewer action.
"""

import sys
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from src.config import Settings


def _load_settings() -> Settings:
    # Invalid inputs are reported by the entry point, not at import
    try:
        return Settings()
    except ValidationError:
        return Settings.model_construct()


def configure_logging() -> None:
    """Configure logging for local runs and GitHub Actions runners."""

    settings = _load_settings()
    logger.remove()

    log_level = "DEBUG" if settings.runner_debug else "INFO"

    if settings.environment == "development":
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<blue>{extra[logger_name]}</blue>:<blue>{function}</blue>:<blue>{line}</blue> - "
                "<level>{message}</level>"
            ),
            level=log_level,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )
    else:
        # Actions log viewer
        logger.add(
            sys.stderr,
            format="{level: <8} | {extra[logger_name]} - {message}",
            level=log_level,
            colorize=False,
        )


logger.configure(extra={"logger_name": "reviewer"})
configure_logging()


def get_logger(name: Optional[str] = None):
    """Get a logger instance with optional name binding."""
    if name:
        return logger.bind(logger_name=name)
    return logger
