"""Configuration module for the order line parser."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

_TRUE_VALUES = ("1", "true", "yes", "on", "si", "sí")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


class Config:
    """Application configuration."""

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_PHRASE_MAX_LENGTH: int = int(os.getenv("LOG_PHRASE_MAX_LENGTH", "100"))

    # Interpreter
    STRICT_UNIT_COMBINATION: bool = _env_flag("STRICT_UNIT_COMBINATION", "false")
    STRIP_LEADING_ARTICLES: bool = _env_flag("STRIP_LEADING_ARTICLES", "true")


config = Config()


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_config():
    """Validate configuration values."""
    if config.LOG_LEVEL.upper() not in _LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {config.LOG_LEVEL!r}")
    if config.LOG_PHRASE_MAX_LENGTH <= 0:
        raise ValueError("LOG_PHRASE_MAX_LENGTH must be positive.")
