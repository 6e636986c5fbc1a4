"""Configuration loader with environment variable support."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration."""

    # Citation Styles
    STYLE_APA: str = "apa"
    STYLE_MLA: str = "mla"
    STYLE_CHICAGO: str = "chicago"
    STYLE_HARVARD: str = "harvard"
    DEFAULT_STYLE: str = os.getenv("CITATION_DEFAULT_STYLE", STYLE_APA)

    # Persistence (key-value store file and the keys the shell uses)
    STORAGE_PATH: str = os.getenv("CITATION_STORAGE_PATH", "bibliography.json")
    BIBLIOGRAPHY_KEY: str = "bibliography"
    PREFERRED_STYLE_KEY: str = "preferred-style"

    # Export
    EXPORT_FOLDER: str = os.getenv("CITATION_EXPORT_FOLDER", "exports")
    # Off by default: exports keep user text verbatim
    ESCAPE_SPECIAL_CHARS: bool = _env_flag("CITATION_ESCAPE_SPECIAL_CHARS")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

    # Web
    SECRET_KEY: str = os.getenv("FLASK_SECRET", "dev-secret-change-me")
    RATELIMIT_DEFAULT: str = os.getenv("RATELIMIT_DEFAULT", "200 per day;50 per hour")

    @classmethod
    def ensure_directories_exist(cls) -> None:
        """Ensure the export folder exists."""
        os.makedirs(cls.EXPORT_FOLDER, exist_ok=True)

    @classmethod
    def get_export_path(cls, filename: str) -> str:
        """Get the full path for an exported file."""
        return str(Path(cls.EXPORT_FOLDER) / filename)
