"""Configuration settings for the converter"""
import logging
from pydantic_settings import BaseSettings
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Converter settings.

    Priority (highest to lowest):
    1. Environment variables (JQ2REACT_ prefix)
    2. .env file
    3. Default values
    """

    # Service Identity
    SERVICE_NAME: str = "jq2react"
    SERVICE_PORT: int = 5001

    # Output
    # Batch mode writes here when no output directory is given
    OUTPUT_DIR: str = "./react-components"
    COMPONENT_EXTENSION: str = ".jsx"

    # Discovery
    SOURCE_EXTENSIONS: List[str] = [".js", ".html", ".htm"]
    SKIP_DIRECTORIES: List[str] = [
        "node_modules",
        ".git",
        "dist",
        "build",
        "bower_components",
        "react-components",
    ]

    # Upper bound on file conversions in flight during a batch run
    MAX_CONCURRENT_CONVERSIONS: int = 8

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "JQ2REACT_"
        extra = "ignore"


# Global settings instance
settings = Settings()


def configure_logging(level: str = None):
    """Configure root logging for the CLI and the HTTP service."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
