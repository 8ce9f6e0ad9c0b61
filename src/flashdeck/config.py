"""Settings and logging setup.

Values come from ``FLASH_*`` environment variables or a ``.env`` file.
"""
import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FLASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    extension: str = Field(default=".flsh", description="Flashcard file extension")
    directory: Path = Field(default=Path("."), description="Where bare invocations look for files")

    # Keys
    quit_key: str = "q"
    yes_keys: str = "yY"
    no_keys: str = "nN"

    # Rich styles
    title_style: str = "bold green"
    prompt_style: str = "yellow"
    score_style: str = "cyan"
    correct_style: str = "green"
    wrong_style: str = "red"
    text_style: str = "default"

    log_level: str = Field(default="WARNING", description="loguru level for the stderr sink")
    log_file: Optional[Path] = Field(default=None, description="Optional debug log file")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB")
