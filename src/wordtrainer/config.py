"""Configuration settings for the trainer."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Learning settings
SRS_INTERVALS_DAYS = [1, 3, 7, 14, 30, 60, 90, 180, 365]  # days between reviews, indexed by stage - 1
MAX_SET_SIZE = 30  # words per study set before an origin group is split
DEFAULT_SET_NAME = "Set"


def get_srs_intervals() -> list[int]:
    """Get SRS intervals from environment variable."""
    raw = os.getenv("SRS_INTERVALS", "")
    if not raw:
        return list(SRS_INTERVALS_DAYS)
    return [int(days) for days in raw.split(",") if days.strip()]


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", "sqlite:///wordtrainer.db")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class LearningSettings:
    """Spaced repetition and set partitioning settings."""
    srs_intervals: list[int] = field(default_factory=get_srs_intervals)
    max_set_size: int = int(os.getenv("MAX_SET_SIZE", str(MAX_SET_SIZE)))
    default_set_name: str = DEFAULT_SET_NAME

    @property
    def max_stage(self) -> int:
        """Highest reachable SRS stage, defined by the interval table length."""
        return len(self.srs_intervals)


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_learning_settings() -> LearningSettings:
    """Get learning settings."""
    return LearningSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    learning: LearningSettings = field(default_factory=get_learning_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if not self.learning.srs_intervals:
            raise ValueError("SRS_INTERVALS must contain at least one interval")

        if any(days < 1 for days in self.learning.srs_intervals):
            raise ValueError("SRS_INTERVALS must be positive")

        if self.learning.srs_intervals != sorted(self.learning.srs_intervals):
            raise ValueError("SRS_INTERVALS must be non-decreasing")

        if self.learning.max_set_size < 1:
            raise ValueError("MAX_SET_SIZE must be positive")

        if not self.database.url:
            raise ValueError("DATABASE_URL is required")


# Create global settings instance
settings = Settings()
settings.validate()
