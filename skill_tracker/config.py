"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv
import pytz

from skill_tracker.exceptions import ConfigurationError

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("SKILL_TRACKER_DATA_PATH", "./data"))
STORAGE_KEY_PREFIX: str = os.getenv("STORAGE_KEY_PREFIX", "skill_tracker")

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Calendar
# Empty means "use the system's local time" for calendar-day normalization
TRACKER_TIMEZONE: str = os.getenv("TRACKER_TIMEZONE", "")

# Weight log retention
WEIGHT_MIN_KG: float = float(os.getenv("WEIGHT_MIN_KG", "20"))
WEIGHT_MAX_KG: float = float(os.getenv("WEIGHT_MAX_KG", "300"))
WEIGHT_RETENTION_YEARS: int = int(os.getenv("WEIGHT_RETENTION_YEARS", "2"))

# Progress
MASTERED_THRESHOLD: float = float(os.getenv("MASTERED_THRESHOLD", "80"))


# Validation
def validate_config() -> None:
    """Validate configuration values"""
    if TRACKER_TIMEZONE:
        try:
            pytz.timezone(TRACKER_TIMEZONE)
        except pytz.exceptions.UnknownTimeZoneError as e:
            raise ConfigurationError(
                message=f"Invalid TRACKER_TIMEZONE: '{TRACKER_TIMEZONE}'",
                config_key="TRACKER_TIMEZONE",
                cause=e,
            )
    if WEIGHT_MIN_KG >= WEIGHT_MAX_KG:
        raise ConfigurationError(
            message=f"WEIGHT_MIN_KG ({WEIGHT_MIN_KG}) must be below WEIGHT_MAX_KG ({WEIGHT_MAX_KG})",
            config_key="WEIGHT_MIN_KG",
        )
    if WEIGHT_RETENTION_YEARS < 1:
        raise ConfigurationError(
            message="WEIGHT_RETENTION_YEARS must be at least 1",
            config_key="WEIGHT_RETENTION_YEARS",
        )
