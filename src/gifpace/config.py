"""
gifpace Configuration
=====================

This module handles configuration loading for gifpace.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. YAML config file
    3. Default values (lowest priority)

Config File Search Order:
    $GIFPACE_CONFIG, ./gifpace.yaml, ./gifpace.yml,
    ~/.config/gifpace/config.yaml

Environment Variable Mapping:
    GIFPACE_MIN_DELAY        -> timing.min_delay
    GIFPACE_ZERO_DELAY       -> timing.zero_delay
    GIFPACE_FILLER_MIN_TICKS -> timing.filler_min_ticks
    GIFPACE_LOOP_FOREVER     -> output.loop_forever
    GIFPACE_LOG_LEVEL        -> logging.level
    GIFPACE_LOG_FORMAT       -> logging.format

Example:
    from gifpace.config import settings

    print(settings.timing.min_delay)
    print(settings.output.loop_forever)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class TimingConfig(BaseModel):
    """Delay normalization parameters (hundredths of a second)."""

    min_delay: int = Field(
        default=2,
        ge=1,
        description="Floor for frame delays and for the uniform delay",
    )
    zero_delay: int = Field(
        default=10,
        ge=1,
        description="Duration assumed for frames with a delay below min_delay",
    )
    filler_min_ticks: int = Field(
        default=3,
        ge=2,
        description="Shortest tick run that uses filler frames instead of repeats",
    )


class OutputConfig(BaseModel):
    """Output stream configuration."""

    loop_forever: bool = Field(
        default=True,
        description="Write an infinite NETSCAPE2.0 loop block",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="WARNING", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for gifpace.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    timing: TimingConfig = Field(default_factory=TimingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def _find_config_file() -> Optional[Path]:
    if env_path := os.environ.get("GIFPACE_CONFIG"):
        return Path(env_path)

    search_paths = [
        Path("gifpace.yaml"),
        Path("gifpace.yml"),
        Path.home() / ".config" / "gifpace" / "config.yaml",
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to a YAML file. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    path = Path(config_path) if config_path else _find_config_file()

    config_data = {}
    if path is not None and path.exists():
        logger.debug(f"Loading config from: {path}")
        with open(path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    elif path is not None:
        logger.warning(f"Config file not found: {path}, using defaults")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Timing settings
    if env_min := os.environ.get("GIFPACE_MIN_DELAY"):
        config_data.setdefault("timing", {})["min_delay"] = int(env_min)
    if env_zero := os.environ.get("GIFPACE_ZERO_DELAY"):
        config_data.setdefault("timing", {})["zero_delay"] = int(env_zero)
    if env_ticks := os.environ.get("GIFPACE_FILLER_MIN_TICKS"):
        config_data.setdefault("timing", {})["filler_min_ticks"] = int(env_ticks)

    # Output settings (pydantic parses "true"/"false"/"1"/"0")
    if env_loop := os.environ.get("GIFPACE_LOOP_FOREVER"):
        config_data.setdefault("output", {})["loop_forever"] = env_loop

    # Logging settings
    if env_log := os.environ.get("GIFPACE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("GIFPACE_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings. Records go to stderr."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.WARNING)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import
settings = load_config()
setup_logging(settings)
