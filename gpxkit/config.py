"""
Library Configuration

Uses Pydantic Settings for type-safe configuration.
"""

import logging
import sys
from typing import Optional

from pydantic import Field, field_validator, ConfigDict
from pydantic_settings import BaseSettings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Settings(BaseSettings):
    """Library settings with validation."""

    # === Core ===
    log_level: str = Field(default="INFO", description="Logging level")

    # === Writer ===
    indent: str = Field(
        default="\t",
        description="Indentation unit for encoded XML (empty = no pretty-printing)"
    )
    encoding: str = Field(
        default="UTF-8",
        description="Encoding named in the XML declaration"
    )

    # === Analytics ===
    simplify_tolerance: float = Field(
        default=0.5,
        description="Default Douglas-Peucker tolerance"
    )

    @field_validator('log_level')
    @classmethod
    def check_log_level(cls, v: str) -> str:
        """Accept only level names the logging module knows."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('encoding')
    @classmethod
    def check_encoding(cls, v: str) -> str:
        """Accept only text encodings str.encode() knows."""
        try:
            "".encode(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v

    model_config = ConfigDict(
        env_prefix="GPXKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


def configure_logging(config: Optional[Settings] = None) -> None:
    """
    Send gpxkit logs to stdout at the configured level.

    Meant for applications and scripts; the library never calls it itself.
    """
    config = config or settings
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


# Global settings instance
settings = Settings()
