"""
Environment configuration loader with validation for the booking service.
"""

import logging
import os
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from ..cache.config import ValkeyConfig


class BookingConfig(BaseModel):
    """Configuration model for the booking session service with validation."""

    # Valkey Session Store
    valkey_host: str = Field(default="localhost", description="Valkey server host")
    valkey_port: int = Field(default=6379, ge=1, le=65535, description="Valkey server port")
    valkey_password: Optional[str] = Field(default=None, description="Valkey server password")
    valkey_database: int = Field(default=0, ge=0, le=15, description="Valkey database number")
    session_ttl_seconds: int = Field(
        default=1800, ge=60, description="Expiry of draft sessions in the store"
    )

    # Booking
    default_currency: str = Field(
        default="USD", min_length=3, max_length=3, description="Currency before a flight is chosen"
    )
    payment_failure_rate: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Mock gateway decline rate (0.0-1.0)"
    )

    # Service
    booking_debug: bool = Field(default=False, description="Enable debug mode")
    booking_log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("booking_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return v.upper()

    def valkey_config(self) -> ValkeyConfig:
        """Build the connection config for the session store."""
        return ValkeyConfig(
            host=self.valkey_host,
            port=self.valkey_port,
            password=self.valkey_password,
            database=self.valkey_database,
        )


def load_config(env_file: Optional[str] = None) -> BookingConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        BookingConfig: Validated configuration object

    Raises:
        ValueError: If configuration values are invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    config_data: Dict[str, Any] = {
        "valkey_host": os.getenv("VALKEY_HOST", "localhost"),
        "valkey_port": int(os.getenv("VALKEY_PORT", "6379")),
        "valkey_password": os.getenv("VALKEY_PASSWORD") or None,
        "valkey_database": int(os.getenv("VALKEY_DATABASE", "0")),
        "session_ttl_seconds": int(os.getenv("SESSION_TTL_SECONDS", "1800")),
        "default_currency": os.getenv("DEFAULT_CURRENCY", "USD"),
        "payment_failure_rate": float(os.getenv("PAYMENT_FAILURE_RATE", "0.0")),
        "booking_debug": os.getenv("BOOKING_DEBUG", "false").lower() in ("true", "1", "yes", "on"),
        "booking_log_level": os.getenv("BOOKING_LOG_LEVEL", "INFO"),
    }

    return BookingConfig(**config_data)


def setup_logging(config: BookingConfig, handler: Optional[logging.Handler] = None) -> None:
    """
    Configure root logging from the loaded config.

    Args:
        config: Loaded configuration
        handler: Optional handler (the CLI passes a RichHandler)
    """
    level = logging.DEBUG if config.booking_debug else getattr(logging, config.booking_log_level)
    kwargs: Dict[str, Any] = {"level": level, "force": True}
    if handler is not None:
        kwargs["handlers"] = [handler]
        kwargs["format"] = "%(message)s"
    else:
        kwargs["format"] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    logging.basicConfig(**kwargs)
