"""
Configuration and environment handling for the HouseHunt client.
"""
import logging
import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class APIConfig(BaseModel):
    """Remote listing/booking service configuration."""
    base_url: str = Field(
        default_factory=lambda: os.getenv(
            "HOUSEHUNT_API_URL", "https://househunt-production-4887.up.railway.app"
        )
    )
    timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("HOUSEHUNT_API_TIMEOUT", "10"))
    )


class BookingConfig(BaseModel):
    """Booking rules configuration."""
    conflict_policy: Literal["guest_per_property", "date_overlap"] = Field(
        default_factory=lambda: os.getenv("HOUSEHUNT_CONFLICT_POLICY", "guest_per_property"),
        description="guest_per_property: one booking per guest per property; "
                    "date_overlap: reject overlapping stays from any guest",
    )
    enforce_min_check_in: bool = Field(
        default_factory=lambda: _env_flag("HOUSEHUNT_ENFORCE_MIN_CHECK_IN"),
        description="Reject check-in dates before today",
    )


class FeedConfig(BaseModel):
    """Listing feed configuration."""
    all_category_label: str = Field(default="All")
    categories: list[str] = Field(
        default_factory=lambda: [
            "All",
            "Beachfront",
            "Windmills",
            "Iconic cities",
            "Countryside",
            "Amazing Pools",
            "Islands",
            "Lakefront",
            "Ski-in/out",
            "Castles",
            "Caves",
            "Camping",
            "Arctic",
            "Desert",
            "Barns",
            "Luxury",
        ]
    )


class Config(BaseModel):
    """Main configuration."""
    api: APIConfig = Field(default_factory=APIConfig)
    booking: BookingConfig = Field(default_factory=BookingConfig)
    feed: FeedConfig = Field(default_factory=FeedConfig)

    log_level: str = Field(default_factory=lambda: os.getenv("HOUSEHUNT_LOG_LEVEL", "INFO"))


# Singleton config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the singleton config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the configured log level to the root logger."""
    level_name = (level or get_config().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
