"""
Centralized configuration with environment variable overrides.

Capacity ceilings, calendar settings, and notification credentials are
configurable here. Nothing is hardcoded in scheduling or booking logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "Reliable Auto Service")
    default_branch: str = os.getenv("DEFAULT_BRANCH", "Our Service Center")
    # Python weekday numbering: 0 = Monday ... 6 = Sunday
    week_starts_on: int = _safe_int("WEEK_STARTS_ON", "6")


@dataclass(frozen=True)
class CapacityConfig:
    """Soft capacity ceilings for the booking calendar."""

    slot_capacity: int = _safe_int("SLOT_CAPACITY", "8")
    day_capacity: int = _safe_int("DAY_CAPACITY", "35")
    slot_duration_minutes: int = _safe_int("SLOT_DURATION_MINUTES", "30")


@dataclass(frozen=True)
class NotificationConfig:
    """EmailJS credentials for confirmation emails."""

    emailjs_service_id: str = os.getenv("EMAILJS_SERVICE_ID", "")
    emailjs_template_id: str = os.getenv("EMAILJS_TEMPLATE_ID", "")
    emailjs_public_key: str = os.getenv("EMAILJS_PUBLIC_KEY", "")
    emailjs_api_url: str = os.getenv(
        "EMAILJS_API_URL", "https://api.emailjs.com/api/v1.0/email/send"
    )
    timeout_sec: float = _safe_float("NOTIFICATION_TIMEOUT_SEC", "10.0")

    @property
    def emailjs_configured(self) -> bool:
        return bool(
            self.emailjs_service_id and self.emailjs_template_id and self.emailjs_public_key
        )


@dataclass(frozen=True)
class AdminConfig:
    """Settings for the staff appointment list."""

    page_size: int = _safe_int("ADMIN_PAGE_SIZE", "10")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    capacity: CapacityConfig = field(default_factory=CapacityConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "service-booking")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.capacity.slot_capacity < 1:
        raise ValueError(
            f"SLOT_CAPACITY must be >= 1, got {config.capacity.slot_capacity}"
        )
    if config.capacity.day_capacity < 1:
        raise ValueError(
            f"DAY_CAPACITY must be >= 1, got {config.capacity.day_capacity}"
        )
    if config.capacity.slot_duration_minutes < 1:
        raise ValueError(
            "SLOT_DURATION_MINUTES must be >= 1, "
            f"got {config.capacity.slot_duration_minutes}"
        )
    if not 0 <= config.business.week_starts_on <= 6:
        raise ValueError(
            f"WEEK_STARTS_ON must be between 0 and 6, got {config.business.week_starts_on}"
        )
    if config.notifications.timeout_sec <= 0:
        raise ValueError(
            f"NOTIFICATION_TIMEOUT_SEC must be > 0, got {config.notifications.timeout_sec}"
        )
    if config.admin.page_size < 1:
        raise ValueError(
            f"ADMIN_PAGE_SIZE must be >= 1, got {config.admin.page_size}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
