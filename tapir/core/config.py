"""
Configuration management for the Tapir Live Activity coordinator.

This module provides pydantic-settings models for type-safe configuration with
validation and environment variable integration. Every section can be
overridden through ``TAPIR_*`` environment variables or a ``.env`` file.
"""

from enum import Enum
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class LogLevel(str, Enum):
    """Log levels for the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class BaseConfig(BaseSettings):
    """
    Base configuration class with common settings for all components.

    All other configuration classes should inherit from this class.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="TAPIR_", extra="ignore")

    debug: bool = False
    log_level: LogLevel = LogLevel.INFO

class EventConfig(BaseConfig):
    """Configuration for the event system."""
    model_config = SettingsConfigDict(env_prefix="TAPIR_EVENT_")

    max_trace_events: int = 1000
    tracing_enabled: bool = True

class LiveActivityConfig(BaseConfig):
    """Configuration shared by the reminder and companion coordinators."""
    model_config = SettingsConfigDict(env_prefix="TAPIR_LIVE_ACTIVITY_")

    signature_refresh_interval: float = 30 * 60  # seconds
    companion_horizon_days: int = 365
    initial_refresh_enabled: bool = True
    initial_refresh_delay: float = 1.0  # seconds
    default_reminder_message: str = "点击记录昨晚的梦境"
    recording_message: str = "正在记录梦境..."
    fallback_signature: str = "貘婆婆与你同在"

    @field_validator("signature_refresh_interval", "initial_refresh_delay")
    @classmethod
    def validate_interval(cls, v):
        """Timers need a positive period."""
        if v <= 0:
            raise ValueError("Intervals must be positive")
        return v

    @field_validator("companion_horizon_days")
    @classmethod
    def validate_horizon(cls, v):
        """The companion horizon must lie in the future."""
        if v < 1:
            raise ValueError("Companion horizon must be at least one day")
        return v

class HostConfig(BaseConfig):
    """Configuration for the in-process activity host."""
    model_config = SettingsConfigDict(env_prefix="TAPIR_HOST_")

    max_activities: int = 5
    dismissal_delay: float = 4 * 60 * 60  # seconds

    @field_validator("max_activities")
    @classmethod
    def validate_capacity(cls, v):
        """A host has to be able to show at least one activity."""
        if v < 1:
            raise ValueError("max_activities must be at least 1")
        return v

class DeepLinkConfig(BaseConfig):
    """Configuration for the deep link router."""
    model_config = SettingsConfigDict(env_prefix="TAPIR_DEEP_LINK_")

    scheme: str = "tapirtwins"
    dream_reminder_notification: str = "dreamReminder"

class ApplicationConfig(BaseConfig):
    """
    Main application configuration that combines all component configurations.

    This is the top-level configuration class that should be used by the application.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="TAPIR_",
                                      env_nested_delimiter="__", extra="ignore")

    companion_mode_enabled: bool = True
    event: EventConfig = Field(default_factory=EventConfig)
    live_activity: LiveActivityConfig = Field(default_factory=LiveActivityConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    deep_link: DeepLinkConfig = Field(default_factory=DeepLinkConfig)

def get_config() -> ApplicationConfig:
    """
    Get the application configuration.

    Returns:
        The validated ApplicationConfig instance
    """
    return ApplicationConfig()
