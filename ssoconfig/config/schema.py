"""
SSOConfig - SSO session management for the shared credentials config file.

Configuration schema using Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ProfileFileConfig(BaseModel):
    """Configuration for the profile config file being edited."""

    path: Optional[str] = Field(
        None,
        description="Path to the config file (default: $AWS_CONFIG_FILE or ~/.aws/config)"
    )
    encoding: str = Field("utf-8", description="Text encoding of the config file")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field("WARNING", description="Log level for console output")
    log_file: Optional[str] = Field(None, description="File that receives ERROR records")

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level '{value}', expected one of {', '.join(LOG_LEVELS)}")
        return level


class NotificationConfig(BaseModel):
    """Configuration for change notifications after a write."""

    enabled: bool = Field(True, description="Whether to notify listeners after the file changes")


class SsoConfigSettings(BaseModel):
    """Main configuration for SSOConfig."""

    profile_file: ProfileFileConfig = Field(
        default_factory=ProfileFileConfig,
        description="Profile config file settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration"
    )
    notifications: NotificationConfig = Field(
        default_factory=NotificationConfig,
        description="Change notification configuration"
    )
