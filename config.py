"""Application configuration."""
import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class OutputConfig:
    """Model document output settings."""

    media_type: str = "application/json"
    pretty_print: bool = True

    @classmethod
    def from_env(cls) -> "OutputConfig":
        """Load config from environment variables."""
        return cls(
            media_type=os.getenv("SWAGGER_MEDIA_TYPE", "application/json"),
            pretty_print=_env_flag("SWAGGER_PRETTY", True),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    log_level: str = "WARNING"
    output: OutputConfig = None

    def __post_init__(self):
        """Fill in default values."""
        if self.output is None:
            self.output = OutputConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            log_level=os.getenv("SWAGGER_LOG_LEVEL", "WARNING").upper(),
            output=OutputConfig.from_env(),
        )


# Global instance
app_config = AppConfig.from_env()
