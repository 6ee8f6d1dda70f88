"""Application configuration using Pydantic v2 Settings.

Centralized configuration that loads from environment variables
and provides type-safe access throughout the application.
"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_FORMATS = frozenset({"json", "console"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Generated sources layout
    src_directory: str = Field(
        default="src",
        description="Root directory of the generated sources.",
    )
    password_service_path: str = Field(
        default="auth/password_service.py",
        description="Password service module, relative to src_directory.",
    )
    prisma_util_path: str = Field(
        default="prisma_util.py",
        description="Module defining transform_string_field_update_input, relative to src_directory.",
    )

    # Templates
    template_dir: Path | None = Field(
        default=None,
        description="Directory overriding the bundled service templates.",
    )
    template_encoding: str = Field(
        default="utf-8",
        description="Character encoding of template files.",
    )
    template_cache_enabled: bool = Field(
        default=True,
        description="Keep parsed templates in memory between syntheses.",
    )

    # Strategy Selection
    loader_type: str = Field(
        default="filesystem",
        description="Template loader strategy to use: 'filesystem'.",
    )
    renderer_type: str = Field(
        default="unparse",
        description="Renderer strategy to use: 'unparse'.",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR.",
    )
    log_dir: Path | None = Field(
        default=None,
        description="Directory for info.log and error.log. Console only when unset.",
    )
    log_format: str = Field(
        default="json",
        description="Structured log output: 'json' or 'console'.",
    )

    @field_validator("src_directory")
    @classmethod
    def normalize_src_directory(cls, v: str) -> str:
        """Use forward slashes and no trailing separator."""
        return v.replace("\\", "/").rstrip("/") or "."

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Accept only the supported structlog renderers."""
        v = v.lower()
        if v not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of: {', '.join(sorted(LOG_FORMATS))}")
        return v

    def configure_logging(self) -> None:
        """Route structlog through the standard library at the configured level.

        ``log_format`` picks JSON lines for deployments or a colored console
        renderer for local development.
        """
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)
        renderer = (
            structlog.dev.ConsoleRenderer()
            if self.log_format == "console"
            else structlog.processors.JSONRenderer()
        )

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.format_exc_info,
                renderer,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(format="%(message)s", level=level)
        logging.getLogger("codesynth").setLevel(level)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, configuring logging on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
        logger.debug(f"Generated sources rooted at: {_settings.src_directory}")
    return _settings
