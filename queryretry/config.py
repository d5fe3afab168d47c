"""Configuration management for the query retry pipeline.

This module provides the settings model, loading from a TOML file with
environment variable overrides, and helpers that assemble a pipeline from
settings.
"""

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel, Field, HttpUrl, ValidationError, field_validator

from .client import HTTPHandler
from .exceptions import ConfigError
from .handler import Handler, Middleware, build_pipeline
from .retry import new_retry_middleware
from .utils.logging import configure_logging
from .utils.metrics import HistogramLike

ENV_PREFIX = "QUERYRETRY_"
ENV_OVERRIDES = {
    "MAX_RETRIES": "max_retries",
    "LOG_LEVEL": "log_level",
    "LOG_JSON": "log_json",
    "BACKEND_URL": "backend_url",
    "TIMEOUT": "timeout",
}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class RetrySettings(BaseModel):
    """Settings for a retrying query pipeline."""

    max_retries: int = Field(default=5, description="Maximum attempts per request")
    log_level: str = Field(default="INFO", description="Minimum log level")
    log_json: Optional[bool] = Field(None, description="JSON log output, None to auto-detect")
    backend_url: Optional[HttpUrl] = Field(None, description="Query backend base URL")
    timeout: float = Field(default=30, description="Backend request timeout in seconds")

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        """Validate the retry budget."""
        if v < 0:
            raise ValueError("Max retries cannot be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalise the log level."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout value."""
        if v <= 0:
            raise ValueError("Timeout must be greater than 0")
        if v > 300:  # 5 minutes max
            raise ValueError("Timeout cannot exceed 300 seconds")
        return v


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for suffix, field in ENV_OVERRIDES.items():
        value = os.getenv(f"{ENV_PREFIX}{suffix}")
        if value is not None and value != "":
            overrides[field] = value
    return overrides


def load_settings(path: Optional[Path] = None) -> RetrySettings:
    """Load settings from a TOML file and the environment.

    The ``[retry]`` table of the file is read first; ``QUERYRETRY_*``
    environment variables override it.

    Args:
        path: TOML file path. If None, only defaults and environment apply.

    Returns:
        Validated settings

    Raises:
        ConfigError: If the file cannot be read or the values are invalid
    """
    data: Dict[str, Any] = {}

    if path is not None:
        try:
            with open(path, "rb") as f:
                document = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to load config file {path}: {e}")

        table = document.get("retry", {})
        if not isinstance(table, dict):
            raise ConfigError("The [retry] section must be a table")
        data.update(table)

    data.update(_env_overrides())

    try:
        return RetrySettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}", details={"errors": e.errors()})


def build_retry_middleware(
    settings: RetrySettings,
    logger: Optional[Any] = None,
    retries: Optional[HistogramLike] = None,
) -> Middleware:
    """Create the retry middleware described by ``settings``."""
    return new_retry_middleware(logger, settings.max_retries, retries=retries)


def build_http_pipeline(
    settings: RetrySettings,
    middlewares: Iterable[Middleware] = (),
    logger: Optional[Any] = None,
    retries: Optional[HistogramLike] = None,
) -> Handler:
    """Assemble a retrying pipeline in front of the HTTP backend.

    Args:
        settings: Pipeline settings; ``backend_url`` is required
        middlewares: Extra stages placed inside the retry stage
        logger: structlog logger for the retry stage
        retries: Histogram for the retry stage

    Returns:
        The pipeline entry point

    Raises:
        ConfigError: If no backend URL is configured
    """
    if settings.backend_url is None:
        raise ConfigError("backend_url is required to build an HTTP pipeline")

    terminal = HTTPHandler(str(settings.backend_url), timeout=settings.timeout)
    stages = [build_retry_middleware(settings, logger=logger, retries=retries)]
    stages.extend(middlewares)
    return build_pipeline(terminal, stages)


def apply_logging(settings: RetrySettings) -> None:
    """Configure structured logging from ``settings``."""
    configure_logging(level=settings.log_level, json_format=settings.log_json)
