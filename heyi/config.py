"""
Configuration management for heyi.
Builds the runtime configuration once at startup from environment variables
and an optional .env file.
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .constants import (
    API_KEY_ENV,
    CRAWLER_ENV,
    DEFAULT_CRAWLER,
    DEFAULT_MODEL,
    MODEL_ENV,
)
from .errors import ConfigError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Application configuration resolved from the environment.

    Attributes:
        api_key: Credential for the model provider.
        model: Default model identifier when neither flag nor preset sets one.
        crawler: Default crawler when neither flag nor preset sets one.
    """
    api_key: str
    model: str = DEFAULT_MODEL
    crawler: str = DEFAULT_CRAWLER

    def __repr__(self) -> str:
        return f"AppConfig(model={self.model!r}, crawler={self.crawler!r})"


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build the application configuration.

    Args:
        environ: Mapping to read variables from. When omitted, a .env file in
            the working directory is loaded (without overriding existing
            variables) and the process environment is used.

    Returns:
        Frozen AppConfig

    Raises:
        ConfigError: If the API key is not set
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        environ = os.environ

    api_key = (environ.get(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ConfigError(
            f"{API_KEY_ENV} environment variable is required. "
            "Set it via environment or .env file."
        )

    config = AppConfig(
        api_key=api_key,
        model=environ.get(MODEL_ENV) or DEFAULT_MODEL,
        crawler=environ.get(CRAWLER_ENV) or DEFAULT_CRAWLER,
    )
    logger.debug(f"Loaded configuration: {config!r}")
    return config
