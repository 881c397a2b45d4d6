"""
Configuration settings for reading and writing Camtrap DP tables.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). Settings are validated when
they are built, so a bad value fails at startup instead of mid-fetch.

**Environment variables** (all optional):
  - CAMTRAP_HTTP_TIMEOUT_SECONDS: HTTP timeout for URL sources (default 30).
  - CAMTRAP_HTTP_USER_AGENT: User-Agent header sent with URL fetches.
  - CAMTRAP_DATA_DIR: Default directory holding the package CSV files
    (default "data").

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from camtrap_dp import __version__


# Load .env from project root (dev/local environments); existing environment
# variables win over .env values.
env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


DEFAULT_USER_AGENT = f"camtrap_dp/{__version__}"


@dataclass(frozen=True)
class HttpSettings:
    """
    Configuration for fetching tables from URLs.

    **Conceptual**: URL sources make one blocking GET per table. The timeout
    bounds both connecting and reading; there is no retry.

    Attributes:
        timeout_seconds: HTTP request timeout in seconds (default 30).
                        Must be positive.
        user_agent: Value of the User-Agent header.
    """
    timeout_seconds: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"HTTP timeout must be positive, got: {self.timeout_seconds}. "
                f"Check CAMTRAP_HTTP_TIMEOUT_SECONDS in your .env file or environment."
            )
        if not self.user_agent:
            raise ValueError("HTTP user agent must not be empty.")

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """
        Load HTTP settings from environment variables.

        Returns:
            HttpSettings with values from CAMTRAP_HTTP_TIMEOUT_SECONDS and
            CAMTRAP_HTTP_USER_AGENT, or the defaults.

        Raises:
            ValueError: If the timeout is not a positive number.
        """
        timeout_str = os.getenv("CAMTRAP_HTTP_TIMEOUT_SECONDS", "30")
        user_agent = os.getenv("CAMTRAP_HTTP_USER_AGENT", DEFAULT_USER_AGENT)

        try:
            timeout_seconds = float(timeout_str)
        except ValueError:
            raise ValueError(
                f"CAMTRAP_HTTP_TIMEOUT_SECONDS must be a number, got: {timeout_str}"
            )

        return cls(timeout_seconds=timeout_seconds, user_agent=user_agent)


@dataclass(frozen=True)
class Settings:
    """
    Global settings.

    **Usage pattern**:
      ```python
      from camtrap_dp.config.settings import get_settings

      settings = get_settings()
      settings.http.timeout_seconds
      settings.data_dir / "deployments.csv"
      ```

    Attributes:
        http: Settings for URL sources.
        data_dir: Default directory of the package CSV files.
    """
    http: HttpSettings = field(default_factory=HttpSettings)
    data_dir: Path = Path("data")

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load global settings from environment variables.

        Raises:
            ValueError: If any subsystem setting is invalid.
        """
        data_dir = Path(os.getenv("CAMTRAP_DATA_DIR", "data"))
        return cls(http=HttpSettings.from_env(), data_dir=data_dir)


# Lazily loaded singleton; tests build Settings(...) directly or call reset_settings().
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton, loading it from the environment on
    first call.

    Raises:
        ValueError: If the environment holds invalid settings.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    The next get_settings() call reloads from the environment.
    """
    global _default_settings
    _default_settings = None
