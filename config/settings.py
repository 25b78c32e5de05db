"""
Configuration settings with environment variable loading.

The API token MUST be provided via environment variables or a .env file.
Never log or expose tokens in any output.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.sweetprocess.com/api/v1"
DEFAULT_TIMEOUT = 30.0


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class SweetProcessConfig:
    """SweetProcess API configuration."""
    api_token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        if not self.api_token:
            raise ConfigurationError("SWEETPROCESS_API_TOKEN is required")
        if not self.base_url:
            raise ConfigurationError("SWEETPROCESS_BASE_URL must not be empty")
        if not self.base_url.startswith("https://"):
            raise ConfigurationError("SWEETPROCESS_BASE_URL must use HTTPS")
        if self.timeout <= 0:
            raise ConfigurationError("SWEETPROCESS_TIMEOUT must be positive")
        # Strip trailing slash so endpoint paths join cleanly
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "Authorization": f"Token {self.api_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def __repr__(self) -> str:
        """Never expose token in repr."""
        return (
            f"SweetProcessConfig(base_url='{self.base_url}', "
            f"api_token='***REDACTED***', timeout={self.timeout})"
        )


@dataclass(frozen=True)
class Settings:
    """
    Application settings container.

    All configuration is loaded from environment variables.
    Secrets are never logged or exposed.
    """
    sweetprocess: SweetProcessConfig
    log_level: str = "INFO"

    def __post_init__(self):
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"LOG_LEVEL '{self.log_level}' is not a valid level")

    def __repr__(self) -> str:
        return f"Settings(sweetprocess={self.sweetprocess}, log_level='{self.log_level}')"


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from environment variables.

    Optionally loads from a .env file first.

    Args:
        env_file: Optional path to .env file

    Returns:
        Configured Settings instance

    Raises:
        ConfigurationError: If required configuration is missing
    """
    # Load .env file if provided
    if env_file and env_file.exists():
        _load_env_file(env_file)
    elif Path(".env").exists():
        _load_env_file(Path(".env"))

    try:
        sweetprocess = SweetProcessConfig(
            api_token=os.getenv("SWEETPROCESS_API_TOKEN", ""),
            base_url=os.getenv("SWEETPROCESS_BASE_URL", DEFAULT_BASE_URL),
            timeout=float(os.getenv("SWEETPROCESS_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        settings = Settings(sweetprocess=sweetprocess, log_level=log_level)

        logger.info("Configuration loaded successfully")
        logger.debug(f"Settings: {settings}")

        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Failed to load configuration: {e}") from e


def _load_env_file(path: Path) -> None:
    """
    Load environment variables from a file.

    Handles KEY=value, quoted values, comments and blank lines.
    Variables already present in the environment take precedence.
    """
    logger.debug(f"Loading environment from {path}")

    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            # Parse KEY=value
            if "=" not in line:
                logger.warning(f"Invalid line {line_num} in {path}: no '=' found")
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            # Remove quotes if present
            if value.startswith('"') and value.endswith('"'):
                value = value[1:-1]
            elif value.startswith("'") and value.endswith("'"):
                value = value[1:-1]

            # Only set if not already defined (env vars take precedence)
            if key not in os.environ:
                os.environ[key] = value
