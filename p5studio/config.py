"""
Runtime settings for p5studio.

Reads configuration from the environment (and a local .env via python-dotenv).
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_P5_URL = "https://cdnjs.cloudflare.com/ajax/libs/p5.js/1.4.0/p5.js"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigError(RuntimeError):
    """Raised when a required setting is missing."""


@dataclass
class Settings:
    gemini_api_key: str | None = None
    default_model: str = "gemini-2.0-flash"
    engine: str = "gemini"
    p5_url: str = DEFAULT_P5_URL
    request_timeout: float = 300.0
    log_level: str = "INFO"
    downloads_dir: str = "downloads"

    def require_gemini_key(self) -> str:
        if not self.gemini_api_key:
            raise ConfigError("GEMINI_API_KEY is not set")
        return self.gemini_api_key


def load_settings() -> Settings:
    """Build Settings from os.environ after loading .env."""
    load_dotenv()
    env = os.environ
    return Settings(
        gemini_api_key=env.get("GEMINI_API_KEY") or None,
        default_model=env.get("P5STUDIO_DEFAULT_MODEL", "gemini-2.0-flash"),
        engine=env.get("P5STUDIO_ENGINE", "gemini"),
        p5_url=env.get("P5STUDIO_P5_URL", DEFAULT_P5_URL),
        request_timeout=float(env.get("P5STUDIO_REQUEST_TIMEOUT", "300")),
        log_level=env.get("P5STUDIO_LOG_LEVEL", "INFO").upper(),
        downloads_dir=env.get("P5STUDIO_DOWNLOADS", "downloads"),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
