"""Environment-driven settings for a cart session."""
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_URL = "http://localhost:3333"
DEFAULT_API_TIMEOUT = 5.0
DEFAULT_STORAGE_KEY = "@RocketShoes:cart"
DEFAULT_STORAGE_PATH = "~/.cartstore/storage.json"
DEFAULT_LANGUAGE = "pt"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Cart session configuration."""
    api_url: str = DEFAULT_API_URL
    api_timeout: float = DEFAULT_API_TIMEOUT
    storage_key: str = DEFAULT_STORAGE_KEY
    storage_path: Path = Path(DEFAULT_STORAGE_PATH).expanduser()
    language: str = DEFAULT_LANGUAGE
    redis_url: str = ""
    redis_token: str = ""

    @property
    def redis_configured(self) -> bool:
        return bool(self.redis_url and self.redis_token)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Upstash Redis uses the standard UPSTASH_REDIS_REST_URL and
        UPSTASH_REDIS_REST_TOKEN names.
        """
        return cls(
            api_url=os.environ.get("CART_API_URL", DEFAULT_API_URL).rstrip("/"),
            api_timeout=_env_float("CART_API_TIMEOUT", DEFAULT_API_TIMEOUT),
            storage_key=os.environ.get("CART_STORAGE_KEY", DEFAULT_STORAGE_KEY),
            storage_path=Path(
                os.environ.get("CART_STORAGE_PATH", DEFAULT_STORAGE_PATH)
            ).expanduser(),
            language=os.environ.get("CART_LANGUAGE", DEFAULT_LANGUAGE),
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
        )
