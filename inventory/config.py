"""Configuration for the inventory API.

Everything comes from environment variables (optionally a .env file).
MONGO_URI is the only required setting; the service refuses to start
without it.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the API process."""
    mongo_uri: str
    mongo_db: str = "inventario"
    mongo_collection: str = "productos"
    seed_file: Path = Path("./seeds/productos.json")
    store_timeout: float = 5.0
    connect_timeout: float = 10.0
    static_dir: Path = Path("./static")
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


def _get_required_env(key: str) -> str:
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your environment or .env file."
        )
    return value


def _get_number(key: str, default, cast):
    raw = os.environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"Environment variable '{key}' must be a number, got {raw!r}")


def static_dir_from_env() -> Path:
    return Path(os.environ.get("STATIC_DIR", "./static"))


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load and validate settings.

    Raises:
        ConfigurationError: If MONGO_URI is missing or a numeric value is invalid.
    """
    load_dotenv(env_file)

    return Settings(
        mongo_uri=_get_required_env("MONGO_URI"),
        mongo_db=os.environ.get("MONGO_DB", "inventario"),
        mongo_collection=os.environ.get("MONGO_COLLECTION", "productos"),
        seed_file=Path(os.environ.get("SEED_FILE", "./seeds/productos.json")),
        store_timeout=_get_number("STORE_TIMEOUT", 5.0, float),
        connect_timeout=_get_number("CONNECT_TIMEOUT", 10.0, float),
        static_dir=static_dir_from_env(),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=_get_number("PORT", 8080, int),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
