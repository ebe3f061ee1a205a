"""
Configuration for the stocks API.
"""
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_CATALOG = PACKAGE_DIR / "data" / "nasdaq.csv"
DEFAULT_TEMPLATE = PACKAGE_DIR / "templates" / "frame.html"
DEFAULT_WORKER_THREADS = 1000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Requests for any other Host header get 404
    site: str = "www.stocks.akhil.cc"
    host: str = "0.0.0.0"
    port: int = 8080

    # Startup data
    catalog_path: Optional[Path] = None
    template_path: Optional[Path] = None

    log_level: str = "INFO"

    # Flaky version (v3)
    latency_percent: int = 15
    error_percent: int = 20

    # Reject buy/sell quantities <= 0
    strict_quantities: bool = False

    # Worker threads for request handling; delayed v3 requests each hold one
    worker_threads: int = DEFAULT_WORKER_THREADS

    model_config = SettingsConfigDict(env_file=".env", env_prefix="STOCKS_", extra="ignore")

    @property
    def catalog_file(self) -> Path:
        return self.catalog_path or DEFAULT_CATALOG

    @property
    def template_file(self) -> Path:
        return self.template_path or DEFAULT_TEMPLATE


def get_settings(**overrides) -> Settings:
    """Build settings, letting explicit (non-None) overrides win over the environment."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
