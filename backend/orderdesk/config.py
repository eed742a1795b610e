"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - orders_path is always data_dir / orders_file

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults for every setting: works out-of-the-box from the repo root
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    data_dir: Path = Path("data")
    orders_file: str = "orders.csv"

    @field_validator("orders_file")
    @classmethod
    def reject_nested_file_name(cls, v: str) -> str:
        """orders_file is a bare file name; directories go in data_dir."""
        if not v or Path(v).name != v:
            raise ValueError("orders_file must be a plain file name")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def orders_path(self) -> Path:
        return self.data_dir / self.orders_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
