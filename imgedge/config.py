from __future__ import annotations

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Gateway configuration loaded from environment variables or .env file."""

    # Origin storage
    storage_backend: Literal["s3", "gcs", "local"] = Field(
        "s3", description="Which object store holds the original assets."
    )
    bucket_name: str = Field("static-assets", description="Origin bucket for the s3 and gcs backends.")
    aws_region: str = Field("ap-northeast-2", description="Region of the S3 origin bucket.")
    origin_dir: str = Field("./origin", description="Base directory for the local backend.")

    # Transforms
    max_dimension: int = Field(10000, ge=1, description="Largest width or height a request may ask for (pixels).")

    # Logging
    log_level: str = Field("INFO", description="Root log level for the entrypoints.")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
