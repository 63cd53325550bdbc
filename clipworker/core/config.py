import os
import tempfile
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# =========================
# DEFAULT PATHS
# =========================
DEFAULT_SCRATCH_DIR = os.path.join(tempfile.gettempdir(), "ffmpeg-worker")
DEFAULT_BUCKET = "processed-videos"


class Settings(BaseSettings):
    """Worker settings, read from the environment (and .env if present)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Storage - REQUIRED
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    STORAGE_BUCKET: str = DEFAULT_BUCKET

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Pipeline
    SCRATCH_DIR: str = DEFAULT_SCRATCH_DIR
    FFMPEG_BIN: str = "ffmpeg"
    FETCH_TIMEOUT: Optional[float] = None  # None = wait forever


@lru_cache
def get_settings() -> Settings:
    return Settings()
