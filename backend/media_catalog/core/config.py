import json
from pathlib import Path
from typing import Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_cors_origins(v: Union[str, list[str]]) -> list[str]:
    """Parse CORS_ORIGINS from env: JSON array, comma-separated, or single URL."""
    if isinstance(v, list):
        return [str(x).strip() for x in v if x]
    s = str(v).strip()
    if not s:
        return []
    if s.startswith("["):
        try:
            return [x.strip() for x in json.loads(s) if x]
        except json.JSONDecodeError:
            pass
    return [x.strip() for x in s.split(",") if x.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ───────────────────────────────────────────────────────────────
    # Whole collection lives in this one file; rewritten on every mutation.
    MEDIA_FILE: Path = Path("data/media.json")

    # ── Static files ──────────────────────────────────────────────────────────
    # Mounted at / only when the directory exists.
    PUBLIC_DIR: Path = Path("public")

    # ── Cloudinary (poster uploads) ───────────────────────────────────────────
    # If any of the three is empty, uploads fail with a 500.
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    UPLOAD_FOLDER: str = "stive-school/netflix"
    UPLOAD_TIMEOUT_SECONDS: float = 30.0

    # ── Server ────────────────────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 5001

    # ── CORS ──────────────────────────────────────────────────────────────────
    # Env: comma-separated (https://a.com,https://b.com) or JSON ["https://a.com"]
    CORS_ORIGINS: list[str] = ["*"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors(cls, v: object) -> list[str]:
        if v is None:
            return []
        return _parse_cors_origins(v)

    # ── App ───────────────────────────────────────────────────────────────────
    APP_ENV: str = "development"  # development | production
    ENABLE_DOCS: bool = True  # Set to False to disable /docs in production
    LOG_LEVEL: str = "INFO"


settings = Settings()
