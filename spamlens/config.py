"""
SpamLens Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- OCR Provider ---
    OCR_PROVIDER: str = os.getenv("SPAMLENS_OCR_PROVIDER", "gemini")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    OCR_CACHE_TTL: int = int(os.getenv("SPAMLENS_OCR_CACHE_TTL", "3600"))
    MAX_UPLOAD_BYTES: int = int(os.getenv("SPAMLENS_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # --- Email Store ---
    EMAIL_DB_PATH: str = os.getenv("SPAMLENS_EMAIL_DB", "spamlens_emails.db")
    SEED_SAMPLES: bool = os.getenv("SPAMLENS_SEED_SAMPLES", "true").lower() == "true"

    # --- Server ---
    HOST: str = os.getenv("SPAMLENS_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("SPAMLENS_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("SPAMLENS_CORS_ORIGINS", "*")


settings = Settings()
