"""
Core configuration for the Chassis Extraction service.

This module centralizes all application settings using Pydantic for type safety
and validation. Settings are loaded from environment variables.
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # ==================== Pydantic Settings ====================
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    APP_NAME: str = "Chassis Extraction API"
    APP_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ==================== Server ====================
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = ["*"]

    # ==================== File Storage ====================
    DATA_DIR: Path = Path("data")

    @property
    def UPLOAD_DIR(self) -> Path:
        return self.DATA_DIR / "uploads"

    # File upload constraints
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB in bytes
    ALLOWED_EXTENSIONS: set[str] = {".jpeg", ".jpg", ".png", ".webp", ".gif"}
    ALLOWED_CONTENT_TYPES: set[str] = {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/gif",
    }

    # ==================== Google Cloud Vision ====================
    # Either an inline service account JSON payload or a path to a key file
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None
    GOOGLE_CLOUD_PROJECT_ID: Optional[str] = None

    # ==================== Responses ====================
    EXTRACTED_TEXT_PREVIEW_LENGTH: int = 400
    OCR_LOG_PREVIEW_LENGTH: int = 150

    # ==================== Chassis Matching Rules ====================
    # Letters never used in VINs (confusable with 1 and 0)
    CHASSIS_EXCLUDED_LETTERS: str = "IOQ"
    CHASSIS_MIN_LENGTH: int = 8
    CHASSIS_MAX_LENGTH: int = 17
    CHASSIS_REQUIRE_LETTER: bool = True
    # Manufacture/registration stamps like 20231015 sit next to the plate
    CHASSIS_REJECT_DATE_DIGITS: bool = True
    CHASSIS_DATE_DIGITS_LENGTH: int = 8

    # ==================== Logging ====================
    LOG_FORMAT: str = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"

    def ensure_directories(self) -> None:
        """Create necessary directories (called once at startup)."""
        for directory in (self.DATA_DIR, self.UPLOAD_DIR):
            directory.mkdir(parents=True, exist_ok=True)

    def cleaned_credentials(self) -> Optional[str]:
        """
        Return the credentials setting without the wrapping quotes that
        .env files and deployment dashboards tend to leave around it.
        """
        if not self.GOOGLE_APPLICATION_CREDENTIALS:
            return None

        cleaned = self.GOOGLE_APPLICATION_CREDENTIALS.strip()
        for quote in ('"""', '"'):
            if cleaned.startswith(quote):
                cleaned = cleaned[len(quote):]
            if cleaned.endswith(quote):
                cleaned = cleaned[:-len(quote)]
        return cleaned.strip() or None

    def credentials_are_inline(self) -> bool:
        cleaned = self.cleaned_credentials()
        return bool(cleaned) and cleaned.startswith("{")

    def credentials_info(self) -> dict:
        """
        Parse inline service account credentials.

        Raises:
            ValueError: If the payload is not valid JSON
        """
        cleaned = self.cleaned_credentials() or ""
        try:
            info = json.loads(cleaned, strict=False)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid inline credentials JSON: {e}") from e

        if not isinstance(info, dict):
            raise ValueError("Invalid inline credentials JSON: expected an object")

        # Keys pasted through env vars often arrive with escaped newlines
        if isinstance(info.get("private_key"), str):
            info["private_key"] = info["private_key"].replace("\\n", "\n")
        return info

    def credentials_path(self) -> Optional[Path]:
        """Resolve a credentials file path; relative paths are anchored at BASE_DIR."""
        cleaned = self.cleaned_credentials()
        if not cleaned or cleaned.startswith("{"):
            return None

        path = Path(cleaned)
        return path if path.is_absolute() else self.BASE_DIR / path

    def validate_required_settings(self) -> list[str]:
        """
        Validate that the Vision API credentials are configured.

        Returns:
            List of validation errors (empty if all valid)
        """
        errors = []

        if not self.cleaned_credentials():
            errors.append("GOOGLE_APPLICATION_CREDENTIALS missing")
        elif self.credentials_are_inline():
            try:
                self.credentials_info()
            except ValueError as e:
                errors.append(str(e))
        elif not self.credentials_path().exists():
            errors.append(f"Credentials file not found: {self.credentials_path()}")

        if self.CHASSIS_MIN_LENGTH > self.CHASSIS_MAX_LENGTH:
            errors.append("CHASSIS_MIN_LENGTH must not exceed CHASSIS_MAX_LENGTH")

        return errors


# ==================== Global Settings Instance ====================
settings = Settings()


# ==================== Helper Functions ====================
@lru_cache()
def get_settings() -> Settings:
    """
    Dependency function for FastAPI routes.

    Usage:
        @app.get("/config")
        def get_config(settings: Settings = Depends(get_settings)):
            return {"max_upload": settings.MAX_UPLOAD_SIZE}
    """
    return settings
