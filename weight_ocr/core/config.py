from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    # Number of OCR recognitions allowed to run at once; extra requests get 429
    max_concurrent: int = Field(default=2, ge=1)

    # OCR provider: mock | tesseract | paddleocr
    ocr_provider: str = "tesseract"
    tesseract_lang: str = "eng"
    tesseract_char_whitelist: str = "0123456789.,kg "
    tesseract_psm: int = 6
    ocr_preprocess: bool = True
    paddle_lang: str = "en"
    paddle_use_gpu: bool = False

    # Uploads
    upload_dir: str = "uploads"
    keep_uploads: bool = True
    max_upload_bytes: int = 10 * 1024 * 1024

    history_size: int = Field(default=50, ge=1)

    # Webhook relay (disabled when webhook_url is unset)
    webhook_url: str | None = None
    webhook_timeout_seconds: float = 5.0
    webhook_max_attempts: int = Field(default=3, ge=1)

    cors_origins: str = "*"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
