# aidetect/core/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

class Settings(BaseSettings):
    app_name: str = "AIDetect"
    env: str = "local"

    # =========================
    # Text limits
    # =========================
    MAX_TEXT_LENGTH: int = 50_000
    MIN_TEXT_LENGTH: int = 10
    MAX_CHUNK_WORDS: int = 8000

    # =========================
    # Upload limits
    # =========================
    MAX_FILE_SIZE_BYTES: int = 50 * 1024 * 1024

    # =========================
    # Remote detection service
    # =========================
    DETECTION_BASE_URL: str = "https://semenjana.biz.id/allin"
    DETECTION_SUBMIT_PATH: str = "/api/v1/getId"
    DETECTION_RESULT_PATH: str = "/api/v1/result"

    # Runtime controls
    SUBMIT_TIMEOUT_SECONDS: float = 15.0
    POLL_TIMEOUT_SECONDS: float = 15.0
    MAX_RETRIES: int = 20
    RETRY_DELAY_MS: int = 2000

    # =========================
    # PDF extraction
    # =========================
    # Ordered fallback list; first importable backend wins.
    PDF_BACKENDS: str = "pymupdf,pdfplumber,pypdf"
    PREVIEW_MAX_PAGES: int = 20
    PREVIEW_TEXT_CHARS: int = 200
    SCANNED_SAMPLE_PAGES: int = 3
    SCANNED_MIN_AVG_CHARS: int = 50

    # HTTP
    CORS_ALLOW_ORIGINS: str | None = None

    model_config = SettingsConfigDict(
        env_file=os.path.join(PROJECT_ROOT, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def pdf_backend_names(self) -> list[str]:
        return [b.strip().lower() for b in self.PDF_BACKENDS.split(",") if b.strip()]

    @property
    def retry_delay_seconds(self) -> float:
        return self.RETRY_DELAY_MS / 1000.0

settings = Settings()
