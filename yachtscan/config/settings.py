from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    ocr_provider: str = "edge_function"
    ocr_endpoint_url: str = ""
    ocr_api_key: str = ""
    ocr_action: str = "run_test"
    ocr_processor_id: str = ""
    ocr_timeout_seconds: int = 30
    ocr_default_confidence: float = 0.95

    ocr_fallback_provider: str = "documentai"
    documentai_project_id: str = ""
    documentai_location: str = "us"
    documentai_processor_id: str = ""
    documentai_timeout_seconds: int = 60

    pdf_engine: str = "pdfplumber"
    pdf_text_layer_enabled: bool = True

    rules_dir: Path | None = None
