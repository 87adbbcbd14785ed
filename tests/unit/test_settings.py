from pathlib import Path

import pytest
from pydantic import ValidationError

from yachtscan.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_ocr_provider(self) -> None:
        s = Settings()
        assert s.ocr_provider == "edge_function"
        assert s.ocr_fallback_provider == "documentai"

    def test_default_ocr_action(self) -> None:
        s = Settings()
        assert s.ocr_action == "run_test"

    def test_default_timeouts(self) -> None:
        s = Settings()
        assert s.ocr_timeout_seconds == 30
        assert s.documentai_timeout_seconds == 60

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"
        assert s.pdf_text_layer_enabled is True

    def test_no_rules_dir_override(self) -> None:
        s = Settings()
        assert s.rules_dir is None


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_endpoint_and_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_ENDPOINT_URL", "https://ocr.example.com/functions/v1/extract")
        monkeypatch.setenv("OCR_API_KEY", "secret")
        s = Settings()
        assert s.ocr_endpoint_url == "https://ocr.example.com/functions/v1/extract"
        assert s.ocr_api_key == "secret"

    def test_loads_documentai_location(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCUMENTAI_LOCATION", "eu")
        s = Settings()
        assert s.documentai_location == "eu"

    def test_loads_rules_dir(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("RULES_DIR", str(tmp_path))
        s = Settings()
        assert s.rules_dir == tmp_path

    def test_disables_text_layer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PDF_TEXT_LAYER_ENABLED", "false")
        s = Settings()
        assert s.pdf_text_layer_enabled is False


class TestSettingsValidation:
    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_TIMEOUT_SECONDS", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_confidence_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_DEFAULT_CONFIDENCE", "abc")
        with pytest.raises(ValidationError):
            Settings()
