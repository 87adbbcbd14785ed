from typing import ClassVar

from yachtscan.config.settings import Settings
from yachtscan.ocr.adapter import OcrAdapter
from yachtscan.ocr.base import BaseOcrClient
from yachtscan.ocr.documentai_client_adapter import DocumentAIClientAdapter
from yachtscan.ocr.edge_function_client_adapter import EdgeFunctionClientAdapter
from yachtscan.ocr.example_client_adapter import ExampleClientAdapter


class OcrAdapterFactory:
    """Builds the primary transport plus the optional fallback from settings."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("edge_function", "example")
    FALLBACK_PROVIDERS: ClassVar[tuple[str, ...]] = ("documentai", "none")

    @classmethod
    def create(cls, settings: Settings) -> OcrAdapter:
        clients = [cls._create_primary(settings)]
        fallback = cls._create_fallback(settings)
        if fallback is not None:
            clients.append(fallback)
        return OcrAdapter(clients, default_confidence=settings.ocr_default_confidence)

    @classmethod
    def _create_primary(cls, settings: Settings) -> BaseOcrClient:
        provider = settings.ocr_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "edge_function":
            return EdgeFunctionClientAdapter(
                endpoint_url=settings.ocr_endpoint_url,
                api_key=settings.ocr_api_key,
                processor_id=settings.ocr_processor_id,
                timeout_seconds=settings.ocr_timeout_seconds,
                action=settings.ocr_action,
            )
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )

    @classmethod
    def _create_fallback(cls, settings: Settings) -> BaseOcrClient | None:
        provider = settings.ocr_fallback_provider.lower()
        if provider == "none" or settings.ocr_provider.lower() == "example":
            return None
        if provider == "documentai":
            return DocumentAIClientAdapter(
                project_id=settings.documentai_project_id,
                location=settings.documentai_location,
                processor_id=settings.documentai_processor_id or settings.ocr_processor_id,
                timeout_seconds=settings.documentai_timeout_seconds,
            )
        raise ValueError(
            f"Unknown OCR fallback provider '{provider}'. "
            f"Choose from: {list(cls.FALLBACK_PROVIDERS)}"
        )
