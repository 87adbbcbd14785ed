import base64
from collections.abc import Callable

import pytest

from yachtscan.config.settings import Settings
from yachtscan.extraction.confidence import AutoPopulator
from yachtscan.extraction.field_mapper import FieldMapper
from yachtscan.extraction.file_analyzer import FileAnalyzer
from yachtscan.extraction.models import ExtractionRequest
from yachtscan.extraction.name_reconstruction import YachtNameReconstructor
from yachtscan.extraction.pattern_recognizer import PatternRecognizer
from yachtscan.extraction.processor import ExtractionProcessor
from yachtscan.extraction.rules_loader import RuleTables, load_rule_tables
from yachtscan.extraction.steps import (
    AnalyzeFileStep,
    MapFieldsStep,
    OcrStep,
    PopulateStep,
    RecognizePatternsStep,
    ValidateStep,
)
from yachtscan.extraction.validator import FieldValidator
from yachtscan.ocr.adapter import OcrAdapter
from yachtscan.ocr.base import BaseOcrClient
from yachtscan.pdf.base import BaseTextLayerReader


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return Settings(ocr_provider="example", ocr_fallback_provider="none")


@pytest.fixture(scope="session")
def rule_tables() -> RuleTables:
    return load_rule_tables()


@pytest.fixture
def make_processor(rule_tables: RuleTables) -> Callable[..., ExtractionProcessor]:
    """Full pipeline over the bundled rules with the given OCR transports."""

    def _make(
        clients: list[BaseOcrClient],
        text_layer_reader: BaseTextLayerReader | None = None,
    ) -> ExtractionProcessor:
        recognizer = PatternRecognizer(
            name_reconstructor=YachtNameReconstructor(rule_tables.yacht_names),
            certificate_patterns=rule_tables.certificate_patterns,
        )
        return ExtractionProcessor(
            steps=[
                AnalyzeFileStep(FileAnalyzer()),
                OcrStep(OcrAdapter(clients), text_layer_reader),
                RecognizePatternsStep(recognizer),
                MapFieldsStep(FieldMapper(rule_tables.field_mappings)),
                ValidateStep(FieldValidator(rule_tables.validation_rules, current_year=2026)),
                PopulateStep(AutoPopulator()),
            ]
        )

    return _make


@pytest.fixture
def certificate_request(certificate_pdf_bytes: bytes) -> ExtractionRequest:
    return ExtractionRequest(
        file_base64=base64.b64encode(certificate_pdf_bytes).decode("ascii"),
        file_name="registration_certificate.pdf",
    )
