import base64
import binascii
from dataclasses import replace

from yachtscan.extraction.confidence import AutoPopulator
from yachtscan.extraction.field_mapper import FieldMapper
from yachtscan.extraction.file_analyzer import (
    FileAnalyzer,
    build_ocr_hint,
    document_type_for,
    strip_data_url,
)
from yachtscan.extraction.pattern_recognizer import PatternRecognizer
from yachtscan.extraction.pipeline import ExtractionContext, ExtractionStep
from yachtscan.extraction.validator import FieldValidator
from yachtscan.logging.logger import Log
from yachtscan.ocr.adapter import OcrAdapter
from yachtscan.pdf.base import BaseTextLayerReader
from yachtscan.pdf.exceptions import PdfTextLayerError

TEXT_LAYER_RECOMMENDATION = "extract_text_layers"


class AnalyzeFileStep(ExtractionStep):
    def __init__(self, analyzer: FileAnalyzer) -> None:
        self._analyzer = analyzer

    def run(self, context: ExtractionContext) -> ExtractionContext:
        analysis = self._analyzer.analyze(context.request)
        context.file_analysis = analysis
        context.record(
            f"Phase 1 file analysis: {analysis.mime_type}, category {analysis.category}, "
            f"quality {analysis.quality}, {analysis.size_bytes} bytes"
        )
        return context


class OcrStep(ExtractionStep):
    """Sends the document to OCR, topping up empty text from a PDF text layer."""

    def __init__(
        self,
        ocr_adapter: OcrAdapter,
        text_layer_reader: BaseTextLayerReader | None = None,
    ) -> None:
        self._ocr_adapter = ocr_adapter
        self._text_layer_reader = text_layer_reader

    def close(self) -> None:
        self._ocr_adapter.close()

    def run(self, context: ExtractionContext) -> ExtractionContext:
        if context.file_analysis is None:
            raise ValueError("ExtractionContext.file_analysis must be set before OCR")
        analysis = context.file_analysis
        document_type = document_type_for(analysis.category)
        context.record(
            f"Phase 2 OCR via {', '.join(self._ocr_adapter.transports)} "
            f"(document type {document_type})"
        )
        result = self._ocr_adapter.extract(
            document_base64=strip_data_url(context.request.file_base64),
            mime_type=analysis.mime_type,
            document_type=document_type,
            hint=build_ocr_hint(analysis),
        )
        if not result.text and TEXT_LAYER_RECOMMENDATION in analysis.recommendations:
            text = self._read_text_layer(context)
            if text:
                result = replace(result, text=text)
        context.ocr = result
        context.record(
            f"Phase 2 OCR complete via {result.transport}: {len(result.key_values)} key values, "
            f"{len(result.text)} chars of text, confidence {result.confidence:.2f}"
        )
        return context

    def _read_text_layer(self, context: ExtractionContext) -> str:
        if self._text_layer_reader is None:
            return ""
        try:
            pdf_bytes = base64.b64decode(strip_data_url(context.request.file_base64))
            text = self._text_layer_reader.read(pdf_bytes)
        except (binascii.Error, ValueError, PdfTextLayerError) as exc:
            Log.warning(f"PDF text layer unavailable for {context.request.file_name}: {exc}")
            return ""
        context.record(f"Phase 2 used PDF text layer: {len(text)} chars")
        return text


class RecognizePatternsStep(ExtractionStep):
    def __init__(self, recognizer: PatternRecognizer) -> None:
        self._recognizer = recognizer

    def run(self, context: ExtractionContext) -> ExtractionContext:
        if context.ocr is None:
            raise ValueError("ExtractionContext.ocr must be set before pattern recognition")
        result = self._recognizer.recognize(context.ocr, context.file_analysis)
        context.pattern_recognition = result
        context.record(
            f"Phase 3 pattern recognition: {len(result.enhanced_data)} fields, "
            f"patterns {', '.join(result.patterns_applied) or 'none'}"
        )
        return context


class MapFieldsStep(ExtractionStep):
    def __init__(self, mapper: FieldMapper) -> None:
        self._mapper = mapper

    def run(self, context: ExtractionContext) -> ExtractionContext:
        if context.pattern_recognition is None:
            raise ValueError(
                "ExtractionContext.pattern_recognition must be set before field mapping"
            )
        notes: list[str] = []
        result = self._mapper.map(context.pattern_recognition, log=notes)
        for note in notes:
            context.record(f"Phase 4 {note}")
        context.field_mapping = result
        context.record(
            f"Phase 4 field mapping: {len(result.mapped_fields)} mapped, "
            f"{len(result.unmapped_fields)} unmapped"
        )
        return context


class ValidateStep(ExtractionStep):
    def __init__(self, validator: FieldValidator) -> None:
        self._validator = validator

    def run(self, context: ExtractionContext) -> ExtractionContext:
        if context.field_mapping is None:
            raise ValueError("ExtractionContext.field_mapping must be set before validation")
        result = self._validator.validate(context.field_mapping)
        context.validation = result
        for field_name, reason in result.rejected_fields.items():
            context.record(f"Phase 5 rejected {field_name}: {reason}")
        context.record(
            f"Phase 5 validation: {len(result.validated_fields)} valid, "
            f"{len(result.rejected_fields)} rejected, {result.cleaned_count} cleaned"
        )
        return context


class PopulateStep(ExtractionStep):
    def __init__(self, populator: AutoPopulator) -> None:
        self._populator = populator

    def run(self, context: ExtractionContext) -> ExtractionContext:
        if context.validation is None:
            raise ValueError("ExtractionContext.validation must be set before auto-population")
        result = self._populator.populate(context.validation)
        context.auto_population = result
        context.record(f"Phase 6 auto-population: {len(result.populated_fields)} fields")
        return context
