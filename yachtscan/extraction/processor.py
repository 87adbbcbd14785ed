import time

from yachtscan.config.settings import Settings
from yachtscan.extraction.confidence import AutoPopulator
from yachtscan.extraction.exceptions import ExtractionError
from yachtscan.extraction.field_mapper import FieldMapper
from yachtscan.extraction.file_analyzer import FileAnalyzer
from yachtscan.extraction.models import ExtractionRequest, ExtractionResult
from yachtscan.extraction.name_reconstruction import YachtNameReconstructor
from yachtscan.extraction.pattern_recognizer import PatternRecognizer
from yachtscan.extraction.pipeline import ExtractionContext, ExtractionStep
from yachtscan.extraction.rules_loader import load_rule_tables
from yachtscan.extraction.steps import (
    AnalyzeFileStep,
    MapFieldsStep,
    OcrStep,
    PopulateStep,
    RecognizePatternsStep,
    ValidateStep,
)
from yachtscan.extraction.validator import FieldValidator
from yachtscan.logging.logger import Log
from yachtscan.ocr.factory import OcrAdapterFactory
from yachtscan.pdf.factory import TextLayerReaderFactory


class ExtractionProcessor:
    """Orchestrates the document extraction pipeline.

    Pipeline: analyze -> OCR -> recognize -> map -> validate -> populate.
    Steps run strictly in order. The first ExtractionError stops the run
    and is returned as a failed result carrying the log gathered so far.
    """

    def __init__(self, steps: list[ExtractionStep]) -> None:
        self._steps = steps

    def extract(self, request: ExtractionRequest) -> ExtractionResult:
        started = time.perf_counter()
        context = ExtractionContext(request=request)
        context.record(f"Extraction started for {request.file_name}")
        try:
            for step in self._steps:
                context = step.run(context)
        except ExtractionError as exc:
            Log.error(f"Extraction failed for {request.file_name}: {exc}")
            context.record(f"Extraction failed: {exc}")
            return ExtractionResult(
                success=False,
                file_analysis=context.file_analysis,
                ocr=context.ocr,
                processing_time_ms=_elapsed_ms(started),
                log=tuple(context.log),
                error=str(exc),
            )

        extracted = len(context.ocr.key_values) if context.ocr else 0
        mapped = len(context.field_mapping.mapped_fields) if context.field_mapping else 0
        populated = (
            len(context.auto_population.populated_fields) if context.auto_population else 0
        )
        accuracy = round(populated / extracted * 100, 2) if extracted else 0.0
        context.record(
            f"Extraction complete: {extracted} extracted, {mapped} mapped, "
            f"{populated} populated ({accuracy}%)"
        )
        return ExtractionResult(
            success=True,
            file_analysis=context.file_analysis,
            ocr=context.ocr,
            pattern_recognition=context.pattern_recognition,
            field_mapping=context.field_mapping,
            validation=context.validation,
            auto_population=context.auto_population,
            total_fields_extracted=extracted,
            total_fields_mapped=mapped,
            total_fields_populated=populated,
            extraction_accuracy=accuracy,
            processing_time_ms=_elapsed_ms(started),
            log=tuple(context.log),
        )

    def close(self) -> None:
        for step in self._steps:
            step.close()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def build_processor(settings: Settings) -> ExtractionProcessor:
    """Build an ExtractionProcessor with all required adapters."""
    rules = load_rule_tables(settings.rules_dir)
    ocr_adapter = OcrAdapterFactory.create(settings)
    text_layer_reader = TextLayerReaderFactory.create(settings)
    recognizer = PatternRecognizer(
        name_reconstructor=YachtNameReconstructor(rules.yacht_names),
        certificate_patterns=rules.certificate_patterns,
    )
    return ExtractionProcessor(
        steps=[
            AnalyzeFileStep(FileAnalyzer()),
            OcrStep(ocr_adapter, text_layer_reader),
            RecognizePatternsStep(recognizer),
            MapFieldsStep(FieldMapper(rules.field_mappings)),
            ValidateStep(FieldValidator(rules.validation_rules)),
            PopulateStep(AutoPopulator()),
        ]
    )
