from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone

from yachtscan.extraction.models import (
    AutoPopulationResult,
    ExtractionRequest,
    FieldMappingResult,
    FileAnalysisResult,
    OcrExtractionResult,
    PatternRecognitionResult,
    ValidationResult,
)
from yachtscan.logging.logger import Log


@dataclass(slots=True)
class ExtractionContext:
    """State of a single extraction run. Created per call, never shared."""

    request: ExtractionRequest
    file_analysis: FileAnalysisResult | None = None
    ocr: OcrExtractionResult | None = None
    pattern_recognition: PatternRecognitionResult | None = None
    field_mapping: FieldMappingResult | None = None
    validation: ValidationResult | None = None
    auto_population: AutoPopulationResult | None = None
    log: list[str] = field(default_factory=list)

    def record(self, message: str) -> None:
        """Append to the run log returned with the result and mirror it to Log."""
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        self.log.append(f"[{timestamp}] {message}")
        Log.info(message, file_name=self.request.file_name)


class ExtractionStep(ABC):
    @abstractmethod
    def run(self, context: ExtractionContext) -> ExtractionContext:
        raise NotImplementedError

    def close(self) -> None:
        return None
