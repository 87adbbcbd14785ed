from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractionRequest:
    """One document handed in by the scanner UI."""

    file_base64: str
    file_name: str
    mime_type: str = ""
    category_hint: str | None = None
    extraction_hints: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileAnalysisResult:
    mime_type: str
    category: str
    quality: str
    size_bytes: int
    preprocessing_steps: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OcrExtractionResult:
    """Vendor output with field names untouched."""

    key_values: dict[str, object]
    text: str
    confidence: float
    document_type: str
    transport: str


@dataclass(frozen=True)
class PatternRecognitionResult:
    enhanced_data: dict[str, object]
    patterns_applied: list[str] = field(default_factory=list)
    fields_recognized: list[str] = field(default_factory=list)
    recognition_accuracy: float = 1.0


@dataclass(frozen=True)
class ProcessingRule:
    """How a canonical field's value is coerced after mapping."""

    data_type: str = "string"
    requires_date_formatting: bool = False


@dataclass(frozen=True)
class FieldMappingResult:
    mapped_fields: dict[str, object]
    unmapped_fields: list[str] = field(default_factory=list)
    processing_rules: dict[str, ProcessingRule] = field(default_factory=dict)
    fields_before_mapping: int = 0
    strategy: str = "comprehensive_systematic_mapping"


@dataclass(frozen=True)
class ValidationResult:
    validated_fields: dict[str, object]
    rejected_fields: dict[str, str] = field(default_factory=dict)
    cleaned_count: int = 0


@dataclass(frozen=True)
class AutoPopulationResult:
    populated_fields: list[str]
    field_values: dict[str, object]
    confidence_scores: dict[str, float]
    strategy: str = "systematic_comprehensive_population"


@dataclass(frozen=True)
class ExtractionResult:
    """Everything the form auto-fill needs, including the run log."""

    success: bool
    file_analysis: FileAnalysisResult | None = None
    ocr: OcrExtractionResult | None = None
    pattern_recognition: PatternRecognitionResult | None = None
    field_mapping: FieldMappingResult | None = None
    validation: ValidationResult | None = None
    auto_population: AutoPopulationResult | None = None
    total_fields_extracted: int = 0
    total_fields_mapped: int = 0
    total_fields_populated: int = 0
    extraction_accuracy: float = 0.0
    processing_time_ms: float = 0.0
    log: tuple[str, ...] = ()
    error: str | None = None
