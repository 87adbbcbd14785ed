import re

from yachtscan.extraction.composite import split_builder_and_year
from yachtscan.extraction.dates import format_date, is_date_field
from yachtscan.extraction.models import (
    FileAnalysisResult,
    OcrExtractionResult,
    PatternRecognitionResult,
)
from yachtscan.extraction.name_reconstruction import YachtNameReconstructor
from yachtscan.extraction.rules_loader import CertificatePatternTable, TextPattern

_BUILT_FIELD = re.compile(
    r"^(?:when[_\s]*and[_\s]*where[_\s]*built?|builder[_\s]*and[_\s]*year)$", re.IGNORECASE
)
_NUMBER_CHARS = re.compile(r"[^\d.]")
_WHITESPACE = re.compile(r"\s+")

CERTIFICATE_PATTERNS_RECOMMENDATION = "use_yacht_certificate_patterns"


class PatternRecognizer:
    """Enhances raw OCR key values before they are mapped.

    Output order matters: the reconstructed name comes first, then values
    split out of composite fields, then the trimmed vendor values, then
    anything recovered from the free text. The field mapper keeps the
    first value it sees for a canonical field.
    """

    def __init__(
        self,
        name_reconstructor: YachtNameReconstructor,
        certificate_patterns: CertificatePatternTable,
    ) -> None:
        self._name_reconstructor = name_reconstructor
        self._certificate_patterns = certificate_patterns

    def recognize(
        self,
        ocr: OcrExtractionResult,
        analysis: FileAnalysisResult | None = None,
    ) -> PatternRecognitionResult:
        patterns_applied: list[str] = []
        fields_recognized: list[str] = []
        enhanced: dict[str, object] = {}
        vendor_names = {name.strip().lower() for name in ocr.key_values}

        candidate = self._name_reconstructor.reconstruct(ocr.key_values)
        if candidate is not None and "yacht_name" not in vendor_names:
            enhanced["yacht_name"] = candidate.name
            fields_recognized.append("yacht_name")
            patterns_applied.append(f"yacht_name_{candidate.strategy}")

        for name, builder, year in self._composite_builders(ocr.key_values):
            taken = enhanced.keys() | vendor_names
            if builder is not None and "builder" not in taken:
                enhanced["builder"] = builder
                fields_recognized.append("builder")
            if year is not None and "year_built" not in taken:
                enhanced["year_built"] = str(year)
                fields_recognized.append("year_built")
            if builder is not None or year is not None:
                patterns_applied.append(f"composite_builder_year:{name}")

        for name, value in ocr.key_values.items():
            if value is None or str(value).strip() == "":
                continue
            text = str(value).strip()
            if is_date_field(name, text):
                formatted = format_date(text)
                if formatted != text:
                    fields_recognized.append(name)
                    patterns_applied.append("date_formatting")
                    text = formatted
            enhanced.setdefault(name, text)

        if analysis is None or CERTIFICATE_PATTERNS_RECOMMENDATION in analysis.recommendations:
            category = analysis.category if analysis is not None else ""
            for pattern in self._certificate_patterns.for_category(category):
                if pattern.target_field in enhanced:
                    continue
                value = self._apply_text_pattern(pattern, ocr.text)
                if value is not None:
                    enhanced[pattern.target_field] = value
                    fields_recognized.append(pattern.target_field)
                    patterns_applied.append(pattern.id)

        accuracy = 1.0
        if fields_recognized:
            accuracy = len(fields_recognized) / max(len(ocr.key_values), 1)
        return PatternRecognitionResult(
            enhanced_data=enhanced,
            patterns_applied=patterns_applied,
            fields_recognized=fields_recognized,
            recognition_accuracy=round(accuracy, 4),
        )

    @staticmethod
    def _composite_builders(
        key_values: dict[str, object],
    ) -> list[tuple[str, str | None, int | None]]:
        found = []
        for name, value in key_values.items():
            if isinstance(value, str) and _BUILT_FIELD.match(name.strip()):
                builder, year = split_builder_and_year(value)
                found.append((name, builder, year))
        return found

    @staticmethod
    def _apply_text_pattern(pattern: TextPattern, text: str) -> object | None:
        if not text:
            return None
        for regex in pattern.patterns:
            match = regex.search(text)
            if not match or not match.group(1):
                continue
            value: object = _WHITESPACE.sub(" ", match.group(1)).strip()
            if not value:
                continue
            mapped = pattern.mapping.get(str(value).upper())
            if mapped is not None:
                value = mapped
            if pattern.data_type == "number":
                try:
                    value = float(_NUMBER_CHARS.sub("", str(value)))
                except ValueError:
                    continue
            if pattern.requires_date_formatting:
                value = format_date(str(value))
            return value
        return None
