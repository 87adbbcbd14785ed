import re

from yachtscan.extraction.dates import format_date
from yachtscan.extraction.models import (
    FieldMappingResult,
    PatternRecognitionResult,
    ProcessingRule,
)
from yachtscan.extraction.rules_loader import FieldMappingEntry, FieldMappingTable

_SEPARATORS = re.compile(r"[_\-\s]")
_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9_]")
_NUMBER_CHARS = re.compile(r"[^\d.]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def sanitize_key(field_name: str) -> str:
    """Key under which an unmapped vendor field is kept."""
    return _UNSAFE_KEY_CHARS.sub("_", field_name.lower())


def _normalize(name: str) -> str:
    return _SEPARATORS.sub("", name).lower()


class FieldMapper:
    """Translates vendor field names to canonical record fields.

    Lookup walks the categories in table order: an exact case-insensitive
    match first, then a fuzzy match on the separator-free name or a shared
    synonym group. The first source field that lands on a canonical field
    owns it; later ones are reported in the log and dropped.
    """

    def __init__(self, table: FieldMappingTable) -> None:
        self._table = table
        self._by_category: dict[str, list[FieldMappingEntry]] = {}
        for entry in table.entries:
            self._by_category.setdefault(entry.category, []).append(entry)

    def find(self, field_name: str) -> FieldMappingEntry | None:
        key = field_name.strip().lower()
        for entries in self._by_category.values():
            for entry in entries:
                if entry.source.lower() == key:
                    return entry
            for entry in entries:
                if self._is_fuzzy_match(key, entry.source):
                    return entry
        return None

    def map(
        self,
        recognition: PatternRecognitionResult,
        log: list[str] | None = None,
    ) -> FieldMappingResult:
        mapped: dict[str, object] = {}
        unmapped: list[str] = []
        rules: dict[str, ProcessingRule] = {}

        for field_name, value in recognition.enhanced_data.items():
            entry = self.find(field_name)
            if entry is None:
                key = sanitize_key(field_name)
                unmapped.append(field_name)
                mapped.setdefault(key, value)
                _note(log, f"Unmapped (stored as '{key}'): {field_name}")
                continue
            if entry.target in mapped:
                _note(log, f"Skipped {field_name} -> {entry.target}: already mapped")
                continue
            mapped[entry.target] = self.process_value(entry.target, value, entry.rule)
            rules[entry.target] = entry.rule
            _note(log, f"Mapped: {field_name} -> {entry.target}")

        return FieldMappingResult(
            mapped_fields=mapped,
            unmapped_fields=unmapped,
            processing_rules=rules,
            fields_before_mapping=len(recognition.enhanced_data),
        )

    def process_value(self, target: str, value: object, rule: ProcessingRule) -> object:
        processed = value
        if rule.data_type == "number" and isinstance(value, str):
            number = _parse_positive(value)
            if number is not None:
                processed = number
        if rule.requires_date_formatting and isinstance(value, str):
            processed = format_date(value)
        value_map = self._table.value_maps.get(target)
        if value_map and isinstance(processed, str):
            processed = value_map.get(processed.strip().upper(), processed)
        if isinstance(processed, str):
            processed = processed.strip()
            if not processed:
                return None
        return processed

    def _is_fuzzy_match(self, key: str, source: str) -> bool:
        normalized_key = _normalize(key)
        normalized_source = _normalize(source)
        if normalized_key == normalized_source:
            return True
        return any(
            normalized_key in group and normalized_source in group
            for group in self._table.synonym_groups
        )


def _parse_positive(value: str) -> float | None:
    match = _LEADING_NUMBER.match(_NUMBER_CHARS.sub("", value))
    if not match:
        return None
    number = float(match.group(0))
    return number if number > 0 else None


def _note(log: list[str] | None, message: str) -> None:
    if log is not None:
        log.append(message)
