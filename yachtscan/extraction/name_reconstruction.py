import json
import re
from dataclasses import dataclass

from yachtscan.extraction.rules_loader import NameVocabulary

_NAME_OF_SHIP = re.compile(r"name.*ship", re.IGNORECASE)


@dataclass(frozen=True)
class NameCandidate:
    name: str
    strategy: str
    confidence: float
    source_fields: tuple[str, ...]


class YachtNameReconstructor:
    """Rebuilds a yacht name that OCR split up or stripped of its brand.

    Four strategies each propose a candidate: brand field plus model value,
    short "name of ship" value plus a brand mentioned anywhere else, a
    complete name in a name field, and name parts spread over several
    fields. The most confident candidate wins.
    """

    def __init__(self, vocabulary: NameVocabulary) -> None:
        self._vocabulary = vocabulary

    def reconstruct(self, key_values: dict[str, object]) -> NameCandidate | None:
        candidates = self.candidates(key_values)
        return candidates[0] if candidates else None

    def candidates(self, key_values: dict[str, object]) -> list[NameCandidate]:
        entries = [
            (name.strip(), value.strip())
            for name, value in key_values.items()
            if isinstance(value, str) and value.strip()
        ]
        found: list[NameCandidate] = []
        found.extend(self._brand_model(entries))
        found.extend(self._name_with_brand_context(entries, key_values))
        found.extend(self._complete_names(entries))
        split = self._split_name(entries)
        if split is not None:
            found.append(split)
        return sorted(found, key=lambda candidate: candidate.confidence, reverse=True)

    def _brand_model(self, entries: list[tuple[str, str]]) -> list[NameCandidate]:
        confidence = self._vocabulary.confidence["brand_model"]
        return [
            NameCandidate(
                name=f"{name.upper()} {value.upper()}",
                strategy="brand_model",
                confidence=confidence,
                source_fields=(name,),
            )
            for name, value in entries
            if self._is_brand_field(name) and self._is_model_value(value)
        ]

    def _name_with_brand_context(
        self, entries: list[tuple[str, str]], key_values: dict[str, object]
    ) -> list[NameCandidate]:
        confidence = self._vocabulary.confidence["name_with_brand_context"]
        document = json.dumps(key_values, default=str).upper()
        brand = next((brand for brand in self._vocabulary.brands if brand in document), None)
        if brand is None:
            return []
        return [
            NameCandidate(
                name=f"{brand} {value}",
                strategy="name_with_brand_context",
                confidence=confidence,
                source_fields=(name,),
            )
            for name, value in entries
            if _NAME_OF_SHIP.search(name)
            and self._vocabulary.short_name_pattern.match(value)
            and value != brand
        ]

    def _complete_names(self, entries: list[tuple[str, str]]) -> list[NameCandidate]:
        confidence = self._vocabulary.confidence["complete_name"]
        return [
            NameCandidate(
                name=value.upper(),
                strategy="complete_name",
                confidence=confidence,
                source_fields=(name,),
            )
            for name, value in entries
            if self._is_name_field(name) and self._is_complete_name(value)
        ]

    def _split_name(self, entries: list[tuple[str, str]]) -> NameCandidate | None:
        parts = [
            (name, value.upper())
            for name, value in entries
            if self._could_be_name_part(name, value)
        ]
        if len(parts) < 2:
            return None
        return NameCandidate(
            name=" ".join(value for _, value in parts),
            strategy="split_name",
            confidence=self._vocabulary.confidence["split_name"],
            source_fields=tuple(name for name, _ in parts),
        )

    def _is_brand_field(self, field_name: str) -> bool:
        upper = field_name.upper()
        return any(
            brand in upper or (len(upper) >= 3 and upper in brand)
            for brand in self._vocabulary.brands
        )

    def _is_model_value(self, value: str) -> bool:
        return bool(self._vocabulary.model_pattern.match(value)) or (
            value.upper() in self._vocabulary.model_tokens
        )

    def _is_name_field(self, field_name: str) -> bool:
        return any(pattern.search(field_name) for pattern in self._vocabulary.name_field_patterns)

    def _is_complete_name(self, value: str) -> bool:
        if len(value.split()) >= 2:
            return True
        return value.upper() in self._vocabulary.meaningful_names or len(value) >= 5

    def _could_be_name_part(self, field_name: str, value: str) -> bool:
        lowered = field_name.lower()
        if any(word in lowered for word in self._vocabulary.name_part_excluded_words):
            return False
        if self._is_name_field(field_name):
            return False
        return bool(self._vocabulary.name_part_pattern.match(value)) and 2 <= len(value) <= 20
