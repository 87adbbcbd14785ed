from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def _frozen(data: Any) -> Mapping[str, object]:
    return MappingProxyType(dict(data)) if isinstance(data, Mapping) else MappingProxyType({})


def _empty() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ScanPayload:
    """The four extraction sources of one completed scan, highest trust first."""

    key_information: Mapping[str, object] = field(default_factory=_empty)
    basic_info: Mapping[str, object] = field(default_factory=_empty)
    extracted_fields: Mapping[str, object] = field(default_factory=_empty)
    form_fields: Mapping[str, object] = field(default_factory=_empty)
    confidence: float | None = None

    @classmethod
    def from_dict(cls, scan_result: Mapping[str, Any]) -> "ScanPayload":
        """Build from the scan service response.

        Expected shape::

            {"extracted_data": {"key_information": {...}, "form_fields": {...}},
             "auto_populate_data": {"basicInfo": {...}, "extractedFields": {...}},
             "confidence": 0.9}
        """
        extracted_data = scan_result.get("extracted_data") or {}
        auto_populate_data = scan_result.get("auto_populate_data") or {}
        confidence = scan_result.get("confidence")
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            confidence = None
        return cls(
            key_information=_frozen(extracted_data.get("key_information")),
            basic_info=_frozen(auto_populate_data.get("basicInfo")),
            extracted_fields=_frozen(auto_populate_data.get("extractedFields")),
            form_fields=_frozen(extracted_data.get("form_fields")),
            confidence=float(confidence) if confidence is not None else None,
        )


@dataclass(frozen=True)
class MergedField:
    value: object
    source: str
    priority: int
    confidence: float


@dataclass(frozen=True)
class FormPopulation:
    """Form values derived from one merged scan, in assignment order.

    ``priorities`` holds the priority of the source each value came from.
    """

    fields: Mapping[str, object]
    confidence_scores: Mapping[str, float]
    priorities: Mapping[str, int] = field(default_factory=_empty)

    @property
    def coverage(self) -> tuple[str, ...]:
        return tuple(self.fields)


@dataclass(frozen=True)
class OnboardingState:
    """Form state the merge reducer folds scans into."""

    fields: Mapping[str, object] = field(default_factory=_empty)
    coverage: tuple[str, ...] = ()
    confidence_scores: Mapping[str, float] = field(default_factory=_empty)
    scans_merged: int = 0
