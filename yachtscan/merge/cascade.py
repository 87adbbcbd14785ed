"""Priority-cascade merge of the scan sources.

The sources are folded in priority order into an immutable mapping. A
source only contributes fields that no earlier source has set, so the
highest-priority value for a field always survives.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType

from yachtscan.extraction.composite import parse_number
from yachtscan.merge.aliases import SourceAliases, load_source_aliases
from yachtscan.merge.models import MergedField, ScanPayload


@dataclass(frozen=True)
class MergeSource:
    name: str
    priority: int
    default_confidence: float
    confidence_delta: float


KEY_INFORMATION = MergeSource("key_information", 1, 0.85, 0.15)
BASIC_INFO = MergeSource("basic_info", 2, 0.75, 0.10)
EXTRACTED_FIELDS = MergeSource("extracted_fields", 3, 0.65, 0.0)
FORM_FIELDS = MergeSource("form_fields", 4, 0.75, -0.05)

SOURCES: tuple[MergeSource, ...] = (KEY_INFORMATION, BASIC_INFO, EXTRACTED_FIELDS, FORM_FIELDS)


def has_value(value: object) -> bool:
    """Blank strings, zero and missing values never count as extracted."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (int, float)):
        return value != 0
    return True


def source_confidence(source: MergeSource, scan_confidence: float | None) -> float:
    base = scan_confidence or source.default_confidence
    return round(min(max(base + source.confidence_delta, 0.0), 1.0), 4)


def _candidates(
    source: MergeSource, payload: ScanPayload, aliases: SourceAliases
) -> Iterator[tuple[str, object]]:
    if source is KEY_INFORMATION:
        yield from payload.key_information.items()
    elif source is BASIC_INFO:
        yield from payload.basic_info.items()
    elif source is EXTRACTED_FIELDS:
        for name, value in payload.extracted_fields.items():
            yield aliases.extracted_fields.get(name, name), value
    elif source is FORM_FIELDS:
        for name, value in payload.form_fields.items():
            target = aliases.form_fields.get(name)
            if target is None:
                continue
            if target in aliases.numeric_form_fields:
                number = parse_number(value)
                if number is not None:
                    value = number
            yield target, value


def _fold_source(
    merged: Mapping[str, MergedField],
    contribution: tuple[MergeSource, float, Iterator[tuple[str, object]]],
) -> Mapping[str, MergedField]:
    source, confidence, candidates = contribution
    additions: dict[str, MergedField] = {}
    for field_name, value in candidates:
        if field_name in merged or field_name in additions or not has_value(value):
            continue
        additions[field_name] = MergedField(
            value=value,
            source=source.name,
            priority=source.priority,
            confidence=confidence,
        )
    return MappingProxyType({**merged, **additions})


def merge_sources(
    payload: ScanPayload,
    aliases: SourceAliases | None = None,
    sources: tuple[MergeSource, ...] = SOURCES,
) -> Mapping[str, MergedField]:
    """Merge the payload's sources into one read-only field map."""
    aliases = aliases or load_source_aliases()
    contributions = (
        (
            source,
            source_confidence(source, payload.confidence),
            _candidates(source, payload, aliases),
        )
        for source in sorted(sources, key=lambda source: source.priority)
    )
    return reduce(_fold_source, contributions, MappingProxyType({}))
