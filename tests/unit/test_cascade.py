from types import MappingProxyType

import pytest

from yachtscan.merge.cascade import (
    BASIC_INFO,
    EXTRACTED_FIELDS,
    FORM_FIELDS,
    KEY_INFORMATION,
    SOURCES,
    has_value,
    merge_sources,
    source_confidence,
)
from yachtscan.merge.models import ScanPayload


def _make_payload(**sources: dict[str, object]) -> ScanPayload:
    return ScanPayload(
        **{name: MappingProxyType(values) for name, values in sources.items()}
    )


class TestMergeSources:
    def test_key_information_beats_form_fields(self) -> None:
        payload = _make_payload(
            key_information={"home_port": "VALLETTA"},
            form_fields={"Home_Port": "GOZO"},
        )
        merged = merge_sources(payload)
        assert merged["home_port"].value == "VALLETTA"
        assert merged["home_port"].source == "key_information"
        assert merged["home_port"].priority == 1

    def test_lower_priority_source_fills_gaps(self) -> None:
        payload = _make_payload(
            basic_info={"yacht_name": "  "},
            extracted_fields={"Name of Ship": "SERENITY"},
        )
        merged = merge_sources(payload)
        assert merged["yacht_name"].value == "SERENITY"
        assert merged["yacht_name"].source == "extracted_fields"

    def test_extracted_fields_fall_back_to_their_own_name(self) -> None:
        merged = merge_sources(_make_payload(extracted_fields={"custom_field": "value"}))
        assert merged["custom_field"].value == "value"

    def test_unaliased_form_fields_are_ignored(self) -> None:
        merged = merge_sources(_make_payload(form_fields={"Stamp": "OFFICIAL"}))
        assert dict(merged) == {}

    def test_numeric_form_fields_are_parsed(self) -> None:
        merged = merge_sources(_make_payload(form_fields={"Hull_length": "45,2 m"}))
        assert merged["hull_length"].value == 45.2

    def test_empty_values_never_win(self) -> None:
        payload = _make_payload(
            key_information={"beam_m": 0, "call_sign": None, "flag_state": False},
            basic_info={"beam_m": 8.5},
        )
        merged = merge_sources(payload)
        assert set(merged) == {"beam_m"}
        assert merged["beam_m"].source == "basic_info"

    def test_sources_are_applied_in_priority_order(self) -> None:
        payload = _make_payload(
            key_information={"yacht_name": "STARK X"},
            basic_info={"yacht_name": "X"},
        )
        merged = merge_sources(payload, sources=tuple(reversed(SOURCES)))
        assert merged["yacht_name"].value == "STARK X"

    def test_result_is_read_only(self) -> None:
        merged = merge_sources(_make_payload(key_information={"yacht_name": "X"}))
        with pytest.raises(TypeError):
            merged["yacht_name"] = None  # type: ignore[index]


class TestSourceConfidence:
    def test_defaults_without_scan_confidence(self) -> None:
        assert source_confidence(KEY_INFORMATION, None) == 1.0
        assert source_confidence(BASIC_INFO, None) == 0.85
        assert source_confidence(EXTRACTED_FIELDS, None) == 0.65
        assert source_confidence(FORM_FIELDS, None) == 0.7

    def test_scan_confidence_is_adjusted_and_clamped(self) -> None:
        assert source_confidence(KEY_INFORMATION, 0.95) == 1.0
        assert source_confidence(FORM_FIELDS, 0.9) == 0.85

    def test_merged_field_carries_source_confidence(self) -> None:
        payload = ScanPayload(
            form_fields=MappingProxyType({"Home_Port": "VALLETTA"}), confidence=0.9
        )
        assert merge_sources(payload)["home_port"].confidence == 0.85


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, False), ("", False), ("  ", False), (0, False), (False, False),
     ("X", True), (12.5, True), (["a"], True)],
)
def test_has_value(value: object, expected: bool) -> None:
    assert has_value(value) is expected


class TestScanPayloadFromDict:
    def test_reads_nested_sources(self) -> None:
        payload = ScanPayload.from_dict(
            {
                "extracted_data": {
                    "key_information": {"yacht_name": "X"},
                    "form_fields": {"Home_Port": "VALLETTA"},
                },
                "auto_populate_data": {
                    "basicInfo": {"flag_state": "MALTA"},
                    "extractedFields": {"Beam": "8.5"},
                },
                "confidence": 0.92,
            }
        )
        assert payload.key_information == {"yacht_name": "X"}
        assert payload.form_fields == {"Home_Port": "VALLETTA"}
        assert payload.basic_info == {"flag_state": "MALTA"}
        assert payload.extracted_fields == {"Beam": "8.5"}
        assert payload.confidence == 0.92

    def test_missing_sections_are_empty(self) -> None:
        payload = ScanPayload.from_dict({"confidence": "high"})
        assert dict(payload.key_information) == {}
        assert dict(payload.form_fields) == {}
        assert payload.confidence is None
