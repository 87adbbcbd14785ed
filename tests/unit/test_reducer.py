from types import MappingProxyType

from yachtscan.merge.cascade import merge_sources
from yachtscan.merge.models import OnboardingState, ScanPayload
from yachtscan.merge.reducer import DERIVATION_RULES, DerivationRule, populate_form, reduce_scan


def _make_payload(**sources: dict[str, object]) -> ScanPayload:
    return ScanPayload(
        **{name: MappingProxyType(values) for name, values in sources.items()}
    )


def _populate(**sources: dict[str, object]) -> dict[str, object]:
    return dict(populate_form(merge_sources(_make_payload(**sources))).fields)


class TestGrossTonnage:
    def test_misread_length_is_rejected_for_combined_value(self) -> None:
        fields = _populate(
            key_information={"gross_tonnage": "12"},
            form_fields={"Gross_Net_Tonnage": "45 / 13"},
        )
        assert fields["grossTonnage"] == 45.0

    def test_misread_length_without_combined_value(self) -> None:
        fields = _populate(key_information={"gross_tonnage": "12", "net_tonnage": "40"})
        assert "grossTonnage" not in fields

    def test_net_tonnage_when_gross_is_missing(self) -> None:
        assert _populate(key_information={"net_tonnage": "40"})["grossTonnage"] == 40.0


class TestCompositeFields:
    def test_registration_info_gives_number_and_port(self) -> None:
        fields = _populate(form_fields={"No_Year": "525 IN 2025\nVALLETTA"})
        assert fields["officialNumber"] == "525"
        assert fields["homePort"] == "VALLETTA"

    def test_explicit_values_beat_composite(self) -> None:
        fields = _populate(
            key_information={"official_number": "23456", "home_port": "GOZO"},
            form_fields={"No_Year": "525 IN 2025\nVALLETTA"},
        )
        assert fields["officialNumber"] == "23456"
        assert fields["homePort"] == "GOZO"

    def test_builder_and_year_from_when_and_where_built(self) -> None:
        fields = _populate(
            key_information={
                "when_and_where_built": "2025 AZIMUT BENETTI SPA, VIAREGGIO (LUCCA), ITALY"
            }
        )
        assert fields["builder"] == "AZIMUT BENETTI SPA"
        assert fields["year"] == 2025

    def test_explicit_year_beats_composite(self) -> None:
        fields = _populate(
            key_information={"year_built": "2019", "builder_and_year": "2025 PRINCESS YACHTS"}
        )
        assert fields["year"] == 2019
        assert fields["builder"] == "PRINCESS YACHTS"


class TestValueDerivation:
    def test_flag_state_first_line(self) -> None:
        assert _populate(key_information={"flag_state": "MALTA\nVALLETTA"})["flagState"] == "MALTA"

    def test_dates_are_formatted(self) -> None:
        fields = _populate(key_information={"registered_on": "15 January 2025"})
        assert fields["registrationDate"] == "15-01-2025"

    def test_engine_type(self) -> None:
        fields = _populate(key_information={"propulsion": "INTERNAL COMBUSTION DIESEL"})
        assert fields["engineType"] == "DIESEL"

    def test_engine_makers_fallback(self) -> None:
        fields = _populate(form_fields={"Engine_Makers": "MTU FRIEDRICHSHAFEN"})
        assert fields["engineType"] == "MTU FRIEDRICHSHAFEN"

    def test_draft_from_particulars_of_tonnage(self) -> None:
        fields = _populate(form_fields={"Particulars_of_Tonnage": "Length: 32 Depth: 3.2"})
        assert fields["draft"] == 3.2

    def test_model_is_truncated(self) -> None:
        fields = _populate(key_information={"model": "M" * 80})
        assert fields["model"] == "M" * 50

    def test_numbers_from_extracted_fields(self) -> None:
        fields = _populate(
            extracted_fields={"Length Overall": "45.2 m", "Beam": "8,5", "Engine Power": "2x1000"}
        )
        assert fields["lengthOverall"] == 45.2
        assert fields["beam"] == 8.5
        assert fields["enginePower"] == 2.0


class TestOwner:
    def test_company_owner(self) -> None:
        fields = _populate(
            key_information={"organization_name": "SEA LTD", "owner_name": "JOHN SMITH"}
        )
        assert fields["organizationName"] == "SEA LTD"
        assert fields["ownerType"] == "company"
        assert "ownerName" not in fields

    def test_individual_owner(self) -> None:
        fields = _populate(key_information={"owner_name": "JOHN SMITH"})
        assert fields["ownerName"] == "JOHN SMITH"
        assert fields["ownerType"] == "individual"


class TestPopulateForm:
    def test_coverage_is_assignment_order(self) -> None:
        merged = merge_sources(
            _make_payload(
                key_information={
                    "home_port": "VALLETTA",
                    "flag_state": "MALTA",
                    "yacht_name": "X",
                    "year_built": "2025",
                }
            )
        )
        population = populate_form(merged)
        assert population.coverage == ("year", "name", "flagState", "homePort")
        assert set(population.confidence_scores) == set(population.coverage)

    def test_first_rule_wins(self) -> None:
        rules = (
            DerivationRule("name", ("a",), lambda value: f"first {value}"),
            DerivationRule("name", ("b",), lambda value: f"second {value}"),
        )
        merged = merge_sources(_make_payload(key_information={"a": "1", "b": "2"}))
        assert dict(populate_form(merged, rules).fields) == {"name": "first 1"}

    def test_every_target_has_rules(self) -> None:
        targets = {rule.target for rule in DERIVATION_RULES}
        assert {"name", "flagState", "year", "grossTonnage", "homePort"} <= targets


class TestReduceScan:
    def test_scan_overwrites_and_extends_state(self) -> None:
        state = OnboardingState(
            fields=MappingProxyType({"name": "OLD", "notes": "keep"}),
            coverage=("name", "notes"),
            confidence_scores=MappingProxyType({"name": 0.5}),
        )
        payload = _make_payload(key_information={"yacht_name": "NEW", "flag_state": "MALTA"})
        result = reduce_scan(state, payload)
        assert dict(result.fields) == {"name": "NEW", "notes": "keep", "flagState": "MALTA"}
        assert result.coverage == ("name", "notes", "flagState")
        assert result.confidence_scores["name"] == 1.0
        assert result.scans_merged == 1

    def test_state_is_not_mutated(self) -> None:
        state = OnboardingState()
        reduce_scan(state, _make_payload(key_information={"yacht_name": "X"}))
        assert dict(state.fields) == {}
        assert state.scans_merged == 0

    def test_empty_scan(self) -> None:
        result = reduce_scan(OnboardingState(), ScanPayload())
        assert dict(result.fields) == {}
        assert result.coverage == ()
        assert result.scans_merged == 1


class TestSourcePriorityAcrossNames:
    def test_key_information_date_beats_form_field_alias(self) -> None:
        state = reduce_scan(
            OnboardingState(),
            _make_payload(
                key_information={"certificate_issued_date": "01-01-2024"},
                form_fields={"Certificate_issued_this": "02-02-2023"},
            ),
        )
        assert state.fields["certificateIssuedDate"] == "01-01-2024"
        assert state.confidence_scores["certificateIssuedDate"] == 1.0

    def test_key_information_length_beats_hull_length(self) -> None:
        fields = _populate(
            key_information={"length_overall": 45.2},
            form_fields={"Hull_length": "40"},
        )
        assert fields["lengthOverall"] == 45.2

    def test_provisional_date_from_highest_priority_source(self) -> None:
        fields = _populate(
            basic_info={"provisionally_registered_on_specific": "3 March 2022"},
            form_fields={"Provisionally_registered_on": "04-04-2021"},
        )
        assert fields["provisionalRegistrationDate"] == "03-03-2022"

    def test_input_order_breaks_ties_within_a_source(self) -> None:
        fields = _populate(key_information={"hull_length": "40", "length_overall": "45"})
        assert fields["lengthOverall"] == 40.0

    def test_later_rule_from_higher_priority_source_wins(self) -> None:
        population = populate_form(
            merge_sources(
                _make_payload(
                    key_information={"combined_info": "525 IN 2025\nVALLETTA"},
                    form_fields={"Home_Port": "GOZO"},
                )
            )
        )
        assert population.fields["homePort"] == "VALLETTA"
        assert population.priorities["homePort"] == 1

    def test_later_rule_from_lower_priority_source_is_ignored(self) -> None:
        population = populate_form(
            merge_sources(
                _make_payload(
                    key_information={"home_port": "GOZO"},
                    form_fields={"No_Year": "525 IN 2025\nVALLETTA"},
                )
            )
        )
        assert population.fields["homePort"] == "GOZO"
        assert population.priorities["homePort"] == 1

    def test_form_field_organization_keeps_company_owner(self) -> None:
        fields = _populate(
            key_information={"owner_name": "JOHN SMITH"},
            form_fields={"Company_Name": "SEA LTD"},
        )
        assert fields["ownerType"] == "company"
        assert "ownerName" not in fields

    def test_engine_makers_never_replace_engine_description(self) -> None:
        fields = _populate(
            key_information={"engine_makers": "MTU"},
            form_fields={"Propulsion": "INTERNAL COMBUSTION DIESEL"},
        )
        assert fields["engineType"] == "DIESEL"
