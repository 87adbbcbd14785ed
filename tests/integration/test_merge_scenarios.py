from functools import reduce

import pytest

from yachtscan.merge import OnboardingState, ScanPayload, reduce_scan

_REGISTRATION_SCAN = {
    "extracted_data": {
        "key_information": {
            "yacht_name": "STARK X",
            "flag_state": "MALTA\nVALLETTA",
            "gross_tonnage": "12",
        },
        "form_fields": {
            "No_Year": "525 IN 2025\nVALLETTA",
            "Gross_Net_Tonnage": "45 / 13",
            "Hull_length": "45,2",
            "Main_breadth": "8,5",
            "Framework": "GRP",
            "Company_Name": "BLUE WATER HOLDINGS LTD",
            "Stamp": "OFFICIAL",
        },
    },
    "auto_populate_data": {
        "basicInfo": {"yacht_name": "X"},
        "extractedFields": {"Call Sign": "9HA1234", "Engine Type": "Motor Ship"},
    },
    "confidence": 0.9,
}

_BUILDER_SCAN = {
    "extracted_data": {
        "key_information": {
            "when_and_where_built": "2025 AZIMUT BENETTI SPA, VIAREGGIO (LUCCA), ITALY"
        },
        "form_fields": {"Home_Port": "GOZO"},
    },
    "confidence": 0.8,
}


@pytest.mark.integration
class TestMergeScenarios:
    def test_registration_certificate_scan(self) -> None:
        state = reduce_scan(OnboardingState(), ScanPayload.from_dict(_REGISTRATION_SCAN))

        assert dict(state.fields) == {
            "name": "STARK X",
            "flagState": "MALTA",
            "officialNumber": "525",
            "callSign": "9HA1234",
            "hullMaterial": "GRP",
            "lengthOverall": 45.2,
            "beam": 8.5,
            "grossTonnage": 45.0,
            "engineType": "DIESEL",
            "homePort": "VALLETTA",
            "organizationName": "BLUE WATER HOLDINGS LTD",
            "ownerType": "company",
        }
        assert state.coverage == tuple(state.fields)
        assert state.confidence_scores["name"] == 1.0
        assert state.confidence_scores["callSign"] == 0.9
        assert state.confidence_scores["homePort"] == 0.85

    def test_scans_fold_in_order(self) -> None:
        payloads = [ScanPayload.from_dict(scan) for scan in (_REGISTRATION_SCAN, _BUILDER_SCAN)]

        state = reduce(reduce_scan, payloads, OnboardingState())

        assert state.scans_merged == 2
        assert state.fields["builder"] == "AZIMUT BENETTI SPA"
        assert state.fields["year"] == 2025
        assert state.fields["homePort"] == "GOZO"
        assert state.fields["name"] == "STARK X"
        assert state.coverage[:2] == ("name", "flagState")
        assert state.coverage[-2:] == ("year", "builder")
        assert set(state.coverage) == set(state.fields)
