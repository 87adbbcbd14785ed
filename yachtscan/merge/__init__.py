from yachtscan.merge.cascade import merge_sources
from yachtscan.merge.models import MergedField, OnboardingState, ScanPayload
from yachtscan.merge.reducer import populate_form, reduce_scan

__all__ = [
    "MergedField",
    "OnboardingState",
    "ScanPayload",
    "merge_sources",
    "populate_form",
    "reduce_scan",
]
