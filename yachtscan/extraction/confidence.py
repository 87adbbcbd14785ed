import re

from yachtscan.extraction.models import AutoPopulationResult, ValidationResult

BASE_SCORE = 0.5
MAX_SCORE = 0.98

HIGH_VALUE_FIELDS = frozenset({"name", "flagState", "year", "lengthOverall", "beam"})

_DATE_VALUE = re.compile(r"^\d{2}-\d{2}-\d{4}$")


def score_field(field_name: str, value: object) -> float:
    """Heuristic confidence for one populated value.

    Never reaches 1.0: no extracted value has been checked by a person.
    """
    score = BASE_SCORE
    if value is not None and value != "":
        score += 0.2
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        score += 0.2
    if isinstance(value, str):
        if len(value) > 3:
            score += 0.1
        if value[:1].isupper():
            score += 0.1
    if field_name in HIGH_VALUE_FIELDS:
        score += 0.1
    if field_name.endswith("Date") and isinstance(value, str) and _DATE_VALUE.match(value):
        score += 0.2
    return round(min(score, MAX_SCORE), 4)


class AutoPopulator:
    def populate(self, validation: ValidationResult) -> AutoPopulationResult:
        populated: list[str] = []
        values: dict[str, object] = {}
        scores: dict[str, float] = {}
        for field_name, value in validation.validated_fields.items():
            if value is None:
                continue
            populated.append(field_name)
            values[field_name] = value
            scores[field_name] = score_field(field_name, value)
        return AutoPopulationResult(
            populated_fields=populated,
            field_values=values,
            confidence_scores=scores,
        )
