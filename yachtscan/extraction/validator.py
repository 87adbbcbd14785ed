"""Per-field validation and cleaning of mapped values.

Nothing here raises on bad data: a value that fails its rule is moved to
the rejected map together with a reason the form can show.
"""

import math
from dataclasses import dataclass
from datetime import date

from yachtscan.extraction.models import FieldMappingResult, ValidationResult
from yachtscan.extraction.rules_loader import FieldRule, ValidationRuleTable

_NAME_FIELDS = frozenset({"name", "yacht_name"})
_YEAR_FIELDS = frozenset({"year", "year_built"})


@dataclass(frozen=True)
class FieldVerdict:
    is_valid: bool
    value: object = None
    reason: str = ""


def _accept(value: object) -> FieldVerdict:
    return FieldVerdict(is_valid=True, value=value)


def _reject(reason: str) -> FieldVerdict:
    return FieldVerdict(is_valid=False, reason=reason)


def _is_empty(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class FieldValidator:
    """Applies the rule table to every mapped field."""

    def __init__(self, rules: ValidationRuleTable, current_year: int | None = None) -> None:
        self._rules = rules
        self._current_year = current_year or date.today().year

    def validate(self, mapping: FieldMappingResult) -> ValidationResult:
        validated: dict[str, object] = {}
        rejected: dict[str, str] = {}
        cleaned = 0
        for field_name, value in mapping.mapped_fields.items():
            verdict = self.validate_field(field_name, value)
            if not verdict.is_valid:
                rejected[field_name] = verdict.reason
                continue
            validated[field_name] = verdict.value
            if verdict.value != value:
                cleaned += 1
        return ValidationResult(
            validated_fields=validated,
            rejected_fields=rejected,
            cleaned_count=cleaned,
        )

    def validate_field(self, field_name: str, value: object) -> FieldVerdict:
        rule = self._rules.fields.get(field_name)
        if rule is None:
            return _accept(value)

        cleaned = value.strip() if isinstance(value, str) else value
        if _is_empty(cleaned):
            if rule.required:
                return _reject(f"Field '{field_name}' is required but was empty")
            return _accept(None)

        if field_name in _NAME_FIELDS:
            return self._validate_name(field_name, cleaned, rule)
        if field_name in _YEAR_FIELDS:
            return self._validate_year(cleaned, rule)

        if isinstance(cleaned, str):
            if rule.min_length is not None and len(cleaned) < rule.min_length:
                return _reject(
                    f"Field '{field_name}' must be at least {rule.min_length} characters"
                )
            if rule.max_length is not None and len(cleaned) > rule.max_length:
                return _reject(
                    f"Field '{field_name}' must be no more than {rule.max_length} characters"
                )
            is_date = rule.data_type == "date"
            if rule.pattern is not None and not is_date and not rule.pattern.match(cleaned):
                return _reject(f"Field '{field_name}' has invalid format")

        if rule.data_type == "number":
            return self._validate_number(field_name, cleaned, rule)

        if rule.data_type == "date":
            if rule.pattern is not None and not rule.pattern.match(str(cleaned)):
                return _reject(f"Field '{field_name}' must be in DD-MM-YYYY format")

        if rule.allowed_values is not None and cleaned not in rule.allowed_values:
            return _reject(
                f"Field '{field_name}' must be one of: {', '.join(rule.allowed_values)}"
            )
        return _accept(cleaned)

    @staticmethod
    def _validate_name(field_name: str, value: object, rule: FieldRule) -> FieldVerdict:
        if not isinstance(value, str):
            return _reject("Yacht name must be a valid string")
        if rule.allow_single_char and len(value) == 1:
            if value.upper() in rule.luxury_patterns:
                return _accept(value.upper())
            if value.isascii() and value.isupper():
                return _accept(value)
        if rule.min_length is not None and len(value) < rule.min_length:
            return _reject(f"Field '{field_name}' must be at least {rule.min_length} characters")
        if rule.max_length is not None and len(value) > rule.max_length:
            return _reject(
                f"Field '{field_name}' must be no more than {rule.max_length} characters"
            )
        if rule.pattern is not None and not rule.pattern.match(value):
            return _reject(f"Field '{field_name}' has invalid format")
        return _accept(value)

    def _validate_year(self, value: object, rule: FieldRule) -> FieldVerdict:
        try:
            number = float(str(value))
        except ValueError:
            return _reject("Year must be a valid number")
        if not math.isfinite(number):
            return _reject("Year must be a valid number")
        year = int(number)
        if year in rule.priority_years:
            return _accept(year)
        if rule.min_value is not None and year < rule.min_value:
            return _reject(f"Year must be at least {rule.min_value:g}")
        max_year = rule.max_value
        if rule.max_years_ahead is not None:
            max_year = self._current_year + rule.max_years_ahead
        if max_year is not None and year > max_year:
            return _reject(f"Year must be no more than {max_year:g}")
        return _accept(year)

    @staticmethod
    def _validate_number(field_name: str, value: object, rule: FieldRule) -> FieldVerdict:
        if isinstance(value, bool):
            return _reject(f"Field '{field_name}' must be a number")
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return _reject(f"Field '{field_name}' must be a number")
        if not math.isfinite(number):
            return _reject(f"Field '{field_name}' must be a number")
        if rule.min_value is not None and number < rule.min_value:
            return _reject(f"Field '{field_name}' must be at least {rule.min_value:g}")
        if rule.max_value is not None and number > rule.max_value:
            return _reject(f"Field '{field_name}' must be no more than {rule.max_value:g}")
        return _accept(number)
