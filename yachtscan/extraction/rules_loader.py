"""Loads the versioned rule tables bundled under ``rules/``.

Each table is plain JSON so it can be reviewed and diffed on its own;
this module turns it into frozen records with compiled regexes.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from yachtscan.extraction.exceptions import RulesLoadError
from yachtscan.extraction.models import ProcessingRule

_DEFAULT_RULES_DIR = Path(__file__).parent / "rules"

FIELD_MAPPINGS_FILE = "field_mappings.json"
VALIDATION_RULES_FILE = "validation_rules.json"
CERTIFICATE_PATTERNS_FILE = "certificate_patterns.json"
YACHT_NAMES_FILE = "yacht_names.json"

_SEPARATORS = re.compile(r"[_\-\s]")


@dataclass(frozen=True)
class FieldMappingEntry:
    source: str
    target: str
    category: str
    rule: ProcessingRule


@dataclass(frozen=True)
class FieldMappingTable:
    version: int
    entries: tuple[FieldMappingEntry, ...]
    synonym_groups: tuple[frozenset[str], ...]
    value_maps: dict[str, dict[str, str]]


@dataclass(frozen=True)
class TextPattern:
    """Ordered regex alternatives for one semantic field; first match wins."""

    id: str
    target_field: str
    patterns: tuple[re.Pattern[str], ...]
    data_type: str = "string"
    mapping: dict[str, str] = field(default_factory=dict)
    requires_date_formatting: bool = False


@dataclass(frozen=True)
class CertificatePatternTable:
    version: int
    common: tuple[TextPattern, ...]
    by_category: dict[str, tuple[TextPattern, ...]]

    def for_category(self, category: str) -> tuple[TextPattern, ...]:
        return self.common + self.by_category.get(category, ())


@dataclass(frozen=True)
class FieldRule:
    required: bool = False
    data_type: str = "string"
    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern[str] | None = None
    min_value: float | None = None
    max_value: float | None = None
    allowed_values: tuple[str, ...] | None = None
    allow_single_char: bool = False
    luxury_patterns: tuple[str, ...] = ()
    priority_years: tuple[int, ...] = ()
    max_years_ahead: int | None = None


@dataclass(frozen=True)
class ValidationRuleTable:
    version: int
    fields: dict[str, FieldRule]


@dataclass(frozen=True)
class NameVocabulary:
    brands: tuple[str, ...]
    model_tokens: frozenset[str]
    model_pattern: re.Pattern[str]
    meaningful_names: frozenset[str]
    name_field_patterns: tuple[re.Pattern[str], ...]
    short_name_pattern: re.Pattern[str]
    name_part_pattern: re.Pattern[str]
    name_part_excluded_words: tuple[str, ...]
    confidence: dict[str, float]


@dataclass(frozen=True)
class RuleTables:
    field_mappings: FieldMappingTable
    validation_rules: ValidationRuleTable
    certificate_patterns: CertificatePatternTable
    yacht_names: NameVocabulary


def read_rule_file(file_name: str, rules_dir: Path | None = None) -> dict[str, Any]:
    """Read one JSON rule table.

    Raises:
        RulesLoadError: if the file is missing, unreadable or not a JSON object.
    """
    path = (rules_dir or _DEFAULT_RULES_DIR) / file_name
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RulesLoadError(f"Failed to read rule table {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RulesLoadError(f"Rule table {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise RulesLoadError(f"Rule table {path} must contain a JSON object")
    return data


def _compile(pattern: str, flags: int = 0) -> re.Pattern[str]:
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise RulesLoadError(f"Invalid pattern {pattern!r}: {exc}") from exc


def load_field_mappings(rules_dir: Path | None = None) -> FieldMappingTable:
    data = read_rule_file(FIELD_MAPPINGS_FILE, rules_dir)
    try:
        entries = tuple(
            FieldMappingEntry(
                source=item["source"],
                target=item["target"],
                category=category,
                rule=ProcessingRule(
                    data_type=item.get("data_type", "string"),
                    requires_date_formatting=bool(item.get("date", False)),
                ),
            )
            for category, items in data["categories"].items()
            for item in items
        )
        synonym_groups = tuple(
            frozenset(_SEPARATORS.sub("", member).lower() for member in group)
            for group in data.get("synonym_groups", [])
        )
        value_maps = {
            target: {key.upper(): value for key, value in mapping.items()}
            for target, mapping in data.get("value_maps", {}).items()
        }
        return FieldMappingTable(
            version=int(data["version"]),
            entries=entries,
            synonym_groups=synonym_groups,
            value_maps=value_maps,
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise RulesLoadError(f"Malformed field mapping table: {exc!r}") from exc


def _build_text_pattern(item: dict[str, Any]) -> TextPattern:
    return TextPattern(
        id=item["id"],
        target_field=item["target_field"],
        patterns=tuple(
            _compile(pattern, re.IGNORECASE | re.MULTILINE) for pattern in item["patterns"]
        ),
        data_type=item.get("data_type", "string"),
        mapping={key.upper(): value for key, value in item.get("mapping", {}).items()},
        requires_date_formatting=bool(item.get("date", False)),
    )


def load_certificate_patterns(rules_dir: Path | None = None) -> CertificatePatternTable:
    data = read_rule_file(CERTIFICATE_PATTERNS_FILE, rules_dir)
    try:
        return CertificatePatternTable(
            version=int(data["version"]),
            common=tuple(_build_text_pattern(item) for item in data["common"]),
            by_category={
                category: tuple(_build_text_pattern(item) for item in items)
                for category, items in data.get("categories", {}).items()
            },
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise RulesLoadError(f"Malformed certificate pattern table: {exc!r}") from exc


def _build_field_rule(raw: dict[str, Any]) -> FieldRule:
    allowed = raw.get("allowed_values")
    pattern = raw.get("pattern")
    return FieldRule(
        required=bool(raw.get("required", False)),
        data_type=raw.get("data_type", "string"),
        min_length=raw.get("min_length"),
        max_length=raw.get("max_length"),
        pattern=_compile(pattern) if pattern else None,
        min_value=raw.get("min"),
        max_value=raw.get("max"),
        allowed_values=tuple(allowed) if allowed is not None else None,
        allow_single_char=bool(raw.get("allow_single_char", False)),
        luxury_patterns=tuple(raw.get("luxury_patterns", ())),
        priority_years=tuple(int(year) for year in raw.get("priority_years", ())),
        max_years_ahead=raw.get("max_years_ahead"),
    )


def load_validation_rules(rules_dir: Path | None = None) -> ValidationRuleTable:
    data = read_rule_file(VALIDATION_RULES_FILE, rules_dir)
    try:
        return ValidationRuleTable(
            version=int(data["version"]),
            fields={name: _build_field_rule(raw) for name, raw in data["fields"].items()},
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise RulesLoadError(f"Malformed validation rule table: {exc!r}") from exc


def load_yacht_names(rules_dir: Path | None = None) -> NameVocabulary:
    data = read_rule_file(YACHT_NAMES_FILE, rules_dir)
    try:
        return NameVocabulary(
            brands=tuple(brand.upper() for brand in data["brands"]),
            model_tokens=frozenset(token.upper() for token in data["model_tokens"]),
            model_pattern=_compile(data["model_pattern"], re.IGNORECASE),
            meaningful_names=frozenset(name.upper() for name in data["meaningful_names"]),
            name_field_patterns=tuple(
                _compile(pattern, re.IGNORECASE) for pattern in data["name_field_patterns"]
            ),
            short_name_pattern=_compile(data["short_name_pattern"]),
            name_part_pattern=_compile(data["name_part_pattern"]),
            name_part_excluded_words=tuple(data["name_part_excluded_words"]),
            confidence={key: float(value) for key, value in data["confidence"].items()},
        )
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise RulesLoadError(f"Malformed yacht name vocabulary: {exc!r}") from exc


def load_rule_tables(rules_dir: Path | None = None) -> RuleTables:
    """Load every table from ``rules_dir`` (defaults to the bundled tables)."""
    return RuleTables(
        field_mappings=load_field_mappings(rules_dir),
        validation_rules=load_validation_rules(rules_dir),
        certificate_patterns=load_certificate_patterns(rules_dir),
        yacht_names=load_yacht_names(rules_dir),
    )
