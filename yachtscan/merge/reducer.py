"""Populates onboarding form fields from a merged scan.

Form fields are derived by an ordered table of rules. Each rule takes the
input that yields a value from the highest-priority source, earlier inputs
first on a tie. A later rule for the same form field only replaces the value
when its source has strictly higher priority. The coverage list is the key
order of the fold's output, so every populated field is covered and nothing
else is.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType

from yachtscan.extraction.composite import (
    extract_home_port,
    extract_official_number,
    first_line,
    first_number,
    normalize_engine_type,
    parse_number,
    plausible_gross_tonnage,
    split_builder_and_year,
)
from yachtscan.extraction.dates import format_date
from yachtscan.logging.logger import Log
from yachtscan.merge.aliases import SourceAliases
from yachtscan.merge.cascade import merge_sources
from yachtscan.merge.models import FormPopulation, MergedField, OnboardingState, ScanPayload

_DEPTH = re.compile(r"depth[:\s]*([\d.]+)", re.IGNORECASE)

MODEL_MAX_LENGTH = 50

Derive = Callable[[object], object | None]


@dataclass(frozen=True)
class DerivationRule:
    target: str
    inputs: tuple[str, ...]
    derive: Derive
    unless: tuple[str, ...] = ()


def _text(value: object) -> str | None:
    if isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _first_line(value: object) -> str | None:
    text = _text(value)
    if text is None:
        return None
    return first_line(text) or None


def _positive(value: object) -> float | None:
    number = parse_number(value)
    return number if number is not None and number > 0 else None


def _count(value: object) -> int | None:
    number = _positive(value)
    return int(number) if number is not None else None


def _year(value: object) -> int | None:
    number = parse_number(value)
    return int(number) if number is not None and number >= 1000 else None


def _composite_builder(value: object) -> str | None:
    builder, _ = split_builder_and_year(str(value))
    return builder if builder and len(builder) > 3 else None


def _composite_year(value: object) -> int | None:
    _, year = split_builder_and_year(str(value))
    return year


def _date(value: object) -> str | None:
    text = _text(value)
    return format_date(text) if text else None


def _engine_type(value: object) -> str | None:
    text = _text(value)
    return normalize_engine_type(text) if text else None


def _speed(value: object) -> float | None:
    number = first_number(str(value))
    return number if number is not None and number > 0 else None


def _depth_from_particulars(value: object) -> float | None:
    match = _DEPTH.search(str(value))
    if not match:
        return None
    depth = parse_number(match.group(1))
    return depth if depth is not None and depth > 0 else None


def _home_port(value: object) -> str | None:
    return extract_home_port(str(value))


def _official_number(value: object) -> str | None:
    return extract_official_number(str(value))


def _model(value: object) -> str | None:
    text = _text(value)
    return text[:MODEL_MAX_LENGTH] if text else None


def _constant(result: object) -> Derive:
    return lambda _value: result


_COMPOSITE_BUILT = ("builder_and_year", "when_and_where_built")
_ENGINE_DESCRIPTIONS = ("engine_type", "propulsion", "number_and_description_of_engines")

DERIVATION_RULES: tuple[DerivationRule, ...] = (
    DerivationRule("year", ("year_built",), _year),
    DerivationRule("year", _COMPOSITE_BUILT, _composite_year),
    DerivationRule("name", ("yacht_name", "yacht_name_stark_part"), _text),
    DerivationRule("flagState", ("flag_state", "registry_flag_state"), _first_line),
    DerivationRule("builder", ("builder",), _text),
    DerivationRule(
        "builder",
        _COMPOSITE_BUILT + ("technical_info", "registration_info"),
        _composite_builder,
    ),
    DerivationRule("model", ("model", "technical_info"), _model),
    DerivationRule("officialNumber", ("official_number", "official_number_alt"), _text),
    DerivationRule("officialNumber", ("combined_info",), _official_number),
    DerivationRule("callSign", ("call_sign", "callsign"), _text),
    DerivationRule(
        "imoNumber", ("imo_number", "imo", "imo_no", "hull_id", "hull_id_alt"), _text
    ),
    DerivationRule("hullMaterial", ("framework", "hull_material"), _text),
    DerivationRule(
        "certificateNumber",
        ("certificate_number", "certificate_no", "certificate_number_alt"),
        _text,
    ),
    DerivationRule(
        "certificateIssuedDate", ("certificate_issued_this", "certificate_issued_date"), _date
    ),
    DerivationRule(
        "certificateExpiresDate",
        ("this_certificate_expires_on", "certificate_expires_date"),
        _date,
    ),
    DerivationRule(
        "provisionalRegistrationDate",
        ("provisionally_registered_on", "provisionally_registered_on_specific"),
        _date,
    ),
    DerivationRule("registrationDate", ("registered_on",), _date),
    DerivationRule(
        "lengthOverall",
        ("length_overall_m", "hull_length", "length_overall_lowercase", "length_overall"),
        _positive,
    ),
    DerivationRule("beam", ("beam_m", "main_breadth"), _positive),
    DerivationRule("draft", ("draft_m", "depth"), _positive),
    DerivationRule("draft", ("particulars_of_tonnage",), _depth_from_particulars),
    DerivationRule(
        "grossTonnage",
        ("gross_tonnage", "gross_net_tonnage_combined"),
        plausible_gross_tonnage,
    ),
    DerivationRule("grossTonnage", ("net_tonnage",), _positive, unless=("gross_tonnage",)),
    DerivationRule("engineType", _ENGINE_DESCRIPTIONS, _engine_type),
    DerivationRule("engineType", ("engine_makers",), _text, unless=_ENGINE_DESCRIPTIONS),
    DerivationRule("enginePower", ("engine_power_kw", "propulsion_power"), _positive),
    DerivationRule("maxSpeed", ("estimated_speed",), _speed),
    DerivationRule("crewCapacity", ("crew_capacity",), _count),
    DerivationRule("guestCapacity", ("guest_capacity",), _count),
    DerivationRule("fuelCapacity", ("fuel_capacity",), _positive),
    DerivationRule("homePort", ("home_port",), _text),
    DerivationRule("homePort", ("combined_info",), _home_port),
    DerivationRule("organizationName", ("organization_name",), _text),
    DerivationRule("ownerType", ("organization_name",), _constant("company")),
    DerivationRule("ownerName", ("owner_name",), _text, unless=("organization_name",)),
    DerivationRule(
        "ownerType", ("owner_name",), _constant("individual"), unless=("organization_name",)
    ),
    DerivationRule("businessAddress", ("business_address",), _text),
    DerivationRule("registeredCountry", ("registered_country",), _text),
    DerivationRule("ownerDescription", ("owners_description",), _text),
    DerivationRule("ownerCountry", ("owners_residence",), _text),
)


def _best_candidate(
    rule: DerivationRule, merged: Mapping[str, MergedField]
) -> tuple[object, MergedField] | None:
    best: tuple[object, MergedField] | None = None
    for name in rule.inputs:
        source = merged.get(name)
        if source is None:
            continue
        value = rule.derive(source.value)
        if value is None:
            continue
        if best is None or source.priority < best[1].priority:
            best = (value, source)
    return best


def _apply_rule(
    population: FormPopulation,
    step: tuple[DerivationRule, Mapping[str, MergedField]],
) -> FormPopulation:
    rule, merged = step
    if any(name in merged for name in rule.unless):
        return population
    candidate = _best_candidate(rule, merged)
    if candidate is None:
        return population
    value, source = candidate
    current = population.priorities.get(rule.target)
    if current is not None and current <= source.priority:
        return population
    return FormPopulation(
        fields=MappingProxyType({**population.fields, rule.target: value}),
        confidence_scores=MappingProxyType(
            {**population.confidence_scores, rule.target: source.confidence}
        ),
        priorities=MappingProxyType({**population.priorities, rule.target: source.priority}),
    )


def populate_form(
    merged: Mapping[str, MergedField],
    rules: tuple[DerivationRule, ...] = DERIVATION_RULES,
) -> FormPopulation:
    empty = FormPopulation(fields=MappingProxyType({}), confidence_scores=MappingProxyType({}))
    return reduce(_apply_rule, ((rule, merged) for rule in rules), empty)


def reduce_scan(
    state: OnboardingState,
    payload: ScanPayload,
    aliases: SourceAliases | None = None,
) -> OnboardingState:
    """Fold one completed scan into the onboarding state.

    Scan values overwrite form values already present. Coverage keeps the
    order in which fields were first populated across scans.
    """
    merged = merge_sources(payload, aliases)
    population = populate_form(merged)
    coverage = state.coverage + tuple(
        name for name in population.coverage if name not in state.coverage
    )
    Log.info(
        f"Merged scan into onboarding form: {len(merged)} source fields, "
        f"{len(population.fields)} form fields populated"
    )
    return OnboardingState(
        fields=MappingProxyType({**state.fields, **population.fields}),
        coverage=coverage,
        confidence_scores=MappingProxyType(
            {**state.confidence_scores, **population.confidence_scores}
        ),
        scans_merged=state.scans_merged + 1,
    )
