"""Splitting of composite certificate values into separate attributes.

Registration certificates often pack several facts into one box, e.g.
``2025 AZIMUT BENETTI SPA, VIAREGGIO (LUCCA), ITALY`` under "When and
Where Built" or ``525 IN 2025\\nVALLETTA`` under "No, Year and Home Port".
"""

import math
import re

_BUILDER = re.compile(
    r"\b([A-Z][A-Z\s&]{3,}(?:SPA|LTD|LIMITED|INC|CORPORATION|CORP|SHIPYARD|YACHTS))\b",
    re.IGNORECASE,
)
_YEAR = re.compile(r"\b(20\d{2}|19\d{2})\b")
_TRAILING_PORT = re.compile(r"([A-Z]{3,})$", re.MULTILINE)
_LEADING_NUMBER = re.compile(r"^\s*(\d+)")
_FIRST_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_NUMBER_TOKEN = re.compile(r"\d[\d.,]*|\.\d+")

MIN_PLAUSIBLE_GROSS_TONNAGE = 30.0

_ENGINE_TYPES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("motor ship", "internal combustion diesel", "diesel"), "DIESEL"),
    (("gasoline", "petrol"), "GASOLINE"),
    (("electric",), "ELECTRIC"),
    (("hybrid",), "HYBRID"),
)


def split_builder_and_year(text: str) -> tuple[str | None, int | None]:
    """Return ``(builder, year)`` found in a "when and where built" value."""
    builder = None
    match = _BUILDER.search(text)
    if match:
        builder = match.group(1).split(",", 1)[0].strip() or None
    year_match = _YEAR.search(text)
    year = int(year_match.group(1)) if year_match else None
    return builder, year


def extract_home_port(text: str) -> str | None:
    """Trailing run of three or more capitals on any line, e.g. ``VALLETTA``."""
    match = _TRAILING_PORT.search(text)
    return match.group(1) if match else None


def extract_official_number(text: str) -> str | None:
    match = _LEADING_NUMBER.match(text)
    return match.group(1) if match else None


def parse_number(value: object) -> float | None:
    """Lenient number parsing for OCR values such as ``"45,2 m"``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if not isinstance(value, str):
        return None
    token = _NUMBER_TOKEN.search(value)
    if token is None:
        return None
    cleaned = token.group(0).rstrip(".,")
    if "," in cleaned and "." in cleaned:
        cleaned = cleaned.replace(",", "")
    else:
        cleaned = cleaned.replace(",", ".")
    match = _FIRST_NUMBER.search(cleaned)
    return float(match.group(0)) if match else None


def first_number(text: str) -> float | None:
    match = _FIRST_NUMBER.search(text)
    return float(match.group(0)) if match else None


def plausible_gross_tonnage(value: object) -> float | None:
    """Gross tonnage, or None when the value looks like a misread length.

    Yachts on these certificates are never below 30 GT, so smaller values
    are almost always the overall length picked up from the next box.
    """
    number = parse_number(value)
    if number is None or number < MIN_PLAUSIBLE_GROSS_TONNAGE:
        return None
    return number


def normalize_engine_type(text: str) -> str:
    lowered = text.lower()
    for keywords, engine_type in _ENGINE_TYPES:
        if any(keyword in lowered for keyword in keywords):
            return engine_type
    return text.strip()


def first_line(text: str) -> str:
    return text.split("\n", 1)[0].strip()
