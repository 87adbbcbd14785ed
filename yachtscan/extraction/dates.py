"""Certificate date normalization to ``DD-MM-YYYY``."""

import re

_MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

_MONTH_YEAR = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")
_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})(?:st|nd|rd|th)?\s+([A-Za-z]+),?\s+(\d{4})$")
_DAY_FIRST_NUMERIC = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
_ISO = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")

_DATE_NAME_KEYWORDS = (
    "date",
    "expires",
    "issued",
    "registered",
    "built",
    "year",
    "when",
    "provisional",
)
_DATE_LIKE_VALUE = re.compile(
    r"\b\d{1,2}[/-]\d{1,2}[/-]\d{4}\b"
    r"|\b\d{4}-\d{1,2}-\d{1,2}\b"
    r"|\b\d{1,2}\s+[A-Za-z]{3,9}\s+\d{4}\b"
    r"|^[A-Za-z]{3,9}\s+\d{4}$"
)


def month_number(name: str) -> int | None:
    """Month number for a full or three-letter English month name."""
    key = name.strip().lower()
    if key in _MONTHS:
        return _MONTHS[key]
    if len(key) == 3:
        for month, number in _MONTHS.items():
            if month.startswith(key):
                return number
    return None


def format_date(value: str) -> str:
    """Rewrite a recognized date to ``DD-MM-YYYY``.

    Recognized: ``Month YYYY`` (day becomes 01), ``D Month YYYY``,
    ``D/M/YYYY``, ``D-M-YYYY`` and ISO ``YYYY-M-D``. Anything else,
    including an unknown month name, is returned unchanged, so applying
    the function twice gives the same result as applying it once.
    """
    text = value.strip()

    match = _DAY_FIRST_NUMERIC.match(text)
    if match:
        day, month, year = match.groups()
        return f"{int(day):02d}-{int(month):02d}-{year}"

    match = _ISO.match(text)
    if match:
        year, month, day = match.groups()
        return f"{int(day):02d}-{int(month):02d}-{year}"

    match = _DAY_MONTH_YEAR.match(text)
    if match:
        day, month_name, year = match.groups()
        month = month_number(month_name)
        if month is not None:
            return f"{int(day):02d}-{month:02d}-{year}"
        return value

    match = _MONTH_YEAR.match(text)
    if match:
        month_name, year = match.groups()
        month = month_number(month_name)
        if month is not None:
            return f"01-{month:02d}-{year}"

    return value


def is_date_field(field_name: str, value: str) -> bool:
    name = field_name.lower()
    if any(keyword in name for keyword in _DATE_NAME_KEYWORDS):
        return True
    return bool(_DATE_LIKE_VALUE.search(value))
