from dataclasses import dataclass
from pathlib import Path

from yachtscan.extraction.exceptions import RulesLoadError
from yachtscan.extraction.rules_loader import read_rule_file

_DEFAULT_RULES_DIR = Path(__file__).parent / "rules"

SOURCE_ALIASES_FILE = "source_aliases.json"


@dataclass(frozen=True)
class SourceAliases:
    """Field-name aliases for the two loosely named scan sources.

    ``extracted_fields`` names fall back to themselves when unaliased;
    ``form_fields`` names without an alias are ignored.
    """

    version: int
    extracted_fields: dict[str, str]
    form_fields: dict[str, str]
    numeric_form_fields: frozenset[str]


def load_source_aliases(rules_dir: Path | None = None) -> SourceAliases:
    data = read_rule_file(SOURCE_ALIASES_FILE, rules_dir or _DEFAULT_RULES_DIR)
    try:
        return SourceAliases(
            version=int(data["version"]),
            extracted_fields=dict(data["extracted_fields"]),
            form_fields=dict(data["form_fields"]),
            numeric_form_fields=frozenset(data.get("numeric_form_fields", ())),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise RulesLoadError(f"Malformed source alias table: {exc!r}") from exc
