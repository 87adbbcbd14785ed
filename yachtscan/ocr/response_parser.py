"""Normalizes vendor responses into key values, free text and a confidence.

Responses are only duck-typed: the edge function answers with REST style
camelCase JSON, the client library with snake_case dicts, and older
deployments with a flat ``{fieldName: value}`` object. Every accessor
falls back to a default instead of failing.
"""

from typing import Any

_RESERVED_MEMBERS = frozenset(
    {
        "text",
        "confidence",
        "document",
        "pages",
        "entities",
        "outputs",
        "error",
        "success",
        "uri",
        "mimeType",
        "mime_type",
        "shardInfo",
        "shard_info",
    }
)


def _member(obj: Any, *names: str) -> Any:
    if not isinstance(obj, dict):
        return None
    for name in names:
        if name in obj:
            return obj[name]
    return None


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def unwrap_document(response: Any) -> Any:
    """Return the Document AI document inside any of the known envelopes."""
    outputs = _member(response, "outputs")
    document_ai = _member(outputs, "documentAI", "document_ai")
    if isinstance(document_ai, dict):
        response = document_ai
    document = _member(response, "document")
    return document if isinstance(document, dict) else response


def _anchor_text(layout: Any, full_text: str) -> str:
    anchor = _member(layout, "textAnchor", "text_anchor")
    content = _member(anchor, "content")
    if isinstance(content, str) and content.strip():
        return content.strip()
    mention = _member(layout, "mentionText", "mention_text")
    if isinstance(mention, str) and mention.strip():
        return mention.strip()
    segments = _member(anchor, "textSegments", "text_segments") or []
    parts: list[str] = []
    for segment in segments:
        try:
            start = int(_member(segment, "startIndex", "start_index") or 0)
            end = int(_member(segment, "endIndex", "end_index") or 0)
        except (TypeError, ValueError):
            continue
        parts.append(full_text[start:end])
    return "".join(parts).strip()


def extract_key_values(response: Any) -> dict[str, object]:
    """Flatten a vendor response into ``{vendor field name: value}``.

    Sources, first occurrence of a name wins: top-level scalar members,
    page form fields, then entities and their nested properties. Names are
    kept exactly as the vendor spells them; empty values are dropped.
    """
    key_values: dict[str, object] = {}

    def put(name: Any, value: Any) -> None:
        if not isinstance(name, str) or not name.strip() or _is_blank(value):
            return
        key_values.setdefault(name.strip(), value)

    if isinstance(response, dict):
        for name, value in response.items():
            if name in _RESERVED_MEMBERS or isinstance(value, (dict, list, bool)):
                continue
            put(name, value)

    document = unwrap_document(response)
    full_text = _member(document, "text") or ""
    if not isinstance(full_text, str):
        full_text = ""

    for page in _member(document, "pages") or []:
        for form_field in _member(page, "formFields", "form_fields") or []:
            name = _anchor_text(_member(form_field, "fieldName", "field_name"), full_text)
            value = _anchor_text(_member(form_field, "fieldValue", "field_value"), full_text)
            put(name, value)

    def walk_entities(entities: Any) -> None:
        for entity in entities or []:
            value = _member(entity, "mentionText", "mention_text")
            if _is_blank(value):
                normalized = _member(entity, "normalizedValue", "normalized_value")
                value = _member(normalized, "text")
            put(_member(entity, "type", "type_"), value)
            walk_entities(_member(entity, "properties"))

    walk_entities(_member(document, "entities"))
    return key_values


def extract_text(response: Any) -> str:
    """Best-effort free text of the document."""
    if isinstance(response, str):
        return response
    if not isinstance(response, dict):
        return ""
    for candidate in (
        _member(response, "text"),
        _member(_member(response, "document"), "text"),
        _member(unwrap_document(response), "text"),
    ):
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return " ".join(
        value.strip()
        for value in response.values()
        if isinstance(value, str) and value.strip()
    )


def extract_confidence(response: Any, default: float) -> float:
    value = _member(response, "confidence")
    if isinstance(value, (int, float)) and not isinstance(value, bool) and 0 <= value <= 1:
        return float(value)
    return default
