"""JSON helpers shared by entities, importers and exporters."""

import json

from api_spec_converter.errors import ParseError

INDENT = 4


def parse(text: str):
    """Parse JSON text, raising ParseError on malformed input."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(f"Invalid JSON: {e}") from e


def stringify(data, indent: int = INDENT) -> str:
    """Serialize to canonical indented JSON text. Strings pass through unchanged."""
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=indent, ensure_ascii=False)


def order_by_keys(data: dict, keys: list[str]) -> dict:
    """Return a copy of ``data`` with ``keys`` first, in the given order."""
    ordered = {k: data[k] for k in keys if k in data}
    ordered.update((k, v) for k, v in data.items() if k not in ordered)
    return ordered


def is_empty_schema(schema) -> bool:
    """True for a missing schema or an object schema without properties."""
    if not schema:
        return True
    if isinstance(schema, str):
        schema = parse(schema)
    if not isinstance(schema, dict):
        return True
    return not schema.get("properties") and not schema.get("$ref") and not schema.get("items")
