"""Auto-detect the format of a source document."""

import json

import yaml


def _classify(data) -> str | None:
    if not isinstance(data, dict):
        return None
    if "openapi" in data or "swagger" in data:
        return "swagger"
    if "requests" in data or "_postman_id" in data.get("info", {}):
        return "postman"
    return None


def detect_format(text: str) -> str:
    """Detect the format of an API description.

    Returns: 'postman', 'swagger', 'raml' or 'unknown'.
    """
    if text.lstrip().startswith("#%RAML"):
        return "raml"

    # Try YAML/JSON parsing
    try:
        fmt = _classify(yaml.safe_load(text))
        if fmt:
            return fmt
    except yaml.YAMLError:
        pass

    # Try JSON specifically (for files not parseable as YAML)
    try:
        fmt = _classify(json.loads(text))
        if fmt:
            return fmt
    except (json.JSONDecodeError, ValueError):
        pass

    return "unknown"
