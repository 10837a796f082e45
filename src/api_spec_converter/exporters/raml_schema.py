"""JSON Schema to RAML type and parameter conversions.

All functions return new objects and leave their input untouched.
"""

import copy
import logging

logger = logging.getLogger(__name__)

ACCEPTED_PARAM_TYPES = ("string", "number", "integer", "date", "boolean", "file", "array", "datetime")

# RAML number formats plus the datetime formats produced by rewrite_refs.
VALID_FORMATS = (
    "int", "int8", "int16", "int32", "int64", "long",
    "float", "double", "rfc3339", "rfc2616",
)

PARAMETER_FIELDS = (
    "type", "displayName", "description", "default", "enum", "pattern",
    "minLength", "maxLength", "minimum", "maximum", "example", "required", "repeat",
)

STRING_ONLY_FIELDS = ("enum", "pattern", "minLength", "maxLength")
NUMERIC_ONLY_FIELDS = ("minimum", "maximum")
PASSTHROUGH_FIELDS = (
    "required", "displayName", "description", "example", "repeat", "default",
    "items", "format", "maxItems", "minItems", "uniqueItems",
    "(oas-collectionFormat)", "(oas-allowEmptyValue)",
    "(oas-exclusiveMaximum)", "(oas-exclusiveMinimum)",
)

STRING_FORMATS = ("byte", "binary", "password")


def _ref_type(ref: str) -> str:
    if ref.startswith("#/"):
        return ref.replace("#/definitions/", "")
    return "!include " + ref.replace("#/", "#")


def _rewrite_string_node(node: dict) -> dict:
    result = copy.deepcopy(node)
    fmt = result.get("format")
    if fmt in STRING_FORMATS:
        result.pop("format")
    elif fmt == "date":
        result["type"] = "date-only"
        result.pop("format")
    elif fmt == "date-time":
        result["type"] = "datetime"
        result["format"] = "rfc3339"
    elif fmt not in VALID_FORMATS:
        result.pop("format", None)
    if result.get("readOnly"):
        result["facets"] = {"readOnly?": "boolean"}
    return result


def rewrite_refs(node):
    """Rewrite JSON Schema references and string formats into RAML types.

    ``$ref: "#/definitions/X"`` becomes ``type: X``; ``$ref``, ``ref`` and
    ``include`` pointing at files become ``!include`` types. String nodes get
    their formats canonicalized. Applying it to its own output changes nothing.
    """
    if isinstance(node, list):
        return [rewrite_refs(item) for item in node]
    if not isinstance(node, dict):
        return node
    if node.get("type") == "string":
        return _rewrite_string_node(node)

    result = {}
    has_ref = False
    for key, value in node.items():
        if key == "$ref" and isinstance(value, str):
            result["type"] = _ref_type(value)
            has_ref = True
        elif key == "ref" and isinstance(value, str):
            result["type"] = value
            has_ref = True
        elif key == "include" and isinstance(value, str):
            result["type"] = "!include " + value
            has_ref = True
        elif key == "type" and has_ref:
            continue
        elif key == "title" and isinstance(value, str):
            continue
        elif key in ("exclusiveMinimum", "exclusiveMaximum") and not isinstance(value, (dict, list, str)):
            continue
        elif isinstance(value, (dict, list)):
            result[key] = rewrite_refs(value)
        else:
            result[key] = value
    return result


def demote_required(schema):
    """Turn ``required: [...]`` arrays into ``required: false`` on optional properties.

    Recurses through nested ``properties`` only; object schemas under
    ``items`` keep their arrays. Properties listed as required get no flag,
    required being the RAML default.
    """
    if not isinstance(schema, dict):
        return schema
    result = dict(schema)
    required = result.pop("required") if isinstance(result.get("required"), list) else []
    properties = result.get("properties")
    if isinstance(properties, dict):
        demoted = {}
        for name, prop in properties.items():
            if isinstance(prop, dict):
                prop = demote_required(prop) if "properties" in prop else dict(prop)
                if name not in required:
                    prop["required"] = False
            demoted[name] = prop
        result["properties"] = demoted
    return result


def set_parameter_fields(source: dict) -> dict:
    """Copy the fields a RAML named parameter can carry."""
    return {
        field: copy.deepcopy(source[field])
        for field in PARAMETER_FIELDS
        if source.get(field) is not None
    }


def validate_params(params: dict) -> dict:
    """Drop parameters of unsupported types and fields that do not fit the type."""
    result = {}
    for name, param in params.items():
        param_type = param.get("type")
        if "type" in param and param_type not in ACCEPTED_PARAM_TYPES:
            logger.debug("Dropping parameter %s of unsupported type %s", name, param_type)
            continue
        param_type = str(param_type or "").lower()

        kept = {}
        for field, value in param.items():
            if field == "type" or field in PASSTHROUGH_FIELDS:
                kept[field] = value
            elif field in STRING_ONLY_FIELDS:
                if param_type == "string":
                    kept[field] = value
            elif field in NUMERIC_ONLY_FIELDS:
                if param_type in ("integer", "number"):
                    kept[field] = value
        result[name] = kept
    return result
