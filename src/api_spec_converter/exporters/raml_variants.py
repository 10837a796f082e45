"""RAML version capabilities.

The RAML exporter is version-agnostic; everything that differs between RAML
0.8 and RAML 1.0 lives in a variant object looked up by its version tag.
"""

import re

from api_spec_converter.entities.project import Project, Schema
from api_spec_converter.errors import ParseError, UnsupportedFormatError
from api_spec_converter.utils import json_helper

from .raml_schema import demote_required, rewrite_refs, set_parameter_fields, validate_params


def camel_case(name: str) -> str:
    words = [w for w in re.split(r"[^0-9a-zA-Z]+", name) if w]
    if not words:
        return ""
    return words[0][0].lower() + words[0][1:] + "".join(w[0].upper() + w[1:] for w in words[1:])


def _parse_example(text):
    if not isinstance(text, str):
        return text
    try:
        return json_helper.parse(text)
    except ParseError:
        return text


class RamlVariant:
    """Hooks a RAML version has to supply.

    Any hook a variant leaves out raises NotImplementedError when called.
    """

    tag = ""
    supports_annotations = False

    def version(self) -> str:
        raise NotImplementedError("version method not implemented")

    def description(self, definition: dict, project: Project) -> None:
        raise NotImplementedError("description method not implemented")

    def map_authorization_grants(self, flow: str) -> list[str]:
        raise NotImplementedError("map_authorization_grants method not implemented")

    def map_media_type(self, consumes: list[str], produces: list[str]):
        raise NotImplementedError("map_media_type method not implemented")

    def map_body(self, body_data: dict) -> dict:
        raise NotImplementedError("map_body method not implemented")

    def map_request_body_form(self, body: dict) -> dict:
        raise NotImplementedError("map_request_body_form method not implemented")

    def map_schema(self, schemas: list[Schema]):
        raise NotImplementedError("map_schema method not implemented")

    def add_schema(self, definition: dict, schema) -> None:
        raise NotImplementedError("add_schema method not implemented")

    def get_api_key_type(self) -> str:
        raise NotImplementedError("get_api_key_type method not implemented")

    def map_security_schemes(self, schemes: dict):
        raise NotImplementedError("map_security_schemes method not implemented")

    def set_method_display_name(self, method: dict, display_name: str | None) -> None:
        raise NotImplementedError("set_method_display_name method not implemented")

    def initialize_traits(self):
        raise NotImplementedError("initialize_traits method not implemented")

    def add_trait(self, name: str, trait: dict, traits) -> None:
        raise NotImplementedError("add_trait method not implemented")


class Raml10(RamlVariant):
    tag = "1.0"
    supports_annotations = True

    GRANTS = {
        "implicit": "implicit",
        "password": "password",
        "application": "client_credentials",
        "accessCode": "authorization_code",
    }

    def version(self) -> str:
        return "1.0"

    def description(self, definition, project):
        if project.description:
            definition["description"] = project.description

    def map_authorization_grants(self, flow):
        return [self.GRANTS[flow]] if flow in self.GRANTS else []

    def map_media_type(self, consumes, produces):
        media_types = list(dict.fromkeys((consumes or []) + (produces or [])))
        if len(media_types) == 1:
            return media_types[0]
        return media_types or ""

    def map_body(self, body_data):
        if not body_data.get("body"):
            return {}
        result = rewrite_refs(json_helper.parse(body_data["body"]))
        if body_data.get("example"):
            result["example"] = _parse_example(body_data["example"])
        return result

    def map_request_body_form(self, body):
        properties = {}
        for name, prop in (body.get("properties") or {}).items():
            prop = {key: value for key, value in prop.items() if value is not None}
            if prop.get("type") == "binary":
                prop["type"] = "file"
            properties[name] = prop
        return demote_required({"properties": properties, "required": body.get("required") or []})

    def map_schema(self, schemas):
        types = {}
        for schema in schemas:
            definition = demote_required(rewrite_refs(json_helper.parse(schema.definition)))
            if schema.description and "description" not in definition:
                definition["description"] = schema.description
            types[schema.name] = definition
        return types

    def add_schema(self, definition, schema):
        definition["types"] = schema

    def get_api_key_type(self):
        return "Pass Through"

    def map_security_schemes(self, schemes):
        return schemes

    def set_method_display_name(self, method, display_name):
        if display_name:
            method["displayName"] = display_name

    def initialize_traits(self):
        return {}

    def add_trait(self, name, trait, traits):
        traits[camel_case(name)] = trait


class Raml08(RamlVariant):
    """RAML 0.8: JSON schemas as text, list-shaped declarations, no annotations."""

    tag = "0.8"

    GRANTS = {
        "implicit": "token",
        "password": "owner",
        "application": "credentials",
        "accessCode": "code",
    }

    def version(self) -> str:
        return "0.8"

    def description(self, definition, project):
        if project.description:
            documentation = definition.setdefault("documentation", [])
            documentation.insert(0, {"title": "Description", "content": project.description})

    def map_authorization_grants(self, flow):
        return [self.GRANTS[flow]] if flow in self.GRANTS else []

    def map_media_type(self, consumes, produces):
        media_types = (consumes or []) + (produces or [])
        return media_types[0] if media_types else ""

    def map_body(self, body_data):
        if not body_data.get("body"):
            return {}
        schema = json_helper.parse(body_data["body"])
        ref = schema.get("$ref", "") if isinstance(schema, dict) else ""
        if ref.startswith("#/definitions/"):
            result = {"schema": ref.replace("#/definitions/", "")}
        else:
            result = {"schema": json_helper.stringify(schema)}
        if body_data.get("example"):
            result["example"] = body_data["example"]
        return result

    def map_request_body_form(self, body):
        required = body.get("required") or []
        params = {}
        for name, prop in (body.get("properties") or {}).items():
            param = set_parameter_fields(prop)
            if param.get("type") == "binary":
                param["type"] = "file"
            if name in required:
                param["required"] = True
            params[name] = param
        return {"formParameters": validate_params(params)}

    def map_schema(self, schemas):
        return [
            {schema.name: json_helper.stringify(json_helper.parse(schema.definition))}
            for schema in schemas
        ]

    def add_schema(self, definition, schema):
        definition["schemas"] = schema

    def get_api_key_type(self):
        return "x-api-key"

    def map_security_schemes(self, schemes):
        return [{name: scheme} for name, scheme in schemes.items()]

    def set_method_display_name(self, method, display_name):
        # 0.8 methods have no displayName; fall back to a description.
        if display_name and "description" not in method:
            method["description"] = display_name

    def initialize_traits(self):
        return []

    def add_trait(self, name, trait, traits):
        traits.append({camel_case(name): trait})


VARIANTS = {variant.tag: variant for variant in (Raml08, Raml10)}

DEFAULT_VARIANT = "1.0"


def get_variant(tag: str) -> RamlVariant:
    try:
        return VARIANTS[tag]()
    except KeyError:
        raise UnsupportedFormatError(f"Unsupported RAML version: {tag}") from None
