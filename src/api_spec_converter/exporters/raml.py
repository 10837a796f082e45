"""RAML exporter.

Builds a RAML resource tree from a Project. Path segments become nested
``/segment`` resources, endpoints become method entries on the leaf resource.
Version-specific details are delegated to a RamlVariant.
"""

import logging
import re

import yaml

from api_spec_converter.entities.endpoint import Endpoint, Response, SecuredBy
from api_spec_converter.entities.environment import ApiKeyScheme, Environment, SecuritySchemes
from api_spec_converter.entities.project import Text, Trait
from api_spec_converter.errors import UnsupportedFormatError
from api_spec_converter.utils import json_helper

from .annotations import AnnotationSet
from .base import Exporter
from .raml_schema import demote_required, rewrite_refs, set_parameter_fields, validate_params
from .raml_variants import DEFAULT_VARIANT, camel_case, get_variant

logger = logging.getLogger(__name__)

METHODS_WITH_BODY = ("post", "put", "patch")
FORM_MIME_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
URI_PARAM_ANNOTATIONS = ("collectionFormat", "allowEmptyValue", "exclusiveMaximum", "exclusiveMinimum")

INCLUDE_PATTERN = re.compile(r"'(!include [^']*)'")


def map_protocols(protocols: list[str] | None) -> list[str]:
    """Keep HTTP and HTTPS, upper-cased. RAML has no other protocols."""
    return [p.upper() for p in (protocols or []) if p.lower() in ("http", "https")]


def get_default_mime_type(mime_types: list[str] | None, default) -> str | None:
    if mime_types:
        return mime_types[0]
    if isinstance(default, list) and default:
        return default[0]
    if isinstance(default, str) and default:
        return default
    return None


def map_text_sections(texts: list[Text]) -> list[dict]:
    return [
        {"title": text.name, "content": text.content}
        for text in texts
        if not text.divider and text.name and text.content
    ]


def add_method(resource: dict, segments: list[str], method_key: str, method: dict) -> None:
    """Insert ``method`` into the resource tree under the given path segments.

    Resources are created on first use with the segment as displayName. At the
    leaf, the method's uriParameters whose names appear in the displayName
    move up to the resource.
    """
    if not segments:
        uri_parameters = resource.setdefault("uriParameters", {})
        display_name = resource.get("displayName")
        for name, param in (method.pop("uriParameters", None) or {}).items():
            if display_name and name in display_name:
                uri_parameters[name] = param
        if not uri_parameters:
            del resource["uriParameters"]
        resource[method_key] = method
        return

    segment = segments[0]
    key = "/" + segment
    if key not in resource:
        resource[key] = {}
        if segment:
            resource[key]["displayName"] = segment
    add_method(resource[key], segments[1:], method_key, method)


class RamlExporter(Exporter):
    """Exports a Project as RAML 0.8 or 1.0, chosen by ``variant``."""

    def __init__(self, variant: str = DEFAULT_VARIANT):
        super().__init__()
        self.variant = get_variant(variant)

    def version(self) -> str:
        return self.variant.version()

    # -- security --------------------------------------------------------

    def _api_key_scheme_name(self, api_key: ApiKeyScheme) -> str:
        name = None
        if api_key.query_string:
            name = api_key.query_string[0].external_name
        if not name and api_key.headers:
            name = api_key.headers[0].external_name
        return name or "apiKey"

    def _map_security_schemes(self, schemes: SecuritySchemes):
        result = {}

        if schemes.oauth2:
            oauth2 = schemes.oauth2
            settings = {}
            if oauth2.authorization_url:
                settings["authorizationUri"] = oauth2.authorization_url
            settings["accessTokenUri"] = oauth2.token_url or ""
            settings["authorizationGrants"] = self.variant.map_authorization_grants(oauth2.flow)
            if oauth2.scopes:
                settings["scopes"] = [scope.name for scope in oauth2.scopes]
            result[oauth2.name or "oauth2"] = {"type": "OAuth 2.0", "settings": settings}

        if schemes.basic and schemes.basic.name:
            basic = {"type": "Basic Authentication"}
            if schemes.basic.description:
                basic["description"] = schemes.basic.description
            result[schemes.basic.name] = basic

        if schemes.api_key:
            api_key = schemes.api_key
            described_by = {}
            description = None
            if api_key.headers:
                description = api_key.headers[0].description
                described_by["headers"] = {h.name: {"type": "string"} for h in api_key.headers}
            if api_key.query_string:
                description = api_key.query_string[0].description
                described_by["queryParameters"] = {
                    q.name: {"type": "string"} for q in api_key.query_string
                }
            if described_by:
                scheme = {"type": self.variant.get_api_key_type(), "describedBy": described_by}
                if description:
                    scheme["description"] = description
                result[self._api_key_scheme_name(api_key)] = scheme

        if not result:
            return None
        return self.variant.map_security_schemes(result)

    def _map_secured_by(self, secured_by: SecuredBy | None, schemes: SecuritySchemes) -> list:
        if not secured_by:
            return []
        refs = []
        if secured_by.oauth2 is not None and schemes.oauth2:
            name = schemes.oauth2.name or "oauth2"
            refs.append({name: {"scopes": secured_by.oauth2}} if secured_by.oauth2 else name)
        if secured_by.basic and schemes.basic and schemes.basic.name:
            refs.append(schemes.basic.name)
        if secured_by.api_key and schemes.api_key and (
            schemes.api_key.headers or schemes.api_key.query_string
        ):
            refs.append(self._api_key_scheme_name(schemes.api_key))
        return refs

    # -- parameters and bodies -------------------------------------------

    def _map_named_params(self, params: dict | None) -> dict | None:
        if not params or not params.get("properties"):
            return None
        converted = rewrite_refs(params["properties"])
        required = params.get("required") or []
        mapped = {}
        for key, prop in converted.items():
            if not isinstance(prop, dict):
                continue
            param = set_parameter_fields(prop)
            if key in required:
                param["required"] = True
            mapped[key] = json_helper.order_by_keys(param, ["type", "description"])
        return validate_params(mapped)

    def _map_uri_params(self, data: dict | None, used: AnnotationSet) -> dict | None:
        properties = (data or {}).get("properties")
        if not properties:
            return None
        mapped = {}
        for key, prop in properties.items():
            if not isinstance(prop, dict):
                continue
            param = set_parameter_fields(prop)
            if prop.get("description"):
                param["displayName"] = prop["description"]
            if "items" in prop:
                param["items"] = prop["items"]
            if prop.get("format"):
                param["format"] = prop["format"]
            param["type"] = param.get("type") or "string"
            for kind in URI_PARAM_ANNOTATIONS:
                if kind in prop:
                    used.annotate(param, kind, prop[kind])
            mapped[key] = param
        return validate_params(mapped)

    def _map_request_body(self, body_data: dict, mime_type: str | None) -> dict:
        if not body_data.get("body") or not mime_type:
            return {}
        if mime_type == "application/json":
            mapped = demote_required(self.variant.map_body(body_data))
        elif mime_type in FORM_MIME_TYPES:
            parsed = rewrite_refs(json_helper.parse(body_data["body"]))
            mapped = self.variant.map_request_body_form(parsed)
        else:
            logger.debug("Skipping request body with unsupported mime type %s", mime_type)
            return {}
        if not mapped:
            return {}
        if body_data.get("description"):
            mapped["description"] = body_data["description"]
        return {mime_type: mapped}

    def _map_response_body(self, responses: list[Response], mime_type: str | None) -> dict:
        result = {}
        for response in responses:
            if not response.codes:
                continue
            code = response.codes[0]
            if code == "default" or code.startswith("x-") or not code.isdigit():
                logger.debug("Skipping response code %s", code)
                continue

            entry = {}
            if mime_type:
                body = demote_required(
                    self.variant.map_body({"body": response.body, "example": response.example})
                )
                if body:
                    entry["body"] = {mime_type: body}
            if response.description:
                entry["description"] = response.description
            if not json_helper.is_empty_schema(response.headers):
                headers = self._map_named_params(response.headers)
                if headers:
                    entry["headers"] = headers
            result[code] = entry
        return result

    # -- traits ----------------------------------------------------------

    def _map_traits(self, traits: list[Trait], mime_type: str | None):
        mapped_traits = self.variant.initialize_traits()
        for trait in traits:
            mapped = {}
            if not json_helper.is_empty_schema(trait.query_string):
                mapped["queryParameters"] = self._map_named_params(trait.query_string)
            if not json_helper.is_empty_schema(trait.headers):
                mapped["headers"] = self._map_named_params(trait.headers)
            responses = self._map_response_body(trait.responses, mime_type)
            if responses:
                mapped["responses"] = responses
            self.variant.add_trait(trait.name, mapped, mapped_traits)
        return mapped_traits

    def _map_endpoint_traits(self, traits: list[Trait], endpoint: Endpoint) -> list[str]:
        names = {trait.id: trait.name for trait in traits}
        return [camel_case(names[trait_id]) for trait_id in endpoint.traits if trait_id in names]

    # -- endpoints -------------------------------------------------------

    def _ordered_endpoints(self, endpoints: list[Endpoint], env: Environment) -> list[Endpoint]:
        """Sort endpoints by their position in resourcesOrder; unlisted ones first."""
        positions: dict = {}
        for group in env.resources_order.docs:
            for item in group.get("items", []):
                if item.get("type") == "endpoints":
                    positions.setdefault(item.get("_id"), len(positions))
        return sorted(endpoints, key=lambda e: positions.get(e.id, -1))

    def _map_method(self, endpoint: Endpoint, media_type, used: AnnotationSet) -> dict:
        project = self.project
        schemes = project.environment.security_schemes
        method: dict = {}

        used.add_extensions(method, endpoint.extensions)
        self.variant.set_method_display_name(method, endpoint.operation_id or endpoint.name)
        if endpoint.description:
            method["description"] = endpoint.description
        if endpoint.summary:
            used.annotate(method, "summary", endpoint.summary)

        protocols = map_protocols(endpoint.protocols)
        if protocols:
            method["protocols"] = protocols

        trait_names = self._map_endpoint_traits(project.traits, endpoint)
        if trait_names:
            method["is"] = trait_names

        if endpoint.method in METHODS_WITH_BODY:
            mime_type = get_default_mime_type(endpoint.consumes, media_type)
            body = self._map_request_body(endpoint.body, mime_type)
            if body:
                method["body"] = body

        headers = self._map_named_params(endpoint.headers)
        if headers:
            method["headers"] = headers

        mime_type = get_default_mime_type(endpoint.produces, media_type)
        responses = self._map_response_body(endpoint.responses, mime_type)
        if responses:
            used.add_extensions(responses, endpoint.response_extensions)
            method["responses"] = responses

        query_parameters = self._map_uri_params(endpoint.query_string, used)
        if query_parameters:
            method["queryParameters"] = query_parameters

        uri_parameters = self._map_uri_params(endpoint.path_params, used)
        if uri_parameters:
            method["uriParameters"] = uri_parameters

        secured_by = self._map_secured_by(endpoint.secured_by, schemes)
        if secured_by:
            method["securedBy"] = secured_by

        if endpoint.tags:
            used.annotate(method, "tags", endpoint.tags)
        if endpoint.deprecated:
            used.annotate(method, "deprecated", endpoint.deprecated)
        if endpoint.external_docs:
            docs = {"description": endpoint.external_docs.description, "url": endpoint.external_docs.url}
            used.annotate(method, "externalDocs", {k: v for k, v in docs.items() if v is not None})
        return method

    # -- definition ------------------------------------------------------

    def _definition_header(self, env: Environment) -> dict:
        definition = {"title": self.project.name, "version": env.version}
        base_uri = env.host + env.base_path
        if base_uri:
            definition["baseUri"] = base_uri
        definition["mediaType"] = self.variant.map_media_type(env.consumes, env.produces)
        protocols = map_protocols(env.protocols)
        if protocols:
            definition["protocols"] = protocols
        return definition

    def _add_info(self, definition: dict, env: Environment, used: AnnotationSet) -> None:
        info: dict = {}
        used.add_extensions(info, env.extensions)
        if env.contact_info:
            contact = {
                key: value
                for key, value in (
                    ("name", env.contact_info.name),
                    ("url", env.contact_info.url),
                    ("email", env.contact_info.email),
                )
                if value
            }
            used.add_extensions(contact, env.contact_info.extensions)
            info["contact"] = contact
        if env.terms_of_service:
            info["termsOfService"] = env.terms_of_service
        if env.license:
            license_info = {
                key: value
                for key, value in (("name", env.license.name), ("url", env.license.url))
                if value
            }
            used.add_extensions(license_info, env.license.extensions)
            info["license"] = license_info
        if info:
            used.annotate(definition, "info", info)

    def _add_external_docs(self, definition: dict, env: Environment, used: AnnotationSet) -> None:
        if not env.external_docs:
            return
        docs = {"url": env.external_docs.url}
        if env.external_docs.description:
            docs = {"description": env.external_docs.description, **docs}
        used.add_extensions(docs, env.external_docs.extensions)
        used.annotate(definition, "externalDocs", docs)

    def _export(self) -> None:
        project = self.project
        env = project.environment
        used = AnnotationSet(enabled=self.variant.supports_annotations)

        definition = self._definition_header(env)
        self.variant.description(definition, project)

        if project.tags:
            used.annotate(definition, "tags-definition", list(project.tags))
        self._add_info(definition, env, used)
        self._add_external_docs(definition, env, used)

        docs = map_text_sections(project.texts)
        if docs:
            definition["documentation"] = definition.get("documentation", []) + docs

        security_schemes = self._map_security_schemes(env.security_schemes)
        if security_schemes:
            definition["securitySchemes"] = security_schemes

        if project.endpoint_extensions:
            paths: dict = {}
            used.add_extensions(paths, project.endpoint_extensions)
            if paths:
                used.annotate(definition, "paths", paths)

        tree: dict = {}
        media_type = definition.get("mediaType")
        for endpoint in self._ordered_endpoints(project.endpoints, env):
            method = self._map_method(endpoint, media_type, used)
            add_method(tree, endpoint.path.split("/")[1:], endpoint.method, method)

        if project.schemas:
            self.variant.add_schema(definition, self.variant.map_schema(project.schemas))

        if project.traits:
            traits = self._map_traits(project.traits, get_default_mime_type(None, media_type))
            if traits:
                definition["traits"] = traits

        definition.update(tree)
        for field in [field for field, value in definition.items() if not value]:
            del definition[field]

        used.add_extensions(definition, project.extensions)
        self.data = self._finalize(definition, used)
        logger.info("Exported %d endpoints as RAML %s", len(project.endpoints), self.version())

    def _finalize(self, definition: dict, used: AnnotationSet) -> dict:
        """Place the annotationTypes block before the first resource."""
        used.prune(definition)
        declarations = used.declarations()
        if not declarations:
            return definition
        result = {k: v for k, v in definition.items() if not k.startswith("/")}
        result["annotationTypes"] = declarations
        result.update((k, v) for k, v in definition.items() if k.startswith("/"))
        return result

    def _get_data(self, fmt: str) -> str:
        if fmt != "yaml":
            raise UnsupportedFormatError(f"RAML does not support {fmt} format")
        text = yaml.safe_dump(
            self.data,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
            width=float("inf"),
        )
        return f"#%RAML {self.version()}\n" + INCLUDE_PATTERN.sub(r"\1", text)
