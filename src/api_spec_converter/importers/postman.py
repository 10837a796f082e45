"""Postman collection (v1) importer.

Requests become Endpoints (merged per path and method) and SavedEntries
(one per request). Folders become saved-entry display groups.
"""

import logging
import re
from urllib.parse import unquote

from api_spec_converter.entities.endpoint import Endpoint
from api_spec_converter.entities.project import Project
from api_spec_converter.entities.saved_entry import SavedEntry
from api_spec_converter.errors import ParseError
from api_spec_converter.utils.array import group_by

from .base import Importer

logger = logging.getLogger(__name__)

# Greedy and unanchored: only the first {{...}} span in a string is rewritten.
VARIABLE_PATTERN = re.compile(r"\{\{(.*)\}\}", re.IGNORECASE)

NO_BODY_METHODS = ("get", "head")


def transform_variable_format(value: str | None) -> str | None:
    """Rewrite the first ``{{var}}`` token to ``<<var>>``."""
    if not value:
        return None
    return VARIABLE_PATTERN.sub(r"<<\1>>", value, count=1)


def _object_schema(properties: dict) -> dict:
    return {"type": "object", "properties": properties, "required": []}


def parse_query(query: str | None) -> dict:
    """Parse ``a=1&b=2`` into an object schema with string defaults."""
    properties = {}
    if query:
        for pair in query.split("&"):
            parts = pair.split("=")
            value = parts[1] if len(parts) > 1 else ""
            properties[unquote(parts[0])] = {
                "type": "string",
                "default": transform_variable_format(unquote(value)),
            }
    return _object_schema(properties)


def parse_headers(data: str | None) -> dict:
    """Parse a raw ``Name: value`` header block into an object schema."""
    properties = {}
    for line in (data or "").split("\n"):
        if not line.strip():
            continue
        parts = line.split(":")
        value = parts[1].strip() if len(parts) > 1 else None
        properties[parts[0].strip()] = {
            "type": "string",
            "default": transform_variable_format(value),
        }
    return _object_schema(properties)


def map_consumes(mode: str | None) -> list[str]:
    if mode == "urlencoded":
        return ["application/x-www-form-urlencoded"]
    if mode == "params":
        return ["multipart/form-data"]
    return ["text/plain"]


def map_request_body(data) -> dict:
    """Map form fields to a body entry; text fields are strings, the rest binary."""
    properties = {}
    if isinstance(data, list):
        for field in data:
            properties[field.get("key")] = {
                "type": "string" if field.get("type") == "text" else "binary",
                "default": transform_variable_format(field.get("value")),
            }
    return {"body": _object_schema(properties)}


class PostmanImporter(Importer):
    """Imports Postman collections exported in the v1 format."""

    def _map_path_variables(self, data: dict | None) -> dict:
        return {key: transform_variable_format(value) for key, value in (data or {}).items()}

    def _map_endpoint(self, pmr: dict) -> Endpoint:
        endpoint = Endpoint(id=pmr.get("id"), name=pmr.get("name", ""))
        url_parts = pmr.get("url", "").split("?")
        endpoint.query_string = parse_query(url_parts[1] if len(url_parts) > 1 else None)
        endpoint.path = transform_variable_format(url_parts[0]) or ""
        endpoint.method = pmr.get("method", "get")
        endpoint.before = pmr.get("preRequestScript")

        path_params = {
            key: {"type": "string", "default": value}
            for key, value in self._map_path_variables(pmr.get("pathVariables")).items()
        }
        endpoint.path_params = _object_schema(path_params)
        endpoint.headers = parse_headers(pmr.get("headers"))
        endpoint.consumes = map_consumes(pmr.get("dataMode"))
        endpoint.add_body(map_request_body(pmr.get("data")))
        return endpoint

    def _map_saved_entry(self, pmr: dict) -> SavedEntry:
        entry = SavedEntry(id=pmr.get("id"), name=pmr.get("name", ""))
        url_parts = pmr.get("url", "").split("?")
        entry.query_string = parse_query(url_parts[1] if len(url_parts) > 1 else None)
        entry.path = transform_variable_format(url_parts[0]) or ""
        entry.method = pmr.get("method", "get")
        entry.path_params = self._map_path_variables(pmr.get("pathVariables"))
        entry.headers = parse_headers(pmr.get("headers"))
        entry.consumes = map_consumes(pmr.get("dataMode"))
        if entry.method not in NO_BODY_METHODS:
            entry.add_body(map_request_body(pmr.get("data")))
        return entry

    def _merge_properties(self, schemas: list[dict]) -> dict:
        properties: dict = {}
        for schema in schemas:
            properties.update(schema.get("properties", {}))
        return _object_schema(properties)

    def _merge_endpoint_group(self, endpoints: list[Endpoint]) -> Endpoint:
        """Fold a (path, method) group into its first member.

        Only headers and query strings are merged, later members winning on
        key collisions. Path parameters and bodies of the first member are kept.
        """
        endpoint = endpoints[0]
        if len(endpoints) == 1:
            return endpoint

        headers = self._merge_properties([e.headers for e in endpoints])
        query_string = self._merge_properties([e.query_string for e in endpoints])
        endpoint.name = endpoint.path
        endpoint.headers = headers
        endpoint.query_string = query_string
        logger.debug("Merged %d requests into %s %s", len(endpoints), endpoint.method, endpoint.path)
        return endpoint

    def _merge_endpoints(self, endpoints: list[Endpoint]) -> list[Endpoint]:
        groups = group_by(endpoints, lambda e: (e.path, e.method))
        return [self._merge_endpoint_group(group) for group in groups]

    def _import(self) -> None:
        if not isinstance(self.data, dict):
            raise ParseError("Postman collection must be a JSON object")

        self.project = Project(
            name=self.data.get("name") or "",
            description=self.data.get("description") or "",
        )
        requests = self.data.get("requests") or []
        folders = self.data.get("folders") or []

        endpoints = [self._map_endpoint(r) for r in requests]
        for endpoint in self._merge_endpoints(endpoints):
            self.project.add_endpoint(endpoint)

        for request in requests:
            self.project.add_saved_entry(self._map_saved_entry(request))

        saved_entries_order = self.project.environment.resources_order.saved_entries
        for folder in folders:
            saved_entries_order.append({
                "_id": folder.get("id"),
                "name": folder.get("name"),
                "items": [{"type": "savedEntries", "_id": item} for item in folder.get("order", [])],
            })

        logger.info(
            "Imported %d requests as %d endpoints", len(requests), len(self.project.endpoints)
        )
