"""Shared storage for request-shaped entities.

Header, query string and path parameter maps are stored as canonical
4-space-indented JSON text and exposed as parsed mappings through properties.
"""

from pydantic import BaseModel, Field, field_validator

from api_spec_converter.utils import json_helper


class RequestData(BaseModel):
    """Raw stored request parts."""

    path: str = ""
    method: str = ""
    headers: str = "{}"
    query_string: str | None = None
    path_params: str | None = None
    bodies: list[dict] = []

    @field_validator("method")
    @classmethod
    def _lower_method(cls, value: str) -> str:
        return value.lower()


class RequestEntity(BaseModel):
    """Base for Endpoint and SavedEntry."""

    id: str | None = None
    name: str = ""
    consumes: list[str] = []
    request: RequestData = Field(default_factory=RequestData)

    @property
    def path(self) -> str:
        return self.request.path

    @path.setter
    def path(self, value: str) -> None:
        self.request.path = value

    @property
    def method(self) -> str:
        return self.request.method

    @method.setter
    def method(self, value: str) -> None:
        self.request.method = value.lower()

    @property
    def headers(self) -> dict:
        return json_helper.parse(self.request.headers)

    @headers.setter
    def headers(self, value) -> None:
        self.request.headers = json_helper.stringify(value)

    @property
    def query_string(self) -> dict:
        if not self.request.query_string:
            self.request.query_string = "{}"
        return json_helper.parse(self.request.query_string)

    @query_string.setter
    def query_string(self, value) -> None:
        self.request.query_string = json_helper.stringify(value)

    @property
    def path_params(self) -> dict:
        if not self.request.path_params:
            self.request.path_params = "{}"
        return json_helper.parse(self.request.path_params)

    @path_params.setter
    def path_params(self, value) -> None:
        self.request.path_params = json_helper.stringify(value)

    @property
    def body(self) -> dict:
        """The canonical (first) body entry, or an empty dict."""
        if self.request.bodies:
            return self.request.bodies[0]
        return {}

    def add_body(self, body: dict) -> None:
        """Append a body entry; its ``body`` schema is stored as JSON text."""
        entry = dict(body)
        entry["body"] = json_helper.stringify(entry.get("body", {}))
        self.request.bodies.append(entry)
