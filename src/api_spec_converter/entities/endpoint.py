"""Schema-typed API operation."""

from pydantic import BaseModel

from .request import RequestEntity


class ExternalDocs(BaseModel):
    url: str
    description: str | None = None
    extensions: dict = {}


class Response(BaseModel):
    """A documented response. ``body`` is JSON Schema text, ``headers`` a schema object."""

    codes: list[str] = []
    body: str = ""
    headers: dict = {}
    description: str = ""
    example: str | None = None


class SecuredBy(BaseModel):
    """Security requirements. ``oauth2`` lists scopes; an empty list means no scopes."""

    oauth2: list[str] | None = None
    basic: bool = False
    api_key: bool = False


class Endpoint(RequestEntity):
    """A single operation of the API, with parameters typed as JSON Schema."""

    produces: list[str] = []
    description: str = ""
    summary: str = ""
    operation_id: str | None = None
    protocols: list[str] = []
    before: str | None = None
    responses: list[Response] = []
    response_extensions: dict = {}
    secured_by: SecuredBy | None = None
    traits: list[str] = []  # Trait ids
    tags: list[str] = []
    deprecated: bool = False
    external_docs: ExternalDocs | None = None
    extensions: dict = {}
