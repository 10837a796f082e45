"""API-wide settings: hosts, media types, security and display ordering."""

from pydantic import BaseModel, Field

from .endpoint import ExternalDocs


class Contact(BaseModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None
    extensions: dict = {}


class License(BaseModel):
    name: str | None = None
    url: str | None = None
    extensions: dict = {}


class OAuth2Scope(BaseModel):
    name: str
    value: str = ""


class OAuth2Scheme(BaseModel):
    name: str | None = None
    flow: str = ""  # implicit / password / application / accessCode
    scopes: list[OAuth2Scope] = []
    authorization_url: str | None = None
    token_url: str | None = None


class BasicScheme(BaseModel):
    name: str | None = None
    description: str | None = None


class ApiKeyTransport(BaseModel):
    """Where an API key travels: one header or query parameter."""

    name: str
    external_name: str | None = None
    description: str | None = None


class ApiKeyScheme(BaseModel):
    headers: list[ApiKeyTransport] = []
    query_string: list[ApiKeyTransport] = []


class SecuritySchemes(BaseModel):
    oauth2: OAuth2Scheme | None = None
    basic: BasicScheme | None = None
    api_key: ApiKeyScheme | None = None


class ResourcesOrder(BaseModel):
    """Display grouping. Groups look like ``{_id, name, items: [{type, _id}]}``."""

    docs: list[dict] = []
    saved_entries: list[dict] = []


class Environment(BaseModel):
    version: str | None = None
    host: str = ""
    base_path: str = ""
    protocols: list[str] = []
    consumes: list[str] = []
    produces: list[str] = []
    security_schemes: SecuritySchemes = Field(default_factory=SecuritySchemes)
    external_docs: ExternalDocs | None = None
    contact_info: Contact | None = None
    terms_of_service: str | None = None
    license: License | None = None
    resources_order: ResourcesOrder = Field(default_factory=ResourcesOrder)
    extensions: dict = {}
