"""The intermediate, format-independent representation of an API."""

from pydantic import BaseModel, Field

from .endpoint import Endpoint, Response
from .environment import Environment
from .saved_entry import SavedEntry


class Schema(BaseModel):
    """A named model. ``definition`` is JSON Schema text."""

    name: str
    definition: str = "{}"
    description: str = ""


class Text(BaseModel):
    """A free-form documentation section."""

    name: str = ""
    content: str = ""
    divider: bool = False


class Trait(BaseModel):
    """Reusable request/response fragment. Parameter maps are JSON Schema objects."""

    id: str | None = None
    name: str
    query_string: dict = {}
    headers: dict = {}
    responses: list[Response] = []


class Project(BaseModel):
    name: str = ""
    description: str = ""
    endpoints: list[Endpoint] = []
    saved_entries: list[SavedEntry] = []
    schemas: list[Schema] = []
    texts: list[Text] = []
    traits: list[Trait] = []
    environment: Environment = Field(default_factory=Environment)
    extensions: dict = {}
    endpoint_extensions: dict = {}
    tags: list[dict] = []

    def add_endpoint(self, endpoint: Endpoint) -> None:
        self.endpoints.append(endpoint)

    def add_saved_entry(self, entry: SavedEntry) -> None:
        self.saved_entries.append(entry)
