"""Data models for the fetched schema and the endpoints derived from it.

The schema parser converts the raw Swagger document into these models;
everything downstream (sampling, inference, emission) works on them.
"""

from pydantic import BaseModel, ConfigDict

PARAM_KINDS = ("integer", "number", "boolean", "string")


class SchemaParam(BaseModel):
    """A single declared parameter of an operation."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str  # path / query / body (others are ignored by the emitter)
    kind: str = "string"  # integer / number / boolean / string


class SchemaOperation(BaseModel):
    """One (path, method) entry of the schema."""

    model_config = ConfigDict(frozen=True)

    parameters: tuple[SchemaParam, ...] = ()
    responses: dict = {}  # only the presence of status codes matters


class SchemaDocument(BaseModel):
    """The whole schema: ``paths[path][method] -> SchemaOperation``."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    version: str = ""
    paths: dict[str, dict[str, SchemaOperation]] = {}


class EndpointDescriptor(BaseModel):
    """A normalized (path, method) unit used for sampling and code generation."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: str  # upper-case: GET / POST / PUT / DELETE / ...
    params: tuple[SchemaParam, ...]
    group: str
    func_name: str
    dynamic_path: bool

    @property
    def key(self) -> str:
        return f"{self.method} {self.path}"

    @property
    def callable_without_input(self) -> bool:
        """True when a bare GET of the path is a meaningful request."""
        return self.method == "GET" and not self.dynamic_path

    def params_in(self, location: str) -> list[SchemaParam]:
        return [p for p in self.params if p.location == location]
