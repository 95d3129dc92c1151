"""Derive normalized endpoint descriptors from a parsed schema."""

import re

from api_client_gen.naming import normalize
from .base import EndpointDescriptor, SchemaDocument, SchemaParam

REGEX_GROUP = re.compile(r"\(.*?\)")


def build_endpoints(schema: SchemaDocument) -> list[EndpointDescriptor]:
    """Build one descriptor per (path, method), in emission order."""
    endpoints = []
    for path, methods in schema.paths.items():
        for method, operation in methods.items():
            endpoints.append(
                EndpointDescriptor(
                    path=path,
                    method=method.upper(),
                    params=operation.parameters,
                    group=path_to_group(path),
                    func_name=endpoint_func_name(method, path),
                    dynamic_path=has_dynamic_path(path, operation.parameters),
                )
            )
    endpoints.sort(key=lambda ep: (ep.group, ep.path, ep.method))
    return endpoints


def endpoint_func_name(method: str, path: str) -> str:
    """Canonical PascalCase name of an endpoint, e.g. ``PostRestRaceStart``."""
    clean = REGEX_GROUP.sub("", path).replace("?", "")
    name = normalize(clean)
    if name[0].isdigit():
        name = "N" + name
    method = method.upper()
    if method != "GET":
        name = method.title() + name
    return name


def path_to_group(path: str) -> str:
    parts = path.removeprefix("/").split("/")
    if len(parts) < 2:
        return "root"
    if parts[0] == "rest":
        return parts[1]
    return parts[0]


def has_dynamic_path(path: str, params: tuple[SchemaParam, ...]) -> bool:
    if "{" in path or REGEX_GROUP.search(path):
        return True
    return any(p.location == "path" for p in params)
