"""Swagger 2.0 schema loader.

Reads the schema from a live server or a local JSON/YAML file and parses it
into a SchemaDocument. Any failure here is fatal to the run.
"""

from pathlib import Path

import requests
import yaml
from pydantic import ValidationError

from api_client_gen.errors import SchemaError
from .base import PARAM_KINDS, SchemaDocument, SchemaOperation, SchemaParam

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")


def fetch_schema(url: str, session: requests.Session | None = None) -> SchemaDocument:
    """Download and parse the schema served at ``url``."""
    session = session or requests.Session()
    try:
        resp = session.get(url)
    except requests.RequestException as e:
        raise SchemaError(f"failed to fetch schema from {url}: {e}") from e
    if resp.status_code != 200:
        raise SchemaError(f"failed to fetch schema from {url}: HTTP {resp.status_code}")
    return parse_schema_text(resp.text)


def load_schema(file_path: Path) -> SchemaDocument:
    """Parse a schema stored on disk (JSON or YAML)."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"failed to read schema {file_path}: {e}") from e
    return parse_schema_text(text)


def parse_schema_text(text: str) -> SchemaDocument:
    # YAML is a superset of JSON, so one loader covers both
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaError(f"failed to parse schema: {e}") from e
    return parse_schema(doc)


def parse_schema(doc: object) -> SchemaDocument:
    """Convert a decoded schema document into a SchemaDocument."""
    if not isinstance(doc, dict) or not isinstance(doc.get("paths"), dict):
        raise SchemaError("failed to parse schema: document has no 'paths' mapping")

    info = doc.get("info")
    if not isinstance(info, dict):
        info = {}
    paths: dict[str, dict[str, SchemaOperation]] = {}
    for path, methods in doc["paths"].items():
        if not isinstance(methods, dict):
            continue
        operations = {}
        for method, operation in methods.items():
            method = str(method).lower()
            # path items may also carry shared keys such as "parameters"
            if method not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            try:
                operations[method] = _parse_operation(operation)
            except (ValidationError, AttributeError, TypeError) as e:
                raise SchemaError(f"failed to parse schema: {method.upper()} {path}: {e}") from e
        paths[str(path)] = operations

    return SchemaDocument(
        title=str(info.get("title") or ""),
        version=str(info.get("version") or ""),
        paths=paths,
    )


def _parse_operation(operation: dict) -> SchemaOperation:
    params = operation.get("parameters")
    responses = operation.get("responses")
    return SchemaOperation(
        parameters=tuple(_parse_parameters(params if isinstance(params, list) else [])),
        responses={str(code): resp for code, resp in responses.items()} if isinstance(responses, dict) else {},
    )


def _parse_parameters(params: list) -> list[SchemaParam]:
    result = []
    for p in params:
        if not isinstance(p, dict) or p.get("name") is None:
            continue
        kind = p.get("type") or "string"
        result.append(
            SchemaParam(
                name=str(p["name"]),
                location=str(p.get("in") or "query"),
                kind=kind if kind in PARAM_KINDS else "string",
            )
        )
    return result
