"""Client unit emitter: one method per endpoint on a requests-based Client."""

import json
import re

from api_client_gen.inference.types import InferredType, RecordRef
from api_client_gen.naming import NameRegistry, parameter_name, safe_identifier, snake_case
from api_client_gen.parser.base import EndpointDescriptor, SchemaParam
from .models import GENERATED_HEADER

PLACEHOLDER = re.compile(r"\{\w+\}|\(.*?\)")

PARAM_TYPES = {
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "string": "str",
}

# Public attributes of the generated Client that methods must not shadow.
CLIENT_ATTRS = frozenset({"base_url", "session"})

CLIENT_RUNTIME = '''class ApiError(Exception):
    """Raised for any non-2xx response."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DecodeError(Exception):
    """Raised when a response body does not match its model."""


def _query_value(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class Client:
    def __init__(self, base_url: str, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, params: dict | None = None, body: Any = None) -> bytes:
        kwargs = {}
        if params:
            query = {k: _query_value(v) for k, v in params.items() if v is not None}
            if query:
                kwargs["params"] = query
        if body is not None:
            kwargs["json"] = body
        resp = self.session.request(method, self.base_url + path, **kwargs)
        if not 200 <= resp.status_code < 300:
            raise ApiError(resp.status_code, resp.text)
        return resp.content
'''


def render_client(endpoints: list[EndpointDescriptor], response_types: dict[str, InferredType]) -> str:
    """Render the client unit. ``endpoints`` must already be in emission order."""
    method_names = NameRegistry()
    methods = []
    typed = set()
    for ep in endpoints:
        result = response_types.get(ep.key)
        record = result.name if isinstance(result, RecordRef) else None
        if record:
            typed.add(record)
        methods.append(_render_method(ep, _method_name(ep, method_names), record))

    lines = [
        GENERATED_HEADER,
        "",
        "from typing import Any",
        "",
        "import requests",
        "from pydantic import ValidationError",
    ]
    if typed:
        lines.extend(["", "from .models import ("])
        lines.extend(f"    {name}," for name in sorted(typed))
        lines.append(")")
    lines.extend(["", "", CLIENT_RUNTIME])
    for method in methods:
        lines.append("")
        lines.extend(method)
    return "\n".join(lines) + "\n"


def _method_name(ep: EndpointDescriptor, registry: NameRegistry) -> str:
    name = safe_identifier(snake_case(ep.func_name), CLIENT_ATTRS)
    if name in registry:
        name = f"{name}_{ep.method.lower()}"
    return registry.claim(name)


def _render_method(ep: EndpointDescriptor, name: str, record: str | None) -> list[str]:
    arg_names = NameRegistry()
    signature = ["self"]
    path_args = []
    for p in ep.params_in("path"):
        arg = arg_names.claim(parameter_name(p.name))
        path_args.append(arg)
        signature.append(f"{arg}: {PARAM_TYPES.get(p.kind, 'str')}")
    query = []
    for p in ep.params_in("query"):
        arg = arg_names.claim(parameter_name(p.name))
        query.append((p, arg))
        signature.append(f"{arg}: {PARAM_TYPES.get(p.kind, 'str')} | None = None")
    has_body = bool(ep.params_in("body"))
    if has_body:
        signature.append("body: Any = None")

    call = [json.dumps(ep.method), path_expression(ep.path, path_args)]
    if query:
        call.append("params=" + _query_dict(query))
    if has_body:
        call.append("body=body")

    returns = record or "bytes"
    lines = [
        f"    def {name}({', '.join(signature)}) -> {returns}:",
        f'        """{_docstring(ep)}"""',
    ]
    request = f"self._request({', '.join(call)})"
    if record is None:
        lines.append(f"        return {request}")
        return lines
    lines.extend([
        f"        data = {request}",
        "        try:",
        f"            return {record}.model_validate_json(data)",
        "        except ValidationError as e:",
        f'            raise DecodeError(f"decode {record}: {{e}}") from e',
    ])
    return lines


def path_expression(path: str, args: list[str]) -> str:
    """Python expression building ``path`` with ``args`` substituted in order.

    Placeholders (``{name}`` or regex groups) beyond the number of arguments
    are left in the path verbatim.
    """
    template = []
    used = 0
    pos = 0
    for m in PLACEHOLDER.finditer(path):
        template.append(_escape_braces(path[pos:m.start()]))
        if used < len(args):
            template.append("{}")
            used += 1
        else:
            template.append(_escape_braces(m.group()))
        pos = m.end()
    template.append(_escape_braces(path[pos:]))
    if not used:
        return json.dumps(path)
    return f"{json.dumps(''.join(template))}.format({', '.join(args[:used])})"


def _escape_braces(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def _query_dict(query: list[tuple[SchemaParam, str]]) -> str:
    items = ", ".join(f"{json.dumps(p.name)}: {arg}" for p, arg in query)
    return "{" + items + "}"


def _docstring(ep: EndpointDescriptor) -> str:
    return f"{ep.method} {ep.path}".replace("\\", "\\\\").replace('"', '\\"')
