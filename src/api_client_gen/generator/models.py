"""Models unit emitter: one pydantic model per inferred record."""

import json

from api_client_gen.inference.types import UNTYPED, Record, RecordField, render_type

GENERATED_HEADER = "# Code generated by api-client-gen. DO NOT EDIT."


def source_line(title: str, version: str) -> str:
    label = " ".join(f"{title} {version}".split())
    return f"# Source: {label}" if label else ""


def render_models(records: list[Record], title: str = "", version: str = "") -> str:
    """Render the models unit. ``records`` must already be sorted by name."""
    lines = [GENERATED_HEADER]
    if source := source_line(title, version):
        lines.append(source)
    lines.extend([
        "",
        "from __future__ import annotations",
        "",
        "from typing import Any",
        "",
        "from pydantic import BaseModel, Field",
    ])
    for record in records:
        lines.extend(["", ""])
        lines.extend(_render_record(record))
    if records:
        lines.extend(["", ""])
        lines.extend(f"{record.name}.model_rebuild()" for record in records)
    return "\n".join(lines) + "\n"


def _render_record(record: Record) -> list[str]:
    # Fields validate by alias only; an omitted key must not fall back to
    # another key that happens to equal the attribute name.
    lines = [f"class {record.name}(BaseModel):"]
    lines.extend(_render_field(f) for f in record.fields)
    return lines


def _render_field(field: RecordField) -> str:
    annotation = render_type(field.type)
    if field.type != UNTYPED:
        annotation += " | None"
    return f"    {field.attr}: {annotation} = Field(default=None, alias={json.dumps(field.key)})"
