"""Inferred type model.

An inferred type is one of a closed set of variants: a primitive, a sequence,
a mapping of text keys, or a reference to a named record. Records are the only
named entities; they live in the InferenceContext record table.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class PrimitiveKind(str, Enum):
    BOOLEAN = "bool"
    INTEGER = "int"
    FLOAT = "float"
    TEXT = "str"
    ANY = "Any"  # null, or nothing observed


class Primitive(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: PrimitiveKind


class SequenceOf(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: "InferredType"


class MappingOf(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: "InferredType"


class RecordRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


InferredType = Primitive | SequenceOf | MappingOf | RecordRef

SequenceOf.model_rebuild()
MappingOf.model_rebuild()

UNTYPED = Primitive(kind=PrimitiveKind.ANY)


class RecordField(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str  # normalized PascalCase name, unique within the record
    attr: str  # Python attribute name, unique within the record
    type: InferredType
    key: str  # original JSON key


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    fields: tuple[RecordField, ...]


def render_type(t: InferredType) -> str:
    """Render a type as a Python annotation, e.g. ``list[LapsResponseItem]``."""
    if isinstance(t, Primitive):
        return t.kind.value
    if isinstance(t, SequenceOf):
        return f"list[{render_type(t.item)}]"
    if isinstance(t, MappingOf):
        return f"dict[str, {render_type(t.value)}]"
    return t.name

