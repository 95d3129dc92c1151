"""Structural type inference over a single JSON sample.

``infer`` maps a decoded JSON value to an InferredType, hoisting every
non-empty, non-map object into a named Record registered on the context.
The result reflects only the sample it was given: a whole number is typed as
``int`` even if the field can be fractional in other responses, and only the
first element of an array (or the first value of a numeric-keyed map)
determines the element type.
"""

from pydantic import BaseModel

from api_client_gen.naming import NameRegistry, normalize, safe_identifier, snake_case
from .types import (
    UNTYPED,
    InferredType,
    MappingOf,
    Primitive,
    PrimitiveKind,
    Record,
    RecordField,
    RecordRef,
    SequenceOf,
)

RESPONSE_SUFFIX = "Response"
ITEM_SUFFIX = "Item"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DIGITS = frozenset("0123456789")

# Attribute names a generated model cannot use: BaseModel's public API and the
# builtin names that appear in field annotations.
RESERVED_ATTRS = frozenset(
    {name for name in dir(BaseModel) if not name.startswith("_")}
    | {"bool", "dict", "float", "int", "list", "str"}
)


class InferenceContext:
    """Record table accumulated over one generation run.

    A record, once registered, is never renamed; registering the same name
    twice keeps the later definition.
    """

    def __init__(self):
        self.records: dict[str, Record] = {}

    def register(self, record: Record) -> RecordRef:
        self.records[record.name] = record
        return RecordRef(name=record.name)

    def merge(self, other: "InferenceContext") -> None:
        self.records.update(other.records)

    def sorted_records(self) -> list[Record]:
        return [self.records[name] for name in sorted(self.records)]


def infer(name: str, value: object, ctx: InferenceContext) -> InferredType:
    """Infer the type of ``value``, using ``name`` for any hoisted record."""
    if value is None:
        return UNTYPED
    if isinstance(value, bool):
        return Primitive(kind=PrimitiveKind.BOOLEAN)
    if isinstance(value, (int, float)):
        return Primitive(kind=classify_number(value))
    if isinstance(value, str):
        return Primitive(kind=PrimitiveKind.TEXT)
    if isinstance(value, list):
        if not value:
            return SequenceOf(item=UNTYPED)
        return SequenceOf(item=infer(name + ITEM_SUFFIX, value[0], ctx))
    if isinstance(value, dict):
        return _infer_object(name, value, ctx)
    return UNTYPED


def infer_response(func_name: str, payload: object, ctx: InferenceContext) -> InferredType:
    return infer(func_name + RESPONSE_SUFFIX, payload, ctx)


def classify_number(value: int | float) -> PrimitiveKind:
    """Whole numbers that fit in 64 bits are integers, everything else floats."""
    if isinstance(value, float):
        if not value.is_integer():
            return PrimitiveKind.FLOAT
        value = int(value)
    if _INT64_MIN <= value <= _INT64_MAX:
        return PrimitiveKind.INTEGER
    return PrimitiveKind.FLOAT


def is_numeric_key(key: str) -> bool:
    return set(key) <= _DIGITS


def _infer_object(name: str, obj: dict, ctx: InferenceContext) -> InferredType:
    if not obj:
        return MappingOf(value=UNTYPED)

    keys = sorted(obj)

    # Objects keyed by ids ({"1": {...}, "2": {...}}) are tables, not records
    if len(keys) > 1 and all(is_numeric_key(k) for k in keys):
        return MappingOf(value=infer(name + ITEM_SUFFIX, obj[keys[0]], ctx))

    field_names = NameRegistry()
    attr_names = NameRegistry()
    fields = []
    for key in keys:
        field_name = normalize(key)
        if field_name[0].isdigit():
            field_name = "N" + field_name
        field_name = field_names.claim(field_name)
        fields.append(
            RecordField(
                name=field_name,
                attr=attr_names.claim(attribute_name(field_name)),
                type=infer(name + field_name, obj[key], ctx),
                key=key,
            )
        )
    return ctx.register(Record(name=name, fields=tuple(fields)))


def attribute_name(field_name: str) -> str:
    attr = snake_case(field_name)
    if attr.startswith("model_"):
        return attr + "_"
    return safe_identifier(attr, RESERVED_ATTRS)
