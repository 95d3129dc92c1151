import pytest

from api_client_gen.inference.engine import (
    InferenceContext,
    attribute_name,
    classify_number,
    infer,
    infer_response,
)
from api_client_gen.inference.types import (
    UNTYPED,
    MappingOf,
    Primitive,
    PrimitiveKind,
    RecordRef,
    SequenceOf,
    render_type,
)

INT = Primitive(kind=PrimitiveKind.INTEGER)
FLOAT = Primitive(kind=PrimitiveKind.FLOAT)
TEXT = Primitive(kind=PrimitiveKind.TEXT)
BOOL = Primitive(kind=PrimitiveKind.BOOLEAN)


def _fields(ctx: InferenceContext, name: str) -> dict[str, object]:
    return {f.name: f.type for f in ctx.records[name].fields}


class TestPrimitives:
    def test_null(self):
        assert infer("X", None, InferenceContext()) == UNTYPED

    def test_bool_is_not_integer(self):
        assert infer("X", True, InferenceContext()) == BOOL

    def test_string(self):
        assert infer("X", "hello", InferenceContext()) == TEXT

    @pytest.mark.parametrize("value, expected", [
        (0, PrimitiveKind.INTEGER),
        (5, PrimitiveKind.INTEGER),
        (5.0, PrimitiveKind.INTEGER),
        (-3.0, PrimitiveKind.INTEGER),
        (5.5, PrimitiveKind.FLOAT),
        (2**63 - 1, PrimitiveKind.INTEGER),
        (2**63, PrimitiveKind.FLOAT),
        (1e300, PrimitiveKind.FLOAT),
        (float("inf"), PrimitiveKind.FLOAT),
    ])
    def test_number_classification(self, value, expected):
        assert classify_number(value) == expected


class TestSequences:
    def test_empty_array_is_untyped_sequence(self):
        assert infer("X", [], InferenceContext()) == SequenceOf(item=UNTYPED)

    def test_first_element_decides(self):
        assert infer("X", [1, "a", 2.5], InferenceContext()) == SequenceOf(item=INT)

    def test_array_of_objects_hoists_item_record(self):
        ctx = InferenceContext()
        t = infer("Laps", [{"lap": 1}, {"lap": 2, "extra": True}], ctx)
        assert t == SequenceOf(item=RecordRef(name="LapsItem"))
        assert _fields(ctx, "LapsItem") == {"Lap": INT}


class TestObjects:
    def test_empty_object_is_untyped_mapping(self):
        ctx = InferenceContext()
        assert infer("X", {}, ctx) == MappingOf(value=UNTYPED)
        assert ctx.records == {}

    def test_record_fields(self):
        ctx = InferenceContext()
        assert infer("Pos", {"a": 1, "b": 2}, ctx) == RecordRef(name="Pos")
        assert _fields(ctx, "Pos") == {"A": INT, "B": INT}

    def test_numeric_keys_infer_mapping(self):
        ctx = InferenceContext()
        t = infer("Slots", {"1": {"x": 1}, "2": {"x": 2}}, ctx)
        assert t == MappingOf(value=RecordRef(name="SlotsItem"))
        assert _fields(ctx, "SlotsItem") == {"X": INT}
        assert "Slots" not in ctx.records

    def test_map_value_from_first_sorted_key(self):
        ctx = InferenceContext()
        assert infer("M", {"2": "a", "10": 1}, ctx) == MappingOf(value=INT)

    def test_single_numeric_key_is_record(self):
        ctx = InferenceContext()
        assert infer("One", {"1": 5}, ctx) == RecordRef(name="One")
        field = ctx.records["One"].fields[0]
        assert field.name == "N1"
        assert field.key == "1"
        assert field.attr == "n1"

    def test_mixed_keys_is_record(self):
        ctx = InferenceContext()
        assert infer("Mixed", {"1": 5, "name": "x"}, ctx) == RecordRef(name="Mixed")

    def test_fields_sorted_by_key(self):
        ctx = InferenceContext()
        infer("R", {"zeta": 1, "alpha": 2, "mid": 3}, ctx)
        assert [f.key for f in ctx.records["R"].fields] == ["alpha", "mid", "zeta"]

    def test_nested_record_names(self):
        ctx = InferenceContext()
        infer("SessionResponse", {"weather": {"rain": 0.5}, "cars": [{"id": 1}]}, ctx)
        assert sorted(ctx.records) == ["SessionResponse", "SessionResponseCarsItem", "SessionResponseWeather"]
        assert _fields(ctx, "SessionResponse") == {
            "Cars": SequenceOf(item=RecordRef(name="SessionResponseCarsItem")),
            "Weather": RecordRef(name="SessionResponseWeather"),
        }

    def test_colliding_field_names_suffixed(self):
        ctx = InferenceContext()
        infer("C", {"car_id": 1, "carId": 2, "car-id": 3}, ctx)
        fields = ctx.records["C"].fields
        assert [f.key for f in fields] == ["car-id", "carId", "car_id"]
        assert [f.name for f in fields] == ["CarId", "CarId2", "CarId3"]
        assert [f.attr for f in fields] == ["car_id", "car_id2", "car_id3"]

    def test_colliding_nested_records_get_distinct_names(self):
        ctx = InferenceContext()
        infer("C", {"a_b": {"x": 1}, "aB": {"y": 2}}, ctx)
        assert {"CAB", "CAB2"} <= set(ctx.records)

    def test_reserved_attribute_names(self):
        ctx = InferenceContext()
        infer("R", {"json": 1, "model_name": "x", "class": "GT3", "str": "s"}, ctx)
        attrs = {f.key: f.attr for f in ctx.records["R"].fields}
        assert attrs == {"json": "json_", "model_name": "model_name_", "class": "class_", "str": "str_"}

    def test_attribute_names_are_identifiers(self):
        ctx = InferenceContext()
        infer("R", {"": 1, "--": 2, "9lives": 3, "None": 4, "a b": 5}, ctx)
        for f in ctx.records["R"].fields:
            assert f.attr.isidentifier()
            assert f.name.isidentifier()
        assert len({f.attr for f in ctx.records["R"].fields}) == 5


class TestContext:
    def test_idempotent(self):
        value = {"standings": [{"pos": 1, "name": "A", "gap": 0.5}], "slots": {"1": {"x": 1}, "2": {"x": 2}}}
        a, b = InferenceContext(), InferenceContext()
        assert infer("Root", value, a) == infer("Root", value, b)
        assert a.records == b.records

    def test_reinference_on_same_context_keeps_last(self):
        ctx = InferenceContext()
        infer("R", {"a": 1}, ctx)
        infer("R", {"b": "x"}, ctx)
        assert _fields(ctx, "R") == {"B": TEXT}

    def test_cross_level_name_collision_keeps_last(self):
        ctx = InferenceContext()
        infer("C", {"a": {"b": {"x": 1}}, "aB": {"y": "s"}}, ctx)
        assert _fields(ctx, "CA") == {"B": RecordRef(name="CAB")}
        assert _fields(ctx, "CAB") == {"Y": TEXT}

    def test_accumulates_across_endpoints(self):
        ctx = InferenceContext()
        infer_response("RestA", {"x": 1}, ctx)
        infer_response("RestB", {"x": 1}, ctx)
        assert sorted(ctx.records) == ["RestAResponse", "RestBResponse"]

    def test_sorted_records(self):
        ctx = InferenceContext()
        infer("B", {"x": 1}, ctx)
        infer("A", {"x": 1}, ctx)
        assert [r.name for r in ctx.sorted_records()] == ["A", "B"]


class TestRenderType:
    @pytest.mark.parametrize("t, expected", [
        (INT, "int"),
        (UNTYPED, "Any"),
        (SequenceOf(item=FLOAT), "list[float]"),
        (MappingOf(value=SequenceOf(item=RecordRef(name="R"))), "dict[str, list[R]]"),
        (RecordRef(name="R"), "R"),
    ])
    def test_render(self, t, expected):
        assert render_type(t) == expected


class TestAttributeName:
    def test_snake(self):
        assert attribute_name("PlayerID") == "player_id"

    def test_builtin_annotation_name(self):
        assert attribute_name("Int") == "int_"
