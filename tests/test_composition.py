import pytest

from services.hurl_json import JsonBoolean, JsonNumber, JsonObject, JsonString, template_from_string
from services.request_body import convert_schema, merge_all_of, select_first_of
from services.schema_resolver import ResolutionError, SchemaNode


def names(obj):
    return [el.name.elements[0].value for el in obj.elements]


# ============================================================
# allOf
# ============================================================

def test_all_of_merges_sibling_properties_in_order(make_spec, settings):
    raw = {
        "allOf": [
            {"properties": {"a": {"type": "string"}}},
            {"properties": {"b": {"type": "integer"}}},
        ],
    }
    value = convert_schema(SchemaNode(raw), make_spec(), 1, settings)

    assert isinstance(value, JsonObject)
    assert names(value) == ["a", "b"]
    assert value.elements[0].value == JsonString(template_from_string("string"))
    assert value.elements[1].value == JsonNumber("3")


def test_all_of_resolves_members_and_skips_read_only(make_spec, settings):
    spec = make_spec({
        "Base": {
            "type": "object",
            "properties": {
                "id": {"type": "integer", "readOnly": True},
                "created": {"type": "string"},
            },
        },
    })
    members = [
        {"$ref": "#/components/schemas/Base"},
        {"type": "object", "properties": {"enabled": {"type": "boolean"}}},
    ]
    value = merge_all_of(members, spec, 1, settings)

    assert names(value) == ["created", "enabled"]
    assert value.elements[1].value == JsonBoolean(True)


def test_all_of_always_returns_an_object(make_spec, settings):
    members = [{"type": "string"}, {"description": "no properties here"}]
    assert merge_all_of(members, make_spec(), 1, settings) == JsonObject(space0="", elements=())


def test_all_of_member_properties_go_one_level_deeper(make_spec, settings):
    members = [{
        "properties": {
            "nested": {"type": "object", "properties": {"x": {"type": "integer"}}},
        },
    }]
    value = merge_all_of(members, make_spec(), 1, settings)

    assert value.elements[0].space0 == "\n  "
    assert value.elements[0].value.elements[0].space0 == "\n    "


def test_all_of_wins_over_one_of(make_spec, settings):
    raw = {
        "allOf": [{"properties": {"a": {"type": "string"}}}],
        "oneOf": [{"type": "boolean"}],
    }
    value = convert_schema(SchemaNode(raw), make_spec(), 1, settings)
    assert names(value) == ["a"]


def test_all_of_member_reference_error_propagates(make_spec, settings):
    members = [{"properties": {"a": {"type": "string"}}}, {"$ref": "#/components/schemas/Nope"}]
    with pytest.raises(ResolutionError):
        merge_all_of(members, make_spec(), 1, settings)


# ============================================================
# oneOf / anyOf
# ============================================================

@pytest.mark.parametrize("keyword", ["oneOf", "anyOf"])
def test_only_the_first_alternative_is_evaluated(make_tracking_spec, settings, keyword):
    spec = make_tracking_spec({
        "Flag": {"type": "boolean"},
        "Count": {"type": "integer"},
    })
    raw = {
        keyword: [
            {"$ref": "#/components/schemas/Flag"},
            {"$ref": "#/components/schemas/Count"},
            {"$ref": "#/components/schemas/DoesNotExist"},
        ],
    }
    value = convert_schema(SchemaNode(raw), spec, 1, settings)

    assert value == JsonBoolean(True)
    assert spec.resolved_refs == ["#/components/schemas/Flag"]


def test_one_of_wins_over_any_of(make_spec, settings):
    raw = {"oneOf": [{"type": "integer"}], "anyOf": [{"type": "boolean"}]}
    assert convert_schema(SchemaNode(raw), make_spec(), 1, settings) == JsonNumber("3")


def test_first_alternative_is_converted_at_the_same_depth(make_spec, settings):
    members = [{"type": "object", "properties": {"x": {"type": "integer"}}}]
    value = select_first_of(members, make_spec(), 1, settings)
    assert value.elements[0].space0 == "\n  "


def test_read_only_first_alternative_drops_the_property(make_spec, settings):
    raw = {
        "type": "object",
        "properties": {
            "kept": {"type": "integer"},
            "dropped": {"oneOf": [{"type": "string", "readOnly": True}, {"type": "integer"}]},
        },
    }
    value = convert_schema(SchemaNode(raw), make_spec(), 1, settings)
    assert names(value) == ["kept"]


def test_select_first_of_empty_list_gives_empty_object(make_spec, settings):
    assert select_first_of([], make_spec(), 1, settings) == JsonObject(space0="", elements=())


def test_alternative_pointing_back_at_itself_is_cyclic(make_spec, settings):
    spec = make_spec({"Loop": {"oneOf": [{"$ref": "#/components/schemas/Loop"}]}})
    root = spec.resolve({"$ref": "#/components/schemas/Loop"})

    with pytest.raises(ResolutionError):
        convert_schema(root, spec, 1, settings)
