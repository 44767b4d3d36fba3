import json

import pytest
import yaml

from services.hurl_json import render_body
from services.request_body import build_body_from_spec
from services.schema_resolver import SpecDocument
from services.spec_loader import (
    extract_operations,
    find_operation,
    load_spec_file,
    normalize_spec,
)

OPENAPI_DOC = {
    "openapi": "3.0.3",
    "info": {"title": "Pets", "version": "1.0"},
    "paths": {
        "/pets": {
            "post": {
                "operationId": "createPet",
                "requestBody": {
                    "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
                },
            },
            "get": {"operationId": "listPets"},
        },
        "/owners": {
            "delete": {"operationId": "deleteOwners", "deprecated": True},
        },
    },
    "components": {
        "schemas": {
            "Pet": {"type": "object", "properties": {"name": {"type": "string"}}},
        },
    },
}

SWAGGER_DOC = {
    "swagger": "2.0",
    "info": {"title": "Legacy", "version": "1.0"},
    "consumes": ["application/json"],
    "paths": {
        "/pets": {
            "post": {
                "operationId": "addPet",
                "parameters": [
                    {"in": "body", "name": "body", "schema": {"$ref": "#/definitions/Pet"}},
                    {"in": "query", "name": "dryRun", "type": "boolean"},
                ],
            },
        },
        "/login": {
            "post": {
                "operationId": "login",
                "parameters": [
                    {"in": "formData", "name": "user", "type": "string", "required": True},
                ],
            },
        },
    },
    "definitions": {
        "Pet": {"type": "object", "properties": {"tag": {"$ref": "#/definitions/Tag"}}},
        "Tag": {"type": "string"},
    },
}


def test_loads_yaml(tmp_path):
    path = tmp_path / "spec.yaml"
    path.write_text(yaml.safe_dump(OPENAPI_DOC, sort_keys=False))

    spec = load_spec_file(str(path))
    assert spec["info"]["title"] == "Pets"


def test_loads_json(tmp_path):
    path = tmp_path / "spec.json"
    path.write_text(json.dumps(OPENAPI_DOC))

    assert load_spec_file(str(path))["openapi"] == "3.0.3"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_spec_file(str(tmp_path / "nope.yaml"))


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("openapi: [3.0\npaths: {")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_spec_file(str(path))


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    with pytest.raises(ValueError, match="Invalid JSON"):
        load_spec_file(str(path))


@pytest.mark.parametrize("doc, message", [
    (["a", "list"], "top level"),
    ({"info": {}}, "Unrecognized spec format"),
    ({"openapi": "3.1.0", "paths": {}}, "no 'paths'"),
])
def test_rejects_unusable_documents(doc, message):
    with pytest.raises(ValueError, match=message):
        normalize_spec(doc)


def test_swagger_2_body_parameter_becomes_request_body():
    spec = normalize_spec(SWAGGER_DOC)
    op = spec["paths"]["/pets"]["post"]

    assert spec["openapi"] == "3.0.0"
    assert "swagger" not in spec
    assert op["requestBody"] == {
        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
    }
    assert [p["name"] for p in op["parameters"]] == ["dryRun"]
    assert spec["components"]["schemas"]["Pet"]["properties"]["tag"] == {
        "$ref": "#/components/schemas/Tag",
    }
    # the caller's document is left untouched
    assert SWAGGER_DOC["swagger"] == "2.0"


def test_swagger_2_form_parameters_become_form_body():
    spec = normalize_spec(SWAGGER_DOC)
    content = spec["paths"]["/login"]["post"]["requestBody"]["content"]

    assert list(content) == ["application/x-www-form-urlencoded"]
    assert content["application/x-www-form-urlencoded"]["schema"] == {
        "type": "object",
        "properties": {"user": {"type": "string"}},
    }


def test_swagger_2_body_renders(settings):
    spec = normalize_spec(SWAGGER_DOC)
    op = find_operation(spec, operation_id="addPet")

    body = build_body_from_spec(op["request_body"], SpecDocument(spec), settings)
    assert render_body(body) == '{\n  "tag": "string"\n}\n'


def test_extract_operations_sorted_by_path_then_method():
    ops = extract_operations(OPENAPI_DOC)

    assert [(op["method"], op["path"]) for op in ops] == [
        ("DELETE", "/owners"),
        ("GET", "/pets"),
        ("POST", "/pets"),
    ]
    assert ops[0]["deprecated"] is True
    assert ops[1]["request_body"] is None


def test_find_operation_by_id_and_by_method_path():
    assert find_operation(OPENAPI_DOC, operation_id="createPet")["method"] == "POST"
    assert find_operation(OPENAPI_DOC, method="get", path="/pets")["operation_id"] == "listPets"


def test_find_operation_errors():
    with pytest.raises(ValueError, match="not found"):
        find_operation(OPENAPI_DOC, operation_id="nope")
    with pytest.raises(ValueError, match="Provide an operation_id"):
        find_operation(OPENAPI_DOC, method="GET")
