# services/hurl_json/__init__.py
"""
Hurl JSON Body Package

This package models JSON request bodies the way a Hurl file holds them:
- models.py: JSON value kinds, templates and the Body wrapper
- building.py: layout-aware factories driven by the Formatting settings
- render.py: text serialization of bodies and values
"""

from .models import (
    Body,
    JsonBoolean,
    JsonList,
    JsonListElement,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonObjectElement,
    JsonString,
    JsonValue,
    Placeholder,
    Template,
    TextElement,
)

from .building import (
    EMPTY_LIST_DEFAULT_SPACE,
    build_json_list,
    build_json_list_space,
    build_json_list_value,
    build_json_object,
    build_json_object_element,
    template_from_string,
)

from .render import (
    render_body,
    render_json_value,
    render_template,
)

__all__ = [
    # Models
    "Body",
    "JsonBoolean",
    "JsonList",
    "JsonListElement",
    "JsonNull",
    "JsonNumber",
    "JsonObject",
    "JsonObjectElement",
    "JsonString",
    "JsonValue",
    "Placeholder",
    "Template",
    "TextElement",
    # Builders
    "EMPTY_LIST_DEFAULT_SPACE",
    "build_json_list",
    "build_json_list_space",
    "build_json_list_value",
    "build_json_object",
    "build_json_object_element",
    "template_from_string",
    # Rendering
    "render_body",
    "render_json_value",
    "render_template",
]
