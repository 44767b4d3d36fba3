"""
services/hurl_json/render.py

Serialize the Hurl JSON value model back to text.

The renderer adds no whitespace of its own: everything between tokens comes
from the decorations stored on the nodes.
"""
from services.hurl_json.models import (
    Body,
    JsonBoolean,
    JsonList,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonValue,
    Placeholder,
    Template,
    TextElement,
)


def render_template(template: Template) -> str:
    parts = []
    for element in template.elements:
        if isinstance(element, TextElement):
            parts.append(element.encoded)
        elif isinstance(element, Placeholder):
            parts.append("{{" + element.expr + "}}")
        else:
            raise TypeError(f"Unsupported template element: {type(element).__name__}")

    delimiter = template.delimiter or ""
    return f"{delimiter}{''.join(parts)}{delimiter}"


def render_json_value(value: JsonValue) -> str:
    if isinstance(value, JsonNull):
        return "null"
    if isinstance(value, JsonBoolean):
        return "true" if value.value else "false"
    if isinstance(value, JsonNumber):
        return value.value
    if isinstance(value, JsonString):
        return render_template(value.value)
    if isinstance(value, JsonList):
        items = ",".join(
            f"{el.space0}{render_json_value(el.value)}{el.space1}"
            for el in value.elements
        )
        return f"[{value.space0}{items}]"
    if isinstance(value, JsonObject):
        members = ",".join(
            f"{el.space0}{render_template(el.name)}{el.space1}:"
            f"{el.space2}{render_json_value(el.value)}{el.space3}"
            for el in value.elements
        )
        return f"{{{value.space0}{members}}}"
    raise TypeError(f"Unsupported JSON value: {type(value).__name__}")


def render_body(body: Body) -> str:
    """Render a request body exactly as it would appear in a .hurl file."""
    return (
        "".join(body.line_terminators)
        + body.space0
        + render_json_value(body.value)
        + body.line_terminator0
    )
