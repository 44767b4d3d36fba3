"""
services/hurl_json/building.py

Factory functions for the decorated Hurl JSON nodes.

All whitespace decisions live here so the schema walker only decides WHAT
value to produce and never HOW it is laid out.
"""
import json
from typing import List, Sequence

from utils.config import Formatting
from services.hurl_json.models import (
    JsonObject,
    JsonObjectElement,
    JsonList,
    JsonListElement,
    JsonValue,
    Template,
    TextElement,
)

# Fixed space for arrays declared without an 'items' schema.
EMPTY_LIST_DEFAULT_SPACE = "\n"


def template_from_string(text: str) -> Template:
    """Wrap plain text as a double-quoted template without placeholders."""
    # json.dumps gives the escaped form including quotes; strip them.
    encoded = json.dumps(text, ensure_ascii=False)[1:-1]
    return Template(elements=(TextElement(value=text, encoded=encoded),), delimiter='"')


def build_json_list_space(formatting: Formatting) -> str:
    # Lists are kept on one line in every mode.
    return ""


def build_json_list_value(
    value: JsonValue,
    formatting: Formatting,
    position: int = 0,
) -> JsonListElement:
    """Wrap a value as a list element; pretty mode separates items with a space."""
    space0 = " " if formatting.pretty and position > 0 else ""
    return JsonListElement(value=value, space0=space0, space1="")


def build_json_list(
    values: Sequence[JsonValue],
    formatting: Formatting,
) -> JsonList:
    return JsonList(
        space0=build_json_list_space(formatting),
        elements=tuple(
            build_json_list_value(v, formatting, position=i)
            for i, v in enumerate(values)
        ),
    )


def build_json_object_element(
    name: Template,
    value: JsonValue,
    depth: int,
    formatting: Formatting,
) -> JsonObjectElement:
    """
    Build one "name": value member of an object.

    In pretty mode the member starts on its own line, indented by
    `indent * depth` spaces, with a single space after the colon.
    """
    if not formatting.pretty:
        return JsonObjectElement(name=name, value=value)

    return JsonObjectElement(
        name=name,
        value=value,
        space0="\n" + " " * (formatting.indent * depth),
        space1="",
        space2=" ",
        space3="",
    )


def build_json_object(
    elements: List[JsonObjectElement],
    depth: int,
    formatting: Formatting,
) -> JsonObject:
    """
    Assemble an object from its members.

    In pretty mode the closing brace goes on its own line one level above
    the members, carried by the last member's trailing space.
    """
    if formatting.pretty and elements:
        last = elements[-1]
        closing = "\n" + " " * (formatting.indent * max(depth - 1, 0))
        elements = elements[:-1] + [
            JsonObjectElement(
                name=last.name,
                value=last.value,
                space0=last.space0,
                space1=last.space1,
                space2=last.space2,
                space3=closing,
            )
        ]
    return JsonObject(space0="", elements=tuple(elements))
