"""
services/hurl_json/models.py

Value model for JSON request bodies as they appear in a Hurl file.

Every JSON value kind is its own frozen dataclass; lists and objects also carry
the whitespace ("decorations") that surrounds their elements so the renderer
can reproduce the exact layout chosen at build time.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class TextElement:
    value: str
    encoded: str


@dataclass(frozen=True)
class Placeholder:
    expr: str


TemplateElement = Union[TextElement, Placeholder]


@dataclass(frozen=True)
class Template:
    """A string that may contain {{placeholder}} expressions."""
    elements: Tuple[TemplateElement, ...] = ()
    delimiter: Optional[str] = '"'


@dataclass(frozen=True)
class JsonNull:
    pass


@dataclass(frozen=True)
class JsonBoolean:
    value: bool


@dataclass(frozen=True)
class JsonNumber:
    value: str


@dataclass(frozen=True)
class JsonString:
    value: Template


@dataclass(frozen=True)
class JsonListElement:
    value: "JsonValue"
    space0: str = ""
    space1: str = ""


@dataclass(frozen=True)
class JsonList:
    space0: str = ""
    elements: Tuple[JsonListElement, ...] = ()


@dataclass(frozen=True)
class JsonObjectElement:
    name: Template
    value: "JsonValue"
    space0: str = ""
    space1: str = ""
    space2: str = ""
    space3: str = ""


@dataclass(frozen=True)
class JsonObject:
    space0: str = ""
    elements: Tuple[JsonObjectElement, ...] = ()


JsonValue = Union[JsonNull, JsonBoolean, JsonNumber, JsonString, JsonList, JsonObject]


@dataclass(frozen=True)
class Body:
    """A Hurl request body holding a JSON payload."""
    value: JsonValue
    space0: str = ""
    line_terminator0: str = "\n"
    line_terminators: Tuple[str, ...] = ()
