"""
request_body.py

Builds the JSON request body of an OpenAPI operation as a Hurl Body.

High-level responsibilities:
- Pick the first JSON-like content type of a requestBody
- Walk the (resolved) schema graph and produce one example value per node
- Merge allOf members into a single object; use only the first member of
  oneOf / anyOf
- Convert literal 'example' values into the Hurl JSON value model

Precedence per schema node:
    readOnly (no value) > example > type default > allOf > oneOf > anyOf > null
"""

import logging
import math
import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from utils.config import Formatting, Settings
from services.hurl_json import (
    EMPTY_LIST_DEFAULT_SPACE,
    Body,
    JsonBoolean,
    JsonList,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonObjectElement,
    JsonString,
    JsonValue,
    build_json_list,
    build_json_list_space,
    build_json_list_value,
    build_json_object,
    build_json_object_element,
    template_from_string,
)
from services.schema_resolver import (
    CyclicSchemaError,
    SchemaNode,
    SpecDocument,
)

logger = logging.getLogger(__name__)

_EXPONENT = re.compile(r"e\+?(-?)0*(\d)")

# Values used when a schema only declares its type.
_TYPE_DEFAULTS = {
    "boolean": lambda: JsonBoolean(True),
    "integer": lambda: JsonNumber(str(3)),
    "number": lambda: JsonNumber(str(3.3)),
    "string": lambda: JsonString(template_from_string("string")),
}


@dataclass(frozen=True)
class SpecBodySettings:
    formatting: Formatting = field(default_factory=Formatting)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpecBodySettings":
        return cls(formatting=settings.formatting)


# ============================================================
# Public API
# ============================================================

def build_body_from_spec(
    request_body: Dict[str, Any],
    spec: SpecDocument,
    settings: SpecBodySettings,
) -> Optional[Body]:
    """
    Build a Hurl JSON body from an OpenAPI requestBody object.

    Content types are scanned in declaration order; the first one whose
    name contains "json" (case-insensitive) and that declares a schema is
    used, every other content type is ignored.

    Returns:
        The Body, or None when there is no JSON content type or the schema
        yields no value (e.g. a readOnly root).

    Raises:
        ResolutionError: If any schema reference cannot be resolved.
    """
    request_body = spec.resolve_mapping(request_body)
    content = request_body.get("content") or {}

    for media_type, media in content.items():
        # TODO: support form and multipart bodies once Hurl sections are generated
        if "json" not in str(media_type).lower():
            continue

        schema = media.get("schema") if isinstance(media, dict) else None
        if schema is None:
            continue

        value = convert_schema(spec.resolve(schema), spec, 1, settings)
        if value is None:
            return None
        return Body(value=value, space0="", line_terminator0="\n")

    return None


def convert_schema(
    node: SchemaNode,
    spec: SpecDocument,
    depth: int,
    settings: SpecBodySettings,
) -> Optional[JsonValue]:
    """Produce the example value for a single resolved schema node."""
    return SchemaWalker(spec, settings).convert(node, depth)


def merge_all_of(
    schemas: List[Any],
    spec: SpecDocument,
    depth: int,
    settings: SpecBodySettings,
) -> JsonObject:
    return SchemaWalker(spec, settings).merge_all_of(schemas, depth)


def select_first_of(
    schemas: List[Any],
    spec: SpecDocument,
    depth: int,
    settings: SpecBodySettings,
) -> Optional[JsonValue]:
    return SchemaWalker(spec, settings).select_first_of(schemas, depth)


def materialize_example(
    value: Any,
    depth: int,
    settings: SpecBodySettings,
) -> JsonValue:
    """
    Convert a literal example (as loaded from JSON/YAML) into a JSON value.

    Nested values keep the depth they were given, so an explicit example is
    reproduced with its own shape regardless of where it sits.
    """
    formatting = settings.formatting

    if value is None:
        return JsonNull()
    if isinstance(value, bool):
        return JsonBoolean(value)
    if isinstance(value, int):
        return JsonNumber(str(value))
    if isinstance(value, float):
        # JSON has no literal for inf or nan
        if not math.isfinite(value):
            return JsonNull()
        return JsonNumber(_format_float(value))
    if isinstance(value, str):
        return JsonString(template_from_string(value))
    if isinstance(value, (list, tuple)):
        return build_json_list(
            [materialize_example(item, depth, settings) for item in value],
            formatting,
        )
    if isinstance(value, dict):
        elements = [
            build_json_object_element(
                template_from_string(str(key)),
                materialize_example(member, depth, settings),
                depth,
                formatting,
            )
            for key, member in value.items()
        ]
        return build_json_object(elements, depth, formatting)

    # YAML can hand us dates and timestamps; keep them as strings.
    return JsonString(template_from_string(str(value)))


# ============================================================
# Internal: Schema Walker
# ============================================================

class SchemaWalker:
    """
    Recursive schema-to-example conversion for one body.

    Keeps the schemas currently being expanded so a self-referencing
    schema fails with CyclicSchemaError instead of recursing forever.
    """

    def __init__(self, spec: SpecDocument, settings: SpecBodySettings) -> None:
        self.spec = spec
        self.settings = settings
        self._active: List[Tuple[int, str]] = []

    def convert(
        self,
        node: SchemaNode,
        depth: int,
        ref: Optional[str] = None,
    ) -> Optional[JsonValue]:
        if node.read_only:
            return None

        if node.has_example:
            return materialize_example(node.example, depth, self.settings)

        with self._expanding(node, ref):
            schema_type = node.schema_type
            if schema_type == "array":
                return self._array_value(node, depth)
            if schema_type == "object":
                return self._object_value(node.properties, depth)
            if schema_type is not None:
                return _TYPE_DEFAULTS[schema_type]()

            if node.all_of:
                return self.merge_all_of(node.all_of, depth)

            if node.one_of:
                return self.select_first_of(node.one_of, depth)

            # anyOf is handled like oneOf: only the first schema is used
            if node.any_of:
                return self.select_first_of(node.any_of, depth)

        logger.debug("Couldn't build anything from schema. Returning null...")
        return JsonNull()

    def merge_all_of(self, schemas: List[Any], depth: int) -> JsonObject:
        """Flatten the properties of every allOf member into one object."""
        formatting = self.settings.formatting
        elements: List[JsonObjectElement] = []

        for member in schemas:
            resolved = self.spec.resolve(member)
            elements.extend(self._property_elements(resolved.properties, depth))

        return build_json_object(elements, depth, formatting)

    def select_first_of(self, schemas: List[Any], depth: int) -> Optional[JsonValue]:
        """Convert only the first alternative; the others are never read."""
        if not schemas:
            return JsonObject(space0="", elements=())

        first = schemas[0]
        return self.convert(self.spec.resolve(first), depth, ref=_ref_of(first))

    def _array_value(self, node: SchemaNode, depth: int) -> JsonList:
        formatting = self.settings.formatting
        items = node.items

        if items is None:
            return JsonList(space0=EMPTY_LIST_DEFAULT_SPACE, elements=())

        item_value = self.convert(self.spec.resolve(items), depth, ref=_ref_of(items))
        return JsonList(
            space0=build_json_list_space(formatting),
            elements=(
                (build_json_list_value(item_value, formatting),)
                if item_value is not None else ()
            ),
        )

    def _object_value(self, properties: Dict[str, Any], depth: int) -> JsonObject:
        elements = list(self._property_elements(properties, depth))
        return build_json_object(elements, depth, self.settings.formatting)

    def _property_elements(
        self,
        properties: Dict[str, Any],
        depth: int,
    ) -> Iterator[JsonObjectElement]:
        formatting = self.settings.formatting
        for name, prop_schema in properties.items():
            value = self.convert(
                self.spec.resolve(prop_schema), depth + 1, ref=_ref_of(prop_schema),
            )
            if value is None:
                continue
            yield build_json_object_element(
                template_from_string(str(name)), value, depth, formatting,
            )

    @contextmanager
    def _expanding(self, node: SchemaNode, ref: Optional[str]) -> Iterator[None]:
        label = ref or "<inline schema>"
        if any(identity == node.identity for identity, _ in self._active):
            raise CyclicSchemaError(label, [lbl for _, lbl in self._active])
        self._active.append((node.identity, label))
        try:
            yield
        finally:
            self._active.pop()


def _ref_of(schema_or_ref: Any) -> Optional[str]:
    if isinstance(schema_or_ref, dict):
        ref = schema_or_ref.get("$ref")
        if isinstance(ref, str):
            return ref
    return None


def _format_float(value: float) -> str:
    """repr() without the '+' and the zero padding of the exponent: 1e16, 2.5e-7."""
    return _EXPONENT.sub(r"e\1\2", repr(value))
