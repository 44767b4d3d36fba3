"""
schema_resolver.py

Read-only access to the schemas of a loaded OpenAPI 3.x document.

High-level responsibilities:
- Wrap raw schema mappings in a SchemaNode view exposing the fields the
  body generator relies on (type, readOnly, example, items, properties,
  allOf / oneOf / anyOf)
- Resolve local JSON Pointer references ('#/components/schemas/Foo')
  against the document, following chained references
- Report every dangling, external or malformed reference as a
  ResolutionError
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SCHEMA_TYPES = {"boolean", "integer", "number", "string", "array", "object"}


class ResolutionError(Exception):
    """A schema reference could not be dereferenced against the spec."""

    def __init__(self, ref: str, reason: str) -> None:
        self.ref = ref
        self.reason = reason
        super().__init__(f"Cannot resolve $ref '{ref}': {reason}")


class CyclicSchemaError(ResolutionError):
    """A schema refers back to itself along the current traversal path."""

    def __init__(self, ref: str, path: Optional[List[str]] = None) -> None:
        self.path = list(path or [])
        cycle = " -> ".join([*self.path, ref]) if self.path else ref
        super().__init__(ref, f"circular schema reference ({cycle})")


def _unescape_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


class SchemaNode:
    """Read-only view over a single (already dereferenced) schema mapping."""

    __slots__ = ("raw",)

    def __init__(self, raw: Dict[str, Any]) -> None:
        self.raw = raw

    def __repr__(self) -> str:
        return f"SchemaNode({self.raw!r})"

    @property
    def identity(self) -> int:
        return id(self.raw)

    @property
    def read_only(self) -> bool:
        return self.raw.get("readOnly") is True

    @property
    def has_example(self) -> bool:
        return self.raw.get("example") is not None

    @property
    def example(self) -> Any:
        return self.raw.get("example")

    @property
    def schema_type(self) -> Optional[str]:
        """
        The declared type, or None when absent or not one of the six JSON
        Schema value types. OpenAPI 3.1 type lists use their first non-null
        entry.
        """
        declared = self.raw.get("type")
        if isinstance(declared, list):
            declared = next(
                (t for t in declared if isinstance(t, str) and t != "null"),
                None,
            )
        if isinstance(declared, str) and declared in SCHEMA_TYPES:
            return declared
        if declared is not None:
            logger.debug("Ignoring unsupported schema type: %r", declared)
        return None

    @property
    def items(self) -> Optional[Any]:
        return self.raw.get("items")

    @property
    def properties(self) -> Dict[str, Any]:
        props = self.raw.get("properties")
        return props if isinstance(props, dict) else {}

    @property
    def all_of(self) -> List[Any]:
        return self._composition("allOf")

    @property
    def one_of(self) -> List[Any]:
        return self._composition("oneOf")

    @property
    def any_of(self) -> List[Any]:
        return self._composition("anyOf")

    def _composition(self, keyword: str) -> List[Any]:
        members = self.raw.get(keyword)
        return members if isinstance(members, list) else []


class SpecDocument:
    """
    Reference resolver over a parsed OpenAPI 3.x document.

    The document is treated as immutable; resolving never copies or
    modifies it, so the same SchemaNode identity is returned every time a
    given component is reached.
    """

    def __init__(self, spec: Dict[str, Any]) -> None:
        if not isinstance(spec, dict):
            raise ValueError("Spec document must be a mapping at the top level")
        self.spec = spec

    def resolve(self, schema_or_ref: Any) -> SchemaNode:
        """
        Dereference an inline schema or a {'$ref': ...} mapping.

        Raises:
            ResolutionError: If the reference is dangling, external,
                malformed or does not point at a schema object.
            CyclicSchemaError: If a chain of references loops back on itself.
        """
        return SchemaNode(self.resolve_mapping(schema_or_ref))

    def resolve_mapping(self, obj: Any) -> Dict[str, Any]:
        """Follow '$ref' chains until a concrete mapping is reached."""
        seen: List[str] = []
        current = obj
        while True:
            if not isinstance(current, dict):
                ref = seen[-1] if seen else "<inline>"
                raise ResolutionError(
                    ref, f"expected an object, got {type(current).__name__}",
                )
            ref = current.get("$ref")
            if ref is None:
                return current
            if not isinstance(ref, str):
                raise ResolutionError(str(ref), "'$ref' must be a string")
            if ref in seen:
                raise CyclicSchemaError(ref, seen)
            seen.append(ref)
            current = self.follow_ref(ref)

    def follow_ref(self, ref: str) -> Any:
        """Follow a JSON Pointer reference like '#/components/schemas/Foo'."""
        if not ref.startswith("#"):
            raise ResolutionError(ref, "external references are not supported")

        pointer = ref[1:]
        if pointer == "":
            return self.spec
        if not pointer.startswith("/"):
            raise ResolutionError(ref, "malformed JSON pointer")

        current: Any = self.spec
        for raw_token in pointer[1:].split("/"):
            token = _unescape_pointer_token(raw_token)
            if isinstance(current, dict) and token in current:
                current = current[token]
            elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
                current = current[int(token)]
            else:
                raise ResolutionError(ref, f"missing key '{token}'")

        return current
