"""
spec_loader.py

Loads Swagger 2.x / OpenAPI 3.x documents for request body generation.

High-level responsibilities:
- Parse spec files (JSON and YAML) with size guards
- Normalize Swagger 2.x body / formData parameters into OpenAPI 3.x
  requestBody objects and rewrite '#/definitions/' references
- List the operations of a spec and look one up by operationId or by
  method + path
"""

import json
import logging
import os
from copy import deepcopy
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")
_METHOD_ORDER = {method: idx for idx, method in enumerate(HTTP_METHODS)}

_MAX_SPEC_FILE_SIZE_BYTES = 50 * 1024 * 1024   # reject
_WARN_SPEC_FILE_SIZE_BYTES = 10 * 1024 * 1024  # warn


# ============================================================
# Public API
# ============================================================

def load_spec_file(spec_path: str) -> Dict[str, Any]:
    """
    Load and parse a spec file, returning an OpenAPI 3.x shaped document.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is too large, cannot be parsed, or is not
            a Swagger 2.x / OpenAPI 3.x document with paths.
    """
    if not os.path.isfile(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")

    file_size = os.path.getsize(spec_path)
    if file_size > _MAX_SPEC_FILE_SIZE_BYTES:
        raise ValueError(
            f"Spec file too large ({file_size / (1024 * 1024):.1f} MB). "
            f"Maximum supported size is "
            f"{_MAX_SPEC_FILE_SIZE_BYTES / (1024 * 1024):.0f} MB."
        )
    if file_size > _WARN_SPEC_FILE_SIZE_BYTES:
        logger.warning(
            "Large spec file: %.1f MB, parsing may take a moment",
            file_size / (1024 * 1024),
        )

    ext = os.path.splitext(spec_path)[1].lower()
    try:
        with open(spec_path, "r", encoding="utf-8", errors="replace") as f:
            if ext in (".yaml", ".yml"):
                spec = yaml.safe_load(f)
            else:
                spec = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in spec file: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in spec file: {exc}") from exc

    return normalize_spec(spec)


def normalize_spec(spec: Any) -> Dict[str, Any]:
    """Validate the top-level shape and convert Swagger 2.x to OpenAPI 3.x."""
    if not isinstance(spec, dict):
        raise ValueError(
            "Spec file must contain a JSON/YAML object at the top level"
        )

    is_swagger_2 = "swagger" in spec and str(spec["swagger"]).startswith("2")
    is_openapi_3 = "openapi" in spec and str(spec["openapi"]).startswith("3")

    if not is_swagger_2 and not is_openapi_3:
        raise ValueError(
            "Unrecognized spec format. Expected 'openapi: 3.x' or "
            "'swagger: 2.x' at the top level."
        )

    if not spec.get("paths"):
        raise ValueError("Spec contains no 'paths', nothing to generate.")

    if is_swagger_2:
        logger.info("Detected Swagger 2.x, normalizing to OpenAPI 3.x")
        spec = _normalize_swagger_2x(deepcopy(spec))

    return spec


def extract_operations(spec: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Flatten spec paths into a list of operations, sorted by path and method.

    Each operation dict contains: path, method, operation_id, summary,
    tags, deprecated, request_body.
    """
    operations: List[Dict[str, Any]] = []

    for path, path_item in (spec.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        for method in HTTP_METHODS:
            op = path_item.get(method)
            if not isinstance(op, dict):
                continue
            operations.append({
                "path": path,
                "method": method.upper(),
                "operation_id": op.get("operationId", ""),
                "summary": op.get("summary", ""),
                "tags": op.get("tags", []),
                "deprecated": bool(op.get("deprecated", False)),
                "request_body": op.get("requestBody"),
            })

    operations.sort(
        key=lambda o: (o["path"], _METHOD_ORDER.get(o["method"].lower(), 99)),
    )
    return operations


def find_operation(
    spec: Dict[str, Any],
    operation_id: Optional[str] = None,
    method: Optional[str] = None,
    path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Look up a single operation by operationId, or by method + path.

    Raises:
        ValueError: If the selector is incomplete or nothing matches.
    """
    if not operation_id and not (method and path):
        raise ValueError("Provide an operation_id, or both method and path.")

    for op in extract_operations(spec):
        if operation_id and op["operation_id"] == operation_id:
            return op
        if (not operation_id
                and op["method"] == method.upper()
                and op["path"] == path):
            return op

    selector = operation_id or f"{method.upper()} {path}"
    raise ValueError(f"Operation not found in spec: {selector}")


# ============================================================
# Internal: Swagger 2.x Normalization
# ============================================================

def _normalize_swagger_2x(spec: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a Swagger 2.0 spec to the OpenAPI 3.x structure in place.

    Only what request body generation needs is converted:
    - definitions -> components.schemas
    - body parameters -> requestBody (first 'consumes' media type)
    - formData parameters -> form-encoded requestBody
    - '#/definitions/' -> '#/components/schemas/' in every $ref
    """
    definitions = spec.pop("definitions", {})
    if definitions:
        spec.setdefault("components", {})["schemas"] = definitions

    global_consumes = spec.pop("consumes", None) or ["application/json"]

    for path_item in (spec.get("paths") or {}).values():
        if not isinstance(path_item, dict):
            continue
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            _convert_body_parameters(operation, global_consumes)

    _fix_swagger2_ref_paths(spec)

    spec.pop("swagger", None)
    spec["openapi"] = "3.0.0"
    return spec


def _convert_body_parameters(
    operation: Dict[str, Any],
    global_consumes: List[str],
) -> None:
    params = [p for p in operation.get("parameters", []) if isinstance(p, dict)]
    body_params = [p for p in params if p.get("in") == "body"]
    form_params = [p for p in params if p.get("in") == "formData"]
    consumes = operation.pop("consumes", None) or global_consumes

    if body_params:
        schema = body_params[0].get("schema", {})
        operation["requestBody"] = {
            "content": {content_type: {"schema": schema} for content_type in consumes},
        }
    elif form_params:
        properties = {
            fp["name"]: {
                k: v for k, v in fp.items()
                if k not in ("name", "in", "required", "description")
            }
            for fp in form_params
            if "name" in fp
        }
        operation["requestBody"] = {
            "content": {
                "application/x-www-form-urlencoded": {
                    "schema": {"type": "object", "properties": properties},
                },
            },
        }

    operation["parameters"] = [
        p for p in params if p.get("in") not in ("body", "formData")
    ]


def _fix_swagger2_ref_paths(obj: Any) -> None:
    """Recursively rewrite #/definitions/ -> #/components/schemas/."""
    if isinstance(obj, dict):
        if isinstance(obj.get("$ref"), str):
            obj["$ref"] = obj["$ref"].replace(
                "#/definitions/", "#/components/schemas/",
            )
        for value in obj.values():
            _fix_swagger2_ref_paths(value)
    elif isinstance(obj, list):
        for item in obj:
            _fix_swagger2_ref_paths(item)
