"""
body_generator.py

Per-operation orchestration of request body generation.

High-level responsibilities:
- Generate the rendered Hurl JSON body of a single operation
- Generate bodies for every operation of a spec file (optionally skipping
  deprecated operations)
- Persist generated bodies and a manifest under:
    artifacts/<run_id>/hurl/bodies/
"""

import logging
import os
from typing import Any, Dict, List, Optional, Set

from utils.config import Settings, load_settings
from utils.file_utils import (
    body_file_name,
    save_body_file,
    save_manifest,
    unique_file_name,
)
from services.hurl_json import render_body
from services.request_body import SpecBodySettings, build_body_from_spec
from services.schema_resolver import ResolutionError, SpecDocument
from services.spec_loader import extract_operations, load_spec_file

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_NO_BODY = "NO_BODY"
STATUS_ERROR = "ERROR"


def generate_operation_body(
    spec: SpecDocument,
    operation: Dict[str, Any],
    settings: Settings,
) -> Dict[str, Any]:
    """
    Generate the body for one extracted operation.

    A ResolutionError fails only this operation: it is logged and reported
    with status ERROR so the caller can decide what to do with it.

    Returns:
        dict: {
            "operation_id", "method", "path",
            "content_type": str | None,
            "body": rendered body text | None,
            "status": "OK" | "NO_BODY" | "ERROR",
            "error": str | None
        }
    """
    result: Dict[str, Any] = {
        "operation_id": operation.get("operation_id", ""),
        "method": operation["method"],
        "path": operation["path"],
        "content_type": None,
        "body": None,
        "status": STATUS_NO_BODY,
        "error": None,
    }

    request_body = operation.get("request_body")
    if not isinstance(request_body, dict):
        return result

    try:
        result["content_type"] = _json_content_type(spec, request_body)
        body = build_body_from_spec(
            request_body, spec, SpecBodySettings.from_settings(settings),
        )
    except ResolutionError as exc:
        logger.warning(
            "Skipping body for %s %s: %s",
            operation["method"], operation["path"], exc,
        )
        result["status"] = STATUS_ERROR
        result["error"] = str(exc)
        return result

    if body is not None:
        result["body"] = render_body(body)
        result["status"] = STATUS_OK
    return result


def generate_all_bodies(
    spec_path: str,
    settings: Optional[Settings] = None,
    include_deprecated: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Generate bodies for every operation of a spec file.

    Args:
        spec_path: Full path to the spec file (.json or .yaml/.yml).
        settings: Rendering settings; loaded from config.yaml when omitted.
        include_deprecated: Overrides settings.include_deprecated when given.

    Returns:
        dict with keys: spec_title, spec_version, operations_total,
        deprecated_skipped, results.
    """
    if settings is None:
        settings = load_settings()
    if include_deprecated is None:
        include_deprecated = settings.include_deprecated

    raw_spec = load_spec_file(spec_path)
    spec = SpecDocument(raw_spec)

    operations = extract_operations(raw_spec)
    selected = [
        op for op in operations
        if include_deprecated or not op["deprecated"]
    ]
    deprecated_skipped = len(operations) - len(selected)
    if deprecated_skipped:
        logger.info("Skipped %d deprecated operations", deprecated_skipped)

    results = [generate_operation_body(spec, op, settings) for op in selected]
    logger.info(
        "Generated %d bodies for %d operations",
        sum(1 for r in results if r["status"] == STATUS_OK), len(results),
    )

    return {
        "spec_title": (raw_spec.get("info") or {}).get("title", "unknown"),
        "spec_version": raw_spec.get("openapi", "unknown"),
        "source_file": os.path.basename(spec_path),
        "operations_total": len(operations),
        "deprecated_skipped": deprecated_skipped,
        "results": results,
    }


def write_bodies(test_run_id: str, summary: Dict[str, Any], artifacts_path: str = None) -> Dict[str, Any]:
    """
    Write every generated body to disk plus a body_manifest.json.

    Returns:
        dict with keys: files (operation label -> path), manifest_path.
    """
    files: Dict[str, str] = {}
    entries: List[Dict[str, Any]] = []
    used_names: Set[str] = set()

    for result in summary["results"]:
        entry = {k: v for k, v in result.items() if k != "body"}
        if result["status"] == STATUS_OK:
            file_name = unique_file_name(
                body_file_name(result["method"], result["path"], result["operation_id"]),
                used_names,
            )
            path = save_body_file(test_run_id, file_name, result["body"], artifacts_path)
            files[f"{result['method']} {result['path']}"] = path
            entry["file"] = path
        entries.append(entry)

    manifest_path = save_manifest(
        test_run_id,
        {
            "source_file": summary.get("source_file"),
            "spec_title": summary.get("spec_title"),
            "spec_version": summary.get("spec_version"),
            "operations_total": summary.get("operations_total"),
            "deprecated_skipped": summary.get("deprecated_skipped"),
            "operations": entries,
        },
        artifacts_path,
    )
    logger.info("Body manifest written: %s", manifest_path)
    return {"files": files, "manifest_path": manifest_path}


def _json_content_type(spec: SpecDocument, request_body: Dict[str, Any]) -> Optional[str]:
    content = spec.resolve_mapping(request_body).get("content") or {}
    for media_type, media in content.items():
        if "json" in str(media_type).lower() and isinstance(media, dict) and media.get("schema") is not None:
            return media_type
    return None
