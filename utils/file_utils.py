"""
file_utils.py

This module contains utility functions for writing generated artifacts.
Generated bodies are stored per test run so repeated runs never overwrite
each other.
"""
import datetime
import json
import os
import re
from typing import Any, Dict, Set

from utils.config import load_config

# === Global configuration ===
CONFIG = load_config()
ARTIFACTS_PATH = CONFIG["artifacts"]["artifacts_path"]

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9.-]+")


def get_hurl_artifacts_dir(run_id: str, artifacts_path: str = None) -> str:
    """
    Returns the absolute directory path where generated request bodies
    should be stored for a given run_id.

    Final layout:
      artifacts/<run_id>/hurl/bodies/
    """
    root = artifacts_path or ARTIFACTS_PATH
    output_dir = os.path.abspath(os.path.join(root, str(run_id), "hurl", "bodies"))
    os.makedirs(output_dir, exist_ok=True)
    return output_dir


def body_file_name(method: str, path: str, operation_id: str = "") -> str:
    """Derive a filesystem-safe file name for an operation's body."""
    stem = operation_id or f"{method}_{path}"
    stem = _UNSAFE_FILENAME_CHARS.sub("_", stem).strip("_") or "body"
    return f"{stem}.hurl-body"


def unique_file_name(file_name: str, used: Set[str]) -> str:
    """
    Return file_name, or file_name with a '_2', '_3', ... suffix on its stem
    when it is already in 'used'. The returned name is added to 'used'.
    """
    stem, ext = os.path.splitext(file_name)
    candidate = file_name
    counter = 2
    while candidate in used:
        candidate = f"{stem}_{counter}{ext}"
        counter += 1
    used.add(candidate)
    return candidate


def save_body_file(run_id: str, file_name: str, body_text: str, artifacts_path: str = None) -> str:
    """Write one rendered body and return its full path."""
    output_file = os.path.join(get_hurl_artifacts_dir(run_id, artifacts_path), file_name)
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(body_text)
    return output_file


def save_manifest(run_id: str, manifest: Dict[str, Any], artifacts_path: str = None) -> str:
    """
    Write body_manifest.json next to the generated bodies.

    A 'generated_at' timestamp is added to the manifest.
    """
    output_dir = get_hurl_artifacts_dir(run_id, artifacts_path)
    manifest = dict(manifest)
    manifest["generated_at"] = datetime.datetime.now().isoformat()

    manifest_path = os.path.join(output_dir, "body_manifest.json")
    with open(manifest_path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)
    return manifest_path
