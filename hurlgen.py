# Hurl MCP Server - Request Body Generator
# This module generates Hurl JSON request bodies from Swagger/OpenAPI specs.
import logging
from typing import Optional

from fastmcp import FastMCP, Context  # ✅ FastMCP 2.x import

from utils.config import load_config, load_settings
from services.body_generator import (
    generate_all_bodies,
    generate_operation_body,
    write_bodies,
)
from services.schema_resolver import SpecDocument
from services.spec_loader import extract_operations, find_operation, load_spec_file

# === Global configuration ===
CONFIG = load_config()
SETTINGS = load_settings(CONFIG)

mcp = FastMCP(
    name="hurlgen",
)

# ----------------------------------------------------------
# Spec Discovery Tools
# ----------------------------------------------------------

@mcp.tool()
async def list_operations(spec_path: str, ctx: Context) -> dict:
    """
    List the operations of a Swagger 2.x / OpenAPI 3.x spec file.
    Args:
        spec_path (str): Full path to the spec file (.json, .yaml or .yml).
        ctx (Context, optional): FastMCP context for state/error details.

    Returns:
        dict: {
            "spec_path": str,
            "operations": [{"operation_id", "method", "path", "summary", "deprecated", "has_body"}],
            "count": int
        }
    """
    try:
        spec = load_spec_file(spec_path)
    except (FileNotFoundError, ValueError) as exc:
        await ctx.error(f"Cannot load spec '{spec_path}': {exc}")
        raise

    operations = [
        {
            "operation_id": op["operation_id"],
            "method": op["method"],
            "path": op["path"],
            "summary": op["summary"],
            "deprecated": op["deprecated"],
            "has_body": isinstance(op["request_body"], dict),
        }
        for op in extract_operations(spec)
    ]
    await ctx.info(f"Found {len(operations)} operations in {spec_path}")
    return {"spec_path": spec_path, "operations": operations, "count": len(operations)}

# ----------------------------------------------------------
# Request Body Generation Tools
# ----------------------------------------------------------

@mcp.tool()
async def generate_request_body(
    spec_path: str,
    ctx: Context,
    operation_id: Optional[str] = None,
    method: Optional[str] = None,
    path: Optional[str] = None,
) -> dict:
    """
    Generate the Hurl JSON request body of a single operation.
    Args:
        spec_path (str): Full path to the spec file.
        ctx (Context, optional): FastMCP context for state/error details.
        operation_id (str, optional): operationId of the target operation.
        method (str, optional): HTTP method, used with 'path' when no operationId is given.
        path (str, optional): Path template, e.g. '/pets/{petId}'.

    Returns:
        dict: operation_id, method, path, content_type, body, status ("OK" | "NO_BODY" | "ERROR"), error.
    """
    try:
        spec = load_spec_file(spec_path)
        operation = find_operation(spec, operation_id=operation_id, method=method, path=path)
    except (FileNotFoundError, ValueError) as exc:
        await ctx.error(f"Cannot load operation from '{spec_path}': {exc}")
        raise

    result = generate_operation_body(SpecDocument(spec), operation, SETTINGS)
    if result["error"]:
        await ctx.error(f"Body generation failed for {result['method']} {result['path']}: {result['error']}")
    else:
        await ctx.info(f"✅ {result['method']} {result['path']}: {result['status']}")
    return result

@mcp.tool()
async def generate_request_bodies(
    test_run_id: str,
    spec_path: str,
    ctx: Context,
    include_deprecated: Optional[bool] = None,
) -> dict:
    """
    Generate request bodies for every operation of a spec and write them as artifacts.
    Args:
        test_run_id (str): Unique identifier for the test run.
        spec_path (str): Full path to the spec file.
        ctx (Context, optional): FastMCP context for state/error details.
        include_deprecated (bool, optional): Whether to include deprecated operations.
            Defaults to hurl.include_deprecated from config.yaml.

    Returns:
        dict: {
            "test_run_id": str,
            "manifest_path": str,
            "files": {"<METHOD> <path>": "<file path>"},
            "counts": {"OK": int, "NO_BODY": int, "ERROR": int}
        }
    """
    try:
        summary = generate_all_bodies(spec_path, SETTINGS, include_deprecated)
    except (FileNotFoundError, ValueError) as exc:
        await ctx.error(f"Cannot load spec '{spec_path}': {exc}")
        raise
    written = write_bodies(test_run_id, summary)

    counts = {"OK": 0, "NO_BODY": 0, "ERROR": 0}
    for result in summary["results"]:
        counts[result["status"]] += 1

    await ctx.info(
        f"Generated {counts['OK']} bodies ({counts['ERROR']} errors) "
        f"-> {written['manifest_path']}"
    )
    return {
        "test_run_id": test_run_id,
        "manifest_path": written["manifest_path"],
        "files": written["files"],
        "counts": counts,
    }

# -----------------------------
# Hurl MCP entry point
# -----------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=str((CONFIG.get("logging") or {}).get("level", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        mcp.run("stdio")
    except KeyboardInterrupt:
        print("Shutting down Hurl MCP…")
