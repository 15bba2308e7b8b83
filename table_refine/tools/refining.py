"""Agent tools for registering, refining and previewing in-memory tables.

Tools never raise: failures come back as ``{"error": ...}`` dicts so the
model can read them. Tables live in a module-level TableStore; the session
state keeps the current table name and a history of refinements.
"""

from datetime import datetime, timezone
from typing import Any

from google.adk.tools import ToolContext

from table_refine.config import Config
from table_refine.core.table_store import TableStore, to_frame, to_markdown
from table_refine.refine import RefineError, parse_operations, refine

# ---------------------------------------------------------------------------
# Module-level Store
# ---------------------------------------------------------------------------

_store: TableStore | None = None


def _get_store() -> TableStore:
    """Get or create the module-level table store."""
    global _store
    if _store is None:
        _store = TableStore()
    return _store


def _resolve_table_name(store: TableStore, table_name: str) -> str:
    """Map a name as the user gave it to the key register_table stored."""
    if store.table_exists(table_name):
        return table_name
    return store.generate_table_name(table_name)


def _preview(rows: list, limit: int | None = None) -> str:
    limit = limit if limit is not None else Config.PREVIEW_ROWS
    frame = to_frame(rows, limit=limit)
    return to_markdown(frame, max_columns=Config.PREVIEW_COLUMNS)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


def register_table(
    table_name: str,
    rows: list[list[Any]],
    tool_context: ToolContext,
) -> dict[str, Any]:
    """Store a table (list of rows, each a list of cells) under a name.

    Args:
        table_name: Name to store the table under. Unsafe characters are
            replaced with underscores.
        rows: The table rows.
    """
    if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
        return {"error": "rows must be a list of lists of cells."}

    store = _get_store()
    safe_name = store.generate_table_name(table_name)
    metadata = store.put(safe_name, rows)
    tool_context.state["current_table"] = safe_name

    return {
        "status": "success",
        **metadata.to_dict(),
        "preview": _preview(rows),
    }


def refine_table(
    table_name: str,
    operations: list[dict[str, Any]],
    tool_context: ToolContext,
    output_table: str = "",
) -> dict[str, Any]:
    """Apply refinement operations to a stored table and store the result.

    Operations are applied in order. Each is an object with an "operation"
    name (ignoreRowIf, ignoreColIf, replace, interpretStr, transpose) and a
    "param" value. The source table is left unchanged.

    Args:
        table_name: The stored table to refine.
        operations: Ordered list of operations.
        output_table: Name for the result. Defaults to <table_name>_refined.
    """
    store = _get_store()
    table_name = _resolve_table_name(store, table_name)
    if not store.table_exists(table_name):
        return {"error": f"Table '{table_name}' not found. Use register_table first."}

    try:
        parsed = parse_operations(operations)
    except ValueError as exc:
        return {"error": str(exc), "table_name": table_name}

    rows = store.get(table_name)
    before_columns = store.get_column_count(table_name)
    try:
        refined = refine(parsed, rows)
    except RefineError as exc:
        return {"error": str(exc), "table_name": table_name}

    output_name = store.generate_table_name(output_table or f"{table_name}_refined")
    operation_names = [op.kind.value for op in parsed]
    metadata = store.put(
        output_name, refined, source_table=table_name, operations=operation_names,
    )

    result = {
        "status": "success",
        "table_name": table_name,
        "output_table": output_name,
        "before_rows": len(rows),
        "after_rows": metadata.row_count,
        "before_columns": before_columns,
        "after_columns": metadata.column_count,
        "operations": operation_names,
        "preview": _preview(refined),
    }

    history = tool_context.state.get("refine_history", [])
    history.append({
        "source_table": table_name,
        "output_table": output_name,
        "operations": operation_names,
        "refined_at": datetime.now(timezone.utc).isoformat(),
    })
    tool_context.state["refine_history"] = history
    tool_context.state["current_table"] = output_name

    return result


def sample_table(
    table_name: str,
    tool_context: ToolContext,
    limit: int = 10,
) -> dict[str, Any]:
    """Return the first rows of a stored table as markdown.

    Args:
        table_name: The stored table to preview.
        limit: Number of rows to show (default 10).
    """
    store = _get_store()
    table_name = _resolve_table_name(store, table_name)
    if not store.table_exists(table_name):
        return {"error": f"Table '{table_name}' not found."}

    rows = store.get(table_name)
    return {
        "status": "success",
        "table_name": table_name,
        "total_rows": len(rows),
        "sample": _preview(rows, limit=limit),
    }


def list_tables(tool_context: ToolContext) -> dict[str, Any]:
    """List every stored table with its row and column counts."""
    store = _get_store()
    tables = [meta.to_dict() for meta in store.table_registry.values()]
    return {
        "status": "success",
        "tables": tables,
        "current_table": tool_context.state.get("current_table", ""),
    }
