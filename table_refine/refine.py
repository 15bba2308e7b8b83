"""Apply a sequence of refinement operations to a table.

Each operation is a dict naming the operation and carrying its parameters:

    refine(
        [
            {"operation": "ignoreRowIf", "param": [{"index": 0}]},
            {"operation": "interpretStr", "param": {"numbers": True}},
        ],
        rows,
    )

Operations run strictly in order, each on the previous operation's output.
The input table is never modified.
"""

import enum
import logging
from collections.abc import Callable
from typing import Any

from table_refine.config import Config
from table_refine.core.rules import (
    parse_filter_rules,
    parse_interpret_rule,
    parse_replace_rules,
)
from table_refine.core.table import Table, copy_table, validate_table
from table_refine.ops.col_filter import ignore_col_if
from table_refine.ops.row_filter import ignore_row_if
from table_refine.ops.str_ops import interpret_str, replace
from table_refine.ops.structure_ops import transpose

logger = logging.getLogger(__name__)


class OperationKind(enum.Enum):
    """Supported refinement operations."""
    IGNORE_ROW_IF = "ignoreRowIf"
    IGNORE_COL_IF = "ignoreColIf"
    REPLACE = "replace"
    INTERPRET_STR = "interpretStr"
    TRANSPOSE = "transpose"


SUPPORTED_OPERATIONS = [kind.value for kind in OperationKind]


class RefineError(ValueError):
    """Raised by the default error handler when a refinement fails."""


class Operation:
    """A parsed operation: its kind plus its typed parameter."""

    def __init__(self, kind: OperationKind, param: Any = None):
        self.kind = kind
        self.param = param

    def __repr__(self) -> str:
        return f"Operation({self.kind.value!r})"


def raise_error(message: str):
    """Default error handler: raise the message as a RefineError."""
    raise RefineError(message)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_operation(raw: Any) -> Operation:
    """Validate a raw operation dict and parse its parameters.

    Raises:
        ValueError: If the operation is not a dict, names no operation, names
            an unknown one, or carries malformed parameters.
    """
    if isinstance(raw, Operation):
        return raw
    if not isinstance(raw, dict):
        raise ValueError(f"Operation must be an object, got {type(raw).__name__}")

    name = raw.get("operation", raw.get("name"))
    if not name:
        raise ValueError("Missing required field: operation")

    try:
        kind = OperationKind(name)
    except ValueError:
        raise ValueError(
            f"Unknown operation '{name}'. "
            f"Supported operations: {', '.join(SUPPORTED_OPERATIONS)}"
        ) from None

    param = raw.get("param")
    if kind is OperationKind.IGNORE_ROW_IF:
        return Operation(kind, parse_filter_rules(param, "col", kind.value))
    if kind is OperationKind.IGNORE_COL_IF:
        return Operation(kind, parse_filter_rules(param, "row", kind.value))
    if kind is OperationKind.REPLACE:
        return Operation(kind, parse_replace_rules(param))
    if kind is OperationKind.INTERPRET_STR:
        return Operation(kind, parse_interpret_rule(param, Config.DATE_FORMAT))
    return Operation(kind)


def parse_operations(raw: Any) -> list[Operation]:
    """Parse one operation or a list of operations, preserving order."""
    if isinstance(raw, (list, tuple)):
        return [parse_operation(item) for item in raw]
    return [parse_operation(raw)]


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def apply_operation(operation: Operation, rows: Table) -> Table:
    """Run a single parsed operation, returning a new table."""
    kind = operation.kind
    if kind is OperationKind.IGNORE_ROW_IF:
        return ignore_row_if(rows, operation.param)
    if kind is OperationKind.IGNORE_COL_IF:
        return ignore_col_if(rows, operation.param)
    if kind is OperationKind.REPLACE:
        return replace(rows, operation.param)
    if kind is OperationKind.INTERPRET_STR:
        return interpret_str(rows, operation.param)
    if kind is OperationKind.TRANSPOSE:
        return transpose(rows)
    raise ValueError(f"Unhandled operation kind: {kind}")


def _describe(operation: Any) -> str:
    if isinstance(operation, Operation):
        return operation.kind.value
    if isinstance(operation, dict):
        return str(operation.get("operation", operation.get("name", "?")))
    return "?"


def refine(
    operations: Any,
    rows: Table,
    on_success: Callable[[Table], Any] | None = None,
    on_error: Callable[[str], Any] | None = None,
) -> Table | None:
    """Execute one or more refinement operations on a table.

    Args:
        operations: An operation dict (``{"operation": name, "param": ...}``)
            or a list of them, applied left to right.
        rows: The table to refine. It is left unchanged.
        on_success: Optional callback invoked with the refined table.
        on_error: Optional callback invoked with a description of the first
            error. Without one, errors raise RefineError.

    Returns:
        The refined table, or None if an error was handled by on_error.
    """
    if on_error is None:
        on_error = raise_error

    raw_operations = operations if isinstance(operations, (list, tuple)) else [operations]

    try:
        current = copy_table(validate_table(rows))
    except ValueError as exc:
        logger.error("Refinement rejected input table: %s", exc)
        on_error(str(exc))
        return None

    for step, raw in enumerate(raw_operations):
        try:
            operation = parse_operation(raw)
            before_rows = len(current)
            current = apply_operation(operation, current)
        except ValueError as exc:
            message = f"Operation {step} ({_describe(raw)}) failed: {exc}"
            logger.error("Refinement aborted: %s", message)
            on_error(message)
            return None
        except Exception as exc:
            message = (
                f"Operation {step} ({_describe(raw)}) failed: "
                f"{type(exc).__name__}: {exc}"
            )
            logger.exception("Refinement aborted: %s", message)
            on_error(message)
            return None
        logger.info(
            "Applied %s: %d -> %d rows", operation.kind.value, before_rows, len(current)
        )

    if on_success is not None:
        on_success(current)
    return current
