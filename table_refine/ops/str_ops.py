"""Cell-level string operations: find/replace and string interpretation.

Both operations are scoped to rows and columns through selectors and return a
new table; cells outside the scope are copied unchanged.
"""

import logging
import math
from collections.abc import Callable
from datetime import datetime, timezone

from table_refine.core.rules import InterpretRule, ReplaceRule
from table_refine.core.selector import matches
from table_refine.core.table import Cell, Table, cells_equal

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Replace
# ---------------------------------------------------------------------------


def replace(rows: Table, rules: list[ReplaceRule]) -> Table:
    """Replace whole cells equal to a rule's ``orig`` with its ``new`` value.

    Rules run in order, each seeing the output of the previous one, and only
    touch cells inside their row and column selectors. Partial matches inside
    a longer string are left alone.
    """
    def run_rules(cell: Cell, row_index: int, col_index: int) -> Cell:
        for rule in rules:
            if not matches(rule.rows, row_index):
                continue
            if not matches(rule.cols, col_index):
                continue
            if cells_equal(rule.orig, cell):
                cell = rule.new
        return cell

    return [
        [run_rules(cell, row_index, col_index) for col_index, cell in enumerate(row)]
        for row_index, row in enumerate(rows)
    ]


# ---------------------------------------------------------------------------
# Interpret
# ---------------------------------------------------------------------------


def to_iso_string(value: datetime) -> str:
    """Format a datetime as ISO 8601 UTC with millisecond precision.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"


def interpret_number(cell: str) -> Cell:
    """Convert a string to a number if it is the number's canonical spelling.

    ``"12"`` and ``"-3"`` become ints and ``"1.5"`` a float, while ``"007"``,
    ``"1.50"``, ``" 4"`` and ``"1.0"`` stay strings.
    """
    try:
        as_int = int(cell)
    except ValueError:
        as_int = None
    if as_int is not None and str(as_int) == cell:
        return as_int

    try:
        as_float = float(cell)
    except ValueError:
        return cell
    if not math.isfinite(as_float) or as_float.is_integer():
        return cell
    if repr(as_float) == cell:
        return as_float
    return cell


def _make_date_interpreter(date_format: str) -> Callable[[Cell], Cell]:
    def interpret_date(cell: Cell) -> Cell:
        if not isinstance(cell, str):
            return cell
        try:
            parsed = datetime.strptime(cell, date_format)
        except ValueError:
            return cell
        return to_iso_string(parsed)

    return interpret_date


def _make_bool_interpreter(bools: dict) -> Callable[[Cell], Cell]:
    true_val = bools.get("trueVal")
    false_val = bools.get("falseVal")

    def interpret_bool(cell: Cell) -> Cell:
        if "falseVal" in bools and cells_equal(cell, false_val):
            return False
        if "trueVal" in bools and cells_equal(cell, true_val):
            return True
        return cell

    return interpret_bool


def _interpret_number_cell(cell: Cell) -> Cell:
    if not isinstance(cell, str):
        return cell
    return interpret_number(cell)


def build_interpreters(rule: InterpretRule) -> list[Callable[[Cell], Cell]]:
    """Return the interpreters a rule enables: dates, then bools, then numbers."""
    interpreters = []
    if rule.dates is not None:
        interpreters.append(_make_date_interpreter(rule.dates))
    if rule.bools:
        interpreters.append(_make_bool_interpreter(rule.bools))
    if rule.numbers:
        interpreters.append(_interpret_number_cell)
    return interpreters


def interpret_str(rows: Table, rule: InterpretRule) -> Table:
    """Convert string cells to dates (ISO strings), booleans and numbers."""
    interpreters = build_interpreters(rule)
    if not interpreters:
        logger.debug("interpretStr: no interpretations requested")

    def interpret_value(cell: Cell) -> Cell:
        for interpret in interpreters:
            cell = interpret(cell)
        return cell

    refined = []
    for row_index, row in enumerate(rows):
        if not matches(rule.rows, row_index):
            refined.append(list(row))
            continue
        refined.append([
            interpret_value(cell) if matches(rule.cols, col_index) else cell
            for col_index, cell in enumerate(row)
        ])
    return refined
