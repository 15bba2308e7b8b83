"""Table helpers shared by every refinement operation.

A table is a list of rows and each row a list of scalar cells. Rows may be
ragged; the column count of a table is its longest row.
"""

from typing import Any

Cell = Any
Row = list[Cell]
Table = list[Row]

_NUMBER_TYPES = (int, float)


def cells_equal(left: Cell, right: Cell) -> bool:
    """Strict, type-aware cell comparison.

    Booleans only equal booleans, ints and floats compare numerically and
    every other pair must share a type. ``"1"`` never equals ``1``.
    """
    left_bool = isinstance(left, bool)
    right_bool = isinstance(right, bool)
    if left_bool or right_bool:
        return left_bool and right_bool and left == right
    if isinstance(left, _NUMBER_TYPES) and isinstance(right, _NUMBER_TYPES):
        return left == right
    return type(left) is type(right) and left == right


def find_max_num_cols(rows: Table) -> int:
    """Return the number of cells in the longest row (0 for no rows)."""
    return max((len(row) for row in rows), default=0)


def copy_table(rows: Table) -> Table:
    """Return a copy of the table that shares no row lists with the input."""
    return [list(row) for row in rows]


def validate_table(rows: Any) -> Table:
    """Check that the input is a sequence of row sequences.

    Raises:
        ValueError: If the input is not a list/tuple of lists/tuples.
    """
    if not isinstance(rows, (list, tuple)):
        raise ValueError(
            f"Table must be a list of rows, got {type(rows).__name__}"
        )
    for index, row in enumerate(rows):
        if not isinstance(row, (list, tuple)):
            raise ValueError(
                f"Row {index} must be a list of cells, got {type(row).__name__}"
            )
    return rows
