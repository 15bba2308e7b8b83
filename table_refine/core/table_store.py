"""In-memory table store with a metadata registry and polars previews."""

import re

import polars as pl

from table_refine.core.table import Table, copy_table, find_max_num_cols


class TableMetadata:
    """Metadata about a table held in the store."""

    def __init__(
        self,
        table_name: str,
        row_count: int,
        column_count: int,
        source_table: str = "",
        operations: list[str] | None = None,
    ):
        self.table_name = table_name
        self.row_count = row_count
        self.column_count = column_count
        self.source_table = source_table
        self.operations = operations or []

    def to_dict(self) -> dict:
        return {
            "table_name": self.table_name,
            "row_count": self.row_count,
            "column_count": self.column_count,
            "source_table": self.source_table,
            "operations": list(self.operations),
        }


class TableStore:
    """Holds named tables for the agent session.

    Provides:
    - Table registry tracking stored tables and where they came from
    - Copy-on-read/write so callers never share rows with the store
    - Polars-backed previews for tool responses
    """

    def __init__(self):
        self._tables: dict[str, Table] = {}
        self._table_registry: dict[str, TableMetadata] = {}

    @property
    def table_registry(self) -> dict[str, TableMetadata]:
        return dict(self._table_registry)

    def put(
        self,
        table_name: str,
        rows: Table,
        source_table: str = "",
        operations: list[str] | None = None,
    ) -> TableMetadata:
        """Store a copy of the table and register its metadata."""
        self._tables[table_name] = copy_table(rows)
        metadata = TableMetadata(
            table_name=table_name,
            row_count=len(rows),
            column_count=find_max_num_cols(rows),
            source_table=source_table,
            operations=operations,
        )
        self._table_registry[table_name] = metadata
        return metadata

    def get(self, table_name: str) -> Table:
        """Return a copy of a stored table.

        Raises:
            KeyError: If no table is stored under the name.
        """
        return copy_table(self._tables[table_name])

    def drop(self, table_name: str):
        """Remove a table and its registry entry."""
        self._tables.pop(table_name, None)
        self._table_registry.pop(table_name, None)

    def table_exists(self, table_name: str) -> bool:
        return table_name in self._tables

    def get_row_count(self, table_name: str) -> int:
        return self._table_registry[table_name].row_count

    def get_column_count(self, table_name: str) -> int:
        return self._table_registry[table_name].column_count

    def generate_table_name(self, name: str) -> str:
        """Generate a safe table name from an arbitrary label."""
        safe_name = re.sub(r"[^a-zA-Z0-9_]", "_", name).lower()
        safe_name = re.sub(r"_+", "_", safe_name).strip("_")
        if not safe_name or safe_name[0].isdigit():
            safe_name = f"t_{safe_name}"
        return safe_name

    def close(self):
        """Release every stored table."""
        self._tables.clear()
        self._table_registry.clear()


def to_frame(rows: Table, limit: int | None = None) -> pl.DataFrame:
    """Convert a table to a polars DataFrame of strings.

    Columns are named ``col_0``, ``col_1``, ... and short rows are padded
    with nulls. Cells are rendered with ``repr`` for non-strings so that
    ``1`` and ``"1"`` stay distinguishable in previews.
    """
    if limit is not None:
        rows = rows[:limit]
    num_cols = find_max_num_cols(rows)
    columns = {
        f"col_{c}": [
            _render_cell(row[c]) if c < len(row) else None for row in rows
        ]
        for c in range(num_cols)
    }
    return pl.DataFrame(columns, schema={name: pl.Utf8 for name in columns})


def _render_cell(cell) -> str:
    if isinstance(cell, str):
        return cell
    return repr(cell)


def to_markdown(
    frame: pl.DataFrame,
    max_columns: int = 10,
    max_cell_width: int = 40,
) -> str:
    """Render a preview frame as a markdown table.

    Padding cells of short rows render blank and pipes inside cells are
    escaped. Values longer than ``max_cell_width`` end in ``...``; columns
    past ``max_columns`` are counted in a footnote.
    """
    if frame.is_empty():
        return "No rows."
    shown = frame.select(frame.columns[:max_columns])
    hidden = frame.width - shown.width

    cells = shown.select([_render_expr(name, max_cell_width) for name in shown.columns])
    lines = [_markdown_row(shown.columns), _markdown_row(["---"] * shown.width)]
    lines.extend(_markdown_row(row) for row in cells.iter_rows())
    if hidden:
        lines.append(f"\n*({hidden} more columns not shown)*")
    return "\n".join(lines)


def _render_expr(name: str, max_cell_width: int) -> pl.Expr:
    column = pl.col(name)
    clipped = pl.concat_str([column.str.slice(0, max_cell_width - 3), pl.lit("...")])
    return (
        pl.when(column.str.len_chars() > max_cell_width)
        .then(clipped)
        .otherwise(column)
        .str.replace_all("|", "\\|", literal=True)
        .fill_null("")
        .alias(name)
    )


def _markdown_row(cells) -> str:
    return "| " + " | ".join(cells) + " |"
