"""Structural table transforms."""

from table_refine.core.table import Table, find_max_num_cols


def transpose(rows: Table) -> Table:
    """Switch rows and columns, returning a new table.

    Output row ``c`` holds ``row[c]`` from every input row long enough to have
    it, so ragged inputs yield ragged outputs.
    """
    transposed: Table = [[] for _ in range(find_max_num_cols(rows))]
    for row in rows:
        for col_index, cell in enumerate(row):
            transposed[col_index].append(cell)
    return transposed
