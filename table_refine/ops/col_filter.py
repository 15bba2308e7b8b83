"""Remove columns by index or by the values found in selected rows.

Unlike row filtering, column rules are not voted on: index rules, value rules
and ``allOf`` groups each contribute columns to one drop set, and a column is
removed if any of them selects it.
"""

import logging

from table_refine.core.index_predicate import build_index_checker
from table_refine.core.rule_combiner import RuleCombiner
from table_refine.core.rules import AllOfRule, IndexRule, ValueRule, split_rules
from table_refine.core.selector import ANY, in_bounds
from table_refine.core.table import Row, Table, cells_equal, find_max_num_cols

logger = logging.getLogger(__name__)


def _select_rows(rows: Table, rule: ValueRule) -> list[Row]:
    """Return the rows a value rule looks in, skipping out-of-range indices."""
    if rule.selector is ANY:
        return list(rows)
    return [rows[i] for i in in_bounds(rule.selector, len(rows))]


def _column_holds(rows: list[Row], col_index: int, target) -> bool:
    """Check if any of the rows holds the target value at the column."""
    return any(
        len(row) > col_index and cells_equal(row[col_index], target)
        for row in rows
    )


def find_cols_by_index(index_rules: list[IndexRule], num_cols: int) -> list[int]:
    """Find the column indices excluded by index rules."""
    if not index_rules:
        return []
    should_keep_index = build_index_checker(index_rules)
    return [i for i in range(num_cols) if not should_keep_index(i)]


def find_cols_by_val(value_rules: list[ValueRule], rows: Table) -> list[int]:
    """Find the columns holding a rule's value in one of the rule's rows."""
    matched = []
    for rule in value_rules:
        for row in _select_rows(rows, rule):
            for col_index, cell in enumerate(row):
                if cells_equal(cell, rule.val):
                    matched.append(col_index)
    return matched


def find_cols_by_combined_vals(group: AllOfRule, rows: Table) -> list[int]:
    """Find the columns satisfying every member of an ``allOf`` group.

    Index members and nested groups narrow the candidates to the columns they
    select; each value member must then find its value in its rows at that
    column.
    """
    index_rules, value_rules, nested_groups = split_rules(group.rules)
    num_cols = find_max_num_cols(rows)

    if index_rules:
        candidates = find_cols_by_index(index_rules, num_cols)
    else:
        candidates = list(range(num_cols))
    for nested in nested_groups:
        nested_cols = set(find_cols_by_combined_vals(nested, rows))
        candidates = [c for c in candidates if c in nested_cols]

    rows_by_rule = [(rule, _select_rows(rows, rule)) for rule in value_rules]

    matched = []
    for col_index in candidates:
        combiner = RuleCombiner(combine_with_and=False)
        for rule, rule_rows in rows_by_rule:
            combiner.report(not _column_holds(rule_rows, col_index, rule.val))
        if not rows_by_rule or not combiner.decide():
            matched.append(col_index)
    return matched


def remove_cols(rows: Table, cols: set[int]) -> Table:
    """Return a copy of the table without the given column positions."""
    return [
        [cell for col_index, cell in enumerate(row) if col_index not in cols]
        for row in rows
    ]


def ignore_col_if(rows: Table, rules: list) -> Table:
    """Return a copy of the table without the columns any rule selects."""
    index_rules, value_rules, all_of_rules = split_rules(rules)
    num_cols = find_max_num_cols(rows)

    drop: set[int] = set()
    drop.update(find_cols_by_index(index_rules, num_cols))
    drop.update(find_cols_by_val(value_rules, rows))
    for group in all_of_rules:
        drop.update(find_cols_by_combined_vals(group, rows))

    logger.debug("ignoreColIf: dropping columns %s", sorted(drop))
    return remove_cols(rows, drop)
