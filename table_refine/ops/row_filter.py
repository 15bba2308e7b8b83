"""Remove rows by index or by the values they hold.

Top-level rules are combined so that a row is removed when it matches any of
them. ``allOf`` groups only match a row when every member matches.
"""

import logging

from table_refine.core.index_predicate import build_index_checker
from table_refine.core.rule_combiner import RuleCombiner
from table_refine.core.rules import Rule, split_rules
from table_refine.core.table import Row, Table
from table_refine.core.value_predicate import LineCheck, build_value_checks

logger = logging.getLogger(__name__)


def create_row_keep_check(rules: list[Rule], combine_with_and: bool) -> LineCheck:
    """Create a function deciding whether a row survives a set of rules.

    Args:
        rules: Parsed rules to check for.
        combine_with_and: True for a top-level rule list (any matching rule
            removes the row), False for an ``allOf`` group (all members must
            match before the row is removed).

    Returns:
        Function taking a row and its index, returning True to keep it.
    """
    index_rules, value_rules, all_of_rules = split_rules(rules)
    should_keep_index = build_index_checker(index_rules)

    checks = build_value_checks(value_rules)
    checks.extend(
        create_row_keep_check(group.rules, combine_with_and=False)
        for group in all_of_rules
    )

    # Index rules decide a group on their own, and a rule list holding only
    # index rules.
    if index_rules and (not combine_with_and or not checks):
        def should_keep_by_index(row: Row, row_index: int) -> bool:
            return should_keep_index(row_index)

        return should_keep_by_index

    def should_keep(row: Row, row_index: int) -> bool:
        combiner = RuleCombiner(combine_with_and)
        if index_rules:
            combiner.report(should_keep_index(row_index))
        for check in checks:
            combiner.report(check(row, row_index))
        return combiner.decide()

    return should_keep


def ignore_row_if(rows: Table, rules: list[Rule]) -> Table:
    """Return a copy of the table without the rows matching any rule.

    Row order and row contents are preserved.
    """
    should_keep = create_row_keep_check(rules, combine_with_and=True)
    kept = [list(row) for index, row in enumerate(rows) if should_keep(row, index)]
    logger.debug(
        "ignoreRowIf: %d rules, kept %d of %d rows", len(rules), len(kept), len(rows)
    )
    return kept
