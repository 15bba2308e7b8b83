"""Build predicates testing whether a line holds a value at given positions.

A line is a row when filtering rows and a column when filtering columns. The
predicates answer "keep": they return False when the target value is found.
"""

from collections.abc import Callable

from table_refine.core.rules import ValueRule
from table_refine.core.selector import ANY, in_bounds
from table_refine.core.table import Row, cells_equal

LineCheck = Callable[[Row, int], bool]


def value_found(line: Row, rule: ValueRule) -> bool:
    """Check if the rule's value sits at one of its selected positions.

    Selected positions past the end of the line are skipped.
    """
    if rule.selector is ANY:
        return any(cells_equal(cell, rule.val) for cell in line)
    return any(
        cells_equal(line[position], rule.val)
        for position in in_bounds(rule.selector, len(line))
    )


def _make_keep_check(rule: ValueRule) -> LineCheck:
    def should_keep(line: Row, line_index: int) -> bool:
        return not value_found(line, rule)

    return should_keep


def build_value_checks(rules: list) -> list[LineCheck]:
    """Create one keep-check per ValueRule, in rule order."""
    return [_make_keep_check(r) for r in rules if isinstance(r, ValueRule)]
