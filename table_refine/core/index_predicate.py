"""Build "keep this index?" predicates from index rules."""

from collections.abc import Callable

from table_refine.core.rules import IndexRule, create_equality_evaluator


def _always_keep(index: int) -> bool:
    return True


def build_index_checker(rules: list) -> Callable[[int], bool]:
    """Create a function checking whether an index survives all index rules.

    Literal indices (alone or in lists) are excluded outright. Equality
    expressions are ANDed together: an index is excluded when it satisfies
    every expression, so ``">=2"`` plus ``"<=4"`` excludes 2 through 4.

    Args:
        rules: Parsed rules; only IndexRule instances participate.

    Returns:
        Function returning True if the index should be kept, False if any
        index rule excludes it. Constant True when there are no index rules.
    """
    index_rules = [r for r in rules if isinstance(r, IndexRule)]
    if not index_rules:
        return _always_keep

    excluded = []
    evaluators = []
    for rule in index_rules:
        index = rule.index
        if isinstance(index, (list, tuple)):
            excluded.extend(index)
        elif isinstance(index, str):
            evaluators.append(create_equality_evaluator(index))
        elif isinstance(index, bool):
            evaluators.append(create_equality_evaluator(None))
        else:
            excluded.append(index)

    def should_keep_index(index: int) -> bool:
        excluded_by_index = any(
            not isinstance(e, bool) and e == index for e in excluded
        )
        passes_equality_tests = all(evaluate(index) for evaluate in evaluators)
        return not excluded_by_index and (
            not evaluators or not passes_equality_tests
        )

    return should_keep_index
