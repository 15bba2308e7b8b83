"""Combine the keep-votes of many rule clauses into one decision."""


class RuleCombiner:
    """Accumulates clause results and decides whether a line is kept.

    Each reported result is a keep-vote: True means the clause does not ask
    for the line to be removed.

    With ``combine_with_and`` the votes are ANDed: a single False removes the
    line, so the line goes if it matches any rule. This is how top-level rule
    lists behave. Otherwise the votes are ORed: the line is only removed when
    every clause voted False, which is how ``allOf`` groups behave.
    """

    def __init__(self, combine_with_and: bool):
        self.combine_with_and = combine_with_and
        self.clause_results: list[bool] = []

    def report(self, clause_result: bool):
        """Record the keep-vote of one clause."""
        self.clause_results.append(bool(clause_result))

    def decide(self) -> bool:
        """Return True if the line should be kept."""
        if self.combine_with_and:
            return False not in self.clause_results
        all_clauses_failed = True not in self.clause_results
        return not all_clauses_failed


def combine(results, combine_with_and: bool) -> bool:
    """Decide over an iterable of keep-votes in one call."""
    combiner = RuleCombiner(combine_with_and)
    for result in results:
        combiner.report(result)
    return combiner.decide()
