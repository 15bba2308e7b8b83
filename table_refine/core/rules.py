"""Rule variants and parsing of raw rule parameters.

Raw parameters arrive as plain dicts (usually decoded JSON). They are parsed
into one of a small set of rule classes so the filters can dispatch on the
rule kind instead of probing for keys:

- ``{"index": 2}``, ``{"index": [0, 3]}``, ``{"index": ">=3"}`` -> IndexRule
- ``{"col": 0, "val": "x"}`` / ``{"row": "any", "val": "x"}`` -> ValueRule
- ``{"allOf": [...]}`` (or the older ``combined`` key) -> AllOfRule
- ``{"orig": "a", "new": "b"}`` -> ReplaceRule
- ``{"numbers": True, "bools": {...}, "dates": "%m/%d/%Y"}`` -> InterpretRule
"""

import logging
import operator
import re
from collections.abc import Callable
from typing import Any

from table_refine.core.selector import Selector, normalize

logger = logging.getLogger(__name__)

_EQUALITY_PATTERN = re.compile(
    r"^\s*(==|!=|>=|<=|>|<)\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*$"
)

EQUALITY_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}

ALL_OF_KEYS = ("allOf", "combined")


def _never_matches(index: int) -> bool:
    return False


def create_equality_evaluator(expression: Any) -> Callable[[int], bool]:
    """Build a function testing an index against an equality expression.

    The expression is an operator followed by a number (``">=3"``,
    ``"!= 2"``). The index is the left-hand operand. Anything that does not
    parse yields an evaluator that never matches.
    """
    if not isinstance(expression, str):
        return _never_matches
    match = _EQUALITY_PATTERN.match(expression)
    if not match:
        logger.debug("Ignoring malformed equality expression %r", expression)
        return _never_matches

    compare = EQUALITY_OPERATORS[match.group(1)]
    value = float(match.group(2))

    def evaluator(index: int) -> bool:
        return compare(index, value)

    return evaluator


# ---------------------------------------------------------------------------
# Rule variants
# ---------------------------------------------------------------------------


class IndexRule:
    """Match rows/columns by position: literal index, list, or expression."""

    def __init__(self, index: Any):
        self.index = index


class ValueRule:
    """Match a line holding ``val`` at one of the selected positions."""

    def __init__(self, selector: Selector, val: Any):
        self.selector = selector
        self.val = val


class AllOfRule:
    """Group of rules that only matches when every member matches."""

    def __init__(self, rules: list):
        self.rules = rules


class ReplaceRule:
    """Replace cells equal to ``orig`` with ``new`` within a row/col scope."""

    def __init__(self, orig: Any, new: Any, rows: Selector, cols: Selector):
        self.orig = orig
        self.new = new
        self.rows = rows
        self.cols = cols


class InterpretRule:
    """Which string interpretations to run, and on which rows and columns."""

    def __init__(
        self,
        numbers: bool = False,
        bools: dict | None = None,
        dates: str | None = None,
        rows: Selector | None = None,
        cols: Selector | None = None,
    ):
        self.numbers = numbers
        self.bools = bools
        self.dates = dates
        self.rows = normalize(rows)
        self.cols = normalize(cols)


Rule = IndexRule | ValueRule | AllOfRule


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _require_rule_list(raw: Any, operation_name: str) -> list[dict]:
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise ValueError(
            f"'{operation_name}' expects a list of rules, got {type(raw).__name__}"
        )
    for position, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(
                f"'{operation_name}' rule {position} must be an object, "
                f"got {type(item).__name__}"
            )
    return list(raw)


def parse_filter_rules(raw: Any, axis_key: str, operation_name: str) -> list[Rule]:
    """Parse raw filter rules into rule variants.

    Args:
        raw: List of rule dicts.
        axis_key: ``"col"`` for row filtering (values are looked up in
            columns) or ``"row"`` for column filtering.
        operation_name: Used in error messages.

    Raises:
        ValueError: If the rules are not a list of dicts.
    """
    rules: list[Rule] = []
    for item in _require_rule_list(raw, operation_name):
        if "index" in item:
            rules.append(IndexRule(item["index"]))
        elif "val" in item:
            rules.append(ValueRule(normalize(item.get(axis_key)), item["val"]))
        elif any(key in item for key in ALL_OF_KEYS):
            key = next(k for k in ALL_OF_KEYS if k in item)
            nested = parse_filter_rules(item[key], axis_key, operation_name)
            if nested:
                rules.append(AllOfRule(nested))
            else:
                logger.debug("Skipping empty allOf group in '%s'", operation_name)
        else:
            logger.debug(
                "Rule %r in '%s' has no index, val or allOf; ignoring",
                item, operation_name,
            )
    return rules


def parse_replace_rules(raw: Any) -> list[ReplaceRule]:
    """Parse raw replace rules.

    Raises:
        ValueError: If a rule is missing ``orig`` or ``new``.
    """
    rules = []
    for position, item in enumerate(_require_rule_list(raw, "replace")):
        missing = [key for key in ("orig", "new") if key not in item]
        if missing:
            raise ValueError(
                f"'replace' rule {position} missing required fields: "
                f"{', '.join(missing)}"
            )
        rules.append(
            ReplaceRule(
                orig=item["orig"],
                new=item["new"],
                rows=normalize(item.get("row")),
                cols=normalize(item.get("col")),
            )
        )
    return rules


def parse_interpret_rule(raw: Any, default_date_format: str) -> InterpretRule:
    """Parse the single interpretStr parameter object.

    ``dates`` may be a format string or ``True`` for the configured default.

    Raises:
        ValueError: If the parameter or its ``bools`` entry is not an object.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(
            f"'interpretStr' expects an object, got {type(raw).__name__}"
        )

    bools = raw.get("bools")
    if bools is not None and bools is not False and not isinstance(bools, dict):
        raise ValueError("'interpretStr' bools must be an object with trueVal/falseVal")

    dates = raw.get("dates")
    if dates is True:
        dates = default_date_format
    elif dates is False:
        dates = None
    elif dates is not None and not isinstance(dates, str):
        raise ValueError("'interpretStr' dates must be a format string")

    return InterpretRule(
        numbers=bool(raw.get("numbers")),
        bools=bools or None,
        dates=dates,
        rows=raw.get("row"),
        cols=raw.get("col"),
    )


def split_rules(rules: list[Rule]) -> tuple[list[IndexRule], list[ValueRule], list[AllOfRule]]:
    """Partition rules by kind, preserving order within each kind."""
    index_rules = [r for r in rules if isinstance(r, IndexRule)]
    value_rules = [r for r in rules if isinstance(r, ValueRule)]
    all_of_rules = [r for r in rules if isinstance(r, AllOfRule)]
    return index_rules, value_rules, all_of_rules
